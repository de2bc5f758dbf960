"""
Keyword research engine components for the legal research agent.

This package normalizes user questions, matches them against the knowledge
corpus, ranks the matches and synthesizes the answer returned to callers.
"""
