"""
Knowledge corpus for the legal research agent
"""
