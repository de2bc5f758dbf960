"""
Shared configuration, logging and error handling for the legal research agent
"""
