"""
Agent Configuration
Configuration settings for the research engine, corpus loading and logging
"""

import os
from pathlib import Path
from typing import Any, Dict

from core.error_handling import ConfigurationError

DEFAULT_CORPUS_PATH = str(Path(__file__).resolve().parent.parent / "corpus" / "legal_corpus.json")

DEFAULT_CATEGORIES = "definition,writ,doctrine,statute,maxim"

# Matching and ranking
ENGINE_CONFIG = {
    'max_supporting_entries': int(os.getenv('MAX_SUPPORTING_ENTRIES', '4')),
    'allow_partial_matches': os.getenv('MATCH_ALLOW_PARTIAL', 'true').lower() == 'true',
    'phrase_bonus_per_word': float(os.getenv('MATCH_PHRASE_BONUS', '0.1')),
}

# Corpus loading
CORPUS_CONFIG = {
    'corpus_path': os.getenv('CORPUS_PATH', DEFAULT_CORPUS_PATH),
    'strict_categories': os.getenv('CORPUS_STRICT_CATEGORIES', 'false').lower() == 'true',
    'allowed_categories': [
        c.strip() for c in os.getenv('CORPUS_ALLOWED_CATEGORIES', DEFAULT_CATEGORIES).split(',') if c.strip()
    ],
}

# Logging
LOGGING_CONFIG = {
    'log_level': os.getenv('LOG_LEVEL', 'INFO'),
    'enable_file_logging': os.getenv('LOG_ENABLE_FILE_LOGGING', 'false').lower() == 'true',
    'enable_console_logging': os.getenv('LOG_ENABLE_CONSOLE_LOGGING', 'true').lower() == 'true',
    'enable_structured_logging': os.getenv('LOG_ENABLE_STRUCTURED_LOGGING', 'true').lower() == 'true',
    'logs_dir': os.getenv('LOG_DIR', 'logs'),
}

# Environment-specific configuration
if os.getenv('ENVIRONMENT') == 'development':
    LOGGING_CONFIG['log_level'] = 'DEBUG'
    LOGGING_CONFIG['enable_structured_logging'] = False

if os.getenv('ENVIRONMENT') == 'production':
    LOGGING_CONFIG['enable_file_logging'] = True


def get_engine_config() -> Dict[str, Any]:
    """Return a validated copy of the engine configuration."""
    config = dict(ENGINE_CONFIG)
    if config['max_supporting_entries'] < 1:
        raise ConfigurationError(
            f"MAX_SUPPORTING_ENTRIES must be at least 1, got {config['max_supporting_entries']}"
        )
    if not 0 <= config['phrase_bonus_per_word'] < 1:
        raise ConfigurationError(
            f"MATCH_PHRASE_BONUS must be in [0, 1), got {config['phrase_bonus_per_word']}"
        )
    return config


def get_corpus_config() -> Dict[str, Any]:
    """Return a copy of the corpus configuration."""
    config = dict(CORPUS_CONFIG)
    config['allowed_categories'] = list(CORPUS_CONFIG['allowed_categories'])
    return config
