"""
Error types and classification for the legal research agent
"""

from enum import Enum
from typing import Optional, Tuple


class LegalResearchError(Exception):
    """Base class for errors raised by the research agent"""


class CorpusIntegrityError(LegalResearchError):
    """Raised when the knowledge corpus fails validation at load time"""

    def __init__(self, message: str, entry_id: Optional[str] = None):
        self.entry_id = entry_id
        if entry_id:
            message = f"{message} (entry: {entry_id})"
        super().__init__(message)


class ConfigurationError(LegalResearchError):
    """Raised when configuration values are invalid"""


class ErrorType(str, Enum):
    CORPUS = "corpus_error"
    CONFIGURATION = "configuration_error"
    VALIDATION = "validation_error"
    PROGRAMMING = "programming_error"
    UNKNOWN = "unknown_error"


class Severity(str, Enum):
    CRITICAL = "critical"
    WARNING = "warning"
    INFO = "info"


def classify_error(error: Exception) -> Tuple[ErrorType, Severity]:
    """Classify an error raised while serving a query.

    Returns: (error_type, severity)
    """
    if isinstance(error, CorpusIntegrityError):
        return (ErrorType.CORPUS, Severity.CRITICAL)

    if isinstance(error, ConfigurationError):
        return (ErrorType.CONFIGURATION, Severity.CRITICAL)

    # Defects in matching or synthesis logic
    if isinstance(error, (AttributeError, TypeError, KeyError, IndexError)):
        return (ErrorType.PROGRAMMING, Severity.CRITICAL)

    message = str(error).lower()
    if any(k in message for k in ["validation", "invalid", "missing required", "schema"]):
        return (ErrorType.VALIDATION, Severity.WARNING)

    return (ErrorType.UNKNOWN, Severity.WARNING)
