"""
Agent Logging Configuration
Logging setup for the research engine and its HTTP boundary
"""

import json
import logging
import logging.handlers
import os
import sys
from datetime import datetime
from pathlib import Path
from typing import Optional

import structlog

# Extra record attributes copied into structured log entries
EXTRA_FIELDS = ('request_id', 'duration', 'error_type', 'severity', 'match_count', 'corpus_size')


class AgentFormatter(logging.Formatter):
    """JSON formatter carrying request and timing context"""

    def __init__(self):
        super().__init__()
        self.hostname = os.getenv('HOSTNAME', 'localhost')

    def format(self, record):
        log_entry = {
            'timestamp': datetime.fromtimestamp(record.created).isoformat(),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'hostname': self.hostname,
            'process_id': os.getpid(),
        }

        for field in EXTRA_FIELDS:
            if hasattr(record, field):
                log_entry[field] = getattr(record, field)

        if record.exc_info:
            log_entry['exception'] = {
                'type': record.exc_info[0].__name__,
                'message': str(record.exc_info[1]),
                'traceback': self.formatException(record.exc_info)
            }

        if record.levelno <= logging.DEBUG:
            log_entry['file'] = record.filename
            log_entry['line'] = record.lineno
            log_entry['function'] = record.funcName

        return json.dumps(log_entry, ensure_ascii=False, default=str)


def setup_logging(
    log_level: str = "INFO",
    enable_file_logging: bool = False,
    enable_console_logging: bool = True,
    enable_structured_logging: bool = True,
    logs_dir: str = "logs",
    log_rotation_size: int = 10 * 1024 * 1024,  # 10MB
    log_retention_count: int = 5
) -> None:
    """
    Setup logging for the agent

    Args:
        log_level: Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)
        enable_file_logging: Whether to log to rotating files under logs_dir
        enable_console_logging: Whether to log to stdout
        enable_structured_logging: Whether to use JSON log lines
        logs_dir: Directory for log files
        log_rotation_size: Size in bytes for log rotation
        log_retention_count: Number of rotated log files to keep
    """
    numeric_level = getattr(logging, log_level.upper(), logging.INFO)

    root_logger = logging.getLogger()
    root_logger.setLevel(numeric_level)
    root_logger.handlers.clear()

    if enable_structured_logging:
        formatter = AgentFormatter()
    else:
        formatter = logging.Formatter(
            '[%(asctime)s] %(levelname)s in %(name)s: %(message)s'
        )

    if enable_console_logging:
        console_handler = logging.StreamHandler(sys.stdout)
        console_handler.setLevel(numeric_level)
        console_handler.setFormatter(formatter)
        root_logger.addHandler(console_handler)

    if enable_file_logging:
        log_path = Path(logs_dir)
        log_path.mkdir(parents=True, exist_ok=True)

        agent_handler = logging.handlers.RotatingFileHandler(
            log_path / "agent.log",
            maxBytes=log_rotation_size,
            backupCount=log_retention_count
        )
        agent_handler.setLevel(numeric_level)
        agent_handler.setFormatter(formatter)
        root_logger.addHandler(agent_handler)

        error_handler = logging.handlers.RotatingFileHandler(
            log_path / "agent_errors.log",
            maxBytes=log_rotation_size,
            backupCount=log_retention_count
        )
        error_handler.setLevel(logging.ERROR)
        error_handler.setFormatter(formatter)
        root_logger.addHandler(error_handler)

    configure_agent_loggers(numeric_level)

    logger = logging.getLogger(__name__)
    logger.info(
        f"Logging configured: level={log_level}, "
        f"file_logging={enable_file_logging}, "
        f"console_logging={enable_console_logging}, "
        f"structured_logging={enable_structured_logging}"
    )


def configure_agent_loggers(log_level: int) -> None:
    """Configure loggers for the agent components"""
    agent_loggers = [
        'corpus.store',
        'rag.question_processor',
        'rag.keyword_matcher',
        'rag.ranker',
        'rag.response_generator',
        'rag.agent',
        'api.query_endpoints',
    ]

    for logger_name in agent_loggers:
        logging.getLogger(logger_name).setLevel(log_level)

    logging.getLogger('uvicorn.access').setLevel(logging.WARNING)
    logging.getLogger('httpx').setLevel(logging.WARNING)


def setup_structured_logging() -> None:
    """Route structlog through the stdlib handlers configured by setup_logging"""
    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        wrapper_class=structlog.stdlib.BoundLogger,
        cache_logger_on_first_use=True,
    )


class AgentLogContext:
    """Context manager that logs an operation with its duration"""

    def __init__(
        self,
        logger: logging.Logger,
        operation: str,
        request_id: Optional[str] = None,
        log_level: int = logging.INFO
    ):
        self.logger = logger
        self.operation = operation
        self.request_id = request_id
        self.log_level = log_level
        self.start_time = None
        self.duration = 0.0

    def _extra(self):
        extra = {}
        if self.request_id:
            extra['request_id'] = self.request_id
        return extra

    def __enter__(self):
        self.start_time = datetime.now()
        self.logger.log(self.log_level, f"Starting {self.operation}", extra=self._extra())
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.duration = (datetime.now() - self.start_time).total_seconds()
        extra = self._extra()
        extra['duration'] = self.duration

        if exc_type is None:
            self.logger.log(
                self.log_level,
                f"Completed {self.operation} in {self.duration:.3f}s",
                extra=extra
            )
        else:
            extra['error_type'] = exc_type.__name__
            self.logger.error(
                f"Failed {self.operation} after {self.duration:.3f}s: {exc_val}",
                extra=extra,
                exc_info=(exc_type, exc_val, exc_tb)
            )
        return False
