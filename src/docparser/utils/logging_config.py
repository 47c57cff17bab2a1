"""
Logging configuration for docparser.

This module provides standard and JSON log formatting, a stream-handler
setup for the package logger, and the dedicated diagnostics logger the
system loader reports through.
"""

import json
import logging
from contextlib import contextmanager
from datetime import datetime
from enum import Enum
from typing import Any, Dict, Optional, TextIO, Union

PACKAGE_LOGGER_NAME = "docparser"
DIAGNOSTICS_LOGGER_NAME = "docparser.diagnostics"


class LogLevel(Enum):
    """Log level enumeration."""
    DEBUG = logging.DEBUG
    INFO = logging.INFO
    WARNING = logging.WARNING
    ERROR = logging.ERROR
    CRITICAL = logging.CRITICAL
    
    @classmethod
    def from_name(cls, name: Union[str, "LogLevel"]) -> "LogLevel":
        if isinstance(name, LogLevel):
            return name
        try:
            return cls[name.upper()]
        except KeyError:
            raise ValueError(f"Unknown log level: {name}") from None


class LogFormat(Enum):
    """Log format types."""
    STANDARD = "standard"
    JSON = "json"
    DETAILED = "detailed"


class JSONFormatter(logging.Formatter):
    """Formats records as single-line JSON objects."""
    
    STANDARD_ATTRS = frozenset({
        'name', 'msg', 'args', 'levelname', 'levelno', 'pathname',
        'filename', 'module', 'lineno', 'funcName', 'created',
        'msecs', 'relativeCreated', 'thread', 'threadName',
        'processName', 'process', 'exc_info', 'exc_text',
        'stack_info', 'message', 'taskName',
    })
    
    def _extract_extra_fields(self, record: logging.LogRecord) -> Dict[str, Any]:
        """Collect attributes passed through ``extra=``."""
        return {
            key: value
            for key, value in record.__dict__.items()
            if not key.startswith('_') and key not in self.STANDARD_ATTRS and not callable(value)
        }
    
    def format(self, record: logging.LogRecord) -> str:
        """Format log record as JSON."""
        log_data = {
            "timestamp": datetime.fromtimestamp(record.created).isoformat(),
            "level": record.levelname,
            "logger": record.name,
            "message": record.getMessage(),
        }
        
        extra_data = self._extract_extra_fields(record)
        if extra_data:
            log_data.update(extra_data)
        
        if record.exc_info:
            log_data["exception"] = self.formatException(record.exc_info)
        
        return json.dumps(log_data, default=str, ensure_ascii=False, separators=(',', ':'))


def create_formatter(log_format: LogFormat) -> logging.Formatter:
    """Create the formatter for a log format."""
    if log_format is LogFormat.JSON:
        return JSONFormatter()
    if log_format is LogFormat.DETAILED:
        return logging.Formatter(
            '%(asctime)s - %(name)s - %(levelname)s - %(module)s:%(funcName)s:%(lineno)d - %(message)s'
        )
    return logging.Formatter('%(asctime)s - %(name)s - %(levelname)s - %(message)s')


def configure_logging(
    level: Union[str, LogLevel] = LogLevel.INFO,
    log_format: Union[str, LogFormat] = LogFormat.STANDARD,
    stream: Optional[TextIO] = None
) -> logging.Logger:
    """
    Configure the package logger with a single stream handler.
    
    Args:
        level: Log level name or LogLevel
        log_format: Format name or LogFormat
        stream: Output stream (default: stderr)
        
    Returns:
        The configured package logger
    """
    log_level = LogLevel.from_name(level)
    fmt = LogFormat(log_format) if isinstance(log_format, str) else log_format
    
    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(log_level.value)
    logger.handlers.clear()
    
    handler = logging.StreamHandler(stream)
    handler.setLevel(log_level.value)
    handler.setFormatter(create_formatter(fmt))
    logger.addHandler(handler)
    
    return logger


def get_diagnostics_logger() -> logging.Logger:
    """Logger for load-time diagnostics such as redefinitions."""
    return logging.getLogger(DIAGNOSTICS_LOGGER_NAME)


@contextmanager
def suppress_logger(logger: logging.Logger):
    """Disable a logger for the duration of the block, then restore its state."""
    previous = logger.disabled
    logger.disabled = True
    try:
        yield logger
    finally:
        logger.disabled = previous
