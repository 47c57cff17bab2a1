"""
Utility modules for docparser.

Configuration management and logging setup.
"""

from .logging_config import (
    LogLevel,
    LogFormat,
    JSONFormatter,
    configure_logging,
    get_diagnostics_logger,
    suppress_logger,
)

__all__ = [
    "LogLevel",
    "LogFormat",
    "JSONFormatter",
    "configure_logging",
    "get_diagnostics_logger",
    "suppress_logger",
]
