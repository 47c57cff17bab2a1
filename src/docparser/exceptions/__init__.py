"""
Exceptions package for docparser.

This package contains custom exception classes for extraction and
configuration error scenarios.
"""

from .config_exceptions import (
    ConfigurationError,
    ConfigurationFileNotFoundError,
    ConfigurationValidationError,
    EnvironmentVariableError,
)

from .parse_exceptions import (
    DocparserError,
    ResolutionError,
    LoadError,
    HandlerError,
    ReaderError,
    EvaluationError,
    HookSlotBusyError,
)

__all__ = [
    # Configuration exceptions
    "ConfigurationError",
    "ConfigurationFileNotFoundError",
    "ConfigurationValidationError",
    "EnvironmentVariableError",
    # Extraction exceptions
    "DocparserError",
    "ResolutionError",
    "LoadError",
    "HandlerError",
    "ReaderError",
    "EvaluationError",
    "HookSlotBusyError",
]
