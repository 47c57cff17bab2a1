"""
Extraction Package

Form handler registry, built-in handlers and the expansion interceptor.
"""

from .handlers import (
    extract_docstring,
    resolve_name,
    parse_function,
    parse_macro,
    parse_method,
    parse_generic_function,
    parse_variable,
    parse_type,
    parse_struct,
    parse_class,
)
from .registry import (
    CORE_FORM_KINDS,
    EXTENDED_FORM_KINDS,
    FormHandler,
    FormHandlerRegistry,
    FormKind,
    register_extended_handlers,
)
from .interceptor import ExpansionInterceptor

__all__ = [
    "extract_docstring",
    "resolve_name",
    "parse_function",
    "parse_macro",
    "parse_method",
    "parse_generic_function",
    "parse_variable",
    "parse_type",
    "parse_struct",
    "parse_class",
    "CORE_FORM_KINDS",
    "EXTENDED_FORM_KINDS",
    "FormHandler",
    "FormHandlerRegistry",
    "FormKind",
    "register_extended_handlers",
    "ExpansionInterceptor",
]
