"""
Forms Package

Form data model, source reader and printer for the documented dialect.
"""

from .types import (
    Character,
    Form,
    Identifier,
    KEYWORD_NAMESPACE,
    STANDARD_NAMESPACE,
    form_head,
    is_setf_name,
    keyword,
)
from .reader import Reader, read_forms
from .printer import render_form

__all__ = [
    "Character",
    "Form",
    "Identifier",
    "KEYWORD_NAMESPACE",
    "STANDARD_NAMESPACE",
    "form_head",
    "is_setf_name",
    "keyword",
    "Reader",
    "read_forms",
    "render_form",
]
