"""
Form Handler Registry

Maps recognized definition-form kinds to extraction handlers. A handler
receives the form's arguments (everything after the head) and the symbol
table, and returns a documentation node, or None to leave the form alone.
"""

import logging
from enum import Enum
from typing import Callable, Dict, List, Optional, Tuple

from ..forms import Form, form_head
from ..pipeline import SymbolTable
from .handlers import (
    parse_class,
    parse_function,
    parse_generic_function,
    parse_macro,
    parse_method,
    parse_struct,
    parse_type,
    parse_variable,
)

logger = logging.getLogger(__name__)

FormHandler = Callable[[Tuple[Form, ...], SymbolTable], Optional[object]]


class FormKind(Enum):
    """Enumeration of recognized definition-form heads."""
    FUNCTION = "defun"
    MACRO = "defmacro"
    GENERIC_FUNCTION = "defgeneric"
    METHOD = "defmethod"
    VARIABLE = "defvar"
    PARAMETER = "defparameter"
    CONSTANT = "defconstant"
    STRUCT = "defstruct"
    CLASS = "defclass"
    TYPE = "deftype"
    
    def __str__(self) -> str:
        return self.value
    
    @classmethod
    def classify(cls, form: Form) -> Optional["FormKind"]:
        """Classify a form by its head identifier, or None if unrecognized."""
        head = form_head(form)
        if head is None or not head.is_standard:
            return None
        try:
            return cls(head.name.lower())
        except ValueError:
            return None


CORE_FORM_KINDS = (
    FormKind.FUNCTION,
    FormKind.MACRO,
    FormKind.GENERIC_FUNCTION,
    FormKind.METHOD,
)

EXTENDED_FORM_KINDS = (
    FormKind.VARIABLE,
    FormKind.PARAMETER,
    FormKind.CONSTANT,
    FormKind.STRUCT,
    FormKind.CLASS,
    FormKind.TYPE,
)


class FormHandlerRegistry:
    """Registry for form extraction handlers."""
    
    def __init__(self, register_defaults: bool = True):
        """Initialize registry, optionally with the built-in handlers."""
        self._handlers: Dict[FormKind, FormHandler] = {}
        if register_defaults:
            self._register_default_handlers()
    
    def _register_default_handlers(self):
        """Register the built-in handlers for the core definition forms."""
        self.register(FormKind.FUNCTION, parse_function)
        self.register(FormKind.MACRO, parse_macro)
        self.register(FormKind.METHOD, parse_method)
        # Recognized but not catalogued: each method is documented separately.
        self.register(FormKind.GENERIC_FUNCTION, parse_generic_function)
    
    def register(self, kind: FormKind, handler: FormHandler) -> None:
        """Register a handler for a form kind; replaces any existing handler."""
        if not isinstance(kind, FormKind):
            raise ValueError(f"kind must be a FormKind, got {type(kind)}")
        if kind in self._handlers:
            logger.debug("Replacing handler for %s", kind)
        self._handlers[kind] = handler
    
    def lookup(self, kind: FormKind) -> Optional[FormHandler]:
        """Get handler for a form kind."""
        return self._handlers.get(kind)
    
    def has(self, kind: FormKind) -> bool:
        return kind in self._handlers
    
    def unregister(self, kind: FormKind) -> None:
        """Remove handler for form kind."""
        if kind in self._handlers:
            del self._handlers[kind]
    
    def kinds(self) -> List[FormKind]:
        """Get list of form kinds with a handler."""
        return list(self._handlers.keys())


def register_extended_handlers(registry: FormHandlerRegistry) -> FormHandlerRegistry:
    """Add handlers for variables, types, structures and classes."""
    registry.register(FormKind.VARIABLE, parse_variable)
    registry.register(FormKind.PARAMETER, parse_variable)
    registry.register(FormKind.CONSTANT, parse_variable)
    registry.register(FormKind.TYPE, parse_type)
    registry.register(FormKind.STRUCT, parse_struct)
    registry.register(FormKind.CLASS, parse_class)
    return registry
