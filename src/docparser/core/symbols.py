"""
Symbol Reference Model

Qualified references to documented identifiers. A SymbolRef is resolved
once, from an Identifier and a symbol-table lookup, and never changes.
"""

import logging
from dataclasses import dataclass
from typing import Protocol

from ..exceptions import ResolutionError
from .forms import Identifier

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Resolution:
    """Result of a symbol-table lookup."""
    namespace: str
    exported: bool


class SymbolLookup(Protocol):
    """Symbol-table capability: identifier to defining namespace and export status."""
    
    def resolve(self, identifier: Identifier) -> Resolution:
        ...


@dataclass(frozen=True)
class SymbolRef:
    """A resolved, qualified identifier.
    
    Attributes:
        namespace: Defining namespace of the identifier
        name: Bare name
        exported: Whether the namespace exports the name
        is_setf: True for ``(setf NAME)`` assignment-function names
    """
    namespace: str
    name: str
    exported: bool
    is_setf: bool = False
    
    def __post_init__(self):
        """Validate reference after creation."""
        if not self.namespace:
            raise ValueError("SymbolRef namespace cannot be empty")
        if not self.name:
            raise ValueError("SymbolRef name cannot be empty")
    
    @classmethod
    def from_identifier(
        cls,
        identifier: Identifier,
        symbol_table: SymbolLookup,
        is_setf: bool = False
    ) -> "SymbolRef":
        """Resolve an identifier into a SymbolRef.
        
        Args:
            identifier: Identifier as read from source
            symbol_table: Lookup capability supplying namespace and export status
            is_setf: Mark the reference as a setf-name
            
        Returns:
            Resolved SymbolRef
            
        Raises:
            ResolutionError: If the identifier has no defining namespace
        """
        if not isinstance(identifier, Identifier):
            raise ResolutionError(f"Expected an identifier, got {identifier!r}", identifier)
        
        resolution = symbol_table.resolve(identifier)
        if not resolution.namespace:
            raise ResolutionError(f"No defining namespace for {identifier}", identifier)
        
        logger.debug("Resolved %s to %s:%s", identifier, resolution.namespace, identifier.name)
        return cls(
            namespace=resolution.namespace,
            name=identifier.name,
            exported=resolution.exported,
            is_setf=is_setf,
        )


def render_qualified(ref: SymbolRef) -> str:
    """Render as ``namespace:name``."""
    return f"{ref.namespace}:{ref.name}"


def render_humanized(ref: SymbolRef) -> str:
    """Render the lowercased bare name, without namespace, for human-facing display."""
    return ref.name.lower()
