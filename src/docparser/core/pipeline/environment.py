"""
Host Environment

Namespaces, symbol resolution and the definition store that a load pass
writes into. The SymbolTable implements the symbol-lookup capability used
to build SymbolRefs; the Environment records the real side effects of
every form the compilation pipeline evaluates.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Dict, Iterable, List, Optional, Set, Tuple

from ...exceptions import ResolutionError
from ...utils.logging_config import get_diagnostics_logger
from ..forms import Form, Identifier, KEYWORD_NAMESPACE, STANDARD_NAMESPACE
from ..symbols import Resolution, SymbolRef, render_qualified

logger = logging.getLogger(__name__)
diagnostics = get_diagnostics_logger()

DEFAULT_NAMESPACE = "user"

STANDARD_OPERATORS = (
    "defun", "defmacro", "defgeneric", "defmethod",
    "defvar", "defparameter", "defconstant",
    "defstruct", "defclass", "deftype",
    "defpackage", "in-package", "defsystem",
    "progn", "quote", "declare", "export", "setf", "function",
    "lambda", "let", "if", "print", "format", "list", "nil", "t",
)


@dataclass(eq=False)
class Namespace:
    """A named scope of identifiers.
    
    Attributes:
        name: Canonical namespace name
        nicknames: Alternative names
        uses: Namespaces whose exported names are visible here
        exports: Names this namespace exports (lowercased)
        symbols: Names interned here (lowercased)
    """
    name: str
    nicknames: Set[str] = field(default_factory=set)
    uses: List["Namespace"] = field(default_factory=list)
    exports: Set[str] = field(default_factory=set)
    symbols: Set[str] = field(default_factory=set)
    
    def find_home(self, name: str) -> Optional["Namespace"]:
        """Namespace that owns ``name`` as seen from here, without interning."""
        key = name.lower()
        if key in self.symbols:
            return self
        for used in self.uses:
            if key in used.exports:
                return used.find_home(name) or used
        return None
    
    def intern(self, name: str) -> "Namespace":
        """Return the home namespace of ``name``, interning it here if unknown."""
        home = self.find_home(name)
        if home is None:
            self.symbols.add(name.lower())
            home = self
        return home
    
    def export(self, name: str) -> None:
        self.intern(name)
        self.exports.add(name.lower())
    
    def is_exported(self, name: str) -> bool:
        return name.lower() in self.exports


class SymbolTable:
    """Namespace registry with a current namespace.
    
    Resolution order for ``resolve``:
    keywords resolve to the keyword namespace; qualified identifiers resolve
    through the named namespace; unqualified identifiers through the current
    namespace. Within a namespace an own name wins over an exported name of
    a used namespace; unknown names are interned.
    """
    
    def __init__(self, current: Optional[str] = DEFAULT_NAMESPACE) -> None:
        self._namespaces: Dict[str, Namespace] = {}
        self.current: Optional[Namespace] = None
        
        standard = self.define_namespace(STANDARD_NAMESPACE, exports=STANDARD_OPERATORS)
        if current is not None:
            self.define_namespace(current, uses=[standard.name])
            self.set_current(current)
    
    @property
    def namespaces(self) -> List[Namespace]:
        seen = []
        for namespace in self._namespaces.values():
            if namespace not in seen:
                seen.append(namespace)
        return seen
    
    def find_namespace(self, name: str) -> Optional[Namespace]:
        return self._namespaces.get(name.lower())
    
    def get_namespace(self, name: str) -> Namespace:
        """Look up a namespace by name or nickname.
        
        Raises:
            ResolutionError: If no such namespace exists
        """
        namespace = self.find_namespace(name)
        if namespace is None:
            raise ResolutionError(f"Unknown namespace: {name}")
        return namespace
    
    def define_namespace(
        self,
        name: str,
        uses: Iterable[str] = (),
        exports: Iterable[str] = (),
        nicknames: Iterable[str] = ()
    ) -> Namespace:
        """Create a namespace, or extend an existing one with more uses and exports."""
        namespace = self.find_namespace(name)
        if namespace is None:
            namespace = Namespace(name=name.lower())
            self._namespaces[namespace.name] = namespace
            logger.debug("Defined namespace %s", namespace.name)
        
        for used_name in uses:
            used = self.get_namespace(used_name)
            if used not in namespace.uses and used is not namespace:
                namespace.uses.append(used)
        
        for nickname in nicknames:
            other = self.find_namespace(nickname)
            if other is not None and other is not namespace:
                raise ResolutionError(f"Nickname {nickname} already names namespace {other.name}")
            namespace.nicknames.add(nickname.lower())
            self._namespaces[nickname.lower()] = namespace
        
        for exported in exports:
            namespace.export(exported)
        
        return namespace
    
    def set_current(self, name: str) -> Namespace:
        self.current = self.get_namespace(name)
        logger.debug("Current namespace is now %s", self.current.name)
        return self.current
    
    def _namespace_for(self, identifier: Identifier) -> Namespace:
        if identifier.namespace is not None:
            return self.get_namespace(identifier.namespace)
        if self.current is None:
            raise ResolutionError(f"No current namespace to resolve {identifier}", identifier)
        return self.current
    
    def resolve(self, identifier: Identifier) -> Resolution:
        """Resolve an identifier to its defining namespace and export status.
        
        Raises:
            ResolutionError: If the identifier names an unknown namespace, or
                is unqualified while no namespace is current
        """
        if identifier.is_keyword:
            return Resolution(namespace=KEYWORD_NAMESPACE, exported=True)
        
        try:
            home = self._namespace_for(identifier).intern(identifier.name)
        except ResolutionError as e:
            if e.identifier is None:
                e.identifier = identifier
            raise
        return Resolution(namespace=home.name, exported=home.is_exported(identifier.name))
    
    def find(self, identifier: Identifier) -> Optional[Resolution]:
        """Like ``resolve`` but never interns and returns None instead of raising."""
        if identifier.is_keyword:
            return Resolution(namespace=KEYWORD_NAMESPACE, exported=True)
        
        if identifier.namespace is not None:
            namespace = self.find_namespace(identifier.namespace)
        else:
            namespace = self.current
        if namespace is None:
            return None
        
        home = namespace.find_home(identifier.name)
        if home is None:
            return None
        return Resolution(namespace=home.name, exported=home.is_exported(identifier.name))
    
    def export(self, names: Iterable[Identifier]) -> None:
        """Export names from their home namespaces."""
        for identifier in names:
            resolution = self.resolve(identifier)
            self.get_namespace(resolution.namespace).export(identifier.name)


class DefinitionKind(Enum):
    """Kinds of definitions a load pass can establish."""
    FUNCTION = "function"
    MACRO = "macro"
    GENERIC_FUNCTION = "generic-function"
    METHOD = "method"
    VARIABLE = "variable"
    STRUCT = "struct"
    CLASS = "class"
    TYPE = "type"
    
    def __str__(self) -> str:
        return self.value


@dataclass(frozen=True)
class Definition:
    """A definition established by evaluating a top-level form."""
    kind: DefinitionKind
    ref: SymbolRef
    form: Form


def _definition_key(kind: DefinitionKind, ref: SymbolRef) -> Tuple[DefinitionKind, str, str, bool]:
    # Export status can change after definition; it is not part of identity.
    return (kind, ref.namespace, ref.name.lower(), ref.is_setf)


class Environment:
    """Live program state written by the compilation pipeline."""
    
    def __init__(self, symbol_table: Optional[SymbolTable] = None) -> None:
        self.symbol_table = symbol_table or SymbolTable()
        self._definitions: Dict[tuple, List[Definition]] = {}
        self.calls: List[Form] = []
    
    def define(self, kind: DefinitionKind, ref: SymbolRef, form: Form) -> Definition:
        """Record a definition; methods accumulate, everything else is replaced."""
        definition = Definition(kind=kind, ref=ref, form=form)
        key = _definition_key(kind, ref)
        
        existing = self._definitions.get(key)
        if existing and kind is not DefinitionKind.METHOD:
            diagnostics.warning("Redefining %s %s", kind, render_qualified(ref))
            self._definitions[key] = [definition]
        else:
            self._definitions.setdefault(key, []).append(definition)
        
        logger.debug("Defined %s %s", kind, render_qualified(ref))
        return definition
    
    def is_defined(self, kind: DefinitionKind, ref: SymbolRef) -> bool:
        return _definition_key(kind, ref) in self._definitions
    
    def lookup(self, kind: DefinitionKind, ref: SymbolRef) -> List[Definition]:
        return list(self._definitions.get(_definition_key(kind, ref), []))
    
    def definitions_of(self, kind: DefinitionKind) -> List[Definition]:
        return [
            definition
            for key, definitions in self._definitions.items()
            if key[0] is kind
            for definition in definitions
        ]
    
    def is_macro(self, identifier: Identifier) -> bool:
        """Whether ``identifier`` names a user-defined macro, without interning it."""
        resolution = self.symbol_table.find(identifier)
        if resolution is None:
            return False
        ref = SymbolRef(resolution.namespace, identifier.name, resolution.exported)
        return self.is_defined(DefinitionKind.MACRO, ref)
    
    def record_call(self, form: Form) -> None:
        self.calls.append(form)
