"""
Documentation Node Types

Core data structures for extracted documentation. Nodes form a tagged union:
each variant is its own immutable dataclass carrying a ``kind`` tag, and all
variants share the ``name``/``docstring``/``kind`` capability described by
the Documented protocol.
"""

from dataclasses import dataclass
from enum import Enum
from typing import ClassVar, Optional, Protocol, Tuple, Union, runtime_checkable

from ..symbols import SymbolRef


class NodeKind(Enum):
    """Enumeration of documentation node variants."""
    FUNCTION = "function"
    MACRO = "macro"
    GENERIC_FUNCTION = "generic-function"
    METHOD = "method"
    TYPE = "type"
    VARIABLE = "variable"
    SLOT = "slot"
    STRUCT = "struct"
    CLASS = "class"
    
    def __str__(self) -> str:
        return self.value


@runtime_checkable
class Documented(Protocol):
    """Capability shared by every node variant."""
    kind: NodeKind
    name: SymbolRef
    docstring: Optional[str]


def _validate_common(node) -> None:
    if not isinstance(node.name, SymbolRef):
        raise ValueError(f"name must be a SymbolRef, got {type(node.name)}")
    if node.docstring is not None and not isinstance(node.docstring, str):
        raise ValueError(f"docstring must be a string or None, got {type(node.docstring)}")


def _freeze(node, attribute: str, item_type: type) -> None:
    value = getattr(node, attribute)
    if isinstance(value, list):
        value = tuple(value)
        object.__setattr__(node, attribute, value)
    if not isinstance(value, tuple):
        raise ValueError(f"{attribute} must be a tuple, got {type(value)}")
    for item in value:
        if not isinstance(item, item_type):
            raise ValueError(f"{attribute} entries must be {item_type.__name__}, got {type(item)}")


def _validate_operator(node) -> None:
    _validate_common(node)
    _freeze(node, "parameters", str)


@dataclass(frozen=True)
class FunctionNode:
    """A function definition."""
    kind: ClassVar[NodeKind] = NodeKind.FUNCTION
    name: SymbolRef
    parameters: Tuple[str, ...] = ()
    docstring: Optional[str] = None
    
    def __post_init__(self):
        _validate_operator(self)


@dataclass(frozen=True)
class MacroNode:
    """A macro definition."""
    kind: ClassVar[NodeKind] = NodeKind.MACRO
    name: SymbolRef
    parameters: Tuple[str, ...] = ()
    docstring: Optional[str] = None
    
    def __post_init__(self):
        _validate_operator(self)


@dataclass(frozen=True)
class GenericFunctionNode:
    """A generic-function definition."""
    kind: ClassVar[NodeKind] = NodeKind.GENERIC_FUNCTION
    name: SymbolRef
    parameters: Tuple[str, ...] = ()
    docstring: Optional[str] = None
    
    def __post_init__(self):
        _validate_operator(self)


@dataclass(frozen=True)
class MethodNode:
    """A method definition."""
    kind: ClassVar[NodeKind] = NodeKind.METHOD
    name: SymbolRef
    parameters: Tuple[str, ...] = ()
    docstring: Optional[str] = None
    
    def __post_init__(self):
        _validate_operator(self)


@dataclass(frozen=True)
class TypeNode:
    """A type definition. Parameters are the type's lambda list."""
    kind: ClassVar[NodeKind] = NodeKind.TYPE
    name: SymbolRef
    parameters: Tuple[str, ...] = ()
    docstring: Optional[str] = None
    
    def __post_init__(self):
        _validate_operator(self)


@dataclass(frozen=True)
class VariableNode:
    """A global variable, parameter or constant."""
    kind: ClassVar[NodeKind] = NodeKind.VARIABLE
    name: SymbolRef
    docstring: Optional[str] = None
    
    def __post_init__(self):
        _validate_common(self)


@dataclass(frozen=True)
class SlotNode:
    """A slot of a struct or class with its accessor functions."""
    kind: ClassVar[NodeKind] = NodeKind.SLOT
    name: SymbolRef
    docstring: Optional[str] = None
    accessors: Tuple[SymbolRef, ...] = ()
    readers: Tuple[SymbolRef, ...] = ()
    writers: Tuple[SymbolRef, ...] = ()
    
    def __post_init__(self):
        _validate_common(self)
        for attribute in ("accessors", "readers", "writers"):
            _freeze(self, attribute, SymbolRef)


@dataclass(frozen=True)
class StructNode:
    """A structure definition."""
    kind: ClassVar[NodeKind] = NodeKind.STRUCT
    name: SymbolRef
    docstring: Optional[str] = None
    slots: Tuple[SlotNode, ...] = ()
    
    def __post_init__(self):
        _validate_common(self)
        _freeze(self, "slots", SlotNode)


@dataclass(frozen=True)
class ClassNode:
    """A class definition."""
    kind: ClassVar[NodeKind] = NodeKind.CLASS
    name: SymbolRef
    docstring: Optional[str] = None
    slots: Tuple[SlotNode, ...] = ()
    
    def __post_init__(self):
        _validate_common(self)
        _freeze(self, "slots", SlotNode)


OperatorNode = Union[FunctionNode, MacroNode, GenericFunctionNode, MethodNode, TypeNode]
RecordNode = Union[StructNode, ClassNode]
DocumentationNode = Union[
    FunctionNode,
    MacroNode,
    GenericFunctionNode,
    MethodNode,
    TypeNode,
    VariableNode,
    SlotNode,
    StructNode,
    ClassNode,
]

OPERATOR_NODE_TYPES = (FunctionNode, MacroNode, GenericFunctionNode, MethodNode, TypeNode)
RECORD_NODE_TYPES = (StructNode, ClassNode)

NODE_TYPES = {
    node_type.kind: node_type
    for node_type in OPERATOR_NODE_TYPES + (VariableNode, SlotNode) + RECORD_NODE_TYPES
}


def is_operator_node(node) -> bool:
    return isinstance(node, OPERATOR_NODE_TYPES)


def is_record_node(node) -> bool:
    return isinstance(node, RECORD_NODE_TYPES)
