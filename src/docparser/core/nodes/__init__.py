"""
Documentation Nodes

Tagged-union node model for extracted documentation and its rendering helpers.
"""

from .types import (
    NodeKind,
    Documented,
    DocumentationNode,
    OperatorNode,
    RecordNode,
    FunctionNode,
    MacroNode,
    GenericFunctionNode,
    MethodNode,
    TypeNode,
    VariableNode,
    SlotNode,
    StructNode,
    ClassNode,
    NODE_TYPES,
    OPERATOR_NODE_TYPES,
    RECORD_NODE_TYPES,
    is_operator_node,
    is_record_node,
)
from .render import display_name, render_node, node_to_dict

__all__ = [
    "NodeKind",
    "Documented",
    "DocumentationNode",
    "OperatorNode",
    "RecordNode",
    "FunctionNode",
    "MacroNode",
    "GenericFunctionNode",
    "MethodNode",
    "TypeNode",
    "VariableNode",
    "SlotNode",
    "StructNode",
    "ClassNode",
    "NODE_TYPES",
    "OPERATOR_NODE_TYPES",
    "RECORD_NODE_TYPES",
    "is_operator_node",
    "is_record_node",
    "display_name",
    "render_node",
    "node_to_dict",
]
