"""
Node Rendering

Compact textual and dictionary views of documentation nodes for display and
machine-readable output. Full documentation rendering is left to downstream
tools.
"""

from typing import Any, Dict

from ..symbols import SymbolRef, render_humanized, render_qualified
from .types import is_operator_node, is_record_node, SlotNode, VariableNode


def display_name(ref: SymbolRef) -> str:
    """Humanized name, wrapped as ``(setf name)`` for setf-names."""
    name = render_humanized(ref)
    if ref.is_setf:
        return f"(setf {name})"
    return name


def render_node(node) -> str:
    """One-line summary, e.g. ``#<function greet (name)>``."""
    label = f"#<{node.kind} {display_name(node.name)}"
    
    if is_operator_node(node):
        label += " (" + " ".join(node.parameters) + ")"
    elif is_record_node(node):
        label += " (" + " ".join(display_name(slot.name) for slot in node.slots) + ")"
    
    return label + ">"


def _ref_to_dict(ref: SymbolRef) -> Dict[str, Any]:
    return {
        "namespace": ref.namespace,
        "name": ref.name,
        "qualified": render_qualified(ref),
        "exported": ref.exported,
        "setf": ref.is_setf,
    }


def node_to_dict(node) -> Dict[str, Any]:
    """Convert a node to a JSON-compatible dictionary."""
    data: Dict[str, Any] = {
        "kind": node.kind.value,
        "name": _ref_to_dict(node.name),
        "docstring": node.docstring,
    }
    
    if is_operator_node(node):
        data["parameters"] = list(node.parameters)
    elif is_record_node(node):
        data["slots"] = [node_to_dict(slot) for slot in node.slots]
    elif isinstance(node, SlotNode):
        data["accessors"] = [_ref_to_dict(ref) for ref in node.accessors]
        data["readers"] = [_ref_to_dict(ref) for ref in node.readers]
        data["writers"] = [_ref_to_dict(ref) for ref in node.writers]
    elif not isinstance(node, VariableNode):
        raise TypeError(f"Unsupported node type: {type(node).__name__}")
    
    return data
