"""
Core modules for docparser.

This package contains the extraction engine: the symbol reference model,
documentation nodes, the form reader, the compilation pipeline, the handler
registry and interceptor, the system loader and the parse orchestrator.
"""

from .symbols import SymbolRef, render_humanized, render_qualified

from .nodes import (
    NodeKind,
    DocumentationNode,
    FunctionNode,
    MacroNode,
    GenericFunctionNode,
    MethodNode,
    TypeNode,
    VariableNode,
    SlotNode,
    StructNode,
    ClassNode,
    node_to_dict,
    render_node,
)

from .extraction import (
    ExpansionInterceptor,
    FormHandlerRegistry,
    FormKind,
    register_extended_handlers,
)

from .pipeline import CompilationPipeline, Environment, PipelineHookSlot

from .loader import ModuleLoader, SystemDefinition

from .orchestrator import DocumentationParser, ParseOutcome, parse, safe_parse

__all__ = [
    "SymbolRef",
    "render_humanized",
    "render_qualified",
    "NodeKind",
    "DocumentationNode",
    "FunctionNode",
    "MacroNode",
    "GenericFunctionNode",
    "MethodNode",
    "TypeNode",
    "VariableNode",
    "SlotNode",
    "StructNode",
    "ClassNode",
    "node_to_dict",
    "render_node",
    "ExpansionInterceptor",
    "FormHandlerRegistry",
    "FormKind",
    "register_extended_handlers",
    "CompilationPipeline",
    "Environment",
    "PipelineHookSlot",
    "ModuleLoader",
    "SystemDefinition",
    "DocumentationParser",
    "ParseOutcome",
    "parse",
    "safe_parse",
]
