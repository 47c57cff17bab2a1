"""
Compilation Pipeline Package

Host environment, symbol table, expansion-hook slot and the top-level form
processor that a load pass runs through.
"""

from .environment import (
    DEFAULT_NAMESPACE,
    Definition,
    DefinitionKind,
    Environment,
    Namespace,
    SymbolTable,
)
from .hook_slot import (
    Expander,
    ExpansionHook,
    PipelineHookSlot,
    default_expansion_hook,
)
from .pipeline import (
    CompilationPipeline,
    NOOP_FORM,
    SPECIAL_OPERATORS,
    STANDARD_MACROS,
)

__all__ = [
    "DEFAULT_NAMESPACE",
    "Definition",
    "DefinitionKind",
    "Environment",
    "Namespace",
    "SymbolTable",
    "Expander",
    "ExpansionHook",
    "PipelineHookSlot",
    "default_expansion_hook",
    "CompilationPipeline",
    "NOOP_FORM",
    "SPECIAL_OPERATORS",
    "STANDARD_MACROS",
]
