"""
Expansion Interceptor

Temporarily takes over the pipeline's expansion-hook slot during a load
pass. Every macro form the pipeline expands is classified through the
registry: when a handler produces a node, the node is accumulated and the
form is replaced by an inert expansion so its definition never takes
effect; otherwise the form goes to the hook that was active before, and
the load behaves exactly as it would without interception.

The accumulator is newest-first: the last form encountered is the first
node returned.
"""

import logging
from collections import deque
from typing import Deque, List, Optional

from ..forms import Form
from ..pipeline import NOOP_FORM, Environment, ExpansionHook, PipelineHookSlot, SymbolTable
from ..nodes import DocumentationNode, render_node
from .registry import FormHandlerRegistry, FormKind

logger = logging.getLogger(__name__)


class ExpansionInterceptor:
    """Diverts recognized definition forms into the extraction handlers."""
    
    def __init__(
        self,
        registry: FormHandlerRegistry,
        hook_slot: PipelineHookSlot,
        symbol_table: SymbolTable
    ) -> None:
        self.registry = registry
        self.hook_slot = hook_slot
        self.symbol_table = symbol_table
        self._nodes: Deque[DocumentationNode] = deque()
        self._prior: Optional[ExpansionHook] = None
    
    @property
    def nodes(self) -> List[DocumentationNode]:
        """Accumulated nodes, most recently extracted first."""
        return list(self._nodes)
    
    @property
    def is_installed(self) -> bool:
        return self._prior is not None
    
    def install(self) -> ExpansionHook:
        """Capture the active hook and take over the slot.
        
        Returns:
            The captured prior hook, to be passed to ``uninstall``
            
        Raises:
            HookSlotBusyError: If another interceptor holds the slot
        """
        prior = self.hook_slot.acquire(self.intercept)
        self._prior = prior
        logger.debug("Expansion interceptor installed")
        return prior
    
    def uninstall(self, prior: ExpansionHook) -> None:
        """Restore ``prior`` as the pipeline's expansion hook."""
        self.hook_slot.release(prior)
        self._prior = None
        logger.debug("Expansion interceptor uninstalled")
    
    def intercept(self, expander, form: Form, environment: Environment) -> Form:
        """Expansion hook installed while the interceptor is active."""
        kind = FormKind.classify(form)
        handler = self.registry.lookup(kind) if kind is not None else None
        
        if handler is not None:
            node = handler(form[1:], self.symbol_table)
            if node is not None:
                self._nodes.appendleft(node)
                logger.debug("Extracted %s", render_node(node))
                return NOOP_FORM
        
        return self._prior(expander, form, environment)
    
    def __enter__(self) -> "ExpansionInterceptor":
        self.install()
        return self
    
    def __exit__(self, exc_type, exc_value, traceback) -> None:
        self.uninstall(self._prior)
