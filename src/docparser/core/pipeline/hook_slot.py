"""
Expansion Hook Slot

The compilation pipeline's single expansion-hook slot, held as an explicit
resource. A hook receives the pipeline's expander, the form being expanded
and the environment, and returns the expansion. Replacing the hook is a
scoped acquisition: ``acquire`` hands back the prior hook, ``release``
restores it, and only one acquisition may be outstanding at a time.
"""

import logging
from contextlib import contextmanager
from typing import Callable, Iterator

from ...exceptions import HookSlotBusyError
from ..forms import Form

logger = logging.getLogger(__name__)

Expander = Callable[[Form, "Environment"], Form]
ExpansionHook = Callable[[Expander, Form, "Environment"], Form]


def default_expansion_hook(expander: Expander, form: Form, environment) -> Form:
    """Plain expansion: call the expander."""
    return expander(form, environment)


class PipelineHookSlot:
    """Holder of the active expansion hook."""
    
    def __init__(self, hook: ExpansionHook = default_expansion_hook) -> None:
        self._hook = hook
        self._acquired = False
    
    @property
    def current(self) -> ExpansionHook:
        """The active expansion hook."""
        return self._hook
    
    @property
    def is_acquired(self) -> bool:
        return self._acquired
    
    def acquire(self, hook: ExpansionHook) -> ExpansionHook:
        """Install ``hook`` and return the hook it replaces.
        
        Raises:
            HookSlotBusyError: If the slot is already acquired
        """
        if self._acquired:
            raise HookSlotBusyError("Expansion hook slot is already acquired")
        
        prior = self._hook
        self._hook = hook
        self._acquired = True
        logger.debug("Acquired expansion hook slot")
        return prior
    
    def release(self, prior: ExpansionHook) -> None:
        """Restore ``prior`` as the active hook.
        
        Raises:
            HookSlotBusyError: If the slot is not acquired
        """
        if not self._acquired:
            raise HookSlotBusyError("Expansion hook slot released without being acquired")
        
        self._hook = prior
        self._acquired = False
        logger.debug("Released expansion hook slot")
    
    @contextmanager
    def scoped(self, hook: ExpansionHook) -> Iterator[ExpansionHook]:
        """Hold the slot with ``hook`` for the block; release on every exit path."""
        prior = self.acquire(hook)
        try:
            yield prior
        finally:
            self.release(prior)
