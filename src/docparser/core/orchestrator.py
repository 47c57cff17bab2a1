"""
Parse Orchestrator

Public entry point of the extraction engine. A parse installs an
ExpansionInterceptor on the loader's pipeline, forces a full load of the
requested system with loader diagnostics suppressed, and always restores
the pipeline's expansion hook before returning or raising.

The returned nodes are in reverse encounter order: the last definition
form loaded is the first node.
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterable, List, Optional, Union

from ..exceptions import DocparserError
from ..utils.config import ConfigManager
from .extraction import ExpansionInterceptor, FormHandlerRegistry, register_extended_handlers
from .loader import ModuleLoader
from .pipeline import CompilationPipeline, Environment, PipelineHookSlot

logger = logging.getLogger(__name__)


def parse(
    identifier: str,
    loader: Optional[ModuleLoader] = None,
    registry: Optional[FormHandlerRegistry] = None
) -> List:
    """
    Extract documentation nodes from a system.
    
    Args:
        identifier: System to load
        loader: Loader whose ``pipeline`` runs the load pass (default: a
            fresh pipeline searching the current directory)
        registry: Handlers to extract with (default: built-in handlers)
        
    Returns:
        Documentation nodes, most recently encountered first
        
    Raises:
        LoadError: If the system fails to load
        ResolutionError: If a definition name cannot be resolved
        HandlerError: If a recognized form is malformed
    """
    loader = loader if loader is not None else ModuleLoader(CompilationPipeline())
    registry = registry if registry is not None else FormHandlerRegistry()
    pipeline = loader.pipeline
    interceptor = ExpansionInterceptor(registry, pipeline.hook_slot, pipeline.symbol_table)
    
    logger.info("Parsing system %s", identifier)
    prior = interceptor.install()
    try:
        loader.load(identifier, force_reload=True, suppress_diagnostics=True)
    finally:
        interceptor.uninstall(prior)
    
    nodes = interceptor.nodes
    logger.info("Extracted %d node(s) from %s", len(nodes), identifier)
    return nodes


@dataclass
class ParseOutcome:
    """Explicit result of a parse: either nodes or the error that aborted it."""
    nodes: List = field(default_factory=list)
    error: Optional[DocparserError] = None
    
    @property
    def ok(self) -> bool:
        return self.error is None


def safe_parse(
    identifier: str,
    loader: Optional[ModuleLoader] = None,
    registry: Optional[FormHandlerRegistry] = None
) -> ParseOutcome:
    """Like ``parse`` but returns extraction errors instead of raising them."""
    try:
        return ParseOutcome(nodes=parse(identifier, loader, registry))
    except DocparserError as e:
        logger.error("Parse of %s failed: %s", identifier, e)
        return ParseOutcome(error=e)


class DocumentationParser:
    """
    Configured extraction engine.
    
    Owns an environment, a hook slot, a pipeline, a loader and a handler
    registry, built from a ConfigManager. Successive parses share the
    environment, so namespaces defined by one load stay visible.
    """
    
    def __init__(
        self,
        config_manager: Optional[ConfigManager] = None,
        search_paths: Optional[Iterable[Union[str, Path]]] = None,
        extended_forms: Optional[bool] = None
    ) -> None:
        """
        Initialize the parser.
        
        Args:
            config_manager: Configuration source (default: ConfigManager())
            search_paths: Overrides the configured source paths
            extended_forms: Overrides ``extraction.extended_forms``
        """
        self.config_manager = config_manager or ConfigManager()
        
        if search_paths is None:
            search_paths = self.config_manager.get_source_paths()
        if extended_forms is None:
            extended_forms = bool(self.config_manager.get("extraction.extended_forms", False))
        
        self.environment = Environment()
        self.hook_slot = PipelineHookSlot()
        self.pipeline = CompilationPipeline(self.environment, self.hook_slot)
        self.loader = ModuleLoader(self.pipeline, search_paths)
        
        self.registry = FormHandlerRegistry()
        if extended_forms:
            register_extended_handlers(self.registry)
        
        logger.debug(
            "DocumentationParser ready (search paths: %s, extended forms: %s)",
            self.loader.search_paths, extended_forms
        )
    
    def parse(self, identifier: str) -> List:
        """Extract documentation nodes from a system; see ``parse``."""
        return parse(identifier, self.loader, self.registry)
    
    def safe_parse(self, identifier: str) -> ParseOutcome:
        """Extract documentation nodes, returning errors in a ParseOutcome."""
        return safe_parse(identifier, self.loader, self.registry)
