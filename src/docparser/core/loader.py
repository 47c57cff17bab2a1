"""
System Loader

Resolves a system identifier to its definition file and loads the system's
dependency closure, depth-first and dependencies first, submitting every
top-level form of every component file to the compilation pipeline.

A system definition file ``<name>.system`` holds a single form::

    (defsystem "geometry"
      :description "Points and shapes."
      :depends-on ("math-utils")
      :components ("package" "points" (:file "shapes")))

Component names are relative to the definition file; the ``.lisp``
extension is implied when absent.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable, List, Optional, Set, Tuple, Union

from ..exceptions import EvaluationError, LoadError, ReaderError
from ..utils.logging_config import get_diagnostics_logger, suppress_logger
from .forms import Form, Identifier, form_head, read_forms, render_form
from .pipeline import CompilationPipeline

logger = logging.getLogger(__name__)
diagnostics = get_diagnostics_logger()

SYSTEM_EXTENSION = ".system"
SOURCE_EXTENSION = ".lisp"


def _system_name(form: Form, path: Path) -> str:
    if isinstance(form, Identifier):
        return form.name.lower()
    if isinstance(form, str) and form:
        return form.lower()
    raise LoadError(f"Invalid system name {render_form(form)} in {path}")


def _component_name(form: Form, path: Path) -> str:
    head = form_head(form)
    if head is not None and head.is_keyword and head.matches("file") and len(form) == 2:
        form = form[1]
    if isinstance(form, str) and form:
        return form
    if isinstance(form, Identifier) and not form.is_keyword:
        return form.name
    raise LoadError(f"Invalid component {render_form(form)} in {path}")


def _name_list(form: Form, path: Path, option: str) -> Tuple[Form, ...]:
    if isinstance(form, Identifier) and form.matches("nil"):
        return ()
    if not isinstance(form, tuple):
        raise LoadError(f"{option} must be a list in {path}")
    return form


@dataclass(frozen=True)
class SystemDefinition:
    """A parsed system definition file."""
    name: str
    path: Path
    depends_on: Tuple[str, ...] = ()
    components: Tuple[str, ...] = ()
    description: Optional[str] = None
    
    @property
    def directory(self) -> Path:
        return self.path.parent
    
    def component_paths(self) -> List[Path]:
        """Absolute paths of the component files, in load order."""
        paths = []
        for component in self.components:
            path = self.directory / component
            if not path.suffix:
                path = path.with_suffix(SOURCE_EXTENSION)
            paths.append(path)
        return paths
    
    @classmethod
    def from_file(cls, path: Path) -> "SystemDefinition":
        """Read a system definition file.
        
        Raises:
            LoadError: If the file cannot be read or is not a single defsystem form
        """
        try:
            forms = read_forms(path.read_text(encoding="utf-8"), source=str(path))
        except (OSError, ReaderError) as e:
            raise LoadError(f"Cannot read system definition {path}: {e}") from e
        
        if len(forms) != 1 or form_head(forms[0]) is None or not form_head(forms[0]).matches("defsystem"):
            raise LoadError(f"{path} must contain exactly one defsystem form")
        
        form = forms[0]
        if len(form) < 2:
            raise LoadError(f"defsystem in {path} requires a name")
        name = _system_name(form[1], path)
        
        options = form[2:]
        if len(options) % 2:
            raise LoadError(f"Odd number of defsystem options in {path}")
        
        depends_on: Tuple[str, ...] = ()
        components: Tuple[str, ...] = ()
        description = None
        for index in range(0, len(options), 2):
            key, value = options[index], options[index + 1]
            if not isinstance(key, Identifier) or not key.is_keyword:
                raise LoadError(f"Expected a keyword option in {path}, got {render_form(key)}")
            if key.matches("depends-on"):
                depends_on = tuple(_system_name(item, path) for item in _name_list(value, path, ":depends-on"))
            elif key.matches("components"):
                components = tuple(_component_name(item, path) for item in _name_list(value, path, ":components"))
            elif key.matches("description") and isinstance(value, str):
                description = value
            else:
                logger.debug("Ignoring defsystem option %s in %s", key, path)
        
        return cls(
            name=name,
            path=path,
            depends_on=depends_on,
            components=components,
            description=description,
        )


class ModuleLoader:
    """Loads systems from a list of search directories into a pipeline."""
    
    def __init__(
        self,
        pipeline: CompilationPipeline,
        search_paths: Optional[Iterable[Union[str, Path]]] = None
    ) -> None:
        """
        Initialize the loader.
        
        Args:
            pipeline: Pipeline every top-level form is submitted to
            search_paths: Directories searched for ``<name>.system`` files
                (default: current working directory)
        """
        self.pipeline = pipeline
        self.search_paths = [Path(p) for p in (search_paths or [Path.cwd()])]
        self.loaded: Set[str] = set()
    
    def find_system(self, identifier: str) -> Path:
        """Locate the definition file for a system.
        
        Raises:
            LoadError: If no search path contains the system
        """
        direct = Path(identifier)
        if direct.suffix == SYSTEM_EXTENSION and direct.is_file():
            return direct
        
        file_name = f"{identifier.lower()}{SYSTEM_EXTENSION}"
        for directory in self.search_paths:
            for candidate in (directory / file_name, directory / identifier.lower() / file_name):
                if candidate.is_file():
                    return candidate
        
        searched = ", ".join(str(p) for p in self.search_paths)
        raise LoadError(f"System {identifier!r} not found (searched: {searched})", system=identifier)
    
    def load(
        self,
        identifier: str,
        force_reload: bool = True,
        suppress_diagnostics: bool = True
    ) -> List[str]:
        """
        Load a system and its dependencies.
        
        Args:
            identifier: System name, or path to a ``.system`` file
            force_reload: Reload systems this loader has already loaded
            suppress_diagnostics: Silence the diagnostics logger while loading
            
        Returns:
            Names of the systems loaded, in load order
            
        Raises:
            LoadError: If a system cannot be found, read or evaluated
        """
        order: List[str] = []
        if suppress_diagnostics:
            with suppress_logger(diagnostics):
                self._load_system(identifier, force_reload, [], set(), order)
        else:
            self._load_system(identifier, force_reload, [], set(), order)
        
        logger.info("Loaded %d system(s) for %s", len(order), identifier)
        return order
    
    def _load_system(
        self,
        identifier: str,
        force_reload: bool,
        visiting: List[str],
        done: Set[str],
        order: List[str]
    ) -> None:
        definition = SystemDefinition.from_file(self.find_system(identifier))
        name = definition.name
        
        if name in done:
            return
        if name in visiting:
            cycle = " -> ".join(visiting + [name])
            raise LoadError(f"Circular system dependency: {cycle}", system=name)
        
        visiting.append(name)
        for dependency in definition.depends_on:
            self._load_system(dependency, force_reload, visiting, done, order)
        visiting.pop()
        done.add(name)
        
        if name in self.loaded and not force_reload:
            diagnostics.info("System %s already loaded, skipping", name)
            return
        
        for path in definition.component_paths():
            self.load_file(path, system=name)
        self.loaded.add(name)
        order.append(name)
    
    def load_file(self, path: Path, system: Optional[str] = None) -> None:
        """Read a source file and submit its forms to the pipeline.
        
        Raises:
            LoadError: If the file cannot be read, parsed or evaluated
        """
        logger.debug("Loading %s", path)
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise LoadError(f"Cannot read {path}: {e}", system=system) from e
        
        try:
            forms = read_forms(text, source=str(path))
        except ReaderError as e:
            raise LoadError(f"Cannot parse {path}: {e}", system=system) from e
        
        for form in forms:
            try:
                self.pipeline.process(form)
            except EvaluationError as e:
                raise LoadError(f"Error loading {path}: {e}", system=system) from e
