"""Shared test fixtures and configuration for docparser tests."""

import logging
from pathlib import Path
from typing import Dict, Iterable, Optional

import pytest

from docparser.core.loader import ModuleLoader
from docparser.core.pipeline import CompilationPipeline, Environment, PipelineHookSlot
from docparser.utils.logging_config import DIAGNOSTICS_LOGGER_NAME


DEMO_PACKAGE = """\
(defpackage :demo
  (:use :core)
  (:export :greet :shout))
"""

DEMO_SOURCE = """\
(in-package :demo)

(defun greet (name)
  "Greets a person."
  (format t "Hello, ~a" name))
"""


@pytest.fixture(autouse=True)
def restore_diagnostics_logger():
    """Make sure no test leaves the diagnostics logger disabled."""
    diagnostics = logging.getLogger(DIAGNOSTICS_LOGGER_NAME)
    disabled = diagnostics.disabled
    yield
    diagnostics.disabled = disabled


@pytest.fixture(autouse=True)
def isolate_environment(monkeypatch):
    """Drop any DOCPARSER_* variables inherited from the developer shell."""
    for name in ("DOCPARSER_SOURCE_PATHS", "DOCPARSER_EXTENDED_FORMS",
                 "DOCPARSER_LOG_LEVEL", "DOCPARSER_LOG_FORMAT"):
        monkeypatch.delenv(name, raising=False)


@pytest.fixture
def write_system(tmp_path):
    """
    Factory writing a system definition and its component files.

    Usage:
        write_system("demo", {"package": "...", "main": "..."}, depends_on=["base"])
    """
    def _write(
        name: str,
        files: Dict[str, str],
        depends_on: Optional[Iterable[str]] = None,
        directory: Optional[Path] = None,
    ) -> Path:
        directory = directory or tmp_path
        directory.mkdir(parents=True, exist_ok=True)
        for component, text in files.items():
            (directory / f"{component}.lisp").write_text(text, encoding="utf-8")

        components = " ".join(f'"{component}"' for component in files)
        dependencies = " ".join(f'"{dep}"' for dep in (depends_on or ()))
        definition = (
            f'(defsystem "{name}"\n'
            f'  :description "Test system {name}."\n'
            f'  :depends-on ({dependencies})\n'
            f'  :components ({components}))\n'
        )
        path = directory / f"{name}.system"
        path.write_text(definition, encoding="utf-8")
        return path

    return _write


@pytest.fixture
def demo_system(write_system):
    """The single-function demo system from the documentation."""
    return write_system("demo", {"package": DEMO_PACKAGE, "main": DEMO_SOURCE})


@pytest.fixture
def pipeline():
    """A fresh compilation pipeline with its own environment and hook slot."""
    return CompilationPipeline(Environment(), PipelineHookSlot())


@pytest.fixture
def loader(pipeline, tmp_path):
    """Loader searching the test's temporary directory."""
    return ModuleLoader(pipeline, [tmp_path])
