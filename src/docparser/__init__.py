"""
docparser: documentation extraction for Lisp-dialect systems.

Loads a system through its compilation pipeline with an expansion hook
installed and collects a documentation node for every recognized
definition form.
"""

__version__ = "0.1.0"

from .core import DocumentationParser, ParseOutcome, parse, safe_parse

__all__ = ["__version__", "DocumentationParser", "ParseOutcome", "parse", "safe_parse"]
