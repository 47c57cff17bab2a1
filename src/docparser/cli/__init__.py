"""
docparser CLI Package.

Command-line interface for extracting documentation from systems.
"""

from .cli import app, cli_main

__all__ = ["app", "cli_main"]
