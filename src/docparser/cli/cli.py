"""
docparser CLI Application.

Main entry point for the docparser command-line interface: extract
documentation nodes from a system and print them as a table or as JSON.
"""

import json
import logging
from enum import Enum
from pathlib import Path
from typing import List, Optional

import typer
from rich import print as rprint
from rich.console import Console
from rich.logging import RichHandler
from rich.panel import Panel
from rich.table import Table
from rich.text import Text

from .. import __version__
from ..core.nodes import display_name, is_operator_node, is_record_node, node_to_dict
from ..core.orchestrator import DocumentationParser
from ..exceptions import DocparserError, HandlerError, LoadError, ResolutionError
from ..exceptions.config_exceptions import ConfigurationError
from ..utils.config import ConfigManager
from ..utils.logging_config import LogFormat, PACKAGE_LOGGER_NAME, configure_logging

# Initialize console for rich output
console = Console()

app = typer.Typer(
    name="docparser",
    help="Extract documentation from Lisp-dialect systems",
    add_completion=False,
    rich_markup_mode="rich",
    context_settings={"help_option_names": ["-h", "--help"]},
)

# Global state
_config_manager: Optional[ConfigManager] = None
_logger: Optional[logging.Logger] = None
_global_config: dict = {}


class OutputFormat(str, Enum):
    """Output formats for the parse command."""
    TABLE = "table"
    JSON = "json"


def setup_logging(verbose: bool = False, level: str = "INFO") -> logging.Logger:
    """
    Set up console logging with rich.

    Args:
        verbose: Enable verbose (DEBUG) logging, overriding ``level``
        level: Configured log level name

    Returns:
        Configured package logger
    """
    logging.getLogger().handlers.clear()

    log_level = logging.DEBUG if verbose else logging.getLevelName(level.upper())
    if not isinstance(log_level, int):
        log_level = logging.INFO

    rich_handler = RichHandler(
        console=Console(stderr=True),
        show_time=True,
        show_path=False,
        markup=False,
        rich_tracebacks=True,
    )
    rich_handler.setLevel(log_level)

    logging.basicConfig(
        level=log_level,
        format="%(message)s",
        datefmt="[%X]",
        handlers=[rich_handler],
    )

    logger = logging.getLogger(PACKAGE_LOGGER_NAME)
    logger.setLevel(log_level)

    return logger


def get_config_manager(config_path: Optional[str] = None) -> ConfigManager:
    """
    Get or create the global configuration manager.

    Args:
        config_path: Optional path to configuration file

    Returns:
        ConfigManager instance with configuration loaded

    Raises:
        typer.Exit: If configuration loading fails
    """
    global _config_manager

    if _config_manager is None or config_path:
        try:
            manager = ConfigManager(config_file=config_path, load_env=True)
            manager.load_config()
        except ConfigurationError as e:
            rprint(f"[red]Configuration Error:[/red] {e}")
            raise typer.Exit(1)
        _config_manager = manager

    return _config_manager


def get_logger() -> logging.Logger:
    """Get the global logger instance."""
    global _logger
    if _logger is None:
        _logger = setup_logging()
    return _logger


def get_global_config() -> dict:
    """Get the global options dictionary."""
    return _global_config


@app.callback()
def main(
    ctx: typer.Context,
    config_path: Optional[str] = typer.Option(
        None,
        "--config-path",
        "-c",
        help="Path to configuration file (default: docparser.config.json)",
        metavar="PATH",
    ),
    verbose: bool = typer.Option(
        False,
        "--verbose",
        "-v",
        help="Enable verbose logging (DEBUG level)",
    ),
) -> None:
    """
    docparser - documentation extraction for Lisp-dialect systems.

    Loads a system with an expansion hook installed and reports every
    function, macro, generic function and method definition it sees.

    Common workflows:
    • Table output: docparser parse my-system --path ./src
    • JSON output: docparser parse my-system --format json
    • Include variables, types, structs and classes: docparser parse my-system --extended
    """
    global _logger, _global_config

    config_manager = get_config_manager(config_path)
    level = config_manager.get("logging.level", "INFO")
    log_format = config_manager.get("logging.format", LogFormat.STANDARD.value)

    if log_format == LogFormat.STANDARD.value:
        _logger = setup_logging(verbose, level)
    else:
        _logger = configure_logging("DEBUG" if verbose else level, log_format)

    _global_config = {
        "config_path": config_path,
        "verbose": verbose,
        "config_manager": config_manager,
        "logger": _logger,
    }
    ctx.obj = _global_config.copy()


def _node_detail(node) -> str:
    if is_operator_node(node):
        return "(" + " ".join(node.parameters) + ")"
    if is_record_node(node):
        return ", ".join(display_name(slot.name) for slot in node.slots)
    return ""


def build_nodes_table(nodes: List, title: str) -> Table:
    """Rich table with one row per documentation node."""
    table = Table(title=title, show_lines=False)
    table.add_column("Kind", style="cyan", no_wrap=True)
    table.add_column("Namespace", style="magenta")
    table.add_column("Name", style="bold")
    table.add_column("Exported", justify="center")
    table.add_column("Parameters / Slots")
    table.add_column("Docstring", style="green")

    for node in nodes:
        table.add_row(
            str(node.kind),
            node.name.namespace,
            display_name(node.name),
            "✓" if node.name.exported else "",
            _node_detail(node),
            node.docstring or "",
        )

    return table


@app.command()
def parse(
    system: str = typer.Argument(..., help="System name or path to a .system file"),
    paths: Optional[List[Path]] = typer.Option(
        None,
        "--path",
        "-p",
        help="Directory to search for systems (repeatable, overrides source_paths)",
    ),
    output_format: OutputFormat = typer.Option(
        OutputFormat.TABLE,
        "--format",
        "-f",
        help="Output format",
        case_sensitive=False,
    ),
    extended: Optional[bool] = typer.Option(
        None,
        "--extended/--core-only",
        help="Also extract variables, types, structs and classes",
    ),
) -> None:
    """Extract documentation nodes from a system."""
    logger = get_logger()
    config_manager = get_global_config().get("config_manager") or get_config_manager()

    parser = DocumentationParser(
        config_manager=config_manager,
        search_paths=paths or None,
        extended_forms=extended,
    )

    try:
        nodes = parser.parse(system)
    except DocparserError as e:
        handle_cli_error(e)
        raise typer.Exit(1)

    logger.debug(f"Rendering {len(nodes)} node(s) as {output_format.value}")

    if output_format is OutputFormat.JSON:
        typer.echo(json.dumps([node_to_dict(node) for node in nodes], indent=2))
        return

    if not nodes:
        rprint(f"[yellow]No documented definitions found in {system}[/yellow]")
        return

    console.print(build_nodes_table(nodes, f"Documentation for {system}"))


@app.command()
def info() -> None:
    """Show configuration status."""
    try:
        config_manager = get_global_config().get("config_manager") or get_config_manager()
        config = config_manager.config

        info_text = Text()
        info_text.append("docparser Information\n\n", style="bold blue")
        info_text.append(f"Version: {__version__}\n")
        info_text.append(f"Config file: {config_manager.config_file}\n")
        info_text.append(f"Project root: {config_manager.project_root}\n")
        info_text.append(f"Loaded: {'✓' if config_manager.is_loaded else '✗'}\n\n")

        info_text.append("Configuration:\n", style="bold")
        for source_path in config_manager.get_source_paths():
            info_text.append(f"• Source path: {source_path}\n")
        extended = config.get('extraction', {}).get('extended_forms', False)
        info_text.append(f"• Extended forms: {'on' if extended else 'off'}\n")
        info_text.append(f"• Log level: {config.get('logging', {}).get('level', 'INFO')}\n")

        panel = Panel(info_text, title="System Information", border_style="blue")
        console.print(panel)

    except ConfigurationError as e:
        rprint(f"[red]Configuration Error:[/red] {e}")
        raise typer.Exit(1)


@app.command()
def version() -> None:
    """Show version information."""
    rprint(f"docparser [blue]v{__version__}[/blue]")


def handle_cli_error(error: Exception) -> None:
    """
    Handle CLI errors with user-friendly messages.

    Args:
        error: The exception that occurred
    """
    logger = get_logger()

    if isinstance(error, ConfigurationError):
        rprint(f"[red]Configuration Error:[/red] {error}")
        logger.debug("Configuration error details", exc_info=True)
    elif isinstance(error, LoadError):
        rprint(f"[red]Load Error:[/red] {error}")
        logger.debug("Load error details", exc_info=True)
    elif isinstance(error, ResolutionError):
        rprint(f"[red]Resolution Error:[/red] {error}")
        logger.debug("Resolution error details", exc_info=True)
    elif isinstance(error, HandlerError):
        rprint(f"[red]Malformed Definition:[/red] {error}")
        logger.debug("Handler error details", exc_info=True)
    else:
        rprint(f"[red]Error:[/red] {error}")
        logger.debug("Unexpected error details", exc_info=True)


def cli_main() -> None:
    """
    Main CLI entry point with error handling.

    This function is called by the console script entry point.
    """
    try:
        app()
    except typer.Exit:
        raise
    except KeyboardInterrupt:
        rprint("\n[yellow]Operation cancelled by user[/yellow]")
        raise typer.Exit(130)
    except Exception as e:
        handle_cli_error(e)
        raise typer.Exit(1)


if __name__ == "__main__":
    cli_main()
