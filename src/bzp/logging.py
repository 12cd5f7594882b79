"""Console output and logging for BZP CLI.

Progress lines (``print_info``, ``print_step``, ``print_success``) are
hidden in quiet mode; warnings and errors always reach stderr.
"""

from __future__ import annotations

import logging
from typing import Literal

from rich.console import Console
from rich.logging import RichHandler

Verbosity = Literal["quiet", "normal", "verbose"]

console = Console()
err_console = Console(stderr=True)

_LEVELS: dict[str, int] = {
    "quiet": logging.ERROR,
    "normal": logging.WARNING,
    "verbose": logging.DEBUG,
}

_quiet = False


def setup_logging(verbosity: Verbosity = "normal", debug: bool = False) -> logging.Logger:
    """Configure the ``bzp`` logger and the progress helpers.

    Module loggers report through stderr. ``--debug`` lowers the level to
    DEBUG (spawned commands, probe failures, PATH lookups) and turns on rich
    tracebacks with timestamps and source locations.
    """
    global _quiet
    _quiet = verbosity == "quiet"

    logger = logging.getLogger("bzp")
    logger.handlers.clear()
    logger.setLevel(logging.DEBUG if debug else _LEVELS[verbosity])

    handler = RichHandler(
        console=err_console,
        show_time=debug,
        show_path=debug,
        rich_tracebacks=debug,
        markup=False,
    )
    handler.setFormatter(logging.Formatter("%(message)s"))
    logger.addHandler(handler)
    return logger


def print_error(message: str) -> None:
    err_console.print(f"[red]Error:[/red] {message}")


def print_warning(message: str) -> None:
    err_console.print(f"[yellow]Warning:[/yellow] {message}")


def print_info(message: str) -> None:
    if not _quiet:
        console.print(message)


def print_success(message: str) -> None:
    if not _quiet:
        console.print(f"[green]{message}[/green]")


def print_step(message: str) -> None:
    """A finished step, e.g. ``  ✓ src/server.ts``."""
    if not _quiet:
        console.print(f"  [green]✓[/green] {message}")
