"""BZP Runtime Commands - Inspect and set up the local Ollama runtime."""

from __future__ import annotations

import click

from bzp.commands.lazy import LazyGroup

LAZY_RUNTIME_COMMANDS: dict[str, str] = {
    "status": "bzp.commands.runtime.status:runtime_status",
    "setup": "bzp.commands.runtime.setup:runtime_setup",
}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_RUNTIME_COMMANDS)
def runtime() -> None:
    """Local runtime (Ollama) commands.

    \b
    Examples:
        bzp runtime status        # Installed? Service up? Model pulled?
        bzp runtime setup         # Install, start and provision
    """
    pass


__all__ = ["runtime"]
