"""Click group whose subcommands are imported on first use."""

from __future__ import annotations

import importlib
from typing import Any

import click


def load_command(target: str) -> click.Command:
    """Import ``"package.module:attribute"`` and check it is a click command."""
    module_path, _, attr_name = target.partition(":")
    try:
        command = getattr(importlib.import_module(module_path), attr_name)
    except (ImportError, AttributeError) as e:
        raise click.ClickException(f"Failed to load command {target}: {e}") from None
    if not isinstance(command, click.Command):
        raise click.ClickException(f"{target} is not a click command")
    return command


class LazyGroup(click.Group):
    """A click group mapping command names to ``"module:attribute"`` targets.

    Commands are listed in declaration order. A module is imported the
    first time its command is resolved, so ``bzp init`` never pays for the
    asyncio and subprocess machinery behind ``create`` and ``runtime``.
    """

    def __init__(
        self,
        *args: Any,
        lazy_subcommands: dict[str, str] | None = None,
        **kwargs: Any,
    ) -> None:
        super().__init__(*args, **kwargs)
        self.lazy_subcommands: dict[str, str] = dict(lazy_subcommands or {})

    def list_commands(self, ctx: click.Context) -> list[str]:
        eager = [name for name in super().list_commands(ctx) if name not in self.lazy_subcommands]
        return [*self.lazy_subcommands, *eager]

    def get_command(self, ctx: click.Context, cmd_name: str) -> click.Command | None:
        if cmd_name in self.commands:
            return self.commands[cmd_name]
        target = self.lazy_subcommands.get(cmd_name)
        if target is None:
            return None
        command = load_command(target)
        # Registered once loaded, so later lookups skip the import
        self.add_command(command, cmd_name)
        return command


__all__ = ["LazyGroup", "load_command"]
