"""BZP runtime status command - Read-only runtime check."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING, Any, Callable

import click

from bzp.runtime.commands import command_available

if TYPE_CHECKING:
    from bzp.cli import BZPContext
    from bzp.config import RuntimeConfig
    from bzp.runtime import ProcessRunner


async def collect_status(
    config: RuntimeConfig,
    runner: ProcessRunner,
    model: str | None = None,
    is_available: Callable[[str], bool] = command_available,
) -> dict[str, Any]:
    """Probe the runtime without starting or pulling anything."""
    from bzp.runtime import ModelProvisioner, RuntimeStatus, ServiceSupervisor, detect_platform

    platform = detect_platform()
    model = model or config.model
    supervisor = ServiceSupervisor(config, runner, platform)
    status = await supervisor.status(is_available)

    model_ready = False
    if status is RuntimeStatus.SERVICE_RUNNING:
        model_ready = await ModelProvisioner(config, runner).is_available(model)

    return {
        "platform": platform.value,
        "status": status.value,
        "installed": status is not RuntimeStatus.NOT_INSTALLED,
        "service_running": status is RuntimeStatus.SERVICE_RUNNING,
        "model": model,
        "model_ready": model_ready,
    }


@click.command("status")
@click.option("--model", "-m", type=str, default=None, help="Model to look for")
@click.option("--json", "as_json", is_flag=True, help="Output as JSON")
@click.pass_obj
def runtime_status(ctx: BZPContext, model: str | None, as_json: bool) -> None:
    """Check whether Ollama is installed, running and has the model.

    \b
    Example:
        bzp runtime status
        bzp runtime status --json
    """
    import json as json_module

    from rich.table import Table

    from bzp.config import BZPConfig
    from bzp.logging import console
    from bzp.runtime import ProcessRunner

    config = ctx.config if ctx is not None and ctx.config is not None else BZPConfig()
    status = asyncio.run(
        collect_status(config.runtime, ProcessRunner(), model, is_available=command_available)
    )

    if as_json:
        console.print(json_module.dumps(status, indent=2))
        return

    table = Table(title="Ollama Runtime Status")
    table.add_column("Property", style="cyan")
    table.add_column("Value", style="green")

    table.add_row("Platform", status["platform"])
    table.add_row("Installed", "Yes" if status["installed"] else "No")
    table.add_row("Service", "Running" if status["service_running"] else "Not running")
    table.add_row("Model", status["model"])
    table.add_row("Model ready", "Yes" if status["model_ready"] else "No")

    console.print(table)


__all__ = ["collect_status", "runtime_status"]
