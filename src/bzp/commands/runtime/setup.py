"""BZP runtime setup command - Install, start and provision Ollama."""

from __future__ import annotations

import asyncio
from typing import TYPE_CHECKING

import click

from bzp.runtime.commands import command_available

if TYPE_CHECKING:
    from bzp.cli import BZPContext
    from bzp.runtime import BootstrapOrchestrator, BootstrapReport


async def run_setup(orchestrator: BootstrapOrchestrator, assume_yes: bool = False) -> BootstrapReport:
    """Full bootstrap without the background ceiling."""
    report = await orchestrator.prepare(assume_yes=assume_yes)
    if orchestrator.runtime_present:
        await orchestrator.setup_present()
    return report


@click.command("setup")
@click.option("--yes", "-y", is_flag=True, help="Install Ollama without asking if it is missing")
@click.option("--model", "-m", type=str, default=None, help="Ollama model to provision")
@click.option("--json", "as_json", is_flag=True, help="Print the final report as JSON")
@click.pass_obj
def runtime_setup(ctx: BZPContext, yes: bool, model: str | None, as_json: bool) -> None:
    """Install Ollama if needed, start its service and pull the model.

    Never fails: anything that can't be done automatically is reported
    with the command to run by hand.

    \b
    Examples:
        bzp runtime setup
        bzp runtime setup --yes --model llama3.2:3b
        bzp -q runtime setup --yes --json
    """
    import json as json_module

    from bzp.config import BZPConfig
    from bzp.logging import console, print_info
    from bzp.runtime import BootstrapOrchestrator, ProcessRunner, render_summary

    config = ctx.config if ctx is not None and ctx.config is not None else BZPConfig()
    orchestrator = BootstrapOrchestrator(
        config.runtime,
        runner=ProcessRunner(terminate_on_cancel=config.runtime.terminate_on_timeout),
        is_available=command_available,
        model=model,
    )

    report = asyncio.run(run_setup(orchestrator, assume_yes=yes))

    if as_json:
        console.print(json_module.dumps(report.to_dict(), indent=2))
        return

    print_info("")
    render_summary(report, verbose=ctx is not None and ctx.verbosity == "verbose")


__all__ = ["run_setup", "runtime_setup"]
