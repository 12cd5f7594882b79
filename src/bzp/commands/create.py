"""BZP create command - Scaffold a new agent project."""

from __future__ import annotations

import asyncio
import sys
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Callable

import click

from bzp.runtime.commands import command_available

if TYPE_CHECKING:
    from bzp.cli import BZPContext
    from bzp.config import BZPConfig
    from bzp.runtime import BootstrapOrchestrator, BootstrapReport, ProcessRunner
    from bzp.scaffold import DependencyResult, ProjectNames


@dataclass
class CreateResult:
    """Everything the final summary needs."""

    names: ProjectNames
    project_dir: Path
    files: list[str]
    report: BootstrapReport
    dependencies: DependencyResult | None
    package_manager: str


async def run_create(
    names: ProjectNames,
    project_dir: Path,
    config: BZPConfig,
    orchestrator: BootstrapOrchestrator,
    runner: ProcessRunner,
    assume_yes: bool = False,
    skip_runtime: bool = False,
    install: bool = True,
    is_available: Callable[[str], bool] = command_available,
) -> CreateResult:
    """Consent gate, file generation, dependency install, bounded runtime pass.

    Only project generation can fail (``ScaffoldError``); everything on the
    runtime side ends up in the returned report.
    """
    from bzp.logging import print_info, print_step, print_success, print_warning
    from bzp.scaffold import choose_package_manager, generate_project, install_dependencies

    print_info(f"🚀 Creating agent: {names.project_name}\n")

    await orchestrator.prepare(assume_yes=assume_yes, skip=skip_runtime)
    orchestrator.start_background()

    print_info("📝 Generating files...\n")
    files = generate_project(names, project_dir)
    for path in files:
        print_step(path)
    print_success(f"\n✅ Success! Created {names.project_name}\n")

    package_manager = choose_package_manager(config.scaffold.package_manager, is_available)
    dependencies = None
    if install and config.scaffold.install_dependencies:
        print_info("📦 Installing dependencies...")
        dependencies = await install_dependencies(project_dir, runner, package_manager)
        if dependencies.ok:
            print_step(f"Dependencies installed with {package_manager}")
        else:
            print_warning(f"Failed to install dependencies: {dependencies.error}")
            print_info(f"   Please run manually: {dependencies.manual_command(names.project_name)}")

    report = await orchestrator.finish()
    return CreateResult(
        names=names,
        project_dir=project_dir,
        files=files,
        report=report,
        dependencies=dependencies,
        package_manager=package_manager,
    )


def print_next_steps(result: CreateResult, verbose: bool = False) -> None:
    from bzp.logging import print_info
    from bzp.runtime import render_summary

    print_info("\n🎉 Setup complete! Your agent is ready to run.\n")
    render_summary(result.report, verbose=verbose)

    deps = result.dependencies
    if deps is None:
        print_info(f"⚠️  Install dependencies: {result.package_manager} install")
    elif deps.ok:
        print_info("✅ Dependencies are installed")
    else:
        print_info(f"⚠️  Install dependencies: {deps.manual_command(result.names.project_name)}")

    print_info("\nNext steps:")
    print_info(f"  cd {result.names.project_name}")
    print_info(f"  {result.package_manager} dev")
    print_info("\nYour server will start on http://localhost:3000")
    print_info("The server will wait for requests. Make a POST request to / with:")
    print_info('  { "input": "your message" }')


@click.command()
@click.argument("name")
@click.option("--yes", "-y", is_flag=True, help="Install Ollama without asking if it is missing")
@click.option("--skip-runtime", is_flag=True, help="Don't install, start or provision Ollama")
@click.option("--no-install", is_flag=True, help="Don't install npm dependencies")
@click.option("--model", "-m", type=str, default=None, help="Ollama model to provision")
@click.option(
    "--output-dir",
    "-o",
    type=click.Path(file_okay=False, path_type=Path),
    default=".",
    help="Directory to create the project in",
)
@click.pass_obj
def create(
    ctx: BZPContext,
    name: str,
    yes: bool,
    skip_runtime: bool,
    no_install: bool,
    model: str | None,
    output_dir: Path,
) -> None:
    """Create a new agent project.

    NAME gets an "-agent" suffix if it doesn't already have one. If Ollama
    is missing you are asked whether to install it; either way the project
    is generated.

    \b
    Examples:
        bzp create chatbot
        bzp create my-agent --yes
        bzp create support --skip-runtime --no-install
    """
    from bzp.config import BZPConfig
    from bzp.errors import BZPError, ExitCode
    from bzp.logging import print_error
    from bzp.paths import get_project_dir
    from bzp.runtime import BootstrapOrchestrator, ProcessRunner
    from bzp.scaffold import ProjectNames

    config = ctx.config if ctx is not None and ctx.config is not None else BZPConfig()
    names = ProjectNames.from_agent_name(name)
    project_dir = get_project_dir(names.project_name, output_dir)

    if project_dir.exists():
        print_error(f"Directory {project_dir} already exists")
        sys.exit(ExitCode.SCAFFOLD_ERROR)

    runner = ProcessRunner(terminate_on_cancel=config.runtime.terminate_on_timeout)
    orchestrator = BootstrapOrchestrator(
        config.runtime,
        runner=runner,
        is_available=command_available,
        model=model,
    )

    try:
        result = asyncio.run(
            run_create(
                names,
                project_dir,
                config,
                orchestrator,
                runner,
                assume_yes=yes,
                skip_runtime=skip_runtime,
                install=not no_install,
                is_available=command_available,
            )
        )
    except BZPError as e:
        print_error(e.message)
        sys.exit(e.exit_code)

    print_next_steps(result, verbose=ctx is not None and ctx.verbosity == "verbose")


__all__ = ["CreateResult", "create", "print_next_steps", "run_create"]
