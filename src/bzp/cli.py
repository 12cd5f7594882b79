"""BZP CLI - scaffold local-first agent projects."""

from __future__ import annotations

from pathlib import Path
from typing import TYPE_CHECKING, Literal

from dotenv import load_dotenv

# Load .env file before any other imports that might use env vars
load_dotenv()

import click  # noqa: E402

from bzp import __version__  # noqa: E402
from bzp.commands.lazy import LazyGroup  # noqa: E402

if TYPE_CHECKING:
    from bzp.config import BZPConfig

VerbosityLevel = Literal["quiet", "normal", "verbose"]


class BZPContext:
    """Shared context for CLI commands."""

    def __init__(self) -> None:
        self.config: BZPConfig | None = None
        self.verbosity: VerbosityLevel = "normal"
        self.debug: bool = False


pass_context = click.make_pass_decorator(BZPContext, ensure=True)


# Define lazy subcommands: name -> (module_path, attribute_name)
LAZY_COMMANDS: dict[str, str] = {
    "create": "bzp.commands.create:create",
    "runtime": "bzp.commands.runtime:runtime",
    "init": "bzp.commands.init_cmd:init",
}


@click.group(cls=LazyGroup, lazy_subcommands=LAZY_COMMANDS)
@click.option("-v", "--verbose", is_flag=True, help="Enable verbose output")
@click.option("-q", "--quiet", is_flag=True, help="Suppress non-error output")
@click.option("--debug", is_flag=True, help="Show debug logs and full tracebacks")
@click.option(
    "--config",
    type=click.Path(exists=True, path_type=Path),
    help="Path to configuration file",
)
@click.version_option(version=__version__, prog_name="bzp")
@pass_context
def cli(
    ctx: BZPContext,
    verbose: bool,
    quiet: bool,
    debug: bool,
    config: Path | None,
) -> None:
    """BZP - scaffold agents that run locally on Ollama.

    \b
    Commands:
      create       Create a new agent project
      runtime      Check or set up the local Ollama runtime
      init         Write a default .bzprc.toml

    Use 'bzp <command> --help' for details.
    """
    from bzp.config import BZPConfig
    from bzp.errors import ConfigError
    from bzp.logging import print_error, setup_logging

    ctx.debug = debug

    if quiet:
        ctx.verbosity = "quiet"
    elif verbose:
        ctx.verbosity = "verbose"
    else:
        ctx.verbosity = "normal"

    setup_logging(ctx.verbosity, debug=debug)

    try:
        ctx.config = BZPConfig.load(config)
    except ConfigError as e:
        if not quiet:
            print_error(f"Failed to load configuration: {e.message}")
        # Commands fall back to built-in defaults


def main() -> None:
    """Entry point for the CLI."""
    import sys

    debug_mode = "--debug" in sys.argv

    try:
        cli()
    except click.ClickException:
        # Let Click handle its own exceptions
        raise
    except KeyboardInterrupt:
        # Clean exit on Ctrl+C
        sys.exit(130)
    except Exception as e:
        from bzp.errors import BZPError
        from bzp.logging import print_error, print_info

        if isinstance(e, BZPError):
            print_error(e.message)
            if debug_mode:
                for key, value in e.context.items():
                    print_info(f"  {key}: {value}")
            sys.exit(e.exit_code)

        print_error(f"Error: {e}")

        if debug_mode:
            print_info("")
            print_info("Full traceback (--debug mode):")
            import traceback

            traceback.print_exc()
        else:
            print_info("")
            print_info("Run with --debug for full traceback.")

        sys.exit(1)


if __name__ == "__main__":
    main()
