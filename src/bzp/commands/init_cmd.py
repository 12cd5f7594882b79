"""BZP init command - Initialize .bzprc.toml configuration."""

from __future__ import annotations

import sys
from pathlib import Path

import click


@click.command()
@click.option("--force", "-f", is_flag=True, help="Overwrite existing .bzprc.toml")
def init(force: bool) -> None:
    """Initialize a new .bzprc.toml configuration file.

    Creates a configuration file with the default runtime and scaffold
    settings in the current directory.
    """
    from bzp.config import get_default_config_toml
    from bzp.errors import ExitCode
    from bzp.logging import print_error, print_info, print_success, print_warning
    from bzp.paths import CONFIG_FILE

    config_path = Path.cwd() / CONFIG_FILE

    if config_path.exists() and not force:
        print_warning(f"Configuration file already exists: {config_path}")
        print_info("Use --force to overwrite")
        sys.exit(ExitCode.CONFIG_ERROR)

    try:
        config_path.write_text(get_default_config_toml())
        print_success(f"Created {config_path}")
        print_info("\nNext steps:")
        print_info(f"  1. Edit {CONFIG_FILE} to pick a model or package manager")
        print_info("  2. Run 'bzp create <name>' to scaffold an agent")
    except PermissionError:
        print_error(f"Permission denied: {config_path}")
        sys.exit(ExitCode.CONFIG_ERROR)
    except OSError as e:
        print_error(f"Failed to create config file: {e}")
        sys.exit(ExitCode.FATAL_ERROR)


__all__ = ["init"]
