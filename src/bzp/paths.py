"""Centralized path definitions for BZP.

Templates ship inside the package; the configuration file lives at the
directory the CLI is invoked from (or the user's home directory).
"""

from __future__ import annotations

from pathlib import Path

# Config file (user-editable)
CONFIG_FILE = ".bzprc.toml"

# Bundled project templates
TEMPLATES_DIR = Path(__file__).parent / "scaffold" / "templates"
TEMPLATE_SUFFIX = ".template"


def get_template_path(name: str, templates_dir: Path | None = None) -> Path:
    """Get the path of a bundled template.

    Args:
        name: Template name without suffix (e.g. ``server.ts``)
        templates_dir: Override for the templates directory

    Returns:
        Path to ``<templates_dir>/<name>.template``
    """
    return (templates_dir or TEMPLATES_DIR) / f"{name}{TEMPLATE_SUFFIX}"


def get_project_dir(project_name: str, root: Path | str = ".") -> Path:
    """Resolve the absolute output directory for a generated project."""
    return Path(root).resolve() / project_name


def get_config_locations(config_path: Path | None = None) -> list[Path]:
    """Config file candidates, highest priority first."""
    locations: list[Path] = []
    if config_path:
        locations.append(config_path)
    locations.extend(
        [
            Path.cwd() / CONFIG_FILE,
            Path.home() / CONFIG_FILE,
        ]
    )
    return locations
