"""Error handling framework for the BZP CLI.

Only the CLI and scaffold layers raise these. The runtime bootstrapper never
raises past its own boundary; see :mod:`bzp.runtime.types` for the failure
values it reports instead.
"""

from __future__ import annotations

from enum import IntEnum
from typing import Any


class ExitCode(IntEnum):
    """BZP CLI exit codes."""

    SUCCESS = 0
    CONFIG_ERROR = 1  # Configuration error (user fixable)
    SCAFFOLD_ERROR = 2  # Project could not be generated
    FATAL_ERROR = 3  # Unexpected crash


class BZPError(Exception):
    """Base exception for BZP errors."""

    exit_code: ExitCode = ExitCode.FATAL_ERROR

    def __init__(self, message: str, **context: Any) -> None:
        super().__init__(message)
        self.message = message
        self.context = context


class ConfigError(BZPError):
    """Configuration-related errors."""

    exit_code = ExitCode.CONFIG_ERROR


class ScaffoldError(BZPError):
    """Project generation errors."""

    exit_code = ExitCode.SCAFFOLD_ERROR


class DirectoryExistsError(ScaffoldError):
    """Target project directory already exists."""

    def __init__(self, path: str):
        super().__init__(f"Directory {path} already exists", path=path)
        self.path = path


class TemplateNotFoundError(ScaffoldError):
    """A bundled template is missing."""

    def __init__(self, template: str, path: str):
        super().__init__(
            f"Template not found: {template}",
            template=template,
            path=path,
        )
        self.template = template
        self.path = path


__all__ = [
    "BZPError",
    "ConfigError",
    "DirectoryExistsError",
    "ExitCode",
    "ScaffoldError",
    "TemplateNotFoundError",
]
