"""Installing the generated project's npm dependencies."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Callable

from bzp.runtime.commands import command_available
from bzp.runtime.process import ProcessRunner

logger = logging.getLogger(__name__)


@dataclass
class DependencyResult:
    """Outcome of ``<package manager> install``."""

    package_manager: str
    ok: bool
    error: str | None = None

    def manual_command(self, project_name: str) -> str:
        return f"cd {project_name} && {self.package_manager} install"


def choose_package_manager(
    preference: str = "auto",
    is_available: Callable[[str], bool] = command_available,
) -> str:
    """Resolve ``auto`` to pnpm when it is on PATH, else npm."""
    if preference != "auto":
        return preference
    return "pnpm" if is_available("pnpm") else "npm"


async def install_dependencies(
    project_dir: Path,
    runner: ProcessRunner,
    package_manager: str,
) -> DependencyResult:
    """Run ``<package_manager> install`` in ``project_dir``. Never raises."""
    result = await runner.run_attached([package_manager, "install"], cwd=project_dir)
    if not result.ok:
        logger.debug(f"{package_manager} install failed: {result.error}")
        return DependencyResult(package_manager, ok=False, error=result.error)
    return DependencyResult(package_manager, ok=True)


__all__ = ["DependencyResult", "choose_package_manager", "install_dependencies"]
