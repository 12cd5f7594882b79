"""Project scaffolding: names, files and npm dependencies."""

from __future__ import annotations

from bzp.scaffold.deps import DependencyResult, choose_package_manager, install_dependencies
from bzp.scaffold.generator import generate_project, render_template
from bzp.scaffold.naming import ProjectNames

__all__ = [
    "DependencyResult",
    "ProjectNames",
    "choose_package_manager",
    "generate_project",
    "install_dependencies",
    "render_template",
]
