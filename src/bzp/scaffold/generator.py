"""Project file generation.

Templates are plain text with ``{{placeholder}}`` markers; everything else
(package.json, tsconfig.json, .gitignore) is emitted directly.
"""

from __future__ import annotations

import json
import logging
import re
import shutil
from pathlib import Path
from typing import Any

from bzp.errors import DirectoryExistsError, TemplateNotFoundError
from bzp.paths import get_template_path
from bzp.scaffold.naming import ProjectNames

logger = logging.getLogger(__name__)

_PLACEHOLDER = re.compile(r"\{\{(\w+)\}\}")

# (template name, output path relative to the project root)
TEMPLATE_FILES: list[tuple[str, str]] = [
    ("server.ts", "src/server.ts"),
    ("prompt.ts", "src/prompt.ts"),
    ("types.ts", "src/types.ts"),
    ("ai.ts", "src/ai.ts"),
    ("env.example", ".env.example"),
]

GITIGNORE = """node_modules/
dist/
.env
*.log
.DS_Store
"""

DEV_DEPENDENCIES = {
    "@types/node": "^24.10.1",
    "tsx": "^4.20.6",
    "typescript": "^5.9.3",
}

DEPENDENCIES = {
    "@ai-sdk/ollama": "^0.0.30",
    "@ai-sdk/azure": "^2.0.70",
    "@ai-sdk/openai": "^2.0.68",
    "ai": "^5.0.93",
    "dotenv": "^17.2.3",
    "fastify": "^5.6.2",
    "zod": "^4.1.12",
}


def render_template(template: str, values: dict[str, str]) -> str:
    """Substitute ``{{name}}`` markers. Unknown markers are left untouched."""

    def replace(match: re.Match[str]) -> str:
        return values.get(match.group(1), match.group(0))

    return _PLACEHOLDER.sub(replace, template)


def read_template(name: str, templates_dir: Path | None = None) -> str:
    path = get_template_path(name, templates_dir)
    if not path.exists():
        raise TemplateNotFoundError(name, str(path))
    return path.read_text(encoding="utf-8")


def package_json(project_name: str) -> dict[str, Any]:
    return {
        "name": project_name,
        "version": "1.0.0",
        "description": "",
        "main": "src/server.ts",
        "scripts": {
            "dev": "tsx watch src/server.ts",
            "start": "tsx src/server.ts",
        },
        "keywords": [],
        "author": "",
        "license": "ISC",
        "devDependencies": dict(DEV_DEPENDENCIES),
        "dependencies": dict(DEPENDENCIES),
    }


def tsconfig_json() -> dict[str, Any]:
    return {
        "compilerOptions": {
            "target": "ES2022",
            "module": "commonjs",
            "lib": ["ES2022"],
            "outDir": "./dist",
            "rootDir": "./src",
            "strict": True,
            "esModuleInterop": True,
            "skipLibCheck": True,
            "forceConsistentCasingInFileNames": True,
            "resolveJsonModule": True,
            "moduleResolution": "node",
        },
        "include": ["src/**/*"],
        "exclude": ["node_modules", "dist"],
    }


def _write_json(path: Path, data: dict[str, Any]) -> None:
    path.write_text(json.dumps(data, indent=2) + "\n", encoding="utf-8")


def generate_project(
    names: ProjectNames,
    output_dir: Path,
    templates_dir: Path | None = None,
) -> list[str]:
    """Create the project tree under ``output_dir``.

    Args:
        names: Identifiers derived from the agent name
        output_dir: Project root; must not exist yet
        templates_dir: Override for the bundled templates

    Returns:
        Relative paths of the files written, in creation order

    Raises:
        DirectoryExistsError: If ``output_dir`` already exists
        TemplateNotFoundError: If a template is missing
    """
    if output_dir.exists():
        raise DirectoryExistsError(str(output_dir))

    # Render everything before touching the filesystem
    values = names.placeholders()
    rendered = [
        (output, render_template(read_template(template, templates_dir), values))
        for template, output in TEMPLATE_FILES
    ]

    (output_dir / "src").mkdir(parents=True)
    written: list[str] = []

    for output, content in rendered:
        (output_dir / output).write_text(content, encoding="utf-8")
        written.append(output)

    _write_json(output_dir / "package.json", package_json(names.project_name))
    written.append("package.json")

    _write_json(output_dir / "tsconfig.json", tsconfig_json())
    written.append("tsconfig.json")

    (output_dir / ".gitignore").write_text(GITIGNORE, encoding="utf-8")
    written.append(".gitignore")

    env_example = output_dir / ".env.example"
    if env_example.exists():
        shutil.copyfile(env_example, output_dir / ".env")
        written.append(".env")

    logger.debug(f"Generated {len(written)} files in {output_dir}")
    return written


__all__ = [
    "TEMPLATE_FILES",
    "generate_project",
    "package_json",
    "read_template",
    "render_template",
    "tsconfig_json",
]
