"""Tests for the create flow: runtime problems never stop project generation."""

from pathlib import Path

import pytest

from bzp.commands.create import run_create
from bzp.config import BZPConfig
from bzp.runtime.orchestrator import BootstrapOrchestrator
from bzp.runtime.types import PlatformKind
from bzp.scaffold import ProjectNames


def make_orchestrator(runtime_config, runner, sleep):
    return BootstrapOrchestrator(
        config=runtime_config,
        runner=runner,
        platform=PlatformKind.LINUX,
        is_available=runner.is_available,
        ask=lambda question: True,
        sleep=sleep,
    )


async def create(tmp_path: Path, runtime_config, runner, sleep):
    names = ProjectNames.from_agent_name("chatbot")
    project_dir = tmp_path / names.project_name
    result = await run_create(
        names,
        project_dir,
        BZPConfig(runtime=runtime_config),
        make_orchestrator(runtime_config, runner, sleep),
        runner,
        is_available=runner.is_available,
    )
    return result, project_dir


class TestRunCreate:
    """Test run_create end to end with a scripted runner."""

    @pytest.mark.asyncio
    async def test_failed_install_still_generates(
        self, tmp_path: Path, runtime_config, make_runner, sleep
    ):
        runner = make_runner(path=set(), install_ok=False)

        result, project_dir = await create(tmp_path, runtime_config, runner, sleep)

        assert result.report.runtime_installed is False
        assert result.report.warnings[0].startswith("install failed:")
        assert (project_dir / "src" / "server.ts").is_file()
        assert (project_dir / "package.json").is_file()
        assert result.dependencies is not None and result.dependencies.ok
        assert runner.commands("attached") == ["npm install"]

    @pytest.mark.asyncio
    async def test_install_exception_still_generates(
        self, tmp_path: Path, runtime_config, make_runner, sleep
    ):
        runner = make_runner(path=set())

        async def broken_pipe(producer, consumer):
            raise RuntimeError("pump exploded")

        runner.run_piped = broken_pipe

        result, project_dir = await create(tmp_path, runtime_config, runner, sleep)

        assert result.report.warnings == ["install failed: pump exploded"]
        assert (project_dir / "src" / "ai.ts").is_file()
        assert result.dependencies is not None and result.dependencies.ok

    @pytest.mark.asyncio
    async def test_ready_runtime(self, tmp_path: Path, runtime_config, make_runner, sleep):
        runner = make_runner(path={"ollama", "pnpm"}, service_up=True, models={"llama3.2:1b"})

        result, project_dir = await create(tmp_path, runtime_config, runner, sleep)

        assert result.report.ready
        assert result.package_manager == "pnpm"
        assert runner.commands("attached") == ["pnpm install"]
        assert result.files[0] == "src/server.ts"
