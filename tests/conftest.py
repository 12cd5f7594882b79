"""Shared fixtures: a scripted stand-in for ProcessRunner and the host PATH."""

from __future__ import annotations

import asyncio
from pathlib import Path

import pytest

from bzp.config import RuntimeConfig
from bzp.runtime.types import ProcessResult

LISTING_HEADER = "NAME              ID              SIZE      MODIFIED"


class FakeRunner:
    """Simulates the Ollama CLI, a package manager and the install script.

    Every spawn is recorded in ``calls`` as ``(mode, command)``.
    """

    def __init__(
        self,
        *,
        path: set[str] | None = None,
        service_up: bool = False,
        serve_starts_service: bool = True,
        models: set[str] | None = None,
        pull_ok: bool = True,
        hang: bool = False,
        install_ok: bool = True,
        install_adds_executable: bool = True,
        executable: str = "ollama",
    ) -> None:
        self.path = set(path or ())
        self.service_up = service_up
        self.serve_starts_service = serve_starts_service
        self.models = set(models or ())
        self.pull_ok = pull_ok
        self.hang = hang
        self.install_ok = install_ok
        self.install_adds_executable = install_adds_executable
        self.executable = executable
        self.attached_results: dict[str, ProcessResult] = {}
        self.calls: list[tuple[str, list[str]]] = []

    # Host PATH, usable as an ``is_available`` callable
    def is_available(self, name: str) -> bool:
        return name in self.path

    def commands(self, mode: str | None = None) -> list[str]:
        return [" ".join(cmd) for m, cmd in self.calls if mode is None or m == mode]

    def listing(self) -> str:
        rows = [f"{name:<18}baf6a787fdff    1.3 GB    2 days ago" for name in sorted(self.models)]
        return "\n".join([LISTING_HEADER, *rows]) + "\n"

    def _installed(self) -> ProcessResult:
        if not self.install_ok:
            return ProcessResult.failed("Installation failed with exit code 1", returncode=1)
        if self.install_adds_executable:
            self.path.add(self.executable)
        return ProcessResult.success()

    async def probe(self, cmd: list[str], timeout: float) -> ProcessResult:
        self.calls.append(("probe", cmd))
        if self.hang:
            await asyncio.Event().wait()
        if cmd[0] not in self.path:
            return ProcessResult.failed(f"Could not run {cmd[0]}: not found")
        if cmd[1:] == ["list"] and self.service_up:
            return ProcessResult.success(stdout=self.listing())
        return ProcessResult.failed("Command failed with exit code 1", returncode=1)

    async def run_attached(self, cmd: list[str], cwd: Path | None = None) -> ProcessResult:
        self.calls.append(("attached", cmd))
        key = " ".join(cmd)
        if key in self.attached_results:
            return self.attached_results[key]
        if cmd[:2] == [self.executable, "pull"]:
            if not self.pull_ok:
                return ProcessResult.failed("Command failed with exit code 1", returncode=1)
            self.models.add(cmd[2])
            return ProcessResult.success()
        if cmd[:2] == ["brew", "install"]:
            return self._installed()
        return ProcessResult.success()

    def start_detached(self, cmd: list[str]) -> ProcessResult:
        self.calls.append(("detached", cmd))
        if cmd[0] not in self.path:
            return ProcessResult.failed(f"Could not start {cmd[0]}: not found")
        if cmd[1:] == ["serve"] and self.serve_starts_service:
            self.service_up = True
        return ProcessResult.success()

    async def run_piped(self, producer: list[str], consumer: list[str]) -> ProcessResult:
        self.calls.append(("piped", [*producer, "|", *consumer]))
        return self._installed()


async def no_sleep(seconds: float) -> None:
    """Instant replacement for asyncio.sleep."""
    return None


@pytest.fixture
def runtime_config() -> RuntimeConfig:
    """Runtime config with short timeouts for tests."""
    return RuntimeConfig(
        probe_timeout_seconds=0.5,
        windows_probe_timeout_seconds=1.0,
        settle_seconds=0.0,
        install_settle_seconds=0.0,
        background_timeout_seconds=5.0,
    )


@pytest.fixture
def sleep():
    return no_sleep


@pytest.fixture
def make_runner():
    """Factory for :class:`FakeRunner` instances."""
    return FakeRunner
