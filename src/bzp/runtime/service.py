"""Supervising the runtime's background service.

The service counts as running when a cheap listing command answers within
a bounded time. If it doesn't, macOS/Linux get exactly one detached start
followed by a settle delay and one re-probe; Windows relies on the
installer's own service and only gets one longer re-probe.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Awaitable, Callable

from bzp.config import RuntimeConfig
from bzp.logging import print_info, print_step, print_warning
from bzp.runtime.commands import command_available
from bzp.runtime.process import ProcessRunner
from bzp.runtime.types import PlatformKind, RuntimeStatus, ServiceResult

logger = logging.getLogger(__name__)


class ServiceSupervisor:
    """Ensure the runtime service is reachable, starting it at most once."""

    def __init__(
        self,
        config: RuntimeConfig,
        runner: ProcessRunner,
        platform: PlatformKind,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.config = config
        self.runner = runner
        self.platform = platform
        self._sleep = sleep

    def list_command(self) -> list[str]:
        return [self.config.executable, "list"]

    def serve_command(self) -> list[str]:
        return [self.config.executable, "serve"]

    def manual_command(self) -> str:
        """Command that starts the service by hand, on every platform."""
        return " ".join(self.serve_command())

    async def probe(self, timeout: float | None = None) -> bool:
        """True if the service answered the listing command in time."""
        result = await self.runner.probe(
            self.list_command(),
            timeout if timeout is not None else self.config.probe_timeout_seconds,
        )
        if not result.ok:
            logger.debug(f"Service probe failed: {result.error}")
        return result.ok

    async def status(self, is_available: Callable[[str], bool] = command_available) -> RuntimeStatus:
        """Read-only status check: never starts anything."""
        if not is_available(self.config.executable):
            return RuntimeStatus.NOT_INSTALLED
        if await self.probe():
            return RuntimeStatus.SERVICE_RUNNING
        return RuntimeStatus.INSTALLED

    async def ensure_running(self) -> ServiceResult:
        """Probe, start once if needed, and re-probe once."""
        if await self.probe():
            print_step("Ollama service is running")
            return ServiceResult(RuntimeStatus.SERVICE_RUNNING)

        print_info("  Starting Ollama service...")

        if self.platform is PlatformKind.WINDOWS:
            # Installer registers the service; all we can do is wait longer
            if await self.probe(self.config.windows_probe_timeout_seconds):
                print_step("Ollama service is running")
                return ServiceResult(RuntimeStatus.SERVICE_RUNNING)
            print_warning("Ollama service doesn't seem to be running.")
            print_info(f"   Start the Ollama app or run: {self.manual_command()}")
            return ServiceResult(RuntimeStatus.INSTALLED, error="Ollama service not running")

        started = self.runner.start_detached(self.serve_command())
        if not started.ok:
            logger.debug(f"Background start failed: {started.error}")
        else:
            await self._sleep(self.config.settle_seconds)
            if await self.probe():
                print_step("Ollama service started")
                return ServiceResult(RuntimeStatus.SERVICE_RUNNING, started=True)

        print_warning("Could not start Ollama service automatically.")
        print_info(f"   Please start it manually with: {self.manual_command()}")
        return ServiceResult(
            RuntimeStatus.INSTALLED,
            started=started.ok,
            error=started.error or "Could not start Ollama service",
        )


__all__ = ["ServiceSupervisor"]
