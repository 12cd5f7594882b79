"""Sequencing the runtime bootstrap around project generation.

Flow::

    prepare()           consent gate; blocking install + setup if accepted
    start_background()  runtime already present: service + model as a task
    ... project files and dependencies ...
    finish()            wait for that task up to the ceiling, return report

Nothing here is fatal. Every failure ends up as a warning (and a manual
command) on the :class:`BootstrapReport`.
"""

from __future__ import annotations

import asyncio
import logging
from typing import Any, Awaitable, Callable

import click

from bzp.config import RuntimeConfig
from bzp.logging import print_info, print_step, print_warning
from bzp.runtime.commands import command_available
from bzp.runtime.install import InstallStrategy, get_strategy
from bzp.runtime.models import ModelProvisioner
from bzp.runtime.platform import detect_platform
from bzp.runtime.process import ProcessRunner
from bzp.runtime.service import ServiceSupervisor
from bzp.runtime.types import BootstrapReport, InstallOutcomeKind, PlatformKind

logger = logging.getLogger(__name__)

AFFIRMATIVE = frozenset({"y", "yes"})
CONSENT_QUESTION = "Would you like to install Ollama now? (y/N)"
DECLINED_WARNING = "skipped: user declined"
SKIPPED_WARNING = "skipped: runtime setup disabled"


def is_affirmative(answer: str | None) -> bool:
    """Trimmed, case-folded match against {"y", "yes"}. Anything else is no."""
    if answer is None:
        return False
    return answer.strip().casefold() in AFFIRMATIVE


def ask_yes_no(question: str) -> bool:
    """Ask once on stdin. EOF or Ctrl+C at the prompt count as no."""
    try:
        answer = click.prompt(question, default="", show_default=False)
    except click.Abort:
        return False
    return is_affirmative(answer)


class BootstrapOrchestrator:
    """Best-effort install, start and provisioning of the local runtime."""

    def __init__(
        self,
        config: RuntimeConfig | None = None,
        runner: ProcessRunner | None = None,
        platform: PlatformKind | None = None,
        is_available: Callable[[str], bool] = command_available,
        ask: Callable[[str], bool] = ask_yes_no,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
        model: str | None = None,
    ) -> None:
        self.config = config or RuntimeConfig()
        self.runner = runner or ProcessRunner(terminate_on_cancel=self.config.terminate_on_timeout)
        self.platform = platform or detect_platform()
        self.model = model or self.config.model
        self.is_available = is_available
        self._ask = ask
        self._sleep = sleep

        self.strategy: InstallStrategy = get_strategy(
            self.platform, self.config, self.runner, is_available
        )
        self.supervisor = ServiceSupervisor(self.config, self.runner, self.platform, sleep=sleep)
        self.provisioner = ModelProvisioner(self.config, self.runner)

        self.report = BootstrapReport()
        self.runtime_present = False
        self.install_requested = False
        self.skipped = False
        self._background: asyncio.Task[None] | None = None
        self._deadline: float | None = None

    @property
    def executable(self) -> str:
        return self.config.executable

    async def prepare(self, assume_yes: bool = False, skip: bool = False) -> BootstrapReport:
        """Check for the runtime and gate installation on consent.

        Args:
            assume_yes: Treat the consent question as answered "yes"
            skip: Do no runtime work at all; absent runtime counts as declined
        """
        self.skipped = skip
        self.runtime_present = self.is_available(self.executable)
        if self.runtime_present:
            logger.debug(f"{self.executable} found, no consent needed")
            self.report.runtime_installed = True
            if skip:
                self.report.add_warning(SKIPPED_WARNING)
                self.report.add_remediation(self.supervisor.manual_command())
                self.report.add_remediation(self.provisioner.manual_command(self.model))
            return self.report

        if skip:
            consent = False
        elif assume_yes:
            consent = True
        else:
            print_info("💡 Ollama enables your agent to run locally without API keys.")
            print_info("   Your agent will be ready to run immediately after setup.\n")
            consent = self._ask(CONSENT_QUESTION)

        if not consent:
            print_info("\n   Skipping Ollama installation. You can install it later if needed.")
            self.report.add_warning(DECLINED_WARNING)
            self.report.add_remediation(self.strategy.manual_command())
            self.report.add_remediation(self.provisioner.manual_command(self.model))
            return self.report

        self.install_requested = True
        try:
            await self.install_and_setup()
        except Exception as e:
            self._record_failure("install", e)
        return self.report

    async def install_and_setup(self) -> BootstrapReport:
        """Install the runtime, verify it, then start the service and pull the model."""
        print_info("\n📦 Installing Ollama...")
        outcome = await self.strategy.install()

        if not outcome.success:
            if outcome.kind is InstallOutcomeKind.UNSUPPORTED:
                self.report.add_warning(f"unsupported: {outcome.reason}")
            else:
                self.report.add_warning(f"install failed: {outcome.reason}")
            print_warning("Ollama installation was not completed.")
            print_info("   You'll need to install Ollama manually to run the agent locally.")
            print_info(f"   Visit {self.config.homepage_url} to download it.")
            self._skip_downstream("runtime not installed")
            self.report.add_remediation(self.strategy.manual_command())
            self.report.add_remediation(self.provisioner.manual_command(self.model))
            return self.report

        await self._sleep(self.config.install_settle_seconds)
        if not self.is_available(self.executable):
            self.report.add_warning(
                f"installed, but '{self.executable}' was not found on PATH; restart your terminal"
            )
            print_warning("Ollama installation completed but command not found.")
            print_info(
                f"   Please restart your terminal and run: "
                f"{self.provisioner.manual_command(self.model)}"
            )
            self._skip_downstream(f"'{self.executable}' not on PATH")
            self.report.add_remediation(self.provisioner.manual_command(self.model))
            return self.report

        print_step("Ollama installed successfully")
        self.report.runtime_installed = True
        await self.supervise_and_provision()
        return self.report

    async def supervise_and_provision(self) -> None:
        """Ensure the service runs; provision the model only if it does."""
        service = await self.supervisor.ensure_running()
        self.report.service_running = service.running
        if not service.running:
            self.report.add_warning(f"service not running: {service.error}")
            self.report.add_warning("skipped: model provisioning (service not running)")
            self.report.add_remediation(self.supervisor.manual_command())
            self.report.add_remediation(self.provisioner.manual_command(self.model))
            return

        result = await self.provisioner.ensure(self.model)
        self.report.model_ready = result.ready
        if not result.ready:
            self.report.add_warning(f"model pull failed: {result.error}")
            self.report.add_remediation(self.provisioner.manual_command(self.model))

    def start_background(self) -> asyncio.Task[None] | None:
        """Start the opportunistic service/model pass if the runtime was already installed.

        Must be called from a running event loop. Returns None when there is
        nothing to do (runtime absent, or installed during :meth:`prepare`).
        """
        if (
            not self.runtime_present
            or self.install_requested
            or self.skipped
            or self._background is not None
        ):
            return None
        loop = asyncio.get_running_loop()
        self._deadline = loop.time() + self.config.background_timeout_seconds
        self._background = asyncio.create_task(self.supervise_and_provision())
        return self._background

    async def finish(self) -> BootstrapReport:
        """Wait for the background pass, never past the ceiling."""
        task = self._background
        if task is None or self._deadline is None:
            return self.report

        remaining = max(0.0, self._deadline - asyncio.get_running_loop().time())
        done, _ = await asyncio.wait({task}, timeout=remaining)
        if task in done:
            error = task.exception()
            if error is not None:
                self._record_failure("runtime setup", error)
            return self.report

        ceiling = self.config.background_timeout_seconds
        self.report.add_warning(f"timeout: Ollama setup did not finish within {ceiling:g}s")
        if not self.report.service_running:
            self.report.add_remediation(self.supervisor.manual_command())
        self.report.add_remediation(self.provisioner.manual_command(self.model))

        # The runner decides whether in-flight children die with the task
        task.cancel()
        await asyncio.wait({task})
        return self.report

    async def run(self, work: Awaitable[Any] | None = None, **prepare_kwargs: Any) -> BootstrapReport:
        """prepare, start the background pass, await ``work``, then finish."""
        await self.prepare(**prepare_kwargs)
        self.start_background()
        if work is not None:
            await work
        return await self.finish()

    async def setup_present(self) -> BootstrapReport:
        """Foreground service/model pass for a runtime that was already installed."""
        try:
            await self.supervise_and_provision()
        except Exception as e:
            self._record_failure("runtime setup", e)
        return self.report

    def _record_failure(self, step: str, error: BaseException) -> None:
        """Turn an unexpected exception into a warning plus manual commands."""
        logger.debug(f"{step} raised", exc_info=error)
        self.report.add_warning(f"{step} failed: {error}")
        if not self.report.runtime_installed:
            self.report.add_remediation(self.strategy.manual_command())
        elif not self.report.service_running:
            self.report.add_remediation(self.supervisor.manual_command())
        self.report.add_remediation(self.provisioner.manual_command(self.model))

    def _skip_downstream(self, reason: str) -> None:
        self.report.add_warning(f"skipped: service start ({reason})")
        self.report.add_warning(f"skipped: model provisioning ({reason})")


__all__ = [
    "AFFIRMATIVE",
    "BootstrapOrchestrator",
    "ask_yes_no",
    "is_affirmative",
]
