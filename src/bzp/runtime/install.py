"""Per-platform strategies for installing the runtime.

Selection is a table lookup keyed by :class:`PlatformKind`; nothing about
the host beyond that value is consulted to pick a strategy.
"""

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Callable

from bzp.config import RuntimeConfig
from bzp.logging import print_info
from bzp.runtime.commands import command_available
from bzp.runtime.process import ProcessRunner
from bzp.runtime.types import InstallOutcome, PlatformKind

logger = logging.getLogger(__name__)

HOMEBREW_URL = "https://brew.sh"


class InstallStrategy(ABC):
    """How to obtain and install the runtime on one platform."""

    platform: PlatformKind = PlatformKind.UNKNOWN

    def __init__(
        self,
        config: RuntimeConfig,
        runner: ProcessRunner,
        is_available: Callable[[str], bool] = command_available,
    ) -> None:
        self.config = config
        self.runner = runner
        self.is_available = is_available

    @abstractmethod
    async def install(self) -> InstallOutcome:
        """Attempt an unattended install. Never raises."""

    @abstractmethod
    def manual_command(self) -> str:
        """Command (or URL) a user can follow to install by hand."""


class MacOSInstall(InstallStrategy):
    """Install through Homebrew."""

    platform = PlatformKind.MACOS

    async def install(self) -> InstallOutcome:
        print_info("   Installing Ollama via Homebrew...")
        if not self.is_available("brew"):
            return InstallOutcome.failed(
                f"Homebrew is not installed. Please install Homebrew first: {HOMEBREW_URL}"
            )
        result = await self.runner.run_attached(["brew", "install", self.config.brew_package])
        if not result.ok:
            return InstallOutcome.failed(result.error or "brew install failed")
        return InstallOutcome.succeeded()

    def manual_command(self) -> str:
        return f"brew install {self.config.brew_package}"


class LinuxInstall(InstallStrategy):
    """Pipe the official install script into ``sh``. One attempt, no retries."""

    platform = PlatformKind.LINUX

    def producer(self) -> list[str]:
        return ["curl", "-fsSL", self.config.install_script_url]

    async def install(self) -> InstallOutcome:
        print_info("   Installing Ollama via official installer...")
        result = await self.runner.run_piped(self.producer(), ["sh"])
        if not result.ok:
            return InstallOutcome.failed(result.error or "install script failed")
        return InstallOutcome.succeeded()

    def manual_command(self) -> str:
        return f"curl -fsSL {self.config.install_script_url} | sh"


class ManualInstall(InstallStrategy):
    """Guidance only. Used where an unattended install cannot be driven."""

    def __init__(
        self,
        config: RuntimeConfig,
        runner: ProcessRunner,
        is_available: Callable[[str], bool] = command_available,
        platform: PlatformKind = PlatformKind.UNKNOWN,
    ) -> None:
        super().__init__(config, runner, is_available)
        self.platform = platform

    async def install(self) -> InstallOutcome:
        if self.platform is PlatformKind.WINDOWS:
            print_info("   Windows installation requires manual download.")
            print_info(f"   Please download and install Ollama from: {self.config.download_url}")
            print_info("   After installation, restart your terminal and run this command again.")
        else:
            print_info(
                f"   Unsupported platform. Please install Ollama manually from "
                f"{self.config.homepage_url}"
            )
        logger.debug(f"No unattended install for {self.platform.value}")
        return InstallOutcome.unsupported(self.platform)

    def manual_command(self) -> str:
        if self.platform is PlatformKind.WINDOWS:
            return self.config.download_url
        return self.config.homepage_url


STRATEGIES: dict[PlatformKind, type[InstallStrategy]] = {
    PlatformKind.MACOS: MacOSInstall,
    PlatformKind.LINUX: LinuxInstall,
    PlatformKind.WINDOWS: ManualInstall,
    PlatformKind.UNKNOWN: ManualInstall,
}


def get_strategy(
    platform: PlatformKind,
    config: RuntimeConfig,
    runner: ProcessRunner,
    is_available: Callable[[str], bool] = command_available,
) -> InstallStrategy:
    """Build the install strategy registered for ``platform``."""
    strategy_cls = STRATEGIES[platform]
    if strategy_cls is ManualInstall:
        return ManualInstall(config, runner, is_available, platform=platform)
    return strategy_cls(config, runner, is_available)


__all__ = [
    "STRATEGIES",
    "InstallStrategy",
    "LinuxInstall",
    "MacOSInstall",
    "ManualInstall",
    "get_strategy",
]
