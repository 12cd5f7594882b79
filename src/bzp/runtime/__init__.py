"""Local runtime (Ollama) bootstrapper.

Detects, installs, starts and provisions the runtime without ever failing
the surrounding command.

Example:
    >>> import asyncio
    >>> from bzp.runtime import BootstrapOrchestrator
    >>> orchestrator = BootstrapOrchestrator()
    >>> report = asyncio.run(orchestrator.run())
    >>> report.ready
"""

from __future__ import annotations

from bzp.runtime.commands import command_available
from bzp.runtime.install import (
    STRATEGIES,
    InstallStrategy,
    LinuxInstall,
    MacOSInstall,
    ManualInstall,
    get_strategy,
)
from bzp.runtime.models import ModelProvisioner
from bzp.runtime.orchestrator import BootstrapOrchestrator, ask_yes_no, is_affirmative
from bzp.runtime.platform import detect_platform
from bzp.runtime.process import ProcessRunner
from bzp.runtime.service import ServiceSupervisor
from bzp.runtime.summary import render_summary
from bzp.runtime.types import (
    BootstrapReport,
    FailureKind,
    InstallOutcome,
    InstallOutcomeKind,
    PlatformKind,
    ProcessResult,
    ProvisionResult,
    RuntimeStatus,
    ServiceResult,
)

__all__ = [
    "STRATEGIES",
    "BootstrapOrchestrator",
    "BootstrapReport",
    "FailureKind",
    "InstallOutcome",
    "InstallOutcomeKind",
    "InstallStrategy",
    "LinuxInstall",
    "MacOSInstall",
    "ManualInstall",
    "ModelProvisioner",
    "PlatformKind",
    "ProcessResult",
    "ProcessRunner",
    "ProvisionResult",
    "RuntimeStatus",
    "ServiceResult",
    "ServiceSupervisor",
    "ask_yes_no",
    "command_available",
    "detect_platform",
    "get_strategy",
    "is_affirmative",
    "render_summary",
]
