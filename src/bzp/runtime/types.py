"""Type definitions for the local runtime bootstrapper."""

from __future__ import annotations

from dataclasses import dataclass, field
from enum import Enum
from typing import Any


class PlatformKind(str, Enum):
    """Host operating systems the bootstrapper distinguishes."""

    MACOS = "macos"
    LINUX = "linux"
    WINDOWS = "windows"
    UNKNOWN = "unknown"


class RuntimeStatus(str, Enum):
    """Probed state of the runtime. Recomputed on every check."""

    NOT_INSTALLED = "not_installed"
    INSTALLED = "installed"
    SERVICE_RUNNING = "service_running"


class FailureKind(str, Enum):
    """Why a step did not succeed."""

    UNAVAILABLE = "unavailable"  # Tool not on PATH (expected, not an error)
    UNSUPPORTED = "unsupported"  # Platform cannot proceed unattended
    RECOVERABLE = "recoverable"  # Command failed to spawn or exited non-zero
    TIMEOUT = "timeout"  # Bounded wait elapsed


@dataclass
class ProcessResult:
    """Outcome of a spawned command. Never raised, always returned."""

    ok: bool
    returncode: int | None = None
    stdout: str = ""
    error: str | None = None
    failure: FailureKind | None = None

    @classmethod
    def success(cls, returncode: int = 0, stdout: str = "") -> ProcessResult:
        return cls(ok=True, returncode=returncode, stdout=stdout)

    @classmethod
    def failed(
        cls,
        error: str,
        returncode: int | None = None,
        failure: FailureKind = FailureKind.RECOVERABLE,
    ) -> ProcessResult:
        return cls(ok=False, returncode=returncode, error=error, failure=failure)

    @classmethod
    def timed_out(cls, timeout: float) -> ProcessResult:
        return cls(
            ok=False,
            error=f"Timed out after {timeout:g}s",
            failure=FailureKind.TIMEOUT,
        )


class InstallOutcomeKind(str, Enum):
    """Result categories of an install attempt."""

    SUCCEEDED = "succeeded"
    FAILED_RECOVERABLE = "failed_recoverable"
    UNSUPPORTED = "unsupported"


@dataclass(frozen=True)
class InstallOutcome:
    """Result of an install attempt."""

    kind: InstallOutcomeKind
    reason: str | None = None
    platform: PlatformKind | None = None

    @classmethod
    def succeeded(cls) -> InstallOutcome:
        return cls(InstallOutcomeKind.SUCCEEDED)

    @classmethod
    def failed(cls, reason: str) -> InstallOutcome:
        return cls(InstallOutcomeKind.FAILED_RECOVERABLE, reason=reason)

    @classmethod
    def unsupported(cls, platform: PlatformKind) -> InstallOutcome:
        return cls(
            InstallOutcomeKind.UNSUPPORTED,
            reason=f"Unattended install is not supported on {platform.value}",
            platform=platform,
        )

    @property
    def success(self) -> bool:
        return self.kind is InstallOutcomeKind.SUCCEEDED


@dataclass
class ServiceResult:
    """Result of ensuring the runtime service is reachable."""

    status: RuntimeStatus
    started: bool = False  # True if we issued a background start
    error: str | None = None

    @property
    def running(self) -> bool:
        return self.status is RuntimeStatus.SERVICE_RUNNING


@dataclass
class ProvisionResult:
    """Result of ensuring a model is available locally."""

    model: str
    ready: bool
    pulled: bool = False  # False when the listing short-circuited
    error: str | None = None


@dataclass
class BootstrapReport:
    """Aggregate outcome of one bootstrap run, used for the final summary."""

    runtime_installed: bool = False
    service_running: bool = False
    model_ready: bool = False
    warnings: list[str] = field(default_factory=list)
    remediation: list[str] = field(default_factory=list)

    @property
    def ready(self) -> bool:
        """True when the generated project can run locally right away."""
        return self.runtime_installed and self.service_running and self.model_ready

    def add_warning(self, message: str) -> None:
        self.warnings.append(message)

    def add_remediation(self, command: str) -> None:
        """Record a manual command, once."""
        if command not in self.remediation:
            self.remediation.append(command)

    def to_dict(self) -> dict[str, Any]:
        """Convert report to dictionary for JSON output."""
        return {
            "runtime_installed": self.runtime_installed,
            "service_running": self.service_running,
            "model_ready": self.model_ready,
            "ready": self.ready,
            "warnings": list(self.warnings),
            "remediation": list(self.remediation),
        }
