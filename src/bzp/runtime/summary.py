"""Final human-readable bootstrap summary."""

from __future__ import annotations

from rich.console import Console

from bzp.logging import console as default_console
from bzp.runtime.types import BootstrapReport

READY_HEADLINE = "Fully ready to run locally"
MANUAL_HEADLINE = "Ready, but the local runtime needs manual setup"


def summary_lines(report: BootstrapReport, verbose: bool = False) -> list[str]:
    """Plain lines for the summary, without markup."""

    def mark(ok: bool) -> str:
        return "✅" if ok else "⚠️ "

    lines = [
        f"{mark(report.runtime_installed)} Ollama installed",
        f"{mark(report.service_running)} Ollama service running",
        f"{mark(report.model_ready)} Model ready",
    ]
    if report.ready:
        lines.append(f"✅ {READY_HEADLINE}")
        return lines

    lines.append(f"⚠️  {MANUAL_HEADLINE}:")
    lines.extend(f"   {command}" for command in report.remediation)
    if verbose:
        lines.extend(f"   - {warning}" for warning in report.warnings)
    return lines


def render_summary(
    report: BootstrapReport,
    console: Console | None = None,
    verbose: bool = False,
) -> None:
    """Print the bootstrap summary."""
    out = console or default_console
    for line in summary_lines(report, verbose=verbose):
        out.print(line)


__all__ = ["MANUAL_HEADLINE", "READY_HEADLINE", "render_summary", "summary_lines"]
