"""Provisioning the model the generated agent talks to."""

from __future__ import annotations

import logging

from bzp.config import RuntimeConfig
from bzp.logging import print_info, print_step, print_warning
from bzp.runtime.process import ProcessRunner
from bzp.runtime.types import ProvisionResult

logger = logging.getLogger(__name__)


def parse_model_names(listing: str) -> list[str]:
    """Extract the NAME column from ``ollama list`` output."""
    names = []
    for line in listing.splitlines():
        fields = line.split()
        if not fields or fields[0] == "NAME":
            continue
        names.append(fields[0])
    return names


def model_listed(model: str, listing: str) -> bool:
    """True if ``model`` is one of the listed names.

    An untagged name also matches its ``:latest`` tag, which is how the
    runtime lists it after a pull.
    """
    names = parse_model_names(listing)
    if model in names:
        return True
    return ":" not in model and f"{model}:latest" in names


class ModelProvisioner:
    """Make a model available locally, pulling it only when missing."""

    def __init__(self, config: RuntimeConfig, runner: ProcessRunner) -> None:
        self.config = config
        self.runner = runner

    def pull_command(self, model: str) -> list[str]:
        return [self.config.executable, "pull", model]

    def manual_command(self, model: str) -> str:
        return " ".join(self.pull_command(model))

    async def is_available(self, model: str) -> bool:
        """Check the listing for ``model``. A failed listing counts as absent."""
        listing = await self.runner.probe(
            [self.config.executable, "list"],
            self.config.probe_timeout_seconds,
        )
        if not listing.ok:
            logger.debug(f"Model listing failed: {listing.error}")
            return False
        return model_listed(model, listing.stdout)

    async def ensure(self, model: str | None = None) -> ProvisionResult:
        """Ensure ``model`` is present. Idempotent; a failed pull is not retried."""
        model = model or self.config.model

        if await self.is_available(model):
            print_step(f"Model {model} is already available")
            return ProvisionResult(model=model, ready=True)

        print_info(f"\n📥 Pulling model: {model}...")
        print_info("   (This may take a few minutes on first run)")
        result = await self.runner.run_attached(self.pull_command(model))
        if not result.ok:
            print_warning("Failed to pull model automatically")
            print_info(f"   You can pull it manually later with: {self.manual_command(model)}")
            return ProvisionResult(model=model, ready=False, pulled=False, error=result.error)

        print_step(f"Model {model} is ready")
        return ProvisionResult(model=model, ready=True, pulled=True)


__all__ = ["ModelProvisioner", "model_listed", "parse_model_names"]
