"""Check whether an executable is resolvable on the search path."""

from __future__ import annotations

import logging
import subprocess

from bzp.runtime.platform import detect_platform
from bzp.runtime.types import PlatformKind

logger = logging.getLogger(__name__)

# Path lookups are local; anything slower means the lookup itself is broken
LOOKUP_TIMEOUT = 5.0


def lookup_command(name: str, platform: PlatformKind | None = None) -> list[str]:
    """Build the path-resolution command for the platform (``where``/``which``)."""
    platform = platform or detect_platform()
    if platform is PlatformKind.WINDOWS:
        return ["where", name]
    return ["which", name]


def command_available(name: str, platform: PlatformKind | None = None) -> bool:
    """Return True if ``name`` resolves on PATH.

    Absence is an expected outcome: any non-zero exit or failure to run the
    lookup itself yields False and is only logged at debug level.
    """
    cmd = lookup_command(name, platform)
    try:
        result = subprocess.run(
            cmd,
            stdout=subprocess.DEVNULL,
            stderr=subprocess.DEVNULL,
            timeout=LOOKUP_TIMEOUT,
            check=False,
        )
    except (OSError, subprocess.SubprocessError) as e:
        logger.debug(f"Lookup {' '.join(cmd)} failed: {e}")
        return False

    available = result.returncode == 0
    logger.debug(f"{name} {'found' if available else 'not found'} on PATH")
    return available


__all__ = ["command_available", "lookup_command"]
