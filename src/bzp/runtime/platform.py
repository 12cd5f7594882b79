"""Host platform detection."""

from __future__ import annotations

import sys
from functools import lru_cache

from bzp.runtime.types import PlatformKind

_PLATFORMS: dict[str, PlatformKind] = {
    "darwin": PlatformKind.MACOS,
    "linux": PlatformKind.LINUX,
    "win32": PlatformKind.WINDOWS,
    "cygwin": PlatformKind.WINDOWS,
}


def classify_platform(name: str) -> PlatformKind:
    """Map a ``sys.platform`` value to a :class:`PlatformKind`."""
    for prefix, kind in _PLATFORMS.items():
        if name.startswith(prefix):
            return kind
    return PlatformKind.UNKNOWN


@lru_cache(maxsize=1)
def detect_platform() -> PlatformKind:
    """Classify the host OS. Cached for the lifetime of the process."""
    return classify_platform(sys.platform)


__all__ = ["classify_platform", "detect_platform"]
