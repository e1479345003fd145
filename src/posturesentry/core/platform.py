"""Platform dispatch: map an OS identifier to the probe variant to run."""
from __future__ import annotations

import logging
import platform as _platform
from enum import Enum

logger = logging.getLogger(__name__)


class Platform(str, Enum):
    """Operating systems with a dedicated probe implementation."""

    WINDOWS = "windows"
    MACOS = "macos"
    LINUX = "linux"
    UNKNOWN = "unknown"


_SYSTEM_NAMES = {
    "Windows": Platform.WINDOWS.value,
    "Darwin": Platform.MACOS.value,
    "Linux": Platform.LINUX.value,
}


def select_platform(os_identifier: str | None) -> Platform:
    """Select the platform for an OS identifier such as ``"macos"``.

    Unrecognized identifiers select ``Platform.UNKNOWN``, for which every
    probe reports an absent value without running anything.
    """
    normalized = (os_identifier or "").strip().lower()
    try:
        selected = Platform(normalized)
    except ValueError:
        selected = Platform.UNKNOWN
    if selected is Platform.UNKNOWN:
        logger.debug("No probes available for OS identifier %r", os_identifier)
    return selected


def current_os_identifier() -> str:
    """Return the lowercase identifier of the running operating system."""
    system = _platform.system()
    return _SYSTEM_NAMES.get(system, system.lower())
