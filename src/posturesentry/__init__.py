"""posturesentry - cross-platform endpoint security posture inspector."""
from __future__ import annotations

__version__ = "0.1.0"

from .core.inspector import (
    PostureInspector,
    get_security_posture,
    probe_antivirus,
    probe_disk_encryption,
    probe_screen_lock,
)
from .core.platform import Platform, select_platform
from .probes.types import SecurityPosture

__all__ = [
    "__version__",
    "Platform",
    "PostureInspector",
    "SecurityPosture",
    "get_security_posture",
    "probe_antivirus",
    "probe_disk_encryption",
    "probe_screen_lock",
    "select_platform",
]
