"""Core types for posture probes - no external dependencies."""
from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Generic, Optional, TypeVar

from ..core.errors import ProbeError
from ..core.platform import Platform

T = TypeVar("T")


class ProbeKind(str, Enum):
    """The three independent posture questions."""

    ANTIVIRUS = "antivirus"
    DISK_ENCRYPTION = "disk_encryption"
    SCREEN_LOCK = "screen_lock"


# Display names for human-readable output
PROBE_DISPLAY_NAMES: Dict[ProbeKind, str] = {
    ProbeKind.ANTIVIRUS: "Antivirus",
    ProbeKind.DISK_ENCRYPTION: "Disk Encryption",
    ProbeKind.SCREEN_LOCK: "Screen Lock",
}


@dataclass(frozen=True, slots=True)
class SecurityPosture:
    """Point-in-time snapshot of the three posture fields.

    Each field is independently optional. ``None`` means not detected, not
    configured, or detection failed; the three cases are not distinguished.
    """

    antivirus_name: Optional[str] = None
    disk_encryption_type: Optional[str] = None
    screen_lock_timeout_minutes: Optional[int] = None

    def to_dict(self) -> Dict[str, Any]:
        return {
            "antivirus_name": self.antivirus_name,
            "disk_encryption_type": self.disk_encryption_type,
            "screen_lock_timeout_minutes": self.screen_lock_timeout_minutes,
        }

    @property
    def is_complete(self) -> bool:
        """True when all three fields were detected."""
        return None not in (
            self.antivirus_name,
            self.disk_encryption_type,
            self.screen_lock_timeout_minutes,
        )


@dataclass
class ProbeOutcome(Generic[T]):
    """Result of one probe run, including the error it collapsed, if any."""

    kind: ProbeKind
    platform: Platform
    value: Optional[T] = None
    error: Optional[ProbeError] = None
    elapsed_time: float = 0.0

    @property
    def detected(self) -> bool:
        return self.value is not None
