"""Full-disk encryption detection."""
from __future__ import annotations

import logging
from typing import Optional

from ..core.interfaces import OSInterface
from ..core.platform import Platform
from ..utils import parsers
from .base import Probe
from .types import ProbeKind

logger = logging.getLogger(__name__)

BITLOCKER = "BitLocker"
BITLOCKER_USED_SPACE = "BitLocker: only space used"
FILEVAULT = "FileVault"
LUKS = "LUKS"
ECRYPTFS = "ecryptfs"

# System.Volume.BitLockerProtection values reported by the Shell namespace
BITLOCKER_STATUS_LABELS = {
    "1": BITLOCKER,
    "7": BITLOCKER_USED_SPACE,
}

_BITLOCKER_SCRIPT = (
    "(New-Object -ComObject Shell.Application).NameSpace('C:')"
    ".Self.ExtendedProperty('System.Volume.BitLockerProtection')"
)


def bitlocker_label(status: str) -> Optional[str]:
    """Map a BitLocker protection status code to its label."""
    return BITLOCKER_STATUS_LABELS.get(status.strip())


class DiskEncryptionProbe(Probe[str]):
    """Common base for disk encryption probes."""

    kind = ProbeKind.DISK_ENCRYPTION


class WindowsDiskEncryptionProbe(DiskEncryptionProbe):
    """Read the BitLocker protection status of the boot volume."""

    platform = Platform.WINDOWS
    description = "Reads System.Volume.BitLockerProtection for C:."

    def run(self, os_interface: OSInterface) -> Optional[str]:
        result = self._run(os_interface, "powershell", "-Command", _BITLOCKER_SCRIPT)
        return bitlocker_label(result.stdout)


class MacOSDiskEncryptionProbe(DiskEncryptionProbe):
    """Check whether FileVault protects the root volume."""

    platform = Platform.MACOS
    description = "Looks for 'FileVault: Yes' in diskutil info for /."

    def run(self, os_interface: OSInterface) -> Optional[str]:
        result = self._run(os_interface, "diskutil", "info", "/")
        # diskutil pads values into columns, so compare the parsed field
        info = parsers.parse_key_value_output(result.stdout)
        if info.get("FileVault", "").startswith("Yes"):
            return FILEVAULT
        return None


class LinuxDiskEncryptionProbe(DiskEncryptionProbe):
    """Detect an ecryptfs home or a LUKS mapping; ecryptfs wins."""

    platform = Platform.LINUX
    description = "Scans mounts for ecryptfs, then block devices for crypt mappings."

    def run(self, os_interface: OSInterface) -> Optional[str]:
        mounts = self._run(os_interface, "mount")
        if ECRYPTFS in mounts.stdout:
            return ECRYPTFS

        devices = self._run(os_interface, "lsblk", "-o", "TYPE")
        if "crypt" in devices.stdout:
            return LUKS

        return None
