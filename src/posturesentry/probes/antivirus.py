"""Antivirus / endpoint-protection detection."""
from __future__ import annotations

import logging
from typing import Optional

from ..core.interfaces import OSInterface
from ..core.platform import Platform
from ..utils import parsers
from .base import Probe
from .types import ProbeKind

logger = logging.getLogger(__name__)

# Running services whose names identify an antivirus product
LINUX_ANTIVIRUS_FRAGMENTS: tuple[str, ...] = (
    "clamav",
    "sophos",
    "eset",
    "comodo",
    "avg",
    "avast",
    "bitdefender",
)

XPROTECT_LABEL = "XProtect/MRT (Built-in macOS protection)"

XPROTECT_STORE = (
    "/var/db/SystemPolicyConfiguration/XProtect.bundle/Contents/Resources/XProtect.meta.plist"
)

XPROTECT_QUERIES: tuple[str, ...] = (
    "SELECT * FROM xprotect_entries;",
    "SELECT * FROM xprotect_meta;",
    "SELECT * FROM launchd WHERE name LIKE '%com.apple.MRT%' OR name LIKE '%com.apple.XProtect%';",
    "SELECT * FROM processes WHERE name LIKE '%MRT%' OR name LIKE '%XProtect%';",
)


class AntivirusProbe(Probe[str]):
    """Common base for antivirus probes."""

    kind = ProbeKind.ANTIVIRUS

    @staticmethod
    def _join(names: list[str]) -> Optional[str]:
        return ", ".join(names) if names else None


class WindowsAntivirusProbe(AntivirusProbe):
    """List products registered with Windows Security Center."""

    platform = Platform.WINDOWS
    description = "Queries SecurityCenter2 for registered antivirus display names."

    def run(self, os_interface: OSInterface) -> Optional[str]:
        result = self._run(
            os_interface,
            "wmic",
            "/node:localhost",
            "/namespace:\\\\root\\SecurityCenter2",
            "path",
            "AntiVirusProduct",
            "Get",
            "DisplayName",
        )
        return self._join(parsers.filter_table_lines(result.stdout, "DisplayName"))


class MacOSAntivirusProbe(AntivirusProbe):
    """Detect the built-in XProtect/MRT protection."""

    platform = Platform.MACOS
    description = "Looks for XProtect/MRT entries in the XProtect metadata store."

    def run(self, os_interface: OSInterface) -> Optional[str]:
        for query in XPROTECT_QUERIES:
            result = self._run(os_interface, "sqlite3", XPROTECT_STORE, query)
            if result.stdout:
                return XPROTECT_LABEL
        return None


class LinuxAntivirusProbe(AntivirusProbe):
    """Match running systemd services against known antivirus names."""

    platform = Platform.LINUX
    description = "Filters running services for known antivirus products."

    def run(self, os_interface: OSInterface) -> Optional[str]:
        result = self._run(
            os_interface, "systemctl", "list-units", "--type=service", "--state=running"
        )
        matches = parsers.lines_containing_any(result.stdout, LINUX_ANTIVIRUS_FRAGMENTS)
        if matches:
            logger.debug("Antivirus services running: %s", matches)
        return self._join(matches)
