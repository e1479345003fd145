"""Device identification for posture reports."""
from __future__ import annotations

import logging
import platform as _platform
from dataclasses import dataclass
from pathlib import Path
from typing import Dict, Optional

from ..core.errors import ProbeError
from ..core.interfaces import OSInterface
from ..core.platform import Platform, select_platform
from . import parsers

logger = logging.getLogger(__name__)

UNKNOWN_DEVICE_ID = "unknown"

LINUX_ID_FILES = (
    Path("/etc/machine-id"),
    Path("/sys/class/dmi/id/product_uuid"),
)


@dataclass(frozen=True)
class DeviceInfo:
    """Identity of the inspected machine."""

    os: str
    version: str
    device_id: str

    def to_dict(self) -> Dict[str, str]:
        return {"os": self.os, "version": self.version, "device_id": self.device_id}


def _windows_serial(os_interface: OSInterface) -> Optional[str]:
    result = os_interface.execute("wmic", ["os", "get", "serialnumber"])
    # piped wmic output ends lines with \r\r\n, so blank lines are dropped
    serials = parsers.filter_table_lines(result.stdout, "SerialNumber")
    return serials[0] if serials else None


def _macos_serial(os_interface: OSInterface) -> Optional[str]:
    result = os_interface.execute("system_profiler", ["SPHardwareDataType"])
    line = parsers.find_line(result.stdout, ("Serial Number",))
    if line is None:
        return None
    # "Serial Number (system): C02XXXXX"
    return parsers.nth_token(line, 3)


def _linux_machine_id(os_interface: OSInterface) -> Optional[str]:
    for path in LINUX_ID_FILES:
        content = os_interface.read_file(path)
        if content is not None:
            return content.strip()
    return None


_LOOKUPS = {
    Platform.WINDOWS: _windows_serial,
    Platform.MACOS: _macos_serial,
    Platform.LINUX: _linux_machine_id,
}


def get_device_id(os_interface: OSInterface, os_identifier: str) -> str:
    """Return a stable hardware or installation identifier, or ``"unknown"``."""
    lookup = _LOOKUPS.get(select_platform(os_identifier))
    if lookup is None:
        return UNKNOWN_DEVICE_ID
    try:
        device_id = lookup(os_interface)
    except ProbeError as exc:
        logger.debug("Device id lookup failed: %s", exc)
        return UNKNOWN_DEVICE_ID
    return device_id or UNKNOWN_DEVICE_ID


def get_device_info(os_interface: OSInterface, os_identifier: str) -> DeviceInfo:
    return DeviceInfo(
        os=os_identifier,
        version=_platform.release() or "unknown",
        device_id=get_device_id(os_interface, os_identifier),
    )
