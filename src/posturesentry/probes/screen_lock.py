"""Idle screen-lock detection.

Every variant reports the number of whole minutes a fully idle machine
waits before it requires re-authentication. Seconds are converted with
floor division, so partial minutes are dropped.
"""
from __future__ import annotations

import logging
import re
from pathlib import Path
from typing import Optional

from ..core.errors import ParseError
from ..core.interfaces import OSInterface
from ..core.platform import Platform
from ..utils import parsers
from .base import Probe
from .types import ProbeKind

logger = logging.getLogger(__name__)

# powercfg labels its values in the display language. Only English and
# Spanish are known; the Spanish labels are matched on their unaccented tail
# so a lossy code-page decode still finds them.
AC_SETTING_LABELS: tuple[str, ...] = (
    "Current AC Power Setting Index",
    "corriente alterna actual",
)
DC_SETTING_LABELS: tuple[str, ...] = (
    "Current DC Power Setting Index",
    "corriente continua actual",
)

_BATTERY_SCRIPT = "[bool](Get-CimInstance -ClassName Win32_Battery -ErrorAction SilentlyContinue)"

SCREEN_LOCK_OFF = "screenLock is off"
IMMEDIATE_PATTERN = re.compile(r"screenLock (?:delay )?is immediate")
LOCK_DELAY_PATTERN = re.compile(r"screenLock delay is (\d+) seconds")

AC_POWER = "AC Power"
BATTERY_POWER = "Battery Power"

DESKTOP_ALIASES = {"ubuntu": "gnome"}
SESSION_BINARY_DIR = Path("/usr/bin")


def windows_lock_minutes(ac_seconds: int, dc_seconds: int, has_battery: bool) -> Optional[int]:
    """Combine the AC and DC display timeouts into lock minutes.

    The DC branch only counts when the machine has a battery. A zero
    timeout means the display never turns off.
    """
    seconds = max(ac_seconds, dc_seconds) if has_battery else ac_seconds
    if seconds == 0:
        return None
    return seconds // 60


def macos_lock_minutes(
    lock_status: str,
    screensaver_minutes: int,
    ac_display_sleep: int,
    battery_display_sleep: int,
) -> int:
    """Combine screensaver and display-sleep delays with the lock delay.

    Args:
        lock_status: Output of ``sysadminctl -screenLock status``
        screensaver_minutes: Screensaver idle time in whole minutes
        ac_display_sleep: Display sleep minutes on AC power
        battery_display_sleep: Display sleep minutes on battery power

    Returns:
        The base idle timeout plus the lock delay in minutes.

    Raises:
        ParseError: If ``lock_status`` reports neither an immediate lock nor
            a delay in seconds.
    """
    base = max(screensaver_minutes, max(ac_display_sleep, battery_display_sleep))
    if IMMEDIATE_PATTERN.search(lock_status):
        return base
    return base + parsers.extract_int(LOCK_DELAY_PATTERN, lock_status) // 60


class ScreenLockProbe(Probe[int]):
    """Common base for screen-lock probes."""

    kind = ProbeKind.SCREEN_LOCK


class WindowsScreenLockProbe(ScreenLockProbe):
    """Derive the lock timeout from the active power scheme."""

    platform = Platform.WINDOWS
    description = "Reads the VIDEOIDLE setting of the current power scheme."

    def run(self, os_interface: OSInterface) -> Optional[int]:
        ac_seconds = self._video_idle_seconds(os_interface, AC_SETTING_LABELS)
        dc_seconds = self._video_idle_seconds(os_interface, DC_SETTING_LABELS)
        has_battery = self._has_battery(os_interface)
        logger.debug(
            "VIDEOIDLE ac=%ss dc=%ss battery=%s", ac_seconds, dc_seconds, has_battery
        )
        return windows_lock_minutes(ac_seconds, dc_seconds, has_battery)

    def _video_idle_seconds(self, os_interface: OSInterface, labels: tuple[str, ...]) -> int:
        result = self._run(
            os_interface, "powercfg", "/q", "SCHEME_CURRENT", "SUB_VIDEO", "VIDEOIDLE"
        )
        line = parsers.find_line(result.stdout, labels)
        if line is None:
            raise ParseError(f"No power setting line matching {labels[0]!r}", raw=result.stdout)
        return parsers.parse_hex_seconds(parsers.value_after_colon(line))

    def _has_battery(self, os_interface: OSInterface) -> bool:
        result = self._run(os_interface, "powershell", "-Command", _BATTERY_SCRIPT)
        has_battery = parsers.parse_bool_text(result.stdout)
        if has_battery is None:
            raise ParseError("Unexpected battery query output", raw=result.stdout)
        return has_battery


class MacOSScreenLockProbe(ScreenLockProbe):
    """Combine screensaver, display sleep and lock delay settings."""

    platform = Platform.MACOS
    description = "Reads sysadminctl, the screensaver idle time and pmset display sleep."

    def run(self, os_interface: OSInterface) -> Optional[int]:
        # sysadminctl reports its status on stderr
        lock_status = self._run(os_interface, "sysadminctl", "-screenLock", "status").output
        if SCREEN_LOCK_OFF in lock_status:
            return None

        idle_time = self._run(
            os_interface, "defaults", "-currentHost", "read", "com.apple.screensaver", "idleTime"
        )
        screensaver_minutes = parsers.parse_int(idle_time.stdout) // 60

        ac_display_sleep = self._display_sleep(os_interface, AC_POWER)
        battery_display_sleep = self._display_sleep(os_interface, BATTERY_POWER)

        return macos_lock_minutes(
            lock_status, screensaver_minutes, ac_display_sleep, battery_display_sleep
        )

    def _display_sleep(self, os_interface: OSInterface, power_source: str) -> int:
        result = self._run(os_interface, "pmset", "-g", "custom")
        return parsers.parse_int(
            parsers.section_value(result.stdout, power_source, "displaysleep")
        )


class LinuxScreenLockProbe(ScreenLockProbe):
    """Read the desktop's screensaver and session settings via gsettings."""

    platform = Platform.LINUX
    description = "Queries lock-enabled, idle-delay and lock-delay with gsettings."

    def run(self, os_interface: OSInterface) -> Optional[int]:
        desktop = self.resolve_desktop(os_interface)
        screensaver_schema = f"org.{desktop}.desktop.screensaver"
        session_schema = f"org.{desktop}.desktop.session"

        lock_enabled = self._run(os_interface, "gsettings", "get", screensaver_schema, "lock-enabled")
        if lock_enabled.stdout.strip() != "true":
            return None

        idle_delay = self._run(os_interface, "gsettings", "get", session_schema, "idle-delay")
        lock_delay = self._run(os_interface, "gsettings", "get", screensaver_schema, "lock-delay")

        idle_seconds = parsers.parse_token_int(idle_delay.stdout)
        lock_seconds = parsers.parse_token_int(lock_delay.stdout)
        return (idle_seconds + lock_seconds) // 60

    def resolve_desktop(self, os_interface: OSInterface) -> str:
        """Return the desktop name used in gsettings schema paths."""
        desktop = (os_interface.get_env("XDG_SESSION_DESKTOP") or "").strip()
        if not desktop:
            raise ParseError("XDG_SESSION_DESKTOP is not set")

        if desktop in DESKTOP_ALIASES:
            return DESKTOP_ALIASES[desktop]
        if desktop == "awesome" and self._has_gnome_session(os_interface):
            return "gnome"
        return desktop

    @staticmethod
    def _has_gnome_session(os_interface: OSInterface) -> bool:
        sessions = [
            entry.name
            for entry in os_interface.list_directory(SESSION_BINARY_DIR)
            if entry.name.endswith("session")
        ]
        logger.debug("Installed session binaries: %s", sessions)
        return any("gnome" in name for name in sessions)
