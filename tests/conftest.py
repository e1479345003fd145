"""Pytest configuration and shared fixtures for posture probe tests."""
from __future__ import annotations

import sys
from pathlib import Path
from typing import Callable, Dict, Tuple

import pytest

# Add src/ to path for imports
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from posturesentry.config import InspectorConfig  # noqa: E402
from posturesentry.core.injection import (  # noqa: E402
    DependencyContainer,
    MockOSInterface,
    reset_container,
)
from posturesentry.core.inspector import PostureInspector  # noqa: E402
from posturesentry.probes import load_probes  # noqa: E402
from posturesentry.probes.base import ProbeRegistry  # noqa: E402

CommandLine = Tuple[str, ...]


# ==============================================================================
# Command lines issued by the probes
# ==============================================================================

WMIC_ANTIVIRUS: CommandLine = (
    "wmic",
    "/node:localhost",
    "/namespace:\\\\root\\SecurityCenter2",
    "path",
    "AntiVirusProduct",
    "Get",
    "DisplayName",
)
BITLOCKER_STATUS: CommandLine = ("powershell", "-Command")
POWERCFG_VIDEOIDLE: CommandLine = ("powercfg", "/q", "SCHEME_CURRENT", "SUB_VIDEO", "VIDEOIDLE")
BATTERY_QUERY: CommandLine = (
    "powershell",
    "-Command",
    "[bool](Get-CimInstance -ClassName Win32_Battery -ErrorAction SilentlyContinue)",
)

SQLITE_XPROTECT: CommandLine = ("sqlite3",)
DISKUTIL_INFO: CommandLine = ("diskutil", "info", "/")
SYSADMINCTL_STATUS: CommandLine = ("sysadminctl", "-screenLock", "status")
SCREENSAVER_IDLE: CommandLine = (
    "defaults", "-currentHost", "read", "com.apple.screensaver", "idleTime",
)
PMSET_CUSTOM: CommandLine = ("pmset", "-g", "custom")

SYSTEMCTL_RUNNING: CommandLine = ("systemctl", "list-units", "--type=service", "--state=running")
MOUNT: CommandLine = ("mount",)
LSBLK_TYPE: CommandLine = ("lsblk", "-o", "TYPE")


def gsettings(desktop: str, schema: str, key: str) -> CommandLine:
    return ("gsettings", "get", f"org.{desktop}.desktop.{schema}", key)


# ==============================================================================
# Canned utility outputs
# ==============================================================================

WINDOWS_OUTPUTS: Dict[str, str] = {
    "wmic_defender": "DisplayName\r\nWindows Defender\r\n\r\n",
    "wmic_two_products": "DisplayName\r\nWindows Defender\r\nESET Security\r\n\r\n",
    "wmic_empty": "DisplayName\r\n\r\n",
    "powercfg_english": (
        "Power Scheme GUID: 381b4222-f694-41f0-9685-ff5bb260df2e  (Balanced)\r\n"
        "  Subgroup GUID: 7516b95f-f776-4464-8c53-06167f40cc99  (Display)\r\n"
        "    Power Setting GUID: 3c0bc021-c8a8-4e07-a973-6b14cbcb2b7e  (Turn off display after)\r\n"
        "      Minimum Possible Setting: 0x00000000\r\n"
        "      Maximum Possible Setting: 0xffffffff\r\n"
        "      Possible Settings increment: 0x00000001\r\n"
        "      Possible Settings units: Seconds\r\n"
        "    Current AC Power Setting Index: 0x00000b40\r\n"
        "    Current DC Power Setting Index: 0x0000012c\r\n"
    ),
    "powercfg_spanish": (
        "    GUID de configuración de energía: 3c0bc021-c8a8-4e07-a973-6b14cbcb2b7e\r\n"
        "    Índice de configuración de corriente alterna actual: 0x00000258\r\n"
        "    Índice de configuración de corriente continua actual: 0x00000e10\r\n"
    ),
    "powercfg_never": (
        "    Current AC Power Setting Index: 0x00000000\r\n"
        "    Current DC Power Setting Index: 0x00000000\r\n"
    ),
}

MACOS_OUTPUTS: Dict[str, str] = {
    "diskutil_filevault_on": (
        "   Device Identifier:         disk3s1s1\n"
        "   Volume Name:               Macintosh HD\n"
        "   FileVault:                 Yes (Unlocked)\n"
    ),
    "diskutil_filevault_on_compact": "   Volume Name: Macintosh HD\n   FileVault: Yes\n",
    "diskutil_filevault_off": (
        "   Volume Name:               Macintosh HD\n"
        "   FileVault:                 No\n"
    ),
    "screenlock_immediate": "2024-05-01 10:00:00.000 sysadminctl[901:1234] screenLock delay is immediate\n",
    "screenlock_120": "2024-05-01 10:00:00.000 sysadminctl[901:1234] screenLock delay is 120 seconds\n",
    "screenlock_off": "2024-05-01 10:00:00.000 sysadminctl[901:1234] screenLock is off\n",
    "screenlock_unexpected": "sysadminctl: unrecognized status\n",
    "pmset_custom": (
        "Battery Power:\n"
        " Sleep On Power Button 1\n"
        " lowpowermode         0\n"
        " standby              1\n"
        " displaysleep         5\n"
        " sleep                1\n"
        "AC Power:\n"
        " Sleep On Power Button 1\n"
        " standby              1\n"
        " displaysleep         15\n"
        " sleep                1\n"
    ),
}

LINUX_OUTPUTS: Dict[str, str] = {
    "systemctl_clamav": (
        "  UNIT                       LOAD   ACTIVE SUB     DESCRIPTION\n"
        "  clamav-daemon.service      loaded active running Clam AntiVirus userspace daemon\n"
        "  cron.service               loaded active running Regular background program processing daemon\n"
        "  dbus.service               loaded active running D-Bus System Message Bus\n"
    ),
    "systemctl_none": (
        "  cron.service               loaded active running Regular background program processing daemon\n"
        "  dbus.service               loaded active running D-Bus System Message Bus\n"
    ),
    "mount_ecryptfs": (
        "/dev/sda1 on / type ext4 (rw,relatime)\n"
        "/home/.ecryptfs/alice/.Private on /home/alice type ecryptfs (rw,nosuid,nodev)\n"
    ),
    "mount_plain": "/dev/mapper/vg-root on / type ext4 (rw,relatime)\nproc on /proc type proc (rw)\n",
    "lsblk_crypt": "TYPE\ndisk\npart\npart\ncrypt\nlvm\n",
    "lsblk_plain": "TYPE\ndisk\npart\npart\n",
}


# ==============================================================================
# Fixtures
# ==============================================================================

@pytest.fixture(autouse=True)
def _isolated_environment(monkeypatch, tmp_path):
    """Keep tests away from the user's configuration and global container."""
    for name in (
        "POSTURESENTRY_COMMAND_TIMEOUT",
        "POSTURESENTRY_PARALLEL",
        "POSTURESENTRY_MAX_WORKERS",
    ):
        monkeypatch.delenv(name, raising=False)
    monkeypatch.setenv("POSTURESENTRY_LOG_DIR", str(tmp_path / "logs"))
    reset_container()
    yield
    reset_container()


@pytest.fixture
def mock_os() -> MockOSInterface:
    """A MockOSInterface with no canned responses."""
    return MockOSInterface()


@pytest.fixture
def make_inspector() -> Callable[..., PostureInspector]:
    """Factory fixture building an inspector around a mock OS interface."""

    def _create(os_identifier: str, os_interface: MockOSInterface, parallel: bool = False) -> PostureInspector:
        container = DependencyContainer(
            os_interface=os_interface,
            config=InspectorConfig(parallel=parallel),
        )
        return PostureInspector(os_identifier, container=container)

    return _create


@pytest.fixture
def preserve_probe_registry():
    """Snapshot the probe registry and restore it after the test."""
    load_probes()
    saved = dict(ProbeRegistry._registry)
    yield
    ProbeRegistry._registry.clear()
    ProbeRegistry._registry.update(saved)
