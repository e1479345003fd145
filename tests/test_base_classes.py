"""Tests for the probe base class and registry."""
from __future__ import annotations

from typing import Optional

import pytest

from posturesentry.core.errors import ParseError, ProbeError
from posturesentry.core.injection import MockOSInterface
from posturesentry.core.interfaces import OSInterface
from posturesentry.core.platform import Platform
from posturesentry.probes import load_probes
from posturesentry.probes.antivirus import LinuxAntivirusProbe
from posturesentry.probes.base import Probe, ProbeRegistry, inspect_is_abstract
from posturesentry.probes.screen_lock import ScreenLockProbe, WindowsScreenLockProbe
from posturesentry.probes.types import ProbeKind, ProbeOutcome, SecurityPosture


class _UnregisteredProbe(Probe[str]):
    auto_register = False
    kind = ProbeKind.ANTIVIRUS
    platform = Platform.LINUX

    def __init__(self, behaviour):
        self.behaviour = behaviour

    def run(self, os_interface: OSInterface) -> Optional[str]:
        return self.behaviour(os_interface)


class TestProbeExecute:
    def test_value_is_reported(self, mock_os: MockOSInterface) -> None:
        outcome = _UnregisteredProbe(lambda _: "ClamAV").execute(mock_os)

        assert isinstance(outcome, ProbeOutcome)
        assert outcome.value == "ClamAV"
        assert outcome.detected
        assert outcome.error is None
        assert outcome.kind is ProbeKind.ANTIVIRUS
        assert outcome.platform is Platform.LINUX
        assert outcome.elapsed_time >= 0

    def test_probe_error_collapses_to_absent(self, mock_os: MockOSInterface) -> None:
        def fail(_):
            raise ParseError("bad output", raw="???")

        outcome = _UnregisteredProbe(fail).execute(mock_os)

        assert outcome.value is None
        assert not outcome.detected
        assert isinstance(outcome.error, ParseError)

    def test_unexpected_error_collapses_to_absent(self, mock_os: MockOSInterface) -> None:
        def explode(_):
            raise IndexError("list index out of range")

        outcome = _UnregisteredProbe(explode).execute(mock_os)

        assert outcome.value is None
        assert isinstance(outcome.error, ProbeError)
        assert "IndexError" in str(outcome.error)

    def test_name_and_repr(self) -> None:
        probe = _UnregisteredProbe(lambda _: None)
        assert probe.name == "_UnregisteredProbe"
        assert repr(probe) == "_UnregisteredProbe(kind='antivirus', platform='linux')"


class TestProbeRegistry:
    def test_every_platform_has_all_three_probes(self) -> None:
        load_probes()
        for platform in (Platform.WINDOWS, Platform.MACOS, Platform.LINUX):
            kinds = {probe_cls.kind for probe_cls in ProbeRegistry.for_platform(platform)}
            assert kinds == set(ProbeKind)

    def test_lookup(self) -> None:
        load_probes()
        assert ProbeRegistry.lookup(ProbeKind.ANTIVIRUS, Platform.LINUX) is LinuxAntivirusProbe
        assert ProbeRegistry.lookup(ProbeKind.SCREEN_LOCK, Platform.WINDOWS) is WindowsScreenLockProbe
        assert ProbeRegistry.lookup(ProbeKind.ANTIVIRUS, Platform.UNKNOWN) is None

    def test_abstract_bases_are_not_registered(self) -> None:
        load_probes()
        assert inspect_is_abstract(ScreenLockProbe)
        assert ScreenLockProbe not in list(ProbeRegistry.get_all())
        assert _UnregisteredProbe not in list(ProbeRegistry.get_all())

    def test_concrete_subclass_registers(self, preserve_probe_registry) -> None:
        ProbeRegistry.clear()

        class CustomProbe(Probe[str]):
            kind = ProbeKind.DISK_ENCRYPTION
            platform = Platform.LINUX

            def run(self, os_interface: OSInterface) -> Optional[str]:
                return "LUKS"

        assert ProbeRegistry.lookup(ProbeKind.DISK_ENCRYPTION, Platform.LINUX) is CustomProbe

    def test_duplicate_registration_rejected(self, preserve_probe_registry) -> None:
        with pytest.raises(ValueError, match="Duplicate"):

            class DuplicateProbe(Probe[str]):
                kind = ProbeKind.ANTIVIRUS
                platform = Platform.LINUX

                def run(self, os_interface: OSInterface) -> Optional[str]:
                    return None

    def test_missing_kind_rejected(self, preserve_probe_registry) -> None:
        with pytest.raises(ValueError, match="must define a kind"):

            class KindlessProbe(Probe[str]):
                platform = Platform.MACOS

                def run(self, os_interface: OSInterface) -> Optional[str]:
                    return None

    def test_unknown_platform_rejected(self, preserve_probe_registry) -> None:
        with pytest.raises(ValueError, match="known platform"):

            class PlatformlessProbe(Probe[str]):
                kind = ProbeKind.ANTIVIRUS

                def run(self, os_interface: OSInterface) -> Optional[str]:
                    return None


class TestSecurityPosture:
    def test_defaults_absent(self) -> None:
        posture = SecurityPosture()
        assert posture.to_dict() == {
            "antivirus_name": None,
            "disk_encryption_type": None,
            "screen_lock_timeout_minutes": None,
        }
        assert not posture.is_complete

    def test_complete(self) -> None:
        posture = SecurityPosture("Windows Defender", "BitLocker", 0)
        assert posture.is_complete

    def test_immutable(self) -> None:
        posture = SecurityPosture()
        with pytest.raises(AttributeError):
            posture.antivirus_name = "ClamAV"  # type: ignore[misc]
