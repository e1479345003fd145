"""Tests for the command line entry point."""
from __future__ import annotations

import json
import logging
from pathlib import Path

import pytest
from conftest import LINUX_OUTPUTS, LSBLK_TYPE, MOUNT, SYSTEMCTL_RUNNING

from posturesentry import audit
from posturesentry.core.injection import MockOSInterface, get_container


@pytest.fixture(autouse=True)
def restore_root_logging():
    root = logging.getLogger()
    handlers, level = root.handlers[:], root.level
    yield
    for handler in root.handlers:
        if handler not in handlers:
            handler.close()
    root.handlers[:] = handlers
    root.setLevel(level)


def test_unknown_platform_json(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = audit.main(["--platform", "unknown", "--format", "json"])

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == audit.EXIT_OK
    assert payload["posture"] == {
        "antivirus_name": None,
        "disk_encryption_type": None,
        "screen_lock_timeout_minutes": None,
    }
    assert payload["system"]["os"] == "unknown"
    assert payload["system"]["device_id"] == "unknown"
    assert "python" in payload["system"]


def test_text_report(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = audit.main(["--platform", "unknown"])

    out = capsys.readouterr().out
    assert exit_code == audit.EXIT_OK
    assert "Detected: 0/3" in out


def test_fail_on_missing() -> None:
    assert audit.main(["--platform", "unknown", "--fail-on-missing"]) == audit.EXIT_MISSING_POSTURE


def test_invalid_probe_name(capsys: pytest.CaptureFixture[str]) -> None:
    exit_code = audit.main(["--platform", "unknown", "--probes", "antivirus,firewall"])

    assert exit_code == audit.EXIT_ERROR
    assert "firewall" in capsys.readouterr().err


def test_output_file(tmp_path: Path, capsys: pytest.CaptureFixture[str]) -> None:
    target = tmp_path / "out" / "posture.json"

    exit_code = audit.main(["--platform", "unknown", "--format", "json", "-o", str(target)])

    assert exit_code == audit.EXIT_OK
    assert json.loads(target.read_text(encoding="utf-8"))["posture"]["antivirus_name"] is None
    assert "Report saved to" in capsys.readouterr().out


def test_log_file_written(tmp_path: Path) -> None:
    audit.main(["--platform", "unknown", "--debug"])
    assert (tmp_path / "logs" / "posturesentry.log").exists()


def test_timeout_and_sequential_flags() -> None:
    audit.main(["--platform", "unknown", "--timeout", "0", "--sequential"])

    container = get_container()
    assert container.config.command_timeout is None
    assert container.config.parallel is False
    assert container.os.timeout is None


def test_selected_probes_with_mocked_os(
    monkeypatch: pytest.MonkeyPatch, capsys: pytest.CaptureFixture[str]
) -> None:
    mock = MockOSInterface()
    mock.mock_command_output(SYSTEMCTL_RUNNING, LINUX_OUTPUTS["systemctl_clamav"])
    mock.mock_command_output(MOUNT, LINUX_OUTPUTS["mount_ecryptfs"])
    monkeypatch.setattr(
        audit.DependencyContainer,
        "from_config",
        classmethod(lambda cls, config: cls(os_interface=mock, config=config)),
    )

    exit_code = audit.main(
        ["--platform", "linux", "--format", "json", "--probes", "disk_encryption", "--fail-on-missing"]
    )

    payload = json.loads(capsys.readouterr().out)
    assert exit_code == audit.EXIT_OK
    assert payload["posture"]["disk_encryption_type"] == "ecryptfs"
    assert payload["posture"]["antivirus_name"] is None
    assert SYSTEMCTL_RUNNING not in mock.calls
    assert LSBLK_TYPE not in mock.calls
