"""Reporting helpers for posture snapshots."""
from __future__ import annotations

import datetime as _dt
import json
import sys
from pathlib import Path
from typing import Any, Dict, Mapping, Optional

from ..probes.types import PROBE_DISPLAY_NAMES, ProbeKind, SecurityPosture

_HEADER_LINE = "═" * 60

NOT_DETECTED = "Not detected"

_COLORS = {
    "reset": "\033[0m",
    "green": "\033[92m",
    "gray": "\033[90m",
}


def _colorize(text: str, color: str) -> str:
    """Wrap text with ANSI color codes."""
    return f"{color}{text}{_COLORS['reset']}"


def _timestamp(dt: _dt.datetime | None = None) -> str:
    return (dt or _dt.datetime.now()).strftime("%Y-%m-%d %H:%M")


def _posture_rows(posture: SecurityPosture) -> Dict[ProbeKind, Optional[str]]:
    minutes = posture.screen_lock_timeout_minutes
    return {
        ProbeKind.ANTIVIRUS: posture.antivirus_name,
        ProbeKind.DISK_ENCRYPTION: posture.disk_encryption_type,
        ProbeKind.SCREEN_LOCK: None if minutes is None else f"{minutes} min",
    }


def _format_system_info(system_info: Mapping[str, str]) -> str:
    return "System: " + ", ".join(f"{key}: {value}" for key, value in system_info.items())


def format_text_report(
    *,
    posture: SecurityPosture,
    system_info: Mapping[str, str],
    color: bool | None = None,
) -> str:
    """Generate a human-readable text report.

    Args:
        color: Enable ANSI colors. None = auto-detect TTY.
    """
    use_color = color if color is not None else sys.stdout.isatty()

    lines = [
        f"╔{_HEADER_LINE}╗",
        f"  Security Posture - {_timestamp()}",
        f"╚{_HEADER_LINE}╝",
        "",
        _format_system_info(system_info),
        "",
    ]

    rows = _posture_rows(posture)
    width = max(len(name) for name in PROBE_DISPLAY_NAMES.values())
    for kind, value in rows.items():
        label = PROBE_DISPLAY_NAMES[kind].ljust(width)
        text = value if value is not None else NOT_DETECTED
        if use_color:
            text = _colorize(text, _COLORS["green"] if value is not None else _COLORS["gray"])
        lines.append(f"  {label}  {text}")

    detected = sum(1 for value in rows.values() if value is not None)
    lines.extend(["", f"Detected: {detected}/{len(rows)}"])

    return "\n".join(lines).strip() + "\n"


def format_json_report(
    *,
    posture: SecurityPosture,
    system_info: Mapping[str, Any],
    scan_time: _dt.datetime | None = None,
) -> str:
    """Generate a JSON report; absent fields are serialized as null."""

    scan_time = scan_time or _dt.datetime.now(_dt.timezone.utc)
    payload = {
        "generated_at": scan_time.replace(microsecond=0).isoformat(),
        "system": dict(system_info),
        "posture": posture.to_dict(),
    }
    return json.dumps(payload, indent=2, sort_keys=True)


def write_report(output_path: Path, content: str) -> None:
    """Persist report content to the specified path."""

    output_path.parent.mkdir(parents=True, exist_ok=True)
    output_path.write_text(content, encoding="utf-8")
