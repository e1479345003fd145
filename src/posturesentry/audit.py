"""Command line entry point for posturesentry."""
from __future__ import annotations

import argparse
import logging
import logging.handlers
import sys
from pathlib import Path
from typing import List, Optional, Sequence

from . import __version__
from .config import InspectorConfig
from .core.injection import DependencyContainer, set_container
from .core.inspector import ALL_PROBES, PostureInspector
from .core.platform import current_os_identifier
from .probes.types import ProbeKind, SecurityPosture
from .utils.device import get_device_info
from .utils.reporting import format_json_report, format_text_report, write_report

EXIT_OK = 0
EXIT_ERROR = 1
EXIT_MISSING_POSTURE = 2

_LOG_FILE_NAME = "posturesentry.log"


def configure_logging(log_dir: Path, level: int = logging.INFO) -> None:
    """Configure logging for the application.

    Logs are written to ``<log_dir>/posturesentry.log`` with rotation at
    5MB and 3 backup files retained. Only warnings reach the console.
    """
    formatter = logging.Formatter(
        fmt="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
    )
    handlers: List[logging.Handler] = []

    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            log_dir / _LOG_FILE_NAME,
            maxBytes=5 * 1024 * 1024,  # 5 MB
            backupCount=3,
            encoding="utf-8",
        )
    except OSError as exc:
        print(f"posturesentry: file logging disabled: {exc}", file=sys.stderr)
    else:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        handlers.append(file_handler)

    console_handler = logging.StreamHandler()
    console_handler.setFormatter(formatter)
    console_handler.setLevel(logging.WARNING)
    handlers.append(console_handler)

    logging.basicConfig(level=level, handlers=handlers, force=True)


def parse_args(argv: Sequence[str]) -> argparse.Namespace:
    parser = argparse.ArgumentParser(
        description="posturesentry - Endpoint Security Posture Inspector",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog="""
Examples:
  %(prog)s                              Inspect all three posture fields
  %(prog)s --format json -o out.json    Write a JSON report
  %(prog)s --probes screen_lock         Only inspect the screen lock
  %(prog)s --fail-on-missing            Exit with 2 when a field is absent
""",
    )
    parser.add_argument(
        "--version",
        action="version",
        version=f"%(prog)s {__version__}",
    )
    parser.add_argument(
        "--format",
        choices=["text", "json"],
        default="text",
        help="Report output format",
    )
    parser.add_argument(
        "--output", "-o",
        type=str,
        help="Write report to file instead of stdout",
    )
    parser.add_argument(
        "--probes",
        type=str,
        help="Comma-separated probes to run: " + ", ".join(kind.value for kind in ProbeKind),
    )
    parser.add_argument(
        "--platform",
        type=str,
        help="Override the OS identifier (windows, macos, linux)",
    )
    parser.add_argument(
        "--timeout",
        type=float,
        help="Seconds before an external utility is killed (0 disables)",
    )
    parser.add_argument(
        "--sequential",
        action="store_true",
        help="Run probes one after another instead of in parallel",
    )
    parser.add_argument(
        "--fail-on-missing",
        action="store_true",
        help="Exit with code 2 when any selected posture field is absent",
    )
    parser.add_argument(
        "--debug",
        action="store_true",
        help="Enable debug logging",
    )
    return parser.parse_args(argv)


def _parse_probes(raw: str | None) -> List[ProbeKind]:
    if not raw:
        return list(ALL_PROBES)
    kinds = []
    for part in raw.split(","):
        name = part.strip().lower()
        if name:
            kinds.append(ProbeKind(name))
    return kinds


def _build_config(args: argparse.Namespace) -> InspectorConfig:
    config = InspectorConfig.from_env()
    if args.timeout is not None:
        config = config.model_copy(
            update={"command_timeout": args.timeout if args.timeout > 0 else None}
        )
    if args.sequential:
        config = config.model_copy(update={"parallel": False})
    return config


def _missing_fields(posture: SecurityPosture, kinds: Sequence[ProbeKind]) -> List[ProbeKind]:
    values = {
        ProbeKind.ANTIVIRUS: posture.antivirus_name,
        ProbeKind.DISK_ENCRYPTION: posture.disk_encryption_type,
        ProbeKind.SCREEN_LOCK: posture.screen_lock_timeout_minutes,
    }
    return [kind for kind in kinds if values[kind] is None]


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(sys.argv[1:] if argv is None else argv)
    config = _build_config(args)
    configure_logging(config.log_dir, level=logging.DEBUG if args.debug else logging.INFO)
    logger = logging.getLogger(__name__)

    try:
        kinds = _parse_probes(args.probes)
    except ValueError as exc:
        print(f"posturesentry: {exc}", file=sys.stderr)
        return EXIT_ERROR

    os_identifier = args.platform or current_os_identifier()
    container = DependencyContainer.from_config(config)
    set_container(container)

    inspector = PostureInspector(os_identifier, container=container)
    logger.info("Inspecting %s posture: %s", os_identifier, ", ".join(k.value for k in kinds))
    posture = inspector.inspect(kinds)

    system_info = get_device_info(container.os, os_identifier).to_dict()
    system_info["python"] = sys.version.split()[0]

    if args.format == "json":
        report = format_json_report(posture=posture, system_info=system_info)
    else:
        report = format_text_report(
            posture=posture,
            system_info=system_info,
            color=None if not args.output else False,
        )

    if args.output:
        output_path = Path(args.output).expanduser()
        try:
            write_report(output_path, report)
        except OSError as exc:
            logger.error("Failed to save report to %s: %s", output_path, exc)
            return EXIT_ERROR
        print(f"Report saved to {output_path}")
    else:
        print(report.rstrip("\n"))

    missing = _missing_fields(posture, kinds)
    if args.fail_on_missing and missing:
        logger.warning("Posture fields not detected: %s", ", ".join(k.value for k in missing))
        return EXIT_MISSING_POSTURE
    return EXIT_OK


if __name__ == "__main__":
    sys.exit(main())
