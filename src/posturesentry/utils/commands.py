"""Command execution utilities for the posture probes."""
from __future__ import annotations

import logging
import shlex
import subprocess
import sys
import time
from typing import Optional, Sequence

from ..core.errors import CommandTimeoutError, SpawnError
from ..core.interfaces import CommandResult

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT: float = 30.0

# Seconds after which a finished command is reported as slow
_SLOW_COMMAND_THRESHOLD = 5.0

# Suppresses the console window flash when spawning from a GUI process
_CREATE_NO_WINDOW = 0x08000000


def _creation_flags() -> int:
    if sys.platform == "win32":
        return getattr(subprocess, "CREATE_NO_WINDOW", _CREATE_NO_WINDOW)
    return 0


def _decode(data: bytes | str | None) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def run_command(
    command: Sequence[str],
    *,
    timeout: Optional[float] = DEFAULT_TIMEOUT,
) -> CommandResult:
    """Execute an external utility and capture its output.

    Output is captured as bytes and decoded leniently, so utilities that emit
    text in a legacy code page still produce a usable (if lossy) string.

    Args:
        command: Executable followed by its arguments.
        timeout: Seconds to wait before killing the child. ``None`` or ``0``
            waits indefinitely.

    Returns:
        CommandResult with stdout, stderr and the exit status. A non-zero exit
        status is not an error here; probes decide what it means.

    Raises:
        ValueError: If the command is empty.
        SpawnError: If the executable cannot be located or started.
        CommandTimeoutError: If the command exceeds ``timeout``.
    """
    if not command:
        raise ValueError("Command cannot be empty")

    effective_timeout = timeout or None
    cmd_str = " ".join(shlex.quote(arg) for arg in command)
    start_time = time.perf_counter()

    try:
        logger.debug("Running command (timeout=%s): %s", effective_timeout, cmd_str)
        completed = subprocess.run(
            list(command),
            capture_output=True,
            timeout=effective_timeout,
            check=False,
            creationflags=_creation_flags(),
        )
    except subprocess.TimeoutExpired:
        logger.warning("Command timed out after %ss: %s", effective_timeout, cmd_str)
        raise CommandTimeoutError(command, effective_timeout) from None
    except FileNotFoundError as exc:
        logger.debug("Command not found: %s", command[0])
        raise SpawnError(command, "executable not found") from exc
    except OSError as exc:
        logger.debug("OS error starting %s: %s", command[0], exc)
        raise SpawnError(command, str(exc)) from exc

    elapsed = time.perf_counter() - start_time
    if elapsed > _SLOW_COMMAND_THRESHOLD:
        logger.info("Slow command (%.1fs): %s", elapsed, command[0])

    return CommandResult(
        stdout=_decode(completed.stdout),
        stderr=_decode(completed.stderr),
        returncode=completed.returncode,
        elapsed_time=elapsed,
        command=list(command),
    )
