"""Exception types raised inside probes.

None of these ever reach callers of the posture query surface: a probe
catches them at its boundary and reports the field as absent.
"""
from __future__ import annotations

import shlex
from typing import Sequence


class ProbeError(Exception):
    """Base class for failures that collapse a probe result to absent."""


class SpawnError(ProbeError):
    """Raised when an external utility cannot be located or started."""

    def __init__(self, command: Sequence[str], reason: str = "") -> None:
        self.command = list(command)
        self.reason = reason
        message = f"Could not start '{self.command[0] if self.command else ''}'"
        if reason:
            message += f": {reason}"
        super().__init__(message)


class CommandTimeoutError(SpawnError):
    """Raised when a command is killed after exceeding its timeout."""

    def __init__(self, command: Sequence[str], timeout: float) -> None:
        self.timeout = timeout
        self.cmd_str = " ".join(shlex.quote(arg) for arg in command)
        super().__init__(command, f"timed out after {timeout:g}s")

    def __str__(self) -> str:
        return f"Command '{self.command[0]}' timed out after {self.timeout:g}s"


class ParseError(ProbeError):
    """Raised when command output does not have the expected shape."""

    def __init__(self, message: str, raw: str = "") -> None:
        super().__init__(message)
        self.raw = raw
