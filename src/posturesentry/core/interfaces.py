"""Abstract interfaces separating the probes from the operating system.

Every probe is strictly read-only: it discovers state through an
``OSInterface`` and never changes the system. Production code uses the
subprocess-backed implementation; tests inject canned outputs.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from pathlib import Path
from typing import List, Optional, Protocol, Sequence


@dataclass
class CommandResult:
    """Result from running an external utility."""

    stdout: str
    stderr: str
    returncode: int
    elapsed_time: float = 0.0
    command: Sequence[str] = field(default_factory=list)

    @property
    def output(self) -> str:
        """Combined stdout and stderr, for utilities that report on stderr."""
        return self.stdout + self.stderr


class OSInterface(Protocol):
    """Protocol defining all OS-level interactions of the probes.

    This abstraction allows complete mocking of OS interactions for testing.
    Subprocess calls, environment lookups and file reads all go through it.
    """

    def execute(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        """Run an external utility and wait for it to exit.

        Args:
            command: Executable name or path
            args: Ordered arguments

        Returns:
            CommandResult with captured output and exit status

        Raises:
            SpawnError: If the executable cannot be located or started
        """
        ...

    def get_env(self, name: str) -> Optional[str]:
        """Return an environment variable of the current session, or None."""
        ...

    def list_directory(self, path: Path) -> List[Path]:
        """List directory contents, empty if the directory is unreadable."""
        ...

    def read_file(self, path: Path) -> Optional[str]:
        """Read file contents as string, or None if unreadable."""
        ...
