"""Dependency injection container for OS interactions.

The real implementation wraps actual system calls, while tests inject a
``MockOSInterface`` loaded with canned outputs.

Usage:
    # Production code
    container = get_container()
    result = container.os.execute("mount")

    # Test code
    mock_os = MockOSInterface()
    mock_os.mock_command_response(["mount"], CommandResult("...", "", 0))
    inspector = PostureInspector("linux", container=DependencyContainer(mock_os))
"""
from __future__ import annotations

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Dict, List, Optional, Sequence, Tuple

from ..config import InspectorConfig
from ..utils.commands import DEFAULT_TIMEOUT, run_command
from .errors import SpawnError
from .interfaces import CommandResult, OSInterface

logger = logging.getLogger(__name__)

# Global container instance (singleton pattern)
_container: Optional["DependencyContainer"] = None


class RealOSInterface:
    """Production implementation of OSInterface backed by subprocess."""

    def __init__(self, timeout: Optional[float] = DEFAULT_TIMEOUT) -> None:
        self.timeout = timeout

    def execute(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        """Execute an external utility."""
        return run_command([command, *args], timeout=self.timeout)

    def get_env(self, name: str) -> Optional[str]:
        return os.environ.get(name)

    def list_directory(self, path: Path) -> List[Path]:
        try:
            return sorted(path.iterdir())
        except OSError as exc:
            logger.debug("Cannot list directory %s: %s", path, exc)
            return []

    def read_file(self, path: Path) -> Optional[str]:
        try:
            return path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as exc:
            logger.debug("Cannot read file %s: %s", path, exc)
            return None


class MockOSInterface:
    """Mock implementation of OSInterface for testing.

    Configure responses using the mock_* methods. Every ``execute`` call is
    recorded in ``calls`` so tests can assert which utilities ran.

    Example:
        mock = MockOSInterface()
        mock.mock_command_response(
            ["diskutil", "info", "/"],
            CommandResult(stdout="FileVault: Yes", stderr="", returncode=0),
        )
    """

    def __init__(self) -> None:
        self._command_responses: Dict[Tuple[str, ...], CommandResult] = {}
        self._missing_commands: set[str] = set()
        self._env: Dict[str, str] = {}
        self._directories: Dict[Path, List[Path]] = {}
        self._file_contents: Dict[Path, str] = {}
        self.calls: List[Tuple[str, ...]] = []
        self._default_command_response = CommandResult(
            stdout="", stderr="Command not mocked", returncode=1
        )

    def mock_command_response(self, args: Sequence[str], response: CommandResult) -> None:
        """Set up a response for a command line (or a prefix of one)."""
        self._command_responses[tuple(args)] = response

    def mock_command_output(self, args: Sequence[str], stdout: str, stderr: str = "") -> None:
        """Shorthand for a successful command with the given output."""
        self.mock_command_response(args, CommandResult(stdout=stdout, stderr=stderr, returncode=0))

    def mock_missing_command(self, command: str) -> None:
        """Make ``execute`` raise SpawnError for this executable."""
        self._missing_commands.add(command)

    def mock_env(self, name: str, value: str) -> None:
        self._env[name] = value

    def mock_directory(self, path: Path, contents: List[Path]) -> None:
        self._directories[path] = contents

    def mock_file_content(self, path: Path, content: str) -> None:
        self._file_contents[path] = content

    @property
    def call_count(self) -> int:
        return len(self.calls)

    def execute(self, command: str, args: Sequence[str] = ()) -> CommandResult:
        """Return the mocked response for a command line."""
        key = (command, *args)
        self.calls.append(key)
        if command in self._missing_commands:
            raise SpawnError(key, "executable not found")
        if key in self._command_responses:
            return self._command_responses[key]
        # Prefix matching, for commands with variable arguments
        for cmd_key, response in self._command_responses.items():
            if key[: len(cmd_key)] == cmd_key:
                return response
        return self._default_command_response

    def get_env(self, name: str) -> Optional[str]:
        return self._env.get(name)

    def list_directory(self, path: Path) -> List[Path]:
        return self._directories.get(path, [])

    def read_file(self, path: Path) -> Optional[str]:
        return self._file_contents.get(path)


@dataclass
class DependencyContainer:
    """Container for all injectable dependencies.

    Attributes:
        os_interface: Implementation of OSInterface to use
        config: Inspector configuration
    """

    os_interface: OSInterface
    config: InspectorConfig = field(default_factory=InspectorConfig)

    @property
    def os(self) -> OSInterface:
        """Shorthand accessor for OS interface."""
        return self.os_interface

    @classmethod
    def from_config(cls, config: InspectorConfig) -> "DependencyContainer":
        """Build a production container honouring the configured timeout."""
        return cls(os_interface=RealOSInterface(timeout=config.command_timeout), config=config)


def get_container() -> DependencyContainer:
    """Get the global dependency container.

    Returns the singleton container instance, creating it from the
    environment configuration with the real OS interface if needed.
    """
    global _container
    if _container is None:
        _container = DependencyContainer.from_config(InspectorConfig.from_env())
    return _container


def set_container(container: DependencyContainer) -> None:
    """Set the global dependency container (used by tests and the CLI)."""
    global _container
    _container = container


def reset_container() -> None:
    """Reset the global container so the next get_container() rebuilds it."""
    global _container
    _container = None
