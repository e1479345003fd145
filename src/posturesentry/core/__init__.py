"""Core components: OS abstraction, platform dispatch and aggregation.

Submodules:
- ``interfaces``: the OSInterface protocol probes run against
- ``injection``: real and mock OS interfaces, dependency container
- ``platform``: OS identifier to Platform dispatch
- ``inspector``: runs the probes and builds SecurityPosture snapshots
"""

from .errors import CommandTimeoutError, ParseError, ProbeError, SpawnError
from .interfaces import CommandResult, OSInterface
from .platform import Platform, current_os_identifier, select_platform

__all__ = [
    # Errors
    "ProbeError",
    "SpawnError",
    "CommandTimeoutError",
    "ParseError",
    # Interfaces
    "CommandResult",
    "OSInterface",
    # Platform dispatch
    "Platform",
    "current_os_identifier",
    "select_platform",
]
