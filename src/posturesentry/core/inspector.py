"""Posture aggregation and the public query surface.

Usage:
    inspector = PostureInspector()          # current OS, global container
    posture = inspector.inspect()
    minutes = inspector.probe_screen_lock()

Each call recomputes from scratch; nothing is cached between calls.
"""
from __future__ import annotations

import logging
from concurrent.futures import ThreadPoolExecutor
from typing import Any, Dict, Iterable, Optional

from ..probes import load_probes
from ..probes.base import ProbeRegistry
from ..probes.types import ProbeKind, ProbeOutcome, SecurityPosture
from .injection import DependencyContainer, get_container
from .platform import Platform, current_os_identifier, select_platform

logger = logging.getLogger(__name__)

ALL_PROBES: tuple[ProbeKind, ...] = (
    ProbeKind.ANTIVIRUS,
    ProbeKind.DISK_ENCRYPTION,
    ProbeKind.SCREEN_LOCK,
)


class PostureInspector:
    """Runs the platform's probes and assembles SecurityPosture snapshots.

    Args:
        os_identifier: Lowercase OS name (``"windows"``, ``"macos"``,
            ``"linux"``). Defaults to the running system. Any other value
            yields absent results without running any utility.
        container: Dependency container (uses global if None)
    """

    def __init__(
        self,
        os_identifier: Optional[str] = None,
        container: Optional[DependencyContainer] = None,
    ) -> None:
        load_probes()
        self.os_identifier = os_identifier if os_identifier is not None else current_os_identifier()
        self.container = container or get_container()

    @property
    def platform(self) -> Platform:
        return select_platform(self.os_identifier)

    def run_probe(self, kind: ProbeKind) -> ProbeOutcome[Any]:
        """Run a single probe and return its full outcome."""
        platform = self.platform
        probe_cls = ProbeRegistry.lookup(kind, platform)
        if probe_cls is None:
            return ProbeOutcome(kind=kind, platform=platform)
        return probe_cls().execute(self.container.os)

    def probe_antivirus(self) -> Optional[str]:
        return self.run_probe(ProbeKind.ANTIVIRUS).value

    def probe_disk_encryption(self) -> Optional[str]:
        return self.run_probe(ProbeKind.DISK_ENCRYPTION).value

    def probe_screen_lock(self) -> Optional[int]:
        return self.run_probe(ProbeKind.SCREEN_LOCK).value

    def run_probes(self, kinds: Iterable[ProbeKind] = ALL_PROBES) -> Dict[ProbeKind, ProbeOutcome[Any]]:
        """Run several probes, on the worker pool when configured to.

        The probes share no state, so completion order does not matter.
        """
        selected = list(dict.fromkeys(kinds))
        config = self.container.config

        if config.parallel and len(selected) > 1:
            with ThreadPoolExecutor(max_workers=config.max_workers) as executor:
                futures = {kind: executor.submit(self.run_probe, kind) for kind in selected}
                outcomes = {kind: future.result() for kind, future in futures.items()}
        else:
            outcomes = {kind: self.run_probe(kind) for kind in selected}

        for outcome in outcomes.values():
            logger.debug(
                "[%s] %s=%r - %.1fms",
                "FOUND" if outcome.detected else "ABSENT",
                outcome.kind.value,
                outcome.value,
                outcome.elapsed_time * 1000,
            )
        return outcomes

    def inspect(self, kinds: Iterable[ProbeKind] = ALL_PROBES) -> SecurityPosture:
        """Take a snapshot; fields of probes not in ``kinds`` stay absent."""
        outcomes = self.run_probes(kinds)

        def value(kind: ProbeKind) -> Any:
            outcome = outcomes.get(kind)
            return outcome.value if outcome else None

        posture = SecurityPosture(
            antivirus_name=value(ProbeKind.ANTIVIRUS),
            disk_encryption_type=value(ProbeKind.DISK_ENCRYPTION),
            screen_lock_timeout_minutes=value(ProbeKind.SCREEN_LOCK),
        )
        logger.info("Security posture on %s: %s", self.platform.value, posture.to_dict())
        return posture


def probe_antivirus() -> Optional[str]:
    """Antivirus name(s) on the running system, or None."""
    return PostureInspector().probe_antivirus()


def probe_disk_encryption() -> Optional[str]:
    """Disk encryption mechanism on the running system, or None."""
    return PostureInspector().probe_disk_encryption()


def probe_screen_lock() -> Optional[int]:
    """Screen-lock timeout in minutes on the running system, or None."""
    return PostureInspector().probe_screen_lock()


def get_security_posture() -> SecurityPosture:
    """Combined snapshot of all three probes on the running system."""
    return PostureInspector().inspect()
