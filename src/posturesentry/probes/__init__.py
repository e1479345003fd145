"""Posture probe implementations, one per probe kind and platform."""
from __future__ import annotations

from importlib import import_module
from typing import Any, Iterable

from .base import Probe, ProbeRegistry
from .types import ProbeKind, ProbeOutcome, SecurityPosture

_PROBE_MODULES: tuple[str, ...] = (
    "antivirus",
    "encryption",
    "screen_lock",
)

__all__ = [
    "Probe",
    "ProbeKind",
    "ProbeOutcome",
    "ProbeRegistry",
    "SecurityPosture",
    "load_probes",
]


def load_probes() -> Iterable[type[Probe[Any]]]:
    """Import all probe modules to populate the registry."""

    for module_name in _PROBE_MODULES:
        import_module(f"{__name__}.{module_name}")
    return ProbeRegistry.get_all()
