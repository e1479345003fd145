"""Base classes and registry for platform-specific posture probes."""
from __future__ import annotations

import abc
import logging
import time
from typing import Any, ClassVar, Dict, Generic, Iterable, Optional, Tuple, Type, TypeVar

from ..core.errors import ProbeError
from ..core.interfaces import CommandResult, OSInterface
from ..core.platform import Platform
from .types import ProbeKind, ProbeOutcome

logger = logging.getLogger(__name__)

T = TypeVar("T")


class ProbeRegistry:
    """Registry of probe strategies keyed by probe kind and platform."""

    _registry: ClassVar[Dict[Tuple[ProbeKind, Platform], Type["Probe[Any]"]]] = {}

    @classmethod
    def register(cls, probe_cls: Type["Probe[Any]"]) -> None:
        if probe_cls.kind is None:
            raise ValueError(f"Probe {probe_cls.__name__} must define a kind")
        if probe_cls.platform is Platform.UNKNOWN:
            raise ValueError(f"Probe {probe_cls.__name__} must target a known platform")
        key = (probe_cls.kind, probe_cls.platform)
        if key in cls._registry:
            raise ValueError(
                f"Duplicate probe registered for {probe_cls.kind.value} on {probe_cls.platform.value}"
            )
        cls._registry[key] = probe_cls
        logger.debug("Registered probe: %s", probe_cls.__name__)

    @classmethod
    def lookup(cls, kind: ProbeKind, platform: Platform) -> Optional[Type["Probe[Any]"]]:
        return cls._registry.get((kind, platform))

    @classmethod
    def get_all(cls) -> Iterable[Type["Probe[Any]"]]:
        return cls._registry.values()

    @classmethod
    def for_platform(cls, platform: Platform) -> Iterable[Type["Probe[Any]"]]:
        for (_, probe_platform), probe_cls in cls._registry.items():
            if probe_platform is platform:
                yield probe_cls

    @classmethod
    def clear(cls) -> None:
        cls._registry.clear()


class ProbeMeta(abc.ABCMeta):
    """Metaclass that auto-registers concrete probes."""

    def __new__(mcls, name: str, bases: Tuple[type, ...], namespace: Dict[str, Any]):
        cls = super().__new__(mcls, name, bases, namespace)
        auto_register = getattr(cls, "auto_register", True)
        if auto_register and not inspect_is_abstract(cls):
            ProbeRegistry.register(cls)
        return cls


def inspect_is_abstract(cls: type) -> bool:
    """Helper to determine whether a class is abstract."""

    abstract_methods = getattr(cls, "__abstractmethods__", set())
    return bool(abstract_methods)


class Probe(Generic[T], metaclass=ProbeMeta):
    """Base class for a single posture probe on a single platform.

    Subclasses implement ``run``, which may raise ProbeError subclasses when
    a utility is missing or its output is malformed. ``execute`` is the
    public boundary: it turns those errors into an absent value.
    """

    auto_register: ClassVar[bool] = True
    kind: ClassVar[Optional[ProbeKind]] = None
    platform: ClassVar[Platform] = Platform.UNKNOWN
    description: ClassVar[str] = ""

    @abc.abstractmethod
    def run(self, os_interface: OSInterface) -> Optional[T]:
        """Detect the value, or return None when it is not present."""

    def execute(self, os_interface: OSInterface) -> ProbeOutcome[T]:
        logger.debug("Executing probe %s", self.name)
        outcome: ProbeOutcome[T] = ProbeOutcome(kind=self.kind, platform=self.platform)
        start_time = time.perf_counter()
        try:
            outcome.value = self.run(os_interface)
        except ProbeError as exc:
            logger.debug("Probe %s found nothing: %s", self.name, exc)
            outcome.error = exc
        except Exception as exc:  # noqa: BLE001
            logger.exception("Unhandled error during probe %s", self.name)
            outcome.error = ProbeError(f"{type(exc).__name__}: {exc}")
        outcome.elapsed_time = time.perf_counter() - start_time
        return outcome

    @property
    def name(self) -> str:
        return self.__class__.__name__

    @staticmethod
    def _run(os_interface: OSInterface, command: str, *args: str) -> CommandResult:
        return os_interface.execute(command, list(args))

    def __repr__(self) -> str:
        kind = self.kind.value if self.kind else None
        return f"{self.__class__.__name__}(kind={kind!r}, platform={self.platform.value!r})"
