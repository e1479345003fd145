"""Runtime configuration for the posture inspector."""
from __future__ import annotations

import logging
from pathlib import Path
from typing import Any, Mapping, Optional

from pydantic import Field, ValidationError, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

logger = logging.getLogger(__name__)

ENV_PREFIX = "POSTURESENTRY_"

_DEFAULT_LOG_DIR = Path.home() / ".posturesentry" / "logs"


class InspectorConfig(BaseSettings):
    """Configuration for probe execution.

    Every field can be set through a ``POSTURESENTRY_*`` environment variable,
    e.g. ``POSTURESENTRY_COMMAND_TIMEOUT=10``. Invalid values are logged and
    replaced by the defaults.
    """

    # Seconds before an external utility is killed; None waits forever
    command_timeout: Optional[float] = 30.0

    # Run the three probes on a worker pool instead of one after another
    parallel: bool = True

    max_workers: int = Field(default=3, ge=1)

    log_dir: Path = Field(default_factory=lambda: _DEFAULT_LOG_DIR)

    model_config = SettingsConfigDict(
        env_prefix=ENV_PREFIX,
        env_ignore_empty=True,
        extra="ignore",
    )

    @field_validator("command_timeout", "parallel", "max_workers", mode="wrap")
    @classmethod
    def _default_when_invalid(cls, value: Any, handler, info: ValidationInfo) -> Any:
        try:
            result = handler(value)
        except ValidationError:
            logger.warning("Ignoring invalid %s%s=%r", ENV_PREFIX, info.field_name.upper(), value)
            return cls.model_fields[info.field_name].default
        if info.field_name == "command_timeout" and result is not None and result <= 0:
            return None
        return result

    @field_validator("log_dir")
    @classmethod
    def _expand_log_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "InspectorConfig":
        """Build a configuration from the process environment or ``environ``."""
        if environ is None:
            return cls()
        values = {}
        for name in cls.model_fields:
            raw = environ.get(f"{ENV_PREFIX}{name.upper()}")
            if raw:
                values[name] = raw
        return cls.model_validate(values)
