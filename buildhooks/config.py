"""Hook settings loaded from buildhooks.yaml"""

import logging
import os
from pathlib import Path
from typing import Any, Dict, Optional

import yaml
from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator, model_validator

from buildhooks.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

CONFIG_FILENAME = "buildhooks.yaml"

DEFAULT_MAX_WAIT_SECONDS = 15.0
DEFAULT_POLL_INTERVAL_MS = 100
DEFAULT_CHANNEL_NAME = "BuildHooks"


def default_interpreter() -> str:
    """PowerShell on Windows, the POSIX shell everywhere else"""
    return "powershell" if os.name == "nt" else "sh"


class HookSettings(BaseModel):
    """Execution policy for the pre-build and post-build scripts."""

    model_config = ConfigDict(extra="forbid")

    max_wait_seconds: float = Field(default=DEFAULT_MAX_WAIT_SECONDS, gt=0)
    poll_interval_ms: int = Field(default=DEFAULT_POLL_INTERVAL_MS, gt=0)
    interpreter: str = Field(default_factory=default_interpreter)
    channel_name: str = Field(default=DEFAULT_CHANNEL_NAME, min_length=1)
    stop_grace_seconds: float = Field(default=2.0, ge=0)

    @field_validator("interpreter")
    @classmethod
    def validate_interpreter(cls, v: str) -> str:
        """Validate interpreter names a known profile."""
        from buildhooks.engine.interpreters import INTERPRETERS

        if v not in INTERPRETERS:
            raise ValueError(
                f"interpreter must be one of: {', '.join(sorted(INTERPRETERS))}"
            )
        return v

    @model_validator(mode="after")
    def validate_poll_interval(self) -> "HookSettings":
        """A single poll may not be longer than the whole wait ceiling."""
        if self.poll_interval_seconds > self.max_wait_seconds:
            raise ValueError("poll_interval_ms must not exceed max_wait_seconds")
        return self

    @property
    def poll_interval_seconds(self) -> float:
        return self.poll_interval_ms / 1000.0


def load_settings(
    session_root: Path,
    overrides: Optional[Dict[str, Any]] = None
) -> HookSettings:
    """Load settings from {session_root}/buildhooks.yaml

    A missing file yields the defaults. Override values that are None are
    ignored so CLI options left unset do not clobber the file.

    Raises:
        ConfigurationError: If the file is unreadable or fails validation
    """
    config_path = Path(session_root) / CONFIG_FILENAME
    data: Dict[str, Any] = {}

    if config_path.exists():
        try:
            loaded = yaml.safe_load(config_path.read_text())
        except yaml.YAMLError as e:
            raise ConfigurationError(f"could not parse YAML: {e}", str(config_path))

        if loaded is None:
            loaded = {}
        if not isinstance(loaded, dict):
            raise ConfigurationError("top level must be a mapping", str(config_path))

        data.update(loaded)
        logger.debug(f"Loaded hook settings from {config_path}")

    if overrides:
        data.update({k: v for k, v in overrides.items() if v is not None})

    try:
        return HookSettings(**data)
    except ValidationError as e:
        errors = [
            f"{'.'.join(str(part) for part in err['loc']) or 'settings'}: {err['msg']}"
            for err in e.errors()
        ]
        raise ConfigurationError(
            "settings failed validation",
            str(config_path) if config_path.exists() else None,
            errors
        )
