"""
Application configuration, read once from environment variables at startup.
"""

from __future__ import annotations

import os
from pathlib import Path
from typing import Mapping

from pydantic import BaseModel, ConfigDict, Field, ValidationError, field_validator

# Default directory for cached models (next to project root)
DEFAULT_MODELS_DIR = Path(__file__).resolve().parent.parent / "models"

_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

# field name -> environment variable
ENV_VARS = {
    "camera_index": "PERCEPTION_CAMERA_INDEX",
    "models_dir": "PERCEPTION_MODELS_DIR",
    "frame_interval_ms": "PERCEPTION_FRAME_INTERVAL_MS",
    "log_level": "PERCEPTION_LOG_LEVEL",
}


class AppConfig(BaseModel):
    """Runtime settings with environment-variable overrides."""

    model_config = ConfigDict(frozen=True)

    camera_index: int = Field(0, ge=0)
    models_dir: Path = DEFAULT_MODELS_DIR
    # Interval between display refresh ticks (16 ms ~ 60 Hz)
    frame_interval_ms: int = Field(16, ge=0)
    log_level: str = "INFO"

    @field_validator("models_dir")
    @classmethod
    def _expand_models_dir(cls, value: Path) -> Path:
        return value.expanduser()

    @field_validator("log_level")
    @classmethod
    def _check_log_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in _LOG_LEVELS:
            raise ValueError(f"must be one of {', '.join(_LOG_LEVELS)}")
        return level

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> AppConfig:
        """Build config from PERCEPTION_* variables; unset or blank values keep defaults."""
        if environ is None:
            environ = os.environ
        overrides = {}
        for field, name in ENV_VARS.items():
            raw = environ.get(name)
            if raw is not None and raw.strip():
                overrides[field] = raw.strip()
        try:
            return cls(**overrides)
        except ValidationError as e:
            names = sorted({ENV_VARS[err["loc"][0]] for err in e.errors() if err["loc"]})
            raise ValueError(f"Invalid {', '.join(names)}: {e}") from e
