"""Configuration for the survey engine.

Settings come from environment variables with defaults suitable for local
use. Validation is done by a Pydantic model so a bad value fails loudly at
load time instead of surfacing later as a broken share link or log setup.

    SURVEY_ENGINE_BASE_URL   origin used when generating share links
    SURVEY_ENGINE_DATA_DIR   directory for the file-backed store (optional)
    SURVEY_ENGINE_LOG_LEVEL  logging level name (DEBUG, INFO, ...)
"""

from __future__ import annotations

import logging
import os
from pathlib import Path
from typing import Mapping, Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError, field_validator

ENV_PREFIX = "SURVEY_ENGINE_"
LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")
logger = logging.getLogger(__name__)


class ConfigError(Exception):
    """Raised when environment configuration does not validate."""
    pass


class Settings(BaseModel):
    base_url: str = Field(default="http://localhost:5173")
    data_dir: Optional[Path] = None
    log_level: str = Field(default="INFO")

    @field_validator("base_url")
    @classmethod
    def base_url_must_be_http(cls, v: str) -> str:
        v = v.strip().rstrip("/")
        if not v.startswith(("http://", "https://")):
            raise ValueError("base_url must start with http:// or https://")
        return v

    @field_validator("log_level")
    @classmethod
    def log_level_must_be_known(cls, v: str) -> str:
        v = v.strip().upper()
        if v not in LOG_LEVELS:
            raise ValueError(f"unknown log level: {v}")
        return v


def load_settings(environ: Optional[Mapping[str, str]] = None) -> Settings:
    """Build Settings from the environment (or the given mapping)."""
    env = os.environ if environ is None else environ
    values = {}
    for name in Settings.model_fields:
        raw = env.get(ENV_PREFIX + name.upper())
        if raw is not None and raw.strip():
            values[name] = raw
    try:
        settings = Settings(**values)
    except PydanticValidationError as e:
        raise ConfigError(str(e)) from e
    logger.debug("Loaded settings: %s", settings)
    return settings
