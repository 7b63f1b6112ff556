"""Centralized configuration using Pydantic Settings (v2).

`load_settings()` returns a cached `Settings` instance read from:
- Real environment variables (highest precedence)
- `.env` files in the working directory: .env, .env.local, .env.dev/.env.test/.env.prod

The groups core itself never reads settings; only the logger helper and the
outer surfaces (CLI, HTTP API) do.
"""

from __future__ import annotations

import logging
import os
from functools import lru_cache
from typing import Literal

from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

EnvName = Literal["dev", "test", "prod"]
LogLevelName = Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]


class Settings(BaseSettings):
    """Typed configuration loaded from env and `.env` files.

    Attributes
    ----------
    environment : EnvName
        Runtime environment flag; maps from `PROCTOR_GROUPS_ENV`.
    log_level : LogLevelName
        Global log level string; maps from `LOG_LEVEL`.
    logging_separator : str
        Single-character separator used for the combined test-group dump;
        maps from `PROCTOR_GROUPS_SEPARATOR`.
    """

    environment: EnvName = Field(default="dev", alias="PROCTOR_GROUPS_ENV")
    log_level: LogLevelName = Field(default="INFO", alias="LOG_LEVEL")
    logging_separator: str = Field(
        default=",", alias="PROCTOR_GROUPS_SEPARATOR", min_length=1, max_length=1
    )

    model_config = SettingsConfigDict(
        env_file=(".env", ".env.local", ".env.dev", ".env.test", ".env.prod"),
        env_file_encoding="utf-8",
        extra="ignore",
    )

    @property
    def is_dev(self) -> bool:
        """Return True if running in the development environment."""
        return self.environment == "dev"

    @property
    def is_test(self) -> bool:
        """Return True if running in the test environment."""
        return self.environment == "test"

    def log_level_numeric(self) -> int:
        """Return the numeric logging level corresponding to `self.log_level`."""
        return getattr(logging, self.log_level, logging.INFO)


@lru_cache(maxsize=1)
def load_settings() -> Settings:
    """Create and cache a `Settings` instance.

    Kept behind an LRU cache so tests can force a rebuild via
    `load_settings.cache_clear()` after mutating `os.environ`.
    """
    os.environ.setdefault("PROCTOR_GROUPS_ENV", "dev")
    return Settings()


def get_logger(name: str = "proctor_groups") -> logging.Logger:
    """Return a process-global logger configured to the current `log_level`."""
    logger = logging.getLogger(name)
    if not logger.handlers:
        handler = logging.StreamHandler()
        handler.setFormatter(
            logging.Formatter("%(asctime)s | %(levelname)s | %(name)s | %(message)s")
        )
        logger.addHandler(handler)
    logger.setLevel(load_settings().log_level_numeric())
    logger.propagate = False
    return logger
