"""Runtime configuration for the CV generator service.

The PII directory can be overridden via the PII_PATH environment variable.
Defaults to ``<cwd>/pii`` so a checkout can be run without any setup.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from pathlib import Path

PII_PATH_ENV = "PII_PATH"
LOG_LEVEL_ENV = "CV_GENERATOR_LOG_LEVEL"
DEFAULT_PII_DIR_NAME = "pii"


def get_pii_root() -> Path:
    """Return the PII data directory, allowing overrides via environment variable."""
    env_root = os.getenv(PII_PATH_ENV)
    if env_root:
        return Path(env_root).expanduser()

    return Path.cwd() / DEFAULT_PII_DIR_NAME


def get_log_level() -> int:
    """Return the configured logging level, falling back to INFO for unknown names."""
    level_name = os.getenv(LOG_LEVEL_ENV, "INFO").upper()
    level = logging.getLevelName(level_name)
    return level if isinstance(level, int) else logging.INFO


@dataclass(frozen=True, slots=True)
class Settings:
    """Configuration captured once and handed to the file services.

    Attributes:
        pii_root: Default base directory for every file operation.
        log_level: Logging level applied at application startup.
    """

    pii_root: Path
    log_level: int = logging.INFO

    @classmethod
    def from_env(cls) -> Settings:
        """Build settings from the current process environment."""
        return cls(pii_root=get_pii_root(), log_level=get_log_level())
