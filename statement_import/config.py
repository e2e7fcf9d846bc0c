"""Runtime settings read from ``STATEMENT_IMPORT_*`` environment variables."""

from __future__ import annotations

import os
from dataclasses import dataclass
from typing import Optional

from . import rules

_ENV_PREFIX = "STATEMENT_IMPORT_"


def _env_int(name: str, default: int) -> int:
    raw = os.getenv(_ENV_PREFIX + name)
    if raw is None or not raw.strip():
        return default
    try:
        value = int(raw.strip())
    except ValueError:
        raise ValueError(f"{_ENV_PREFIX}{name} must be an integer, got {raw!r}") from None
    if value <= 0:
        raise ValueError(f"{_ENV_PREFIX}{name} must be positive, got {value}")
    return value


@dataclass(frozen=True)
class Settings:
    max_file_size: int = rules.MAX_FILE_SIZE
    max_rows: int = rules.MAX_ROWS_PER_IMPORT
    log_level: Optional[str] = None


def get_settings() -> Settings:
    return Settings(
        max_file_size=_env_int("MAX_FILE_SIZE", rules.MAX_FILE_SIZE),
        max_rows=_env_int("MAX_ROWS", rules.MAX_ROWS_PER_IMPORT),
        log_level=os.getenv(_ENV_PREFIX + "LOG_LEVEL") or None,
    )
