from __future__ import annotations

import os
from functools import lru_cache
from pathlib import Path


BACKEND_DIR = Path(__file__).resolve().parent.parent
DATA_DIR = (BACKEND_DIR / "data").resolve()

DEFAULT_RESULT_LIMIT = 100
GLOSS_PREVIEW_LENGTH = 100
RECENTS_LIMIT = 20


def _resolve_path(env_name: str, default: Path) -> Path:
    env_value = os.getenv(env_name)
    if not env_value:
        return default
    candidate = Path(env_value).expanduser()
    if not candidate.is_absolute():
        candidate = (BACKEND_DIR / candidate).resolve()
    return candidate


@lru_cache
def database_path() -> Path:
    return _resolve_path("ENRU_DATABASE_PATH", DATA_DIR / "dict.sqlite3")


@lru_cache
def state_path() -> Path:
    return _resolve_path("ENRU_STATE_PATH", DATA_DIR / "state.json")


@lru_cache
def result_limit() -> int:
    raw = os.getenv("ENRU_RESULT_LIMIT", "")
    try:
        value = int(raw)
    except ValueError:
        return DEFAULT_RESULT_LIMIT
    return value if value > 0 else DEFAULT_RESULT_LIMIT


@lru_cache
def log_level() -> str:
    return os.getenv("ENRU_LOG_LEVEL", "INFO").upper()
