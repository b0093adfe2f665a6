from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_STORE_NAME_ENV = "WHEEL_LOGS_STORE_NAME"
_STORE_ROOT_ENV = "WHEEL_LOGS_ROOT_PATH"
_TABLE_NAME_ENV = "TRIP_TABLE_NAME"
_TABLE_PATH_ENV = "TRIP_TABLE_PERSISTENCE_PATH"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    logs_store_name: str
    logs_root_path: Optional[str]
    trip_table_name: str
    trip_table_path: Optional[str]
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_optional_env(name: str, default: Optional[str]) -> Optional[str]:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or None


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        logs_store_name=_read_str_env(_STORE_NAME_ENV, "logs"),
        logs_root_path=_read_optional_env(_STORE_ROOT_ENV, "./tmp/logs"),
        trip_table_name=_read_str_env(_TABLE_NAME_ENV, "trips"),
        trip_table_path=_read_optional_env(_TABLE_PATH_ENV, "./tmp/trips.json"),
        log_level=_read_log_level("INFO"),
    )
