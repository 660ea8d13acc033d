from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache
from typing import Optional


_BASE_YEAR_ENV = "READINGS_BASE_YEAR"
_READING_HOUR_ENV = "READINGS_HOUR"
_MAX_DAYS_ENV = "READINGS_MAX_DAYS"
_TEMP_MIN_ENV = "SENSOR_TEMP_MIN"
_TEMP_MAX_ENV = "SENSOR_TEMP_MAX"
_HUMID_MIN_ENV = "SENSOR_HUMID_MIN"
_HUMID_MAX_ENV = "SENSOR_HUMID_MAX"
_SHUFFLE_SEED_ENV = "SHUFFLE_SEED"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    base_year: int
    reading_hour: int
    max_days: int
    temperature_range: tuple[float, float]
    humidity_range: tuple[float, float]
    shuffle_seed: Optional[int]
    log_level: str


def _read_int_env(name: str, default: int, minimum: int, maximum: int) -> int:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if minimum <= parsed <= maximum else default


def _read_float_env(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        return float(candidate)
    except ValueError:
        return default


def _read_range(low_env: str, high_env: str, default: tuple[float, float]) -> tuple[float, float]:
    low = _read_float_env(low_env, default[0])
    high = _read_float_env(high_env, default[1])
    if low < 0 or high < low:
        return default
    return (low, high)


def _read_optional_int_env(name: str) -> Optional[int]:
    value = os.getenv(name)
    if value is None:
        return None
    candidate = value.strip()
    if not candidate:
        return None
    try:
        return int(candidate)
    except ValueError:
        return None


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
        base_year=_read_int_env(_BASE_YEAR_ENV, 2023, 1970, 9999),
        reading_hour=_read_int_env(_READING_HOUR_ENV, 13, 0, 23),
        max_days=_read_int_env(_MAX_DAYS_ENV, 100, 1, 100_000),
        temperature_range=_read_range(_TEMP_MIN_ENV, _TEMP_MAX_ENV, (50.0, 85.0)),
        humidity_range=_read_range(_HUMID_MIN_ENV, _HUMID_MAX_ENV, (40.0, 85.0)),
        shuffle_seed=_read_optional_int_env(_SHUFFLE_SEED_ENV),
        log_level=_read_log_level("INFO"),
    )
