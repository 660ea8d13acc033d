from __future__ import annotations

from typing import Iterator

import pytest

from datastore.reading_tree import build_default_tree
from services.sensor import build_default_source
from settings import get_settings


@pytest.fixture(autouse=True)
def _fresh_settings() -> Iterator[None]:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


def test_defaults_without_environment(monkeypatch) -> None:
    for name in (
        "READINGS_BASE_YEAR",
        "READINGS_HOUR",
        "READINGS_MAX_DAYS",
        "SENSOR_TEMP_MIN",
        "SENSOR_TEMP_MAX",
        "SENSOR_HUMID_MIN",
        "SENSOR_HUMID_MAX",
        "SHUFFLE_SEED",
        "LOG_LEVEL",
    ):
        monkeypatch.delenv(name, raising=False)

    settings = get_settings()

    assert settings.base_year == 2023
    assert settings.reading_hour == 13
    assert settings.max_days == 100
    assert settings.temperature_range == (50.0, 85.0)
    assert settings.humidity_range == (40.0, 85.0)
    assert settings.shuffle_seed is None
    assert settings.log_level == "INFO"


def test_environment_overrides_apply(monkeypatch) -> None:
    monkeypatch.setenv("READINGS_BASE_YEAR", "2024")
    monkeypatch.setenv("READINGS_HOUR", "15")
    monkeypatch.setenv("READINGS_MAX_DAYS", "365")
    monkeypatch.setenv("SENSOR_TEMP_MIN", "60")
    monkeypatch.setenv("SENSOR_TEMP_MAX", "61")
    monkeypatch.setenv("SHUFFLE_SEED", "42")
    monkeypatch.setenv("LOG_LEVEL", "debug")

    settings = get_settings()
    source = build_default_source()

    assert settings.base_year == 2024
    assert settings.reading_hour == 15
    assert settings.max_days == 365
    assert settings.shuffle_seed == 42
    assert settings.log_level == "DEBUG"
    assert source.temperature_range == (60.0, 61.0)
    temperature, _ = source()
    assert 60_000 <= temperature <= 61_000


def test_invalid_values_fall_back_to_defaults(monkeypatch) -> None:
    monkeypatch.setenv("READINGS_HOUR", "25")
    monkeypatch.setenv("READINGS_MAX_DAYS", "many")
    monkeypatch.setenv("SENSOR_HUMID_MIN", "90")
    monkeypatch.setenv("SENSOR_HUMID_MAX", "10")
    monkeypatch.setenv("SHUFFLE_SEED", " ")

    settings = get_settings()

    assert settings.reading_hour == 13
    assert settings.max_days == 100
    assert settings.humidity_range == (40.0, 85.0)
    assert settings.shuffle_seed is None


def test_default_tree_is_cached_until_cleared() -> None:
    first = build_default_tree()
    try:
        assert build_default_tree() is first
    finally:
        first.destroy()
        build_default_tree.cache_clear()

    second = build_default_tree()
    try:
        assert second is not first
        assert second.closed is False
    finally:
        second.destroy()
        build_default_tree.cache_clear()
