"""Simulated temperature/humidity instrument."""

from __future__ import annotations

import random
from typing import Optional, Tuple

from settings import get_settings

# Readings are reported in thousandths of a unit (degrees F x 1000, %RH x 1000).
READING_SCALE = 1000


class SensorReadingSource:
    """Produce one ``(temperature, humidity)`` pair per call.

    Values are drawn uniformly from the configured ranges and encoded as
    unsigned integers in thousandths, the way the instrument registers report
    them.
    """

    def __init__(
        self,
        temperature_range: Tuple[float, float] = (50.0, 85.0),
        humidity_range: Tuple[float, float] = (40.0, 85.0),
        rng: Optional[random.Random] = None,
    ) -> None:
        for name, (low, high) in (
            ("temperature_range", temperature_range),
            ("humidity_range", humidity_range),
        ):
            if low < 0 or high < low:
                raise ValueError(f"{name} must satisfy 0 <= low <= high, got {(low, high)}.")
        self.temperature_range = temperature_range
        self.humidity_range = humidity_range
        self._rng = rng or random.Random()

    def __call__(self) -> Tuple[int, int]:
        temperature = self._rng.uniform(*self.temperature_range)
        humidity = self._rng.uniform(*self.humidity_range)
        return (_encode(temperature), _encode(humidity))


def _encode(value: float) -> int:
    return int(round(value * READING_SCALE))


def build_default_source(seed: Optional[int] = None) -> SensorReadingSource:
    settings = get_settings()
    return SensorReadingSource(
        temperature_range=settings.temperature_range,
        humidity_range=settings.humidity_range,
        rng=random.Random(seed),
    )
