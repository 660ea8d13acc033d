"""Fixed March 2024 data set used by the ``demo`` command."""

from __future__ import annotations

from datetime import date
from typing import List

from models.records import Record
from services.timekeeping import reading_timestamp

DEMO_YEAR = 2024
DEMO_MONTH = 3
DEMO_HOUR = 15

# (day of month, temperature, humidity) in the order they are inserted.
DEMO_READINGS = (
    (4, 0x007AF2E, 0x00D8E24),
    (8, 0x007EB95, 0x00D9669),
    (11, 0x007F411, 0x00D8EDA),
    (12, 0x007D6E8, 0x00C6A4B),
    (5, 0x0077D17, 0x00BCD1C),
    (9, 0x007DE23, 0x00BE008),
    (7, 0x0078A30, 0x00CDB00),
    (2, 0x0082489, 0x00C6763),
    (6, 0x007F5FB, 0x00CA8B0),
    (10, 0x007A124, 0x00CDA24),
    (3, 0x0079496, 0x00DB372),
    (1, 0x007F62C, 0x00CFE43),
)


def demo_timestamp(day: int) -> int:
    return reading_timestamp(date(DEMO_YEAR, DEMO_MONTH, day), hour=DEMO_HOUR)


def demo_records() -> List[Record]:
    return [
        Record(timestamp=demo_timestamp(day), temperature=temperature, humidity=humidity)
        for day, temperature, humidity in DEMO_READINGS
    ]


def demo_search_days() -> List[int]:
    """Every stored day plus two that are never stored."""
    return list(range(1, 15))
