"""Build a run of daily readings and load them into a tree in shuffled order."""

from __future__ import annotations

import logging
import random
from dataclasses import dataclass
from datetime import date, timedelta
from typing import Callable, List, MutableSequence, Optional, Sequence

from datastore.reading_tree import ReadingTree
from models.records import Record
from services.sensor import SensorReadingSource
from services.timekeeping import reading_timestamp
from settings import get_settings

logger = logging.getLogger(__name__)

ShuffleStrategy = Callable[[MutableSequence[int]], None]


@dataclass(frozen=True)
class PopulateRequest:
    year: int
    month: int
    day: int
    num_days: int

    @property
    def start(self) -> date:
        return date(self.year, self.month, self.day)


def validate_request(
    month: int,
    day: int,
    num_days: int,
    year: Optional[int] = None,
    max_days: Optional[int] = None,
) -> PopulateRequest:
    """Check the user's start date and span, raising ``ValueError`` when out of range."""
    settings = get_settings()
    limit = max_days if max_days is not None else settings.max_days
    if not 1 <= month <= 12:
        raise ValueError(f"Month must be between 1 and 12, got {month}.")
    if not 1 <= day <= 31:
        raise ValueError(f"Day must be between 1 and 31, got {day}.")
    if not 1 <= num_days <= limit:
        raise ValueError(f"Number of days must be between 1 and {limit}, got {num_days}.")
    start_year = year if year is not None else settings.base_year
    try:
        start = date(start_year, month, day)
    except ValueError as exc:
        raise ValueError(f"{month}/{day}/{start_year} is not a calendar date.") from exc
    try:
        start + timedelta(days=num_days - 1)
    except OverflowError as exc:
        raise ValueError(
            f"{num_days} days from {month}/{day}/{start_year} runs past 12/31/9999."
        ) from exc
    return PopulateRequest(year=start_year, month=month, day=day, num_days=num_days)


def build_readings(
    start: date,
    num_days: int,
    source: SensorReadingSource,
    hour: int = 13,
) -> List[Record]:
    """One record per day starting at ``start``, in chronological order."""
    readings: List[Record] = []
    for offset in range(num_days):
        temperature, humidity = source()
        readings.append(
            Record(
                timestamp=reading_timestamp(start, offset, hour),
                temperature=temperature,
                humidity=humidity,
            )
        )
    return readings


def populate_tree(
    tree: ReadingTree,
    readings: Sequence[Record],
    shuffle: Optional[ShuffleStrategy] = None,
) -> int:
    """Insert ``readings`` in a shuffled order and return how many were inserted.

    Sorted input would degrade the tree into a linked list, so the insertion
    order is permuted first. ``shuffle`` receives the list of reading indices
    and must permute it in place; it defaults to ``random.shuffle`` seeded from
    ``SHUFFLE_SEED`` when that is configured.
    """
    if shuffle is None:
        shuffle = random.Random(get_settings().shuffle_seed).shuffle

    order = list(range(len(readings)))
    shuffle(order)

    for index in order:
        record = readings[index]
        tree.insert(record)
        logger.info(
            "added timestamp %d from data[%d]",
            record.timestamp,
            index,
            extra={"timestamp": record.timestamp, "index": index},
        )
    return len(order)
