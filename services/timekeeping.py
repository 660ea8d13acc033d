"""Date arithmetic used to stamp and look up daily readings.

All timestamps are UTC epoch seconds so that a run produces the same keys on
every host regardless of its local timezone.
"""

from __future__ import annotations

from datetime import date, datetime, timedelta, timezone

SECONDS_PER_DAY = 86_400
# 9999-12-31T23:59:59Z, the last second a datetime can hold.
MAX_TIMESTAMP = 253_402_300_799


def reading_timestamp(start: date, offset_days: int = 0, hour: int = 13) -> int:
    """Timestamp of the reading taken ``offset_days`` after ``start`` at ``hour``:00 UTC."""
    if not 0 <= hour <= 23:
        raise ValueError(f"hour must be between 0 and 23, got {hour}.")
    moment = datetime(start.year, start.month, start.day, hour, tzinfo=timezone.utc)
    try:
        moment += timedelta(days=offset_days)
    except OverflowError as exc:
        raise ValueError(f"{start} plus {offset_days} days is outside the supported date range.") from exc
    return int(moment.timestamp())


def parse_search_date(value: str, hour: int = 13) -> int:
    """Parse ``mm/dd/yyyy`` into the timestamp its reading would carry."""
    candidate = value.strip()
    if not candidate:
        raise ValueError("Search date is empty.")
    try:
        parsed = datetime.strptime(candidate, "%m/%d/%Y")
    except ValueError as exc:
        raise ValueError("Invalid date format. Use mm/dd/yyyy.") from exc
    return reading_timestamp(parsed.date(), hour=hour)


def to_datetime(timestamp: int) -> datetime:
    return datetime.fromtimestamp(timestamp, tz=timezone.utc)
