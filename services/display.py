"""Human-readable renderings of readings for tables, traces and search reports."""

from __future__ import annotations

from datetime import datetime
from typing import Optional

from models.records import Record
from services.sensor import READING_SCALE
from services.timekeeping import to_datetime

COLUMN_GAP = " " * 5


def _moment_or_none(timestamp: int) -> Optional[datetime]:
    try:
        return to_datetime(timestamp)
    except (OverflowError, OSError, ValueError):
        return None


def format_day(timestamp: int) -> str:
    """``04-Mar-2024``, or the bare number when it has no calendar date."""
    moment = _moment_or_none(timestamp)
    if moment is None:
        return f"{timestamp:>11}"
    return moment.strftime("%d-%b-%Y")


def format_moment(timestamp: int) -> str:
    """``Mon Mar  4 15:00:00 2024``"""
    moment = _moment_or_none(timestamp)
    if moment is None:
        return f"<{timestamp}s>"
    return f"{moment:%a %b} {moment.day:2d} {moment:%H:%M:%S %Y}"


def format_record_line(record: Record) -> str:
    """One table row: the date followed by both raw readings in hex."""
    return f"{format_day(record.timestamp)}{COLUMN_GAP}{record.temperature:08X} {record.humidity:08X}"


def format_search_hit(record: Record) -> str:
    """Table row with each raw reading followed by its engineering value."""
    temperature = record.temperature / READING_SCALE
    humidity = record.humidity / READING_SCALE
    return (
        f"{format_day(record.timestamp)}{COLUMN_GAP}"
        f"{record.temperature:08X} ({temperature:05.1f}F) "
        f"{record.humidity:08X} ({humidity:05.1f}%)"
    )


def format_trace_step(record: Record) -> str:
    """``-> [1709564400] Mon Mar  4 15:00:00 2024``"""
    return f"-> [{record.timestamp}] {format_moment(record.timestamp)}"
