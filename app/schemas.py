"""Pydantic schemas for the HTTP API layer."""

from __future__ import annotations

from typing import List, Optional

from pydantic import BaseModel, Field

from models.records import UINT32_MAX, Record
from services.display import format_record_line
from services.timekeeping import MAX_TIMESTAMP


class ReadingIn(BaseModel):
    """A reading submitted for insertion."""

    timestamp: int = Field(
        ..., le=MAX_TIMESTAMP, description="Seconds since the Unix epoch, up to the end of year 9999."
    )
    temperature: int = Field(..., ge=0, le=UINT32_MAX)
    humidity: int = Field(..., ge=0, le=UINT32_MAX)

    def to_record(self) -> Record:
        return Record(
            timestamp=self.timestamp,
            temperature=self.temperature,
            humidity=self.humidity,
        )


class ReadingOut(BaseModel):
    """A stored reading together with its table rendering."""

    timestamp: int
    temperature: int
    humidity: int
    display: str

    @classmethod
    def from_record(cls, record: Record) -> "ReadingOut":
        return cls(
            timestamp=record.timestamp,
            temperature=record.temperature,
            humidity=record.humidity,
            display=format_record_line(record),
        )


class PopulateIn(BaseModel):
    """Generate ``num_days`` daily readings starting at ``month``/``day``."""

    month: int
    day: int
    num_days: int
    year: Optional[int] = Field(default=None, description="Defaults to READINGS_BASE_YEAR.")


class PopulateOut(BaseModel):
    inserted: int = Field(..., ge=0)
    count: int = Field(..., ge=0, description="Total readings held after insertion.")


class SearchOut(BaseModel):
    """Search result including the nodes visited before the match."""

    timestamp: int
    found: bool
    reading: Optional[ReadingOut] = None
    path: List[ReadingOut] = Field(default_factory=list)


class TableOut(BaseModel):
    """All readings in ascending timestamp order."""

    count: int = Field(..., ge=0)
    height: int = Field(..., ge=0)
    readings: List[ReadingOut] = Field(default_factory=list)
