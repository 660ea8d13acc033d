"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass

UINT32_MAX = 0xFFFFFFFF


@dataclass(frozen=True, slots=True)
class Record:
    """One timestamped temperature/humidity sample.

    ``timestamp`` is whole seconds since the Unix epoch. Both readings are raw
    unsigned 32-bit register values as reported by the instrument.
    """

    timestamp: int
    temperature: int
    humidity: int

    def __post_init__(self) -> None:
        for name in ("timestamp", "temperature", "humidity"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int):
                raise ValueError(f"{name} must be an integer, got {value!r}.")
        for name in ("temperature", "humidity"):
            value = getattr(self, name)
            if not 0 <= value <= UINT32_MAX:
                raise ValueError(f"{name} {value} is outside the unsigned 32-bit range.")

    def as_tuple(self) -> tuple[int, int, int]:
        return (self.timestamp, self.temperature, self.humidity)
