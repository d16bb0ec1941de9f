"""Domain models shared across services."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(slots=True, frozen=True)
class Reading:
    """A single sensor sample as produced by the sender."""

    sensor_id: int
    temperature: float
    humidity: float
    timestamp: float

    def as_row(self) -> tuple[int, float, float, float]:
        return (self.sensor_id, self.temperature, self.humidity, self.timestamp)
