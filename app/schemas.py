"""Pydantic schemas for the wire format and the HTTP status API."""

from __future__ import annotations

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from models.records import Reading


class ReadingPayload(BaseModel):
    """Flat key/value record carried in one datagram."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    sensor_id: int = Field(
        ...,
        ge=-(2**63),
        le=2**63 - 1,
        description="Identifier of the emitting sensor; fits an SQLite INTEGER.",
    )
    temperature: float
    humidity: float
    timestamp: float = Field(..., description="Capture time in seconds since epoch.")

    @classmethod
    def from_reading(cls, reading: Reading) -> "ReadingPayload":
        return cls(
            sensor_id=reading.sensor_id,
            temperature=reading.temperature,
            humidity=reading.humidity,
            timestamp=reading.timestamp,
        )

    def to_reading(self) -> Reading:
        return Reading(
            sensor_id=self.sensor_id,
            temperature=self.temperature,
            humidity=self.humidity,
            timestamp=self.timestamp,
        )


class ReadingStats(BaseModel):
    """Summary of the storage table exposed via the API."""

    table: str
    row_count: int = Field(..., ge=0)
    latest_timestamp: Optional[float] = None
