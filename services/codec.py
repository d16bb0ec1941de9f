"""UTF-8 JSON encoding of readings, one reading per datagram."""

from __future__ import annotations

from app.schemas import ReadingPayload
from models.records import Reading


def encode_reading(reading: Reading) -> bytes:
    return ReadingPayload.from_reading(reading).model_dump_json().encode("utf-8")


def decode_reading(data: bytes) -> Reading:
    """Parse a datagram into a reading.

    Raises ``pydantic.ValidationError`` when the payload is not a JSON object
    carrying the four reading fields.
    """
    return ReadingPayload.model_validate_json(data).to_reading()
