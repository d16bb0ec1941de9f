"""HTTP route definitions for the read-only status API."""

from __future__ import annotations

from fastapi import APIRouter, Depends, Query, status

from app.schemas import ReadingPayload, ReadingStats
from datastore.readings_table import ReadingsTable, build_default_table

router = APIRouter()


def get_table() -> ReadingsTable:
    return build_default_table()


@router.get(
    "/readings",
    response_model=list[ReadingPayload],
    summary="List the most recently captured readings.",
)
async def list_readings(
    limit: int = Query(20, ge=1, le=500, description="Maximum readings to return."),
    table: ReadingsTable = Depends(get_table),
) -> list[ReadingPayload]:
    return [ReadingPayload.from_reading(reading) for reading in table.fetch_latest(limit)]


@router.get(
    "/readings/stats",
    response_model=ReadingStats,
    summary="Row count and latest capture time of the storage table.",
)
async def reading_stats(table: ReadingsTable = Depends(get_table)) -> ReadingStats:
    latest = table.fetch_latest(1)
    return ReadingStats(
        table=table.name,
        row_count=table.count(),
        latest_timestamp=latest[0].timestamp if latest else None,
    )


@router.get(
    "/health",
    summary="Health check endpoint.",
    status_code=status.HTTP_200_OK,
)
async def healthcheck() -> dict[str, str]:
    return {"status": "ok"}


@router.get(
    "/",
    summary="Root endpoint mirrors health information.",
    status_code=status.HTTP_200_OK,
)
async def root() -> dict[str, str]:
    return {"status": "ok", "detail": "See /health for service status."}
