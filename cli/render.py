from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Iterable, Optional

import typer


def echo_heading(text: str) -> None:
    typer.secho(text, bold=True)


def echo_key_values(pairs: Iterable[tuple[str, Any]]) -> None:
    for key, value in pairs:
        typer.echo(f"{key}: {value}")


def format_timestamp(value: Optional[float]) -> str:
    if value is None:
        return "-"
    stamp = datetime.fromtimestamp(float(value), tz=timezone.utc)
    return stamp.strftime("%Y-%m-%d %H:%M:%S.%f")


def render_stats(payload: Dict[str, Any]) -> None:
    echo_heading("Storage")
    echo_key_values(
        [
            ("table", payload.get("table")),
            ("row_count", payload.get("row_count")),
            ("latest", format_timestamp(payload.get("latest_timestamp"))),
        ]
    )


def render_readings(readings: Iterable[Dict[str, Any]]) -> None:
    rows = list(readings)
    echo_heading("Recent Readings")
    if not rows:
        typer.echo("No readings stored.")
        return
    typer.echo("  captured_at (UTC)          | sensor | temperature | humidity")
    for row in rows:
        typer.echo(
            f"  {format_timestamp(row.get('timestamp')):<26} | {row.get('sensor_id'):>6} "
            f"| {row.get('temperature'):>11.2f} | {row.get('humidity'):>8.2f}"
        )
