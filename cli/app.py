from __future__ import annotations

from dataclasses import dataclass
from typing import Optional

import typer

from cli.client import ApiClient
from cli.config import CLIConfig, load_config
from cli.render import render_readings, render_stats
from logging_config import configure_logging
from services.pipeline import build_pipeline
from services.sender import SensorSender
from settings import get_settings


@dataclass
class CLIState:
    config: CLIConfig


app = typer.Typer(
    help="Send, receive and inspect UDP sensor readings.",
    context_settings={"help_option_names": ["-h", "--help"]},
)


def _get_state(ctx: typer.Context) -> CLIState:
    state = ctx.obj
    if not isinstance(state, CLIState):
        raise typer.Exit(code=1)
    return state


def _open_client(ctx: typer.Context) -> ApiClient:
    client = ApiClient(_get_state(ctx).config)
    ctx.call_on_close(client.close)
    return client


@app.callback()
def main(
    ctx: typer.Context,
    base_url: Optional[str] = typer.Option(
        None,
        "--base-url",
        "-b",
        help="Status API base URL (defaults to API_BASE_URL env or http://localhost:8000).",
    ),
    log_level: Optional[str] = typer.Option(
        None,
        "--log-level",
        help="Logging level (defaults to LOG_LEVEL env or INFO).",
    ),
) -> None:
    """Entry point for the CLI."""
    configure_logging(log_level.upper() if log_level else None)
    ctx.obj = CLIState(config=load_config(base_url=base_url))


@app.command("send")
def send_command(
    host: Optional[str] = typer.Option(None, "--host", help="Receiver host."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="Receiver UDP port."),
    interval: Optional[float] = typer.Option(
        None, "--interval", help="Seconds to wait between readings."
    ),
    count: Optional[int] = typer.Option(
        None, "--count", "-n", min=1, help="Stop after this many readings (default: run until interrupted)."
    ),
) -> None:
    """Emit synthetic readings to the receiver."""
    settings = get_settings()
    sender = SensorSender(
        host=host or settings.udp_host,
        port=port or settings.udp_port,
        interval=settings.send_interval if interval is None else interval,
    )
    sent = sender.run(count=count)
    typer.echo(f"Sent {sent} readings.")


@app.command("receive")
def receive_command(
    host: Optional[str] = typer.Option(None, "--host", help="Address to bind."),
    port: Optional[int] = typer.Option(None, "--port", "-p", help="UDP port to bind."),
    delay: Optional[float] = typer.Option(
        None, "--delay", help="Seconds the worker waits before each insert."
    ),
) -> None:
    """Listen for readings and persist them until interrupted."""
    pipeline = build_pipeline(host=host, port=port, delay=delay)
    pipeline.start()
    pipeline.serve_forever()


@app.command("stats")
def stats_command(ctx: typer.Context) -> None:
    """Show the row count of the storage table."""
    client = _open_client(ctx)
    render_stats(client.get_stats())


@app.command("recent")
def recent_command(
    ctx: typer.Context,
    limit: int = typer.Option(10, "--limit", "-l", min=1, max=500, help="Readings to show."),
) -> None:
    """List the most recently stored readings."""
    client = _open_client(ctx)
    render_readings(client.list_readings(limit))
