from __future__ import annotations

from typing import Any, Dict, List

import pytest
from typer.testing import CliRunner

from cli.app import app


class StubClient:
    def __init__(self, config) -> None:
        self.config = config
        self.limits: List[int] = []
        self.closed = False

    def get_stats(self) -> Dict[str, Any]:
        return {"table": "readings", "row_count": 42, "latest_timestamp": 0.0}

    def list_readings(self, limit: int) -> List[Dict[str, Any]]:
        self.limits.append(limit)
        return [
            {"sensor_id": 3, "temperature": 21.25, "humidity": 48.5, "timestamp": 0.0},
        ]

    def close(self) -> None:
        self.closed = True


class StubSender:
    instances: List["StubSender"] = []

    def __init__(self, host: str, port: int, interval: float) -> None:
        self.host = host
        self.port = port
        self.interval = interval
        self.count: int | None = None
        StubSender.instances.append(self)

    def run(self, count: int | None = None) -> int:
        self.count = count
        return count or 0


class StubPipeline:
    def __init__(self) -> None:
        self.started = False
        self.served = False

    def start(self) -> None:
        self.started = True

    def serve_forever(self) -> None:
        self.served = True


@pytest.fixture()
def runner(monkeypatch) -> CliRunner:
    # The runner swaps stdio per invocation; keep logging handlers off it.
    monkeypatch.setattr("cli.app.configure_logging", lambda level=None: None)
    return CliRunner()


def _install_client(monkeypatch) -> List[StubClient]:
    created: List[StubClient] = []

    def factory(config):
        client = StubClient(config)
        created.append(client)
        return client

    monkeypatch.setattr("cli.app.ApiClient", factory)
    return created


def test_stats_command(monkeypatch, runner: CliRunner) -> None:
    created = _install_client(monkeypatch)

    result = runner.invoke(app, ["--base-url", "http://status:9000/", "stats"])

    assert result.exit_code == 0
    assert "row_count: 42" in result.stdout
    assert "1970-01-01 00:00:00" in result.stdout
    assert created[0].config.base_url == "http://status:9000"
    assert created[0].closed is True


def test_recent_command(monkeypatch, runner: CliRunner) -> None:
    created = _install_client(monkeypatch)

    result = runner.invoke(app, ["recent", "--limit", "5"])

    assert result.exit_code == 0
    assert "Recent Readings" in result.stdout
    assert "21.25" in result.stdout
    assert created[0].limits == [5]


def test_send_command_uses_options(monkeypatch, runner: CliRunner) -> None:
    StubSender.instances.clear()
    monkeypatch.setattr("cli.app.SensorSender", StubSender)

    result = runner.invoke(
        app, ["send", "--host", "10.0.0.5", "--port", "5005", "--interval", "0", "--count", "3"]
    )

    assert result.exit_code == 0
    assert "Sent 3 readings." in result.stdout
    sender = StubSender.instances[0]
    assert (sender.host, sender.port, sender.interval, sender.count) == ("10.0.0.5", 5005, 0.0, 3)


def test_receive_command_starts_pipeline(monkeypatch, runner: CliRunner) -> None:
    pipeline = StubPipeline()
    calls: List[Dict[str, Any]] = []

    def factory(**kwargs):
        calls.append(kwargs)
        return pipeline

    monkeypatch.setattr("cli.app.build_pipeline", factory)

    result = runner.invoke(app, ["receive", "--port", "7000", "--delay", "0.1"])

    assert result.exit_code == 0
    assert calls == [{"host": None, "port": 7000, "delay": 0.1}]
    assert pipeline.started and pipeline.served
