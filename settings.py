from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache


_UDP_HOST_ENV = "SENSOR_UDP_HOST"
_UDP_PORT_ENV = "SENSOR_UDP_PORT"
_DB_PATH_ENV = "SENSOR_DB_PATH"
_TABLE_NAME_ENV = "SENSOR_TABLE_NAME"
_WORKER_DELAY_ENV = "WORKER_DELAY_SECONDS"
_SEND_INTERVAL_ENV = "SEND_INTERVAL_SECONDS"
_LOG_LEVEL_ENV = "LOG_LEVEL"


@dataclass(frozen=True)
class Settings:
    udp_host: str
    udp_port: int
    db_path: str
    table_name: str
    worker_delay: float
    send_interval: float
    log_level: str


def _read_str_env(name: str, default: str) -> str:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    return candidate or default


def _read_port(default: int) -> int:
    value = os.getenv(_UDP_PORT_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = int(candidate)
    except ValueError:
        return default
    return parsed if 0 < parsed < 65536 else default


def _read_seconds(name: str, default: float) -> float:
    value = os.getenv(name)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    try:
        parsed = float(candidate)
    except ValueError:
        return default
    return parsed if parsed >= 0 else default


def _read_log_level(default: str) -> str:
    value = os.getenv(_LOG_LEVEL_ENV)
    if value is None:
        return default
    candidate = value.strip()
    if not candidate:
        return default
    return candidate.upper()


@lru_cache
def get_settings() -> Settings:
    return Settings(
        udp_host=_read_str_env(_UDP_HOST_ENV, "127.0.0.1"),
        udp_port=_read_port(9999),
        db_path=_read_str_env(_DB_PATH_ENV, "./tmp/readings.db"),
        table_name=_read_str_env(_TABLE_NAME_ENV, "readings"),
        worker_delay=_read_seconds(_WORKER_DELAY_ENV, 0.5),
        send_interval=_read_seconds(_SEND_INTERVAL_ENV, 1.0),
        log_level=_read_log_level("INFO"),
    )
