from __future__ import annotations

import logging
from logging.config import dictConfig
from typing import Any, Iterable

from settings import get_settings

READING_CONTEXT_KEYS = (
    "sensor_id",
    "host",
    "port",
    "delay",
    "queue_size",
    "row_count",
    "reason",
)

_LINE_FORMAT = "%(asctime)s.%(msecs)03d %(levelname)-7s [%(threadName)s] %(name)s: %(message)s"

_configured = False


class ContextualFormatter(logging.Formatter):
    """Append known ``extra`` attributes to each message as ``key=value`` pairs."""

    def __init__(
        self,
        fmt: str | None = None,
        datefmt: str | None = None,
        style: str = "%",
        extra_keys: Iterable[str] | None = None,
    ) -> None:
        super().__init__(fmt=fmt, datefmt=datefmt, style=style)
        self.extra_keys = tuple(extra_keys or READING_CONTEXT_KEYS)

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        context = " ".join(
            f"{key}={getattr(record, key)}"
            for key in self.extra_keys
            if getattr(record, key, None) is not None
        )
        return f"{message} | {context}" if context else message


def _logging_config(level: str | int) -> dict[str, Any]:
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "readings": {
                "()": ContextualFormatter,
                "fmt": _LINE_FORMAT,
                "datefmt": "%H:%M:%S",
                "extra_keys": READING_CONTEXT_KEYS,
            }
        },
        "handlers": {
            "stderr": {
                "class": "logging.StreamHandler",
                "stream": "ext://sys.stderr",
                "formatter": "readings",
            }
        },
        "root": {"handlers": ["stderr"], "level": level},
    }


def configure_logging(level: str | int | None = None) -> None:
    """Install the stderr handler once; later calls only adjust the root level."""
    global _configured
    log_level = level if level is not None else get_settings().log_level
    if _configured:
        logging.getLogger().setLevel(log_level)
        return
    dictConfig(_logging_config(log_level))
    _configured = True
