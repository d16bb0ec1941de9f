from __future__ import annotations
import logging
import re
import sqlite3
from functools import lru_cache
from pathlib import Path
from threading import Lock
from typing import Iterable, Optional

from models.records import Reading
from settings import get_settings

logger = logging.getLogger(__name__)

_TABLE_NAME = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")


class ReadingsTable:
    """SQLite-backed table of readings shared by every thread of the receiver."""

    def __init__(self, path: Path | str, name: str = "readings") -> None:
        if not _TABLE_NAME.match(name):
            raise ValueError(f"Invalid table name {name!r}.")
        self.name = name
        # Quoted so SQL keywords such as "order" still work as names.
        self._sql_name = f'"{name}"'
        self.path = Path(path) if str(path) != ":memory:" else None
        if self.path is not None:
            self.path.parent.mkdir(parents=True, exist_ok=True)
        self._lock = Lock()
        self._conn = sqlite3.connect(
            str(self.path) if self.path is not None else ":memory:",
            check_same_thread=False,
        )
        self._create_table()

    def insert_one(self, reading: Reading) -> None:
        with self._lock:
            with self._conn:
                self._conn.execute(
                    f"INSERT INTO {self._sql_name} VALUES (?, ?, ?, ?)", reading.as_row()
                )

    def insert_many(self, readings: Iterable[Reading]) -> int:
        rows = [reading.as_row() for reading in readings]
        with self._lock:
            with self._conn:
                self._conn.executemany(
                    f"INSERT INTO {self._sql_name} VALUES (?, ?, ?, ?)", rows
                )
        return len(rows)

    def count(self) -> int:
        with self._lock:
            (total,) = self._conn.execute(
                f"SELECT COUNT(*) FROM {self._sql_name}"
            ).fetchone()
        return int(total)

    def fetch_latest(self, limit: int = 20) -> list[Reading]:
        """Return up to ``limit`` readings, newest timestamp first."""

        with self._lock:
            rows = self._conn.execute(
                f"SELECT sensor_id, temperature, humidity, timestamp FROM {self._sql_name} "
                "ORDER BY timestamp DESC, rowid DESC LIMIT ?",
                (limit,),
            ).fetchall()
        return [Reading(*row) for row in rows]

    def fetch_all(self) -> list[Reading]:
        """Return every stored reading in insertion order, for inspection and tests."""

        with self._lock:
            rows = self._conn.execute(
                f"SELECT sensor_id, temperature, humidity, timestamp FROM {self._sql_name} "
                "ORDER BY rowid"
            ).fetchall()
        return [Reading(*row) for row in rows]

    def close(self) -> None:
        with self._lock:
            self._conn.close()

    def _create_table(self) -> None:
        with self._lock:
            with self._conn:
                self._conn.execute(
                    f"CREATE TABLE IF NOT EXISTS {self._sql_name} ("
                    "sensor_id INTEGER, temperature REAL, humidity REAL, timestamp REAL)"
                )
        logger.debug("Storage table ready: %s", self.name)


@lru_cache
def build_default_table(
    name: Optional[str] = None,
    path: Optional[str] = None,
) -> ReadingsTable:
    settings = get_settings()
    table_name = settings.table_name if name is None else name
    table_path = settings.db_path if path is None else path
    return ReadingsTable(path=table_path, name=table_name)
