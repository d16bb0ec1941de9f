"""Unit tests for the SQLite readings table."""

from __future__ import annotations

import sqlite3
import threading

import pytest

from datastore.readings_table import ReadingsTable
from models.records import Reading


def _reading(sensor_id: int = 1, timestamp: float = 1_700_000_000.0) -> Reading:
    return Reading(sensor_id=sensor_id, temperature=21.5, humidity=40.25, timestamp=timestamp)


def test_table_is_created_when_absent(tmp_path) -> None:
    path = tmp_path / "nested" / "readings.db"

    table = ReadingsTable(path=path, name="readings")

    assert path.exists()
    assert table.count() == 0
    conn = sqlite3.connect(path)
    columns = [row[1] for row in conn.execute("PRAGMA table_info(readings)")]
    conn.close()
    assert columns == ["sensor_id", "temperature", "humidity", "timestamp"]


def test_insert_one_and_insert_many(tmp_path) -> None:
    table = ReadingsTable(path=tmp_path / "readings.db")

    table.insert_one(_reading(1, 1.0))
    written = table.insert_many([_reading(2, 2.0), _reading(3, 3.0)])

    assert written == 2
    assert table.count() == 3
    assert [r.sensor_id for r in table.fetch_all()] == [1, 2, 3]


def test_insert_many_with_no_rows_is_noop() -> None:
    table = ReadingsTable(path=":memory:")

    assert table.insert_many([]) == 0
    assert table.count() == 0


def test_fetch_latest_orders_newest_first() -> None:
    table = ReadingsTable(path=":memory:")
    table.insert_many([_reading(1, 10.0), _reading(2, 30.0), _reading(3, 20.0)])

    latest = table.fetch_latest(2)

    assert [r.sensor_id for r in latest] == [2, 3]
    assert latest[0] == _reading(2, 30.0)


def test_rows_survive_reopening(tmp_path) -> None:
    path = tmp_path / "readings.db"
    table = ReadingsTable(path=path)
    table.insert_one(_reading())
    table.close()

    reopened = ReadingsTable(path=path)

    assert reopened.count() == 1
    assert reopened.fetch_all() == [_reading()]


@pytest.mark.parametrize("name", ["readings; DROP TABLE x", "lectures_\u00e9t\u00e9", "1readings", ""])
def test_invalid_table_name_is_rejected(tmp_path, name: str) -> None:
    with pytest.raises(ValueError):
        ReadingsTable(path=tmp_path / "readings.db", name=name)


def test_keyword_table_name_is_usable() -> None:
    table = ReadingsTable(path=":memory:", name="order")

    table.insert_one(_reading())

    assert table.count() == 1
    assert table.fetch_latest(1) == [_reading()]


def test_concurrent_inserts_from_threads() -> None:
    table = ReadingsTable(path=":memory:")

    def write(offset: int) -> None:
        for index in range(25):
            table.insert_one(_reading(offset, float(index)))

    threads = [threading.Thread(target=write, args=(n,)) for n in range(4)]
    for thread in threads:
        thread.start()
    for thread in threads:
        thread.join()

    assert table.count() == 100
