"""Background persistence of queued readings, one row at a time."""

from __future__ import annotations

import logging
import queue
import sqlite3
import threading
from typing import Optional

from datastore.readings_table import ReadingsTable
from models.records import Reading
from services.work_queue import ReadingQueue

logger = logging.getLogger(__name__)

_POLL_SECONDS = 0.2


class PersistenceWorker:
    """Daemon thread that moves readings from the queue into storage.

    Each reading is held for ``delay`` seconds before its insert to pace writes.
    A failed insert is logged and dropped; the loop carries on with the next
    reading.
    """

    def __init__(
        self,
        work_queue: ReadingQueue,
        table: ReadingsTable,
        delay: float = 0.5,
    ) -> None:
        self.work_queue = work_queue
        self.table = table
        self.delay = delay
        self.processed = 0
        self.failed = 0
        self._stop = threading.Event()
        self._thread: Optional[threading.Thread] = None

    @property
    def running(self) -> bool:
        return self._thread is not None and self._thread.is_alive()

    def start(self) -> None:
        if self.running:
            return
        self._stop.clear()
        self._thread = threading.Thread(
            target=self._run, name="persistence-worker", daemon=True
        )
        self._thread.start()
        logger.info("Persistence worker started", extra={"delay": self.delay})

    def stop(self, timeout: Optional[float] = None) -> bool:
        """Signal the loop to exit and wait for the reading in hand to be written.

        Returns False when the thread is still alive after ``timeout``.
        """
        self._stop.set()
        thread = self._thread
        if thread is None:
            return True
        if thread is not threading.current_thread():
            thread.join(timeout)
        if thread.is_alive():
            return False
        self._thread = None
        return True

    def _run(self) -> None:
        while not self._stop.is_set():
            try:
                reading = self.work_queue.get(timeout=_POLL_SECONDS)
            except queue.Empty:
                continue
            # Interrupted by stop(), the reading is still written below.
            self._stop.wait(self.delay)
            self._persist(reading)

    def _persist(self, reading: Reading) -> None:
        try:
            self.table.insert_one(reading)
        except (sqlite3.Error, OverflowError) as exc:
            self.failed += 1
            logger.exception(
                "Failed to store reading",
                extra={"sensor_id": reading.sensor_id, "reason": str(exc)},
            )
            return
        self.processed += 1
        logger.debug("Stored reading", extra={"sensor_id": reading.sensor_id})
