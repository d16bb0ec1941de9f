"""Exit hook that persists readings still waiting in the work queue."""

from __future__ import annotations

import atexit
import logging
import sqlite3
from threading import Lock
from typing import Optional

from datastore.readings_table import ReadingsTable
from services.work_queue import ReadingQueue
from services.worker import PersistenceWorker

logger = logging.getLogger(__name__)

_WORKER_STOP_TIMEOUT = 5.0


class ShutdownFlusher:
    """Drains the queue into storage as one batch when the process exits normally."""

    def __init__(
        self,
        work_queue: ReadingQueue,
        table: ReadingsTable,
        worker: Optional[PersistenceWorker] = None,
        stop_timeout: float = _WORKER_STOP_TIMEOUT,
    ) -> None:
        self.work_queue = work_queue
        self.table = table
        self.worker = worker
        self.stop_timeout = stop_timeout
        self._flushed = False
        self._lock = Lock()

    def register(self) -> None:
        atexit.register(self.flush)

    def flush(self) -> int:
        """Write remaining readings in one insert and return how many were written.

        Runs at most once; later calls return 0.
        """
        with self._lock:
            if self._flushed:
                return 0
            self._flushed = True

        if self.worker is not None and not self.worker.stop(timeout=self.stop_timeout):
            logger.warning(
                "Persistence worker still busy after %.1fs; draining anyway",
                self.stop_timeout,
                extra={"queue_size": self.work_queue.qsize()},
            )

        batch = self.work_queue.drain()
        if not batch:
            logger.info("No queued readings to flush on shutdown")
            return 0

        try:
            written = self.table.insert_many(batch)
        except (sqlite3.Error, OverflowError) as exc:
            logger.exception(
                "Failed to flush queued readings on shutdown",
                extra={"queue_size": len(batch), "reason": str(exc)},
            )
            return 0

        logger.info(
            "Flushed %d queued readings on shutdown",
            written,
            extra={"row_count": self.table.count()},
        )
        return written
