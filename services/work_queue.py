"""In-memory FIFO buffer between the receiving and persisting threads."""

from __future__ import annotations

import queue
from typing import Optional

from models.records import Reading


class ReadingQueue:
    """Unbounded thread-safe FIFO of readings."""

    def __init__(self) -> None:
        self._queue: queue.Queue[Reading] = queue.Queue()

    def put(self, reading: Reading) -> None:
        self._queue.put(reading)

    def get(self, timeout: Optional[float] = None) -> Reading:
        """Remove and return the oldest reading, raising ``queue.Empty`` on timeout."""
        return self._queue.get(timeout=timeout)

    def drain(self) -> list[Reading]:
        """Remove every reading currently queued, oldest first, without blocking."""
        batch: list[Reading] = []
        while True:
            try:
                batch.append(self._queue.get_nowait())
            except queue.Empty:
                return batch

    def qsize(self) -> int:
        return self._queue.qsize()
