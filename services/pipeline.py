"""Wiring of the receiving side: UDP server, work queue, worker and exit hook."""

from __future__ import annotations

import logging
from typing import Optional

from datastore.readings_table import ReadingsTable
from services.receiver import ReadingServer
from services.shutdown import ShutdownFlusher
from services.work_queue import ReadingQueue
from services.worker import PersistenceWorker
from settings import Settings, get_settings

logger = logging.getLogger(__name__)


class ReceiverPipeline:
    """Owns every component of a receiver process."""

    def __init__(
        self,
        table: ReadingsTable,
        host: str,
        port: int,
        delay: float = 0.5,
    ) -> None:
        self.table = table
        self.work_queue = ReadingQueue()
        self.worker = PersistenceWorker(self.work_queue, table, delay=delay)
        self.flusher = ShutdownFlusher(self.work_queue, table, worker=self.worker)
        self.server = ReadingServer((host, port), self.work_queue)
        self._serving = False

    def start(self, register_hook: bool = True) -> None:
        self.worker.start()
        if register_hook:
            self.flusher.register()

    def serve_forever(self, poll_interval: float = 0.5) -> None:
        """Block the calling thread on the listen loop until interrupted."""
        host, port = self.server.server_address[:2]
        logger.info("Listening for readings", extra={"host": host, "port": port})
        self._serving = True
        try:
            self.server.serve_forever(poll_interval=poll_interval)
        except KeyboardInterrupt:
            logger.info(
                "Receiver interrupted",
                extra={"queue_size": self.work_queue.qsize()},
            )
        finally:
            self._serving = False
            self.server.server_close()

    def shutdown(self) -> int:
        """Stop listening and flush whatever is still queued."""
        if self._serving:
            self.server.shutdown()
        self.server.server_close()
        return self.flusher.flush()


def build_pipeline(
    settings: Optional[Settings] = None,
    host: Optional[str] = None,
    port: Optional[int] = None,
    delay: Optional[float] = None,
) -> ReceiverPipeline:
    """Factory that wires the pipeline from environment settings."""
    config = settings or get_settings()
    table = ReadingsTable(path=config.db_path, name=config.table_name)
    return ReceiverPipeline(
        table=table,
        host=config.udp_host if host is None else host,
        port=config.udp_port if port is None else port,
        delay=config.worker_delay if delay is None else delay,
    )
