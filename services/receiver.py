"""UDP listener that decodes datagrams and hands readings to the work queue."""

from __future__ import annotations

import logging
import socketserver
import sys
from typing import Any

from services.codec import decode_reading
from services.work_queue import ReadingQueue

logger = logging.getLogger(__name__)


class ReadingRequestHandler(socketserver.BaseRequestHandler):
    server: "ReadingServer"

    def handle(self) -> None:
        data, _socket = self.request
        reading = decode_reading(data)
        self.server.work_queue.put(reading)
        logger.debug(
            "Queued reading",
            extra={
                "sensor_id": reading.sensor_id,
                "queue_size": self.server.work_queue.qsize(),
            },
        )


class ReadingServer(socketserver.ThreadingUDPServer):
    """One bound UDP socket; each datagram is handled on its own thread."""

    daemon_threads = True
    allow_reuse_address = True

    def __init__(self, address: tuple[str, int], work_queue: ReadingQueue) -> None:
        self.work_queue = work_queue
        super().__init__(address, ReadingRequestHandler)

    @property
    def port(self) -> int:
        return self.server_address[1]

    def handle_error(self, request: Any, client_address: Any) -> None:
        host, port = client_address[:2]
        logger.error(
            "Dropping datagram that could not be handled",
            exc_info=sys.exc_info(),
            extra={"host": host, "port": port},
        )
