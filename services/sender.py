"""Synthetic sensor that fires readings at the receiver over UDP."""

from __future__ import annotations

import logging
import random
import socket
import time
from typing import Callable, Optional

from models.records import Reading
from services.codec import encode_reading

logger = logging.getLogger(__name__)

SENSOR_ID_RANGE = (1, 10)
TEMPERATURE_RANGE = (15.0, 35.0)
HUMIDITY_RANGE = (20.0, 80.0)


def build_reading(
    rng: Optional[random.Random] = None,
    clock: Callable[[], float] = time.time,
) -> Reading:
    source = rng or random
    return Reading(
        sensor_id=source.randint(*SENSOR_ID_RANGE),
        temperature=round(source.uniform(*TEMPERATURE_RANGE), 2),
        humidity=round(source.uniform(*HUMIDITY_RANGE), 2),
        timestamp=clock(),
    )


class SensorSender:
    """Fire-and-forget datagram sender; no acknowledgement or retry."""

    def __init__(
        self,
        host: str,
        port: int,
        interval: float = 1.0,
        rng: Optional[random.Random] = None,
    ) -> None:
        self.address = (host, port)
        self.interval = interval
        self.sent = 0
        self._rng = rng
        self._sock: Optional[socket.socket] = socket.socket(
            socket.AF_INET, socket.SOCK_DGRAM
        )

    def send(self, reading: Reading) -> int:
        if self._sock is None:
            raise RuntimeError("Sender socket is closed.")
        size = self._sock.sendto(encode_reading(reading), self.address)
        self.sent += 1
        return size

    def run(self, count: Optional[int] = None) -> int:
        """Send readings until ``count`` is reached or the process is interrupted."""
        host, port = self.address
        logger.info("Sending readings", extra={"host": host, "port": port})
        try:
            while count is None or self.sent < count:
                reading = build_reading(self._rng)
                self.send(reading)
                logger.debug("Sent reading", extra={"sensor_id": reading.sensor_id})
                if count is not None and self.sent >= count:
                    break
                time.sleep(self.interval)
        except KeyboardInterrupt:
            logger.info("Sender interrupted")
        finally:
            self.close()
        return self.sent

    def close(self) -> None:
        if self._sock is None:
            return
        self._sock.close()
        self._sock = None
        logger.info("Sender socket closed after %d readings", self.sent)
