"""Module: sensor_store."""

from __future__ import annotations

import threading
import time
from dataclasses import dataclass
from typing import Callable


@dataclass(frozen=True)
class SensorReading:
    weight_kg: float | None
    height_cm: float
    source: str
    received_at: float


class SensorReadingStore:
    """
    Holds the most recent reading pushed by the weighing-station bridge.

    Readings older than ``ttl_seconds`` are still returned but flagged as not
    fresh, so the UI can show the station as disconnected. The clock is
    injectable for tests.
    """

    def __init__(self, ttl_seconds: float = 5.0, clock: Callable[[], float] = time.monotonic):
        self.ttl_seconds = ttl_seconds
        self._clock = clock
        self._lock = threading.Lock()
        self._reading: SensorReading | None = None

    def put(self, weight_kg: float | None, height_cm: float, source: str = "sensor") -> SensorReading:
        reading = SensorReading(
            weight_kg=weight_kg,
            height_cm=height_cm,
            source=source,
            received_at=self._clock(),
        )
        with self._lock:
            self._reading = reading
        return reading

    def latest(self) -> dict:
        with self._lock:
            reading = self._reading
        if reading is None:
            return {"data": None, "age_seconds": None, "is_fresh": False}

        age = self._clock() - reading.received_at
        return {
            "data": {
                "weight_kg": reading.weight_kg,
                "height_cm": reading.height_cm,
                "source": reading.source,
            },
            "age_seconds": round(age, 3),
            "is_fresh": age < self.ttl_seconds,
        }

    def clear(self) -> None:
        with self._lock:
            self._reading = None
