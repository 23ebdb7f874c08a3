"""Module: sensor."""

import logging

from fastapi import APIRouter, Depends
from pydantic import BaseModel, Field

from nutriwatch.api.v1.routes.deps import get_sensor_store
from nutriwatch.core.sensor_store import SensorReadingStore

logger = logging.getLogger(__name__)

router = APIRouter()


class SensorReadingPayload(BaseModel):
    # Zero weight is allowed so the height sensor can be tested on its own.
    weight_kg: float | None = Field(default=None, ge=0, le=200)
    height_cm: float = Field(ge=50, le=200)
    source: str = "sensor_bridge"


# Endpoint: the weighing-station bridge pushes each stable reading here.
@router.post("/readings", summary="Receive a reading from the weighing station")
def push_reading(
    payload: SensorReadingPayload,
    store: SensorReadingStore = Depends(get_sensor_store),
):
    reading = store.put(payload.weight_kg, payload.height_cm, payload.source)
    logger.debug("Sensor reading received: weight=%s height=%s", reading.weight_kg, reading.height_cm)
    return {"received": True, **store.latest()}


# Endpoint: polled by the measurement form to prefill weight/height.
@router.get("/latest", summary="Latest weighing-station reading")
def latest_reading(store: SensorReadingStore = Depends(get_sensor_store)):
    latest = store.latest()
    if latest["data"] is not None and not latest["is_fresh"]:
        logger.info("Sensor reading is stale (%.1fs old)", latest["age_seconds"])
    return {**latest, "connected": latest["is_fresh"]}
