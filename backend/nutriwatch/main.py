"""Module: main."""

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from nutriwatch.api.v1.api import api_router
from nutriwatch.core.config import settings
from nutriwatch.core.logging import logger, setup_logging
from nutriwatch.core.sensor_store import SensorReadingStore
from nutriwatch.db.init_db import init_db

setup_logging()

app = FastAPI(title="NutriWatch API", version="0.1.0")

app.include_router(api_router, prefix="/api/v1")

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Latest scale reading shared by the sensor bridge and the weigh-in screen.
app.state.sensor_store = SensorReadingStore(ttl_seconds=settings.sensor_ttl_seconds)

init_db()

logger.info("%s started (sensor ttl %.1fs)", settings.app_name, settings.sensor_ttl_seconds)
