"""Module: deps."""

import uuid
from datetime import date, datetime
from typing import Generator

from fastapi import Request
from sqlalchemy.orm import Session

from nutriwatch.core.exceptions import InvalidIdentifier
from nutriwatch.core.sensor_store import SensorReadingStore
from nutriwatch.db.session import SessionLocal


# Dependency provider: one DB session per request lifecycle.
def get_db() -> Generator[Session, None, None]:
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()


# Reference date for "today"-relative rules (program activity, current age).
def get_today() -> date:
    return date.today()


# The store lives on app.state so tests can swap in one with a fake clock.
def get_sensor_store(request: Request) -> SensorReadingStore:
    return request.app.state.sensor_store


# Validate and coerce UUID inputs from query/path payloads.
def parse_uuid(value: str, field_name: str = "id") -> uuid.UUID:
    try:
        return uuid.UUID(str(value))
    except ValueError:
        raise InvalidIdentifier(field_name)


# [start, end) datetimes for a validated YYYY-MM query value.
def month_bounds(month: str) -> tuple[datetime, datetime]:
    year, mon = (int(part) for part in month.split("-"))
    start = datetime(year, mon, 1)
    end = datetime(year + 1, 1, 1) if mon == 12 else datetime(year, mon + 1, 1)
    return start, end
