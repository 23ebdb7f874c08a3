import os

# Settings are read at import time; point them at SQLite before anything loads.
os.environ.setdefault("DATABASE_URL", "sqlite://")

from datetime import date

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

import nutriwatch.db.models  # noqa: F401
from nutriwatch.api.v1.routes.deps import get_db, get_today
from nutriwatch.core.sensor_store import SensorReadingStore
from nutriwatch.db.base import Base
from nutriwatch.main import app

TODAY = date(2024, 6, 15)


class FakeClock:
    def __init__(self, start: float = 1000.0):
        self.now = start

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


@pytest.fixture
def engine():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(engine):
    session = sessionmaker(bind=engine, autocommit=False, autoflush=False)()
    yield session
    session.close()


@pytest.fixture
def clock():
    return FakeClock()


@pytest.fixture
def client(engine, clock):
    TestingSessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)

    def override_get_db():
        db = TestingSessionLocal()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    app.dependency_overrides[get_today] = lambda: TODAY
    app.state.sensor_store = SensorReadingStore(ttl_seconds=5.0, clock=clock)

    with TestClient(app) as c:
        yield c

    app.dependency_overrides.clear()


@pytest.fixture
def make_student(client):
    def _make(**overrides) -> dict:
        payload = {
            "first_name": "Juan",
            "middle_name": "Perez",
            "last_name": "Dela Cruz",
            "gender": "Male",
            "birthdate": "2018-01-10",
            "grade_level": 1,
            "section": "Sampaguita",
        }
        payload.update(overrides)
        resp = client.post("/api/v1/students", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _make


@pytest.fixture
def add_record(client):
    def _add(student_id: str, weight_kg: float, height_cm: float, measured_at: str = "2024-06-01T08:00:00", **extra) -> dict:
        payload = {
            "student_id": student_id,
            "weight_kg": weight_kg,
            "height_cm": height_cm,
            "measured_at": measured_at,
        }
        payload.update(extra)
        resp = client.post("/api/v1/bmi-records", json=payload)
        assert resp.status_code == 201, resp.text
        return resp.json()

    return _add


@pytest.fixture
def school(make_student, add_record):
    """
    Three weighed pupils:
    - severe: Severely Wasted and Severely Stunted (Primary)
    - stunted: Normal BMI but Stunted (Secondary)
    - healthy: Normal on both (not eligible)
    """
    severe = make_student(first_name="Juan", last_name="Dela Cruz", birthdate="2018-01-10", grade_level=1)
    stunted = make_student(
        first_name="Maria", middle_name="Lopez", last_name="Santos", gender="Female",
        birthdate="2017-01-01", grade_level=2,
    )
    healthy = make_student(
        first_name="Pedro", middle_name=None, last_name="Reyes", birthdate="2016-03-01", grade_level=3,
    )

    add_record(severe["id"], 14, 95)
    add_record(stunted["id"], 22.05, 105)
    add_record(healthy["id"], 33.8, 130)

    return {"severe": severe, "stunted": stunted, "healthy": healthy}
