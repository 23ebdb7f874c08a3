"""Module: bmi_records."""

from __future__ import annotations

import logging
from datetime import UTC, date, datetime
from typing import Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel
from sqlalchemy import or_, select
from sqlalchemy.orm import Session

from nutriwatch.api.v1.routes.deps import get_db, get_today, month_bounds, parse_uuid
from nutriwatch.core.exceptions import MeasurementValidationError, StudentNotFound
from nutriwatch.db.models.bmi_record import BmiRecord
from nutriwatch.db.models.student import Student
from nutriwatch.nutrition import (
    age_years_at,
    classify_measurement,
    is_plausible_bmi,
    latest_per_student,
)

logger = logging.getLogger(__name__)

router = APIRouter()

# Accepted ranges for a Kinder to Grade 6 student.
MIN_WEIGHT_KG = 5
MAX_WEIGHT_KG = 150
MIN_HEIGHT_CM = 50
MAX_HEIGHT_CM = 200


class BmiRecordCreatePayload(BaseModel):
    student_id: str
    weight_kg: float
    height_cm: float
    source: Literal["manual", "sensor"] = "manual"
    measured_at: datetime | None = None


def _validate_measurement(weight_kg: float, height_cm: float) -> None:
    if not MIN_WEIGHT_KG <= weight_kg <= MAX_WEIGHT_KG:
        raise MeasurementValidationError(
            f"Weight must be between {MIN_WEIGHT_KG} and {MAX_WEIGHT_KG} kg for students", field="weight_kg"
        )
    if not MIN_HEIGHT_CM <= height_cm <= MAX_HEIGHT_CM:
        raise MeasurementValidationError(
            f"Height must be between {MIN_HEIGHT_CM} and {MAX_HEIGHT_CM} cm for students", field="height_cm"
        )


def _row_dict(record: BmiRecord, student: Student, today: date) -> dict:
    return {
        "id": str(record.record_id),
        "student_id": str(record.student_id),
        "weight_kg": float(record.weight_kg),
        "height_cm": float(record.height_cm),
        "bmi": float(record.bmi),
        "bmi_status": record.bmi_status,
        "hfa_status": record.hfa_status,
        "measured_at": record.measured_at,
        "source": record.source,
        "first_name": student.first_name,
        "middle_name": student.middle_name,
        "last_name": student.last_name,
        "lrn": student.lrn,
        "age": age_years_at(student.birthdate, student.age, today),
        "gender": student.gender,
        "grade_level": student.grade_level,
        "section": student.section,
    }


# Endpoint: list measurements, by default only the latest one per student.
@router.get("", summary="List BMI records")
def list_bmi_records(
    student_id: str | None = None,
    month: str | None = Query(default=None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    grade: int | None = Query(default=None, ge=0, le=6),
    gender: str | None = None,
    search: str | None = None,
    bmi_status: str | None = None,
    hfa_status: str | None = None,
    include_history: bool = False,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    stmt = select(BmiRecord, Student).join(Student, Student.student_id == BmiRecord.student_id)

    if student_id:
        stmt = stmt.where(BmiRecord.student_id == parse_uuid(student_id, "student_id"))
    if month:
        start, end = month_bounds(month)
        stmt = stmt.where(BmiRecord.measured_at >= start, BmiRecord.measured_at < end)
    if grade is not None:
        stmt = stmt.where(Student.grade_level == grade)
    if gender:
        stmt = stmt.where(Student.gender == gender)
    if search:
        pattern = f"%{search.strip().lower()}%"
        stmt = stmt.where(
            or_(
                Student.first_name.ilike(pattern),
                Student.last_name.ilike(pattern),
                Student.lrn.ilike(pattern),
            )
        )
    stmt = stmt.order_by(BmiRecord.measured_at.desc())

    rows = db.execute(stmt).all()
    students = {student.student_id: student for _, student in rows}
    records = [record for record, _ in rows]

    if not student_id and not include_history:
        latest = latest_per_student(records)
        records = sorted(latest.values(), key=lambda r: r.measured_at, reverse=True)

    # Status filters apply to the resolved records, so "Wasted" means
    # "currently Wasted", not "was Wasted at some point".
    if bmi_status:
        records = [r for r in records if r.bmi_status == bmi_status]
    if hfa_status:
        records = [r for r in records if r.hfa_status == hfa_status]

    return [_row_dict(r, students[r.student_id], today) for r in records]


# Endpoint: record a weigh-in and classify it at the measurement's own date.
@router.post("", summary="Create BMI record", status_code=201)
def create_bmi_record(
    payload: BmiRecordCreatePayload,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    _validate_measurement(payload.weight_kg, payload.height_cm)

    sid = parse_uuid(payload.student_id, "student_id")
    student = db.execute(select(Student).where(Student.student_id == sid)).scalar_one_or_none()
    if not student:
        raise StudentNotFound()

    measured_at = payload.measured_at or datetime.utcnow()
    if measured_at.tzinfo is not None:
        measured_at = measured_at.astimezone(UTC).replace(tzinfo=None)
    age_years = age_years_at(student.birthdate, student.age, measured_at.date())

    status = classify_measurement(payload.weight_kg, payload.height_cm, age_years)
    if not is_plausible_bmi(status.bmi):
        raise MeasurementValidationError(
            f"Invalid BMI calculation ({status.bmi:.2f}). Please check weight and height values."
        )

    record = BmiRecord(
        student_id=sid,
        weight_kg=round(payload.weight_kg, 2),
        height_cm=round(payload.height_cm, 2),
        bmi=status.bmi,
        bmi_status=status.bmi_status.value,
        hfa_status=status.hfa_status.value,
        measured_at=measured_at,
        source=payload.source,
    )
    db.add(record)
    db.commit()
    db.refresh(record)

    logger.info(
        "BMI record %s stored for student %s: bmi=%.2f status=%s hfa=%s source=%s",
        record.record_id, sid, status.bmi, status.bmi_status.value, status.hfa_status.value, payload.source,
    )
    return _row_dict(record, student, today)
