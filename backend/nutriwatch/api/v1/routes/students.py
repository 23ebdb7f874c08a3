"""Module: students."""

from __future__ import annotations

import re
from datetime import date
from typing import Literal

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field, field_validator
from sqlalchemy import desc, or_, select
from sqlalchemy.orm import Session

from nutriwatch.api.v1.routes.deps import get_db, get_today, parse_uuid
from nutriwatch.core.exceptions import NutriWatchException, StudentNotFound
from nutriwatch.db.models.bmi_record import BmiRecord
from nutriwatch.db.models.student import Student
from nutriwatch.nutrition import age_years_at, classify_eligibility, compute_age, status_from_record
from nutriwatch.nutrition.roster import grade_label

router = APIRouter()

LRN_PATTERN = re.compile(r"^\d{12}$")


class StudentPayload(BaseModel):
    lrn: str | None = None
    first_name: str = Field(min_length=1)
    middle_name: str | None = None
    last_name: str = Field(min_length=1)
    gender: Literal["Male", "Female"] | None = None
    birthdate: date | None = None
    age: int | None = Field(default=None, ge=0, le=30)
    grade_level: int | None = Field(default=None, ge=0, le=6)
    section: str | None = None
    parent_guardian: str | None = None
    contact_number: str | None = None

    @field_validator("lrn")
    @classmethod
    def _check_lrn(cls, value: str | None) -> str | None:
        if value is None or not value.strip():
            return None
        value = value.strip()
        if not LRN_PATTERN.match(value):
            raise ValueError("LRN must be exactly 12 digits")
        return value


# -------------------------
# Helpers
# -------------------------
def _normalize_optional(value: str | None) -> str | None:
    if value is None:
        return None
    cleaned = value.strip()
    return cleaned if cleaned else None


def _get_student(db: Session, student_id: str) -> Student:
    sid = parse_uuid(student_id, "student_id")
    student = db.execute(select(Student).where(Student.student_id == sid)).scalar_one_or_none()
    if not student:
        raise StudentNotFound()
    return student


def _ensure_unique_lrn(db: Session, lrn: str | None, exclude_id=None) -> None:
    if not lrn:
        return
    stmt = select(Student.student_id).where(Student.lrn == lrn)
    if exclude_id is not None:
        stmt = stmt.where(Student.student_id != exclude_id)
    if db.execute(stmt).first():
        raise NutriWatchException(status_code=409, detail="A student with this LRN already exists")


def _apply_payload(student: Student, payload: StudentPayload) -> None:
    student.lrn = payload.lrn
    student.first_name = payload.first_name.strip()
    student.middle_name = _normalize_optional(payload.middle_name)
    student.last_name = payload.last_name.strip()
    student.gender = payload.gender
    student.birthdate = payload.birthdate
    student.age = payload.age
    student.grade_level = payload.grade_level
    student.section = _normalize_optional(payload.section)
    student.parent_guardian = _normalize_optional(payload.parent_guardian)
    student.contact_number = _normalize_optional(payload.contact_number)


def _student_dict(student: Student, today: date) -> dict:
    return {
        "id": str(student.student_id),
        "lrn": student.lrn,
        "first_name": student.first_name,
        "middle_name": student.middle_name,
        "last_name": student.last_name,
        "gender": student.gender,
        "birthdate": student.birthdate,
        "age": age_years_at(student.birthdate, student.age, today),
        "grade_level": student.grade_level,
        "grade": grade_label(student.grade_level),
        "section": student.section,
        "parent_guardian": student.parent_guardian,
        "contact_number": student.contact_number,
    }


def _record_dict(record: BmiRecord) -> dict:
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
    }


# -------------------------
# Endpoints
# -------------------------

@router.get("", summary="List students")
def list_students(
    grade: int | None = Query(default=None, ge=0, le=6),
    gender: str | None = None,
    search: str | None = None,
    limit: int = Query(default=500, ge=1, le=2000),
    offset: int = 0,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    stmt = select(Student)
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
    stmt = stmt.order_by(Student.last_name, Student.first_name).offset(offset).limit(limit)

    students = db.execute(stmt).scalars().all()
    return [_student_dict(s, today) for s in students]


@router.post("", summary="Register a student", status_code=201)
def create_student(
    payload: StudentPayload,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    _ensure_unique_lrn(db, payload.lrn)

    student = Student()
    _apply_payload(student, payload)
    db.add(student)
    db.commit()
    db.refresh(student)

    return _student_dict(student, today)


@router.get("/{student_id}", summary="Get student detail with current nutritional status")
def get_student(
    student_id: str,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    student = _get_student(db, student_id)

    latest = db.execute(
        select(BmiRecord)
        .where(BmiRecord.student_id == student.student_id)
        .order_by(desc(BmiRecord.measured_at))
        .limit(1)
    ).scalars().first()

    status = status_from_record(latest)
    out = _student_dict(student, today)
    if student.birthdate is not None:
        out["age_months"] = compute_age(student.birthdate, today).total_months
    out["latest_record"] = _record_dict(latest) if latest else None
    out["tier"] = classify_eligibility(status).value
    return out


@router.put("/{student_id}", summary="Update student details")
def update_student(
    student_id: str,
    payload: StudentPayload,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    student = _get_student(db, student_id)
    _ensure_unique_lrn(db, payload.lrn, exclude_id=student.student_id)

    _apply_payload(student, payload)
    db.commit()
    db.refresh(student)

    return _student_dict(student, today)


@router.get("/{student_id}/bmi-records", summary="Full measurement history for a student")
def list_student_records(
    student_id: str,
    limit: int = Query(default=200, ge=1, le=1000),
    db: Session = Depends(get_db),
):
    student = _get_student(db, student_id)

    records = db.execute(
        select(BmiRecord)
        .where(BmiRecord.student_id == student.student_id)
        .order_by(desc(BmiRecord.measured_at))
        .limit(limit)
    ).scalars().all()
    return [_record_dict(r) for r in records]
