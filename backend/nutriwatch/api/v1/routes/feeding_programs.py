"""Module: feeding_programs."""

from __future__ import annotations

import logging
from datetime import date

from fastapi import APIRouter, Depends, Query
from pydantic import BaseModel, Field
from sqlalchemy import case, delete, func, select
from sqlalchemy.orm import Session

from nutriwatch.api.v1.routes.deps import get_db, get_today, parse_uuid
from nutriwatch.core.exceptions import (
    BeneficiaryNotFound,
    DuplicateEnrollment,
    NutriWatchException,
    ProgramNotFound,
    StudentNotFound,
)
from nutriwatch.db.models.attendance import Attendance
from nutriwatch.db.models.beneficiary import Beneficiary
from nutriwatch.db.models.bmi_record import BmiRecord
from nutriwatch.db.models.feeding_program import FeedingProgram
from nutriwatch.db.models.student import Student
from nutriwatch.db.snapshots import load_beneficiaries, load_programs, load_records, load_students
from nutriwatch.nutrition import (
    ExclusionScope,
    ProgramStatus,
    baselines_per_student,
    classify_eligibility,
    compute_growth_trend,
    eligible_students,
    is_program_truly_active,
    latest_at_or_before,
    latest_per_student,
    status_from_record,
)
from nutriwatch.nutrition.roster import full_name, grade_label

logger = logging.getLogger(__name__)

router = APIRouter()


class ProgramCreatePayload(BaseModel):
    name: str = Field(min_length=1)
    description: str | None = None
    start_date: date
    end_date: date | None = None


class BeneficiaryCreatePayload(BaseModel):
    student_id: str
    enrollment_date: date | None = None


class AttendancePayload(BaseModel):
    attendance_date: date | None = None
    present: bool = True
    notes: str | None = None


# -------------------------
# Helpers
# -------------------------
def _get_program(db: Session, program_id: str) -> FeedingProgram:
    pid = parse_uuid(program_id, "program_id")
    program = db.execute(select(FeedingProgram).where(FeedingProgram.program_id == pid)).scalar_one_or_none()
    if not program:
        raise ProgramNotFound()
    return program


def _program_dict(program: FeedingProgram, today: date, total_beneficiaries: int = 0) -> dict:
    active = is_program_truly_active(program, today)
    return {
        "id": str(program.program_id),
        "name": program.name,
        "description": program.description,
        "start_date": program.start_date,
        "end_date": program.end_date,
        "status": program.status,
        # Derived from the dates; `status` alone may be stale.
        "is_active": active,
        "effective_status": ProgramStatus.ACTIVE.value if active else ProgramStatus.ENDED.value,
        "total_beneficiaries": total_beneficiaries,
    }


def _float_or_none(value) -> float | None:
    return float(value) if value is not None else None


# Baseline is the latest record at or before the enrollment date, if any.
def _enroll(
    db: Session,
    program: FeedingProgram,
    student_id,
    enrollment_date: date,
    baseline_record: BmiRecord | None,
) -> Beneficiary:
    baseline = status_from_record(baseline_record)
    beneficiary = Beneficiary(
        program_id=program.program_id,
        student_id=student_id,
        enrollment_date=enrollment_date,
        bmi_status_at_enrollment=baseline.bmi_status.value if baseline and baseline.bmi_status else None,
        hfa_status_at_enrollment=baseline.hfa_status.value if baseline and baseline.hfa_status else None,
    )
    db.add(beneficiary)
    return beneficiary


def _attendance_stats(db: Session, beneficiary_ids: list) -> dict:
    if not beneficiary_ids:
        return {}
    rows = db.execute(
        select(
            Attendance.beneficiary_id,
            func.count(Attendance.attendance_id),
            func.sum(case((Attendance.present.is_(True), 1), else_=0)),
        )
        .where(Attendance.beneficiary_id.in_(beneficiary_ids))
        .group_by(Attendance.beneficiary_id)
    ).all()
    return {bid: (int(total or 0), int(present or 0)) for bid, total, present in rows}


def beneficiary_progress(db: Session, program: FeedingProgram) -> list[dict]:
    """
    Roster of a program with attendance, baseline and current BMI, and the
    growth trend between them. A missing baseline or current record gives
    N/A rather than borrowing a neighbouring record.
    """
    beneficiaries = db.execute(
        select(Beneficiary, Student)
        .join(Student, Student.student_id == Beneficiary.student_id)
        .where(Beneficiary.program_id == program.program_id)
        .order_by(Beneficiary.enrollment_date.desc())
    ).all()

    student_ids = [b.student_id for b, _ in beneficiaries]
    records = load_records(db, student_ids)
    current = latest_per_student(records)
    baselines = baselines_per_student(records, {b.student_id: b.enrollment_date for b, _ in beneficiaries})
    attendance = _attendance_stats(db, [b.beneficiary_id for b, _ in beneficiaries])

    out = []
    for beneficiary, student in beneficiaries:
        latest = current.get(beneficiary.student_id)
        baseline = baselines.get(beneficiary.student_id)
        total, present = attendance.get(beneficiary.beneficiary_id, (0, 0))
        rate = round(present / total * 100, 2) if total else 0

        out.append(
            {
                "beneficiary_id": str(beneficiary.beneficiary_id),
                "student_id": str(student.student_id),
                "name": full_name(student),
                "lrn": student.lrn,
                "gender": student.gender,
                "grade": grade_label(student.grade_level),
                "enrollment_date": beneficiary.enrollment_date,
                "attendance_rate": rate,
                "total_attendance": total,
                "days_present": present,
                "bmi_at_enrollment": _float_or_none(baseline.bmi) if baseline else None,
                "bmi_status_at_enrollment": baseline.bmi_status if baseline else None,
                "bmi": _float_or_none(latest.bmi) if latest else None,
                "bmi_status": latest.bmi_status if latest else None,
                "hfa_status": latest.hfa_status if latest else None,
                "tier": classify_eligibility(status_from_record(latest)).value,
                "growth_trend": compute_growth_trend(
                    baseline.bmi_status if baseline else None,
                    latest.bmi_status if latest else None,
                ).value,
            }
        )
    return out


# -------------------------
# Endpoints
# -------------------------

@router.get("", summary="List feeding programs with beneficiary counts")
def list_programs(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    counts = dict(
        db.execute(
            select(Beneficiary.program_id, func.count(Beneficiary.beneficiary_id)).group_by(Beneficiary.program_id)
        ).all()
    )
    programs = db.execute(select(FeedingProgram).order_by(FeedingProgram.created_at.desc())).scalars().all()
    return [_program_dict(p, today, counts.get(p.program_id, 0)) for p in programs]


@router.post("", summary="Create a feeding program and auto-enroll eligible students", status_code=201)
def create_program(
    payload: ProgramCreatePayload,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    if payload.end_date is not None and payload.end_date < payload.start_date:
        raise NutriWatchException(status_code=400, detail="End date must not be before start date")

    program = FeedingProgram(
        name=payload.name.strip(),
        description=(payload.description or "").strip() or None,
        start_date=payload.start_date,
        end_date=payload.end_date,
        status=ProgramStatus.ACTIVE.value,
    )
    db.add(program)
    db.flush()

    records = load_records(db)
    candidates = eligible_students(
        latest_per_student(records),
        load_beneficiaries(db),
        load_programs(db),
        scope=ExclusionScope.GLOBAL,
        today=today,
    )
    baselines = baselines_per_student(records, {c.student_id: payload.start_date for c in candidates})
    for candidate in candidates:
        _enroll(db, program, candidate.student_id, payload.start_date, baselines.get(candidate.student_id))

    db.commit()
    db.refresh(program)

    logger.info("Feeding program %s created; %d students auto-enrolled", program.program_id, len(candidates))
    out = _program_dict(program, today, len(candidates))
    out["auto_enrolled"] = len(candidates)
    return out


@router.get("/eligible-students", summary="Students qualifying for a feeding program")
def list_eligible_students(
    scope: ExclusionScope = ExclusionScope.GLOBAL,
    program_id: str | None = None,
    grade: int | None = Query(default=None, ge=0, le=6),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    pid = None
    if scope == ExclusionScope.PROGRAM:
        if not program_id:
            raise NutriWatchException(status_code=400, detail="program_id is required when scope is 'program'")
        pid = _get_program(db, program_id).program_id

    students = {s.student_id: s for s in load_students(db, grade)}
    latest = latest_per_student(load_records(db, students.keys()))
    candidates = eligible_students(
        latest,
        load_beneficiaries(db),
        load_programs(db),
        scope=scope,
        today=today,
        program_id=pid,
    )

    out = []
    for candidate in candidates:
        student = students[candidate.student_id]
        out.append(
            {
                "student_id": str(student.student_id),
                "name": full_name(student),
                "lrn": student.lrn,
                "gender": student.gender,
                "grade": grade_label(student.grade_level),
                "tier": candidate.tier.value,
                "bmi": candidate.status.bmi,
                "bmi_status": candidate.status.bmi_status.value if candidate.status.bmi_status else None,
                "hfa_status": candidate.status.hfa_status.value if candidate.status.hfa_status else None,
                "measured_at": candidate.measured_at,
            }
        )
    return out


@router.get("/{program_id}", summary="Get feeding program detail")
def get_program(
    program_id: str,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    program = _get_program(db, program_id)
    total = db.execute(
        select(func.count(Beneficiary.beneficiary_id)).where(Beneficiary.program_id == program.program_id)
    ).scalar_one()
    return _program_dict(program, today, int(total or 0))


@router.post("/{program_id}/end", summary="Mark a feeding program as ended")
def end_program(
    program_id: str,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    program = _get_program(db, program_id)
    program.status = ProgramStatus.ENDED.value
    if program.end_date is None or program.end_date > today:
        program.end_date = today
    db.commit()
    db.refresh(program)
    return _program_dict(program, today)


@router.get("/{program_id}/beneficiaries", summary="Program roster with growth progress")
def list_beneficiaries(
    program_id: str,
    db: Session = Depends(get_db),
):
    program = _get_program(db, program_id)
    return beneficiary_progress(db, program)


@router.post("/{program_id}/beneficiaries", summary="Enroll a student in a program", status_code=201)
def add_beneficiary(
    program_id: str,
    payload: BeneficiaryCreatePayload,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    program = _get_program(db, program_id)
    sid = parse_uuid(payload.student_id, "student_id")
    if not db.execute(select(Student.student_id).where(Student.student_id == sid)).first():
        raise StudentNotFound()

    existing = db.execute(
        select(Beneficiary.beneficiary_id).where(
            Beneficiary.program_id == program.program_id,
            Beneficiary.student_id == sid,
        )
    ).first()
    if existing:
        raise DuplicateEnrollment()

    enrollment_date = payload.enrollment_date or today
    baseline_record = latest_at_or_before(load_records(db, [sid]), sid, enrollment_date)
    beneficiary = _enroll(db, program, sid, enrollment_date, baseline_record)
    db.commit()
    db.refresh(beneficiary)

    return {
        "beneficiary_id": str(beneficiary.beneficiary_id),
        "program_id": str(beneficiary.program_id),
        "student_id": str(beneficiary.student_id),
        "enrollment_date": beneficiary.enrollment_date,
        "bmi_status_at_enrollment": beneficiary.bmi_status_at_enrollment,
        "hfa_status_at_enrollment": beneficiary.hfa_status_at_enrollment,
    }


@router.delete("/beneficiaries/{beneficiary_id}", summary="Remove a student from a program")
def remove_beneficiary(
    beneficiary_id: str,
    db: Session = Depends(get_db),
):
    bid = parse_uuid(beneficiary_id, "beneficiary_id")
    beneficiary = db.execute(select(Beneficiary).where(Beneficiary.beneficiary_id == bid)).scalar_one_or_none()
    if not beneficiary:
        raise BeneficiaryNotFound()

    # Attendance goes first so backends without FK cascades stay consistent.
    db.execute(delete(Attendance).where(Attendance.beneficiary_id == bid))
    db.delete(beneficiary)
    db.commit()

    logger.info("Beneficiary %s removed from program %s", bid, beneficiary.program_id)
    return {"removed": True, "beneficiary_id": str(bid)}


@router.post("/beneficiaries/{beneficiary_id}/attendance", summary="Record daily attendance")
def record_attendance(
    beneficiary_id: str,
    payload: AttendancePayload,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    bid = parse_uuid(beneficiary_id, "beneficiary_id")
    if not db.execute(select(Beneficiary.beneficiary_id).where(Beneficiary.beneficiary_id == bid)).first():
        raise BeneficiaryNotFound()

    attendance_date = payload.attendance_date or today
    notes = (payload.notes or "").strip() or None

    row = db.execute(
        select(Attendance).where(
            Attendance.beneficiary_id == bid,
            Attendance.attendance_date == attendance_date,
        )
    ).scalar_one_or_none()
    if row:
        row.present = payload.present
        row.notes = notes
    else:
        row = Attendance(beneficiary_id=bid, attendance_date=attendance_date, present=payload.present, notes=notes)
        db.add(row)
    db.commit()
    db.refresh(row)

    return {
        "attendance_id": str(row.attendance_id),
        "beneficiary_id": str(row.beneficiary_id),
        "attendance_date": row.attendance_date,
        "present": row.present,
        "notes": row.notes,
    }
