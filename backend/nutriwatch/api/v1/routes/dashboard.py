"""Module: dashboard."""

from __future__ import annotations

from datetime import date

from fastapi import APIRouter, Depends, Query
from sqlalchemy.orm import Session

from nutriwatch.api.v1.routes.deps import get_db, get_today
from nutriwatch.core.config import settings
from nutriwatch.db.snapshots import load_programs, load_records, load_students
from nutriwatch.nutrition import age_years_at, is_program_truly_active, latest_per_student
from nutriwatch.nutrition.kpi import bmi_distribution

router = APIRouter()


@router.get("")
def nutritionist_dashboard(
    grade: int | None = Query(default=None, ge=0, le=6),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    students = {s.student_id: s for s in load_students(db, grade)}
    latest = latest_per_student(load_records(db, students.keys()))

    recent = sorted(latest.values(), key=lambda r: r.measured_at, reverse=True)[: settings.recent_records_limit]
    recent_records = []
    for record in recent:
        student = students[record.student_id]
        recent_records.append(
            {
                "id": str(record.record_id),
                "student_id": str(record.student_id),
                "first_name": student.first_name,
                "last_name": student.last_name,
                "lrn": student.lrn,
                "grade_level": student.grade_level,
                "age": age_years_at(student.birthdate, student.age, today),
                "bmi": float(record.bmi),
                "bmi_status": record.bmi_status,
                "hfa_status": record.hfa_status,
                "measured_at": record.measured_at,
            }
        )

    return {
        "total_students": len(students),
        "bmi_distribution": bmi_distribution(latest.values(), lambda sid: students[sid].grade_level, grade),
        "active_programs": sum(1 for p in load_programs(db) if is_program_truly_active(p, today)),
        "recent_records": recent_records,
    }
