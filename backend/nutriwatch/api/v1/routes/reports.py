"""Module: reports."""

from __future__ import annotations

import csv
import io
import logging
from datetime import date, datetime

from fastapi import APIRouter, Depends, Query
from fastapi.responses import StreamingResponse
from sqlalchemy import select
from sqlalchemy.orm import Session

from nutriwatch.api.v1.routes.deps import get_db, get_today, month_bounds, parse_uuid
from nutriwatch.api.v1.routes.feeding_programs import beneficiary_progress
from nutriwatch.core.exceptions import ProgramNotFound
from nutriwatch.db.models.bmi_record import BmiRecord
from nutriwatch.db.models.feeding_program import FeedingProgram
from nutriwatch.db.snapshots import load_records, load_students
from nutriwatch.nutrition import (
    Tier,
    classify_eligibility,
    is_program_truly_active,
    latest_per_student,
    status_from_record,
)
from nutriwatch.nutrition.roster import ROSTER_HEADERS, ROSTER_SUBHEADERS, grade_label, roster_row

logger = logging.getLogger(__name__)

router = APIRouter()


# Endpoint: nutritional-status roster as CSV (Y/M age columns on a second header row).
@router.get("/nutritional-status.csv")
def export_nutritional_status(
    month: str | None = Query(default=None, pattern=r"^\d{4}-(0[1-9]|1[0-2])$"),
    grade: int | None = Query(default=None, ge=0, le=6),
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    students = sorted(load_students(db, grade), key=lambda s: ((s.last_name or "").lower(), (s.first_name or "").lower()))

    stmt = select(BmiRecord).where(BmiRecord.student_id.in_([s.student_id for s in students]))
    if month:
        start, end = month_bounds(month)
        stmt = stmt.where(BmiRecord.measured_at >= start, BmiRecord.measured_at < end)
    latest = latest_per_student(db.execute(stmt).scalars().all()) if students else {}

    # A monthly report lists only the pupils weighed that month.
    if month:
        students = [s for s in students if s.student_id in latest]

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(ROSTER_HEADERS)
    writer.writerow(ROSTER_SUBHEADERS)
    for student in students:
        writer.writerow(roster_row(student, latest.get(student.student_id), today))

    logger.info("Nutritional status CSV generated: month=%s grade=%s rows=%d", month, grade, len(students))

    buffer.seek(0)
    filename = f"nutritional_status_{month or 'all'}_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(buffer, media_type="text/csv", headers=headers)


# Endpoint: feeding list of every pupil whose latest weigh-in qualifies, grouped by grade.
@router.get("/feeding-list.csv")
def export_feeding_list(
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    students = sorted(
        load_students(db),
        key=lambda s: (
            s.grade_level is None,
            s.grade_level or 0,
            (s.last_name or "").lower(),
            (s.first_name or "").lower(),
        ),
    )
    latest = latest_per_student(load_records(db))

    qualifying = [
        s
        for s in students
        if classify_eligibility(status_from_record(latest.get(s.student_id))) != Tier.NONE
    ]

    buffer = io.StringIO()
    writer = csv.writer(buffer)
    writer.writerow(ROSTER_HEADERS)
    writer.writerow(ROSTER_SUBHEADERS)
    current_grade: object = object()
    for student in qualifying:
        if student.grade_level != current_grade:
            current_grade = student.grade_level
            writer.writerow([grade_label(current_grade)])
        writer.writerow(roster_row(student, latest.get(student.student_id), today))

    logger.info("Feeding list CSV generated: %d of %d students qualify", len(qualifying), len(students))

    buffer.seek(0)
    filename = f"feeding_list_{datetime.utcnow().strftime('%Y%m%d_%H%M%S')}.csv"
    headers = {"Content-Disposition": f'attachment; filename="{filename}"'}
    return StreamingResponse(buffer, media_type="text/csv", headers=headers)


# Endpoint: data behind the printed feeding program report.
@router.get("/feeding-programs/{program_id}")
def feeding_program_report(
    program_id: str,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    pid = parse_uuid(program_id, "program_id")
    program = db.execute(select(FeedingProgram).where(FeedingProgram.program_id == pid)).scalar_one_or_none()
    if not program:
        raise ProgramNotFound()

    beneficiaries = beneficiary_progress(db, program)
    trend_counts: dict[str, int] = {}
    for row in beneficiaries:
        trend_counts[row["growth_trend"]] = trend_counts.get(row["growth_trend"], 0) + 1

    return {
        "title": f"Feeding Program: {program.name}",
        "program_id": str(program.program_id),
        "program_name": program.name,
        "description": program.description or "",
        "start_date": program.start_date,
        "end_date": program.end_date,
        "is_ended": not is_program_truly_active(program, today),
        "beneficiaries": beneficiaries,
        "total_beneficiaries": len(beneficiaries),
        "growth_trend_counts": trend_counts,
    }
