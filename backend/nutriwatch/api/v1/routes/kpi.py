"""Module: kpi."""

from datetime import date

from fastapi import APIRouter, Depends, Response
from sqlalchemy.orm import Session

from nutriwatch.api.v1.routes.deps import get_db, get_today
from nutriwatch.db.snapshots import load_beneficiaries, load_programs, load_records, load_students
from nutriwatch.nutrition.kpi import summarize_kpis

router = APIRouter()


# Endpoint: every headline KPI in one round trip.
@router.get("", summary="KPI summary (students, statuses, feeding program tiers)")
def kpi_summary(
    response: Response,
    db: Session = Depends(get_db),
    today: date = Depends(get_today),
):
    summary = summarize_kpis(
        load_students(db),
        load_records(db),
        load_beneficiaries(db),
        load_programs(db),
        today,
    )
    # Figures change only when someone weighs in; a short private cache is fine.
    response.headers["Cache-Control"] = "private, max-age=60, stale-while-revalidate=120"
    return summary
