"""Module: kpi."""

from __future__ import annotations

from datetime import date
from typing import Any, Callable, Hashable, Iterable

from nutriwatch.nutrition.eligibility import Tier, classify_eligibility, is_program_truly_active
from nutriwatch.nutrition.resolver import latest_per_student
from nutriwatch.nutrition.status import BmiStatus, ClassifiedStatus, HfaStatus


def status_counts(latest_records: Iterable[Any]) -> tuple[dict[str, int], dict[str, int]]:
    bmi_counts = {s.value: 0 for s in BmiStatus}
    hfa_counts = {s.value: 0 for s in HfaStatus}
    for record in latest_records:
        bmi_status = getattr(record, "bmi_status", None)
        hfa_status = getattr(record, "hfa_status", None)
        if bmi_status in bmi_counts:
            bmi_counts[bmi_status] += 1
        if hfa_status in hfa_counts:
            hfa_counts[hfa_status] += 1
    return bmi_counts, hfa_counts


# Baseline snapshot stored on the enrollment row.
def _enrollment_status(beneficiary: Any) -> ClassifiedStatus:
    return ClassifiedStatus(
        bmi=0.0,
        bmi_status=getattr(beneficiary, "bmi_status_at_enrollment", None),
        hfa_status=getattr(beneficiary, "hfa_status_at_enrollment", None),
    )


def feeding_program_counts(
    beneficiaries: Iterable[Any],
    programs: Iterable[Any],
    student_ids: set[Hashable],
    today: date,
) -> dict[str, int]:
    """
    Beneficiaries of truly-active programs, one count per student.

    A student enrolled in several programs is Primary if any enrollment is
    Primary; Secondary only otherwise.
    """
    programs_by_id = {p.program_id: p for p in programs}
    tiers: dict[Hashable, set[Tier]] = {}
    for b in beneficiaries:
        if b.student_id not in student_ids:
            continue
        if not is_program_truly_active(programs_by_id.get(b.program_id), today):
            continue
        tiers.setdefault(b.student_id, set()).add(classify_eligibility(_enrollment_status(b)))

    primary = sum(1 for t in tiers.values() if Tier.PRIMARY in t)
    secondary = sum(1 for t in tiers.values() if Tier.PRIMARY not in t and Tier.SECONDARY in t)
    return {"primary": primary, "secondary": secondary, "total": primary + secondary}


def summarize_kpis(
    students: Iterable[Any],
    measurements: Iterable[Any],
    beneficiaries: Iterable[Any],
    programs: Iterable[Any],
    today: date,
) -> dict[str, Any]:
    student_ids = {s.student_id for s in students}
    latest = latest_per_student(m for m in measurements if m.student_id in student_ids)
    bmi_counts, hfa_counts = status_counts(latest.values())

    return {
        "total_students": len(student_ids),
        "pupils_weighed": len(latest),
        "bmi_counts": bmi_counts,
        "hfa_counts": hfa_counts,
        "feeding_program": feeding_program_counts(beneficiaries, programs, student_ids, today),
    }


def bmi_distribution(
    latest_records: Iterable[Any],
    grade_of: Callable[[Hashable], int | None],
    grade: int | None = None,
) -> dict[str, int]:
    distribution: dict[str, int] = {}
    for record in latest_records:
        if grade is not None and grade_of(record.student_id) != grade:
            continue
        status = record.bmi_status
        distribution[status] = distribution.get(status, 0) + 1
    return distribution
