"""Module: eligibility."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime
from enum import Enum
from typing import Any, Hashable, Iterable, Mapping

from nutriwatch.nutrition.status import (
    BmiStatus,
    ClassifiedStatus,
    HfaStatus,
    coerce_bmi_status,
    coerce_hfa_status,
    status_from_record,
)


class Tier(str, Enum):
    PRIMARY = "Primary"
    SECONDARY = "Secondary"
    NONE = "None"


class GrowthTrend(str, Enum):
    IMPROVE = "Improve"
    NO_DECLINE = "No/Decline"
    OVERDONE = "Overdone"
    NOT_AVAILABLE = "N/A"


class ProgramStatus(str, Enum):
    ACTIVE = "active"
    ENDED = "ended"


class ExclusionScope(str, Enum):
    GLOBAL = "global"
    PROGRAM = "program"


@dataclass(frozen=True)
class EligibleStudent:
    student_id: Hashable
    tier: Tier
    status: ClassifiedStatus
    measured_at: datetime | None = None


PRIMARY_BMI_STATUSES = (BmiStatus.SEVERELY_WASTED, BmiStatus.WASTED)
SECONDARY_HFA_STATUSES = (HfaStatus.SEVERELY_STUNTED, HfaStatus.STUNTED)
EXCESS_BMI_STATUSES = (BmiStatus.OVERWEIGHT, BmiStatus.OBESE)

# Severity scale used for growth trends; Normal (4) is the ceiling for "Improve".
SEVERITY_RANK: dict[BmiStatus, int] = {
    BmiStatus.SEVERELY_WASTED: 1,
    BmiStatus.WASTED: 2,
    BmiStatus.UNDERWEIGHT: 3,
    BmiStatus.NORMAL: 4,
    BmiStatus.OVERWEIGHT: 5,
    BmiStatus.OBESE: 6,
}
NORMAL_RANK = SEVERITY_RANK[BmiStatus.NORMAL]


def _as_date(value: date | datetime) -> date:
    return value.date() if isinstance(value, datetime) else value


def _enum_value(value: Any) -> Any:
    return value.value if isinstance(value, Enum) else value


def classify_eligibility(status: ClassifiedStatus | None) -> Tier:
    if status is None:
        return Tier.NONE
    if coerce_bmi_status(status.bmi_status) in PRIMARY_BMI_STATUSES:
        return Tier.PRIMARY
    if coerce_hfa_status(status.hfa_status) in SECONDARY_HFA_STATUSES:
        return Tier.SECONDARY
    return Tier.NONE


def is_program_truly_active(program: Any, today: date) -> bool:
    """
    A program counts as active only while its flag says so AND its end date
    has not passed. The stored flag alone is not trusted: it is not updated
    when the end date goes by.
    """
    if program is None:
        return False
    if _enum_value(getattr(program, "status", None)) != ProgramStatus.ACTIVE.value:
        return False
    end_date = getattr(program, "end_date", None)
    return end_date is None or _as_date(end_date) >= _as_date(today)


def is_currently_enrolled_active(beneficiary: Any, program: Any, today: date) -> bool:
    if beneficiary is None or program is None:
        return False
    if getattr(beneficiary, "program_id", None) != getattr(program, "program_id", None):
        return False
    return is_program_truly_active(program, today)


def _status_of(value: Any) -> ClassifiedStatus | None:
    if value is None or isinstance(value, ClassifiedStatus):
        return value
    return status_from_record(value)


def _excluded_students(
    beneficiaries: Iterable[Any],
    programs: Iterable[Any],
    *,
    scope: ExclusionScope,
    today: date,
    program_id: Hashable | None,
) -> set[Hashable]:
    if scope == ExclusionScope.PROGRAM:
        # Per-program roster, regardless of that program's own state.
        return {b.student_id for b in beneficiaries if program_id is not None and b.program_id == program_id}

    programs_by_id = {p.program_id: p for p in programs}
    return {
        b.student_id
        for b in beneficiaries
        if is_currently_enrolled_active(b, programs_by_id.get(b.program_id), today)
    }


def eligible_students(
    statuses: Mapping[Hashable, Any],
    beneficiaries: Iterable[Any],
    programs: Iterable[Any],
    *,
    scope: ExclusionScope,
    today: date,
    program_id: Hashable | None = None,
) -> list[EligibleStudent]:
    """
    Students currently in the Primary or Secondary tier who are not already
    enrolled.

    ``statuses`` maps student id to either a ``ClassifiedStatus`` or a record
    carrying a stored classification (normally the latest record per student).
    ``scope`` picks the exclusion rule: ``GLOBAL`` drops anyone enrolled in
    any truly-active program, ``PROGRAM`` drops only the roster of
    ``program_id``. Severely Wasted students come first; the rest keep their
    input order.
    """
    excluded = _excluded_students(
        list(beneficiaries),
        list(programs),
        scope=ExclusionScope(scope),
        today=today,
        program_id=program_id,
    )

    out: list[EligibleStudent] = []
    for student_id, value in statuses.items():
        if student_id in excluded:
            continue
        status = _status_of(value)
        tier = classify_eligibility(status)
        if tier == Tier.NONE:
            continue
        out.append(
            EligibleStudent(
                student_id=student_id,
                tier=tier,
                status=status,
                measured_at=getattr(value, "measured_at", None),
            )
        )

    out.sort(key=lambda s: 0 if s.status.bmi_status == BmiStatus.SEVERELY_WASTED else 1)
    return out


def compute_growth_trend(baseline: Any, current: Any) -> GrowthTrend:
    """
    Compare the BMI status at enrollment with the current one.

    Reaching Overweight or Obese is always Overdone. Otherwise moving up the
    severity scale (up to Normal) is Improve and staying level or dropping is
    No/Decline. A missing side gives N/A.
    """
    baseline_value = _enum_value(baseline)
    current_value = _enum_value(current)
    if not baseline_value or not current_value:
        return GrowthTrend.NOT_AVAILABLE
    if GrowthTrend.NOT_AVAILABLE.value in (baseline_value, current_value):
        return GrowthTrend.NOT_AVAILABLE

    current_status = coerce_bmi_status(current_value)
    if current_status in EXCESS_BMI_STATUSES:
        return GrowthTrend.OVERDONE

    baseline_rank = SEVERITY_RANK.get(coerce_bmi_status(baseline_value), 0)
    current_rank = SEVERITY_RANK.get(current_status, 0)

    if baseline_rank < current_rank <= NORMAL_RANK:
        return GrowthTrend.IMPROVE
    if current_rank <= baseline_rank:
        return GrowthTrend.NO_DECLINE
    return GrowthTrend.OVERDONE
