"""Module: roster."""

from __future__ import annotations

from datetime import date, datetime
from typing import Any

from nutriwatch.nutrition.metrics import compute_age, compute_bmi
from nutriwatch.nutrition.status import BmiStatus, classify_bmi

ROSTER_HEADERS = [
    "Name",
    "Birthday",
    "Weight (kg)",
    "Height (m)",
    "Sex",
    "Height² (m²)",
    "Age",
    "",
    "BMI",
    "Nutritional Status",
    "Height-For-Age",
]
# Second header row: the Age column splits into years (Y) and total months (M).
ROSTER_SUBHEADERS = ["", "", "", "", "", "", "Y", "M", "", "", ""]

GRADE_LABELS = {
    0: "Kinder",
    1: "Grade 1",
    2: "Grade 2",
    3: "Grade 3",
    4: "Grade 4",
    5: "Grade 5",
    6: "Grade 6",
}

# Labels used on the printed nutritional-status template.
TEMPLATE_STATUS_LABELS = {
    BmiStatus.SEVERELY_WASTED: "Severely Wasted/SU",
    BmiStatus.WASTED: "Wasted/U",
}


def grade_label(grade_level: int | None) -> str:
    return GRADE_LABELS.get(grade_level, "Unknown")


def full_name(student: Any) -> str:
    first = (getattr(student, "first_name", None) or "").strip()
    middle = (getattr(student, "middle_name", None) or "").strip()
    last = (getattr(student, "last_name", None) or "").strip()

    initial = f" {middle[0]}." if middle else ""
    if last and first:
        return f"{last}, {first}{initial}"
    if first:
        return f"{first}{initial} {last}".strip()
    return last


def format_birthday(birthdate: date | None) -> str:
    if birthdate is None:
        return ""
    return birthdate.strftime("%d-%b-%y")


def _number(value: Any) -> float | None:
    if value is None:
        return None
    n = float(value)
    return n if n else None


def roster_row(student: Any, record: Any | None, today: date) -> list[str]:
    """
    One roster line for a student and their latest record.

    Age is taken at the record's timestamp (today when there is no record).
    Missing measurements leave their cells empty.
    """
    weight = _number(getattr(record, "weight_kg", None)) if record is not None else None
    height = _number(getattr(record, "height_cm", None)) if record is not None else None

    height_m = f"{height / 100:.2f}" if height else ""
    height_sq = f"{float(height_m) ** 2:.4f}" if height_m else ""

    gender = getattr(student, "gender", None)
    sex = "M" if gender == "Male" else "F" if gender == "Female" else ""

    age_years = ""
    age_months = ""
    birthdate = getattr(student, "birthdate", None)
    if birthdate is not None:
        measured_at = getattr(record, "measured_at", None) if record is not None else None
        reference = measured_at.date() if isinstance(measured_at, datetime) else (measured_at or today)
        age = compute_age(birthdate, reference)
        age_years = str(age.years)
        age_months = str(age.total_months)

    bmi = ""
    nutritional_status = ""
    if weight and height:
        bmi = f"{compute_bmi(weight, height):.1f}"
        status = classify_bmi(float(bmi))
        nutritional_status = TEMPLATE_STATUS_LABELS.get(status, status.value)

    hfa = (getattr(record, "hfa_status", None) or "") if record is not None else ""

    return [
        full_name(student),
        format_birthday(birthdate),
        f"{weight:g}" if weight else "",
        height_m,
        sex,
        height_sq,
        age_years,
        age_months,
        bmi,
        nutritional_status,
        hfa,
    ]
