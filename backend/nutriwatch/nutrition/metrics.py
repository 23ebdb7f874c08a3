"""Module: metrics."""

from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date

# Plausible BMI window for a school-age child. Values outside it are rejected
# at the request boundary, never inside the calculator.
MIN_PLAUSIBLE_BMI = 5.0
MAX_PLAUSIBLE_BMI = 100.0


@dataclass(frozen=True)
class Age:
    years: int
    total_months: int


def _round_half_up(value: float, places: int = 2) -> float:
    factor = 10 ** places
    return math.floor(value * factor + 0.5) / factor


def compute_bmi(weight_kg: float, height_cm: float) -> float:
    """
    Body mass index from kilograms and centimetres, rounded to 2 decimals.

    Zero height or a non-finite input yields 0.0 instead of an error.
    """
    if not math.isfinite(weight_kg) or not math.isfinite(height_cm):
        return 0.0
    if height_cm == 0:
        return 0.0
    height_m = height_cm / 100
    return _round_half_up(weight_kg / (height_m * height_m))


def is_plausible_bmi(bmi: float) -> bool:
    return MIN_PLAUSIBLE_BMI <= bmi <= MAX_PLAUSIBLE_BMI


def compute_age(birthdate: date, reference_date: date) -> Age:
    """
    Age at ``reference_date``.

    ``total_months`` counts whole months, dropping one when the reference
    day-of-month falls before the birth day-of-month. ``years`` is the floor
    of that count over twelve, which matches a plain calendar year count.
    Either argument may be a ``date`` or a ``datetime``.
    """
    total_months = (reference_date.year - birthdate.year) * 12
    total_months += reference_date.month - birthdate.month
    if reference_date.day < birthdate.day:
        total_months -= 1
    return Age(years=total_months // 12, total_months=total_months)


def age_years_at(birthdate: date | None, stored_age: int | None, reference_date: date) -> int:
    # Birthdate wins; the stored age column is only a fallback for legacy rows.
    if birthdate is not None:
        return compute_age(birthdate, reference_date).years
    return int(stored_age or 0)
