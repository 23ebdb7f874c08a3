"""Module: status."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Any

from nutriwatch.nutrition.metrics import compute_bmi


class BmiStatus(str, Enum):
    SEVERELY_WASTED = "Severely Wasted"
    WASTED = "Wasted"
    # Never produced by classify_bmi, but present in older stored records.
    UNDERWEIGHT = "Underweight"
    NORMAL = "Normal"
    OVERWEIGHT = "Overweight"
    OBESE = "Obese"


class HfaStatus(str, Enum):
    SEVERELY_STUNTED = "Severely Stunted"
    STUNTED = "Stunted"
    NORMAL = "Normal"
    TALL = "Tall"


# Upper bounds (exclusive), evaluated low to high; anything above is Obese.
BMI_THRESHOLDS: tuple[tuple[float, BmiStatus], ...] = (
    (16.0, BmiStatus.SEVERELY_WASTED),
    (18.5, BmiStatus.WASTED),
    (25.0, BmiStatus.NORMAL),
    (30.0, BmiStatus.OVERWEIGHT),
)

# (height below, age above, status), first match wins.
HFA_STUNTING_RULES: tuple[tuple[float, float, HfaStatus], ...] = (
    (100, 5, HfaStatus.SEVERELY_STUNTED),
    (110, 6, HfaStatus.STUNTED),
    (115, 7, HfaStatus.STUNTED),
    (120, 8, HfaStatus.STUNTED),
    (125, 9, HfaStatus.STUNTED),
    (130, 10, HfaStatus.STUNTED),
)
TALL_HEIGHT_CM = 150
TALL_MAX_AGE = 10


@dataclass(frozen=True)
class ClassifiedStatus:
    bmi: float
    bmi_status: BmiStatus | None
    hfa_status: HfaStatus | None


def coerce_bmi_status(value: Any) -> BmiStatus | None:
    if value is None:
        return None
    try:
        return BmiStatus(value)
    except ValueError:
        return None


def coerce_hfa_status(value: Any) -> HfaStatus | None:
    if value is None:
        return None
    try:
        return HfaStatus(value)
    except ValueError:
        return None


def classify_bmi(bmi: float) -> BmiStatus:
    for upper, status in BMI_THRESHOLDS:
        if bmi < upper:
            return status
    return BmiStatus.OBESE


def classify_hfa(height_cm: float, age_years: float) -> HfaStatus:
    """
    Height-for-age from a fixed table of height/age cutoffs.

    This is a coarse screening heuristic, not a WHO z-score model. Missing
    (non-positive) height or age is reported as Normal.
    """
    if age_years <= 0 or height_cm <= 0:
        return HfaStatus.NORMAL

    for height_below, age_above, status in HFA_STUNTING_RULES:
        if height_cm < height_below and age_years > age_above:
            return status

    if height_cm > TALL_HEIGHT_CM and age_years < TALL_MAX_AGE:
        return HfaStatus.TALL
    return HfaStatus.NORMAL


def classify_measurement(weight_kg: float, height_cm: float, age_years: float) -> ClassifiedStatus:
    bmi = compute_bmi(weight_kg, height_cm)
    return ClassifiedStatus(
        bmi=bmi,
        bmi_status=classify_bmi(bmi),
        hfa_status=classify_hfa(height_cm, age_years),
    )


# Read the classification stored on a persisted record (None when absent).
def status_from_record(record: Any) -> ClassifiedStatus | None:
    if record is None:
        return None
    bmi = getattr(record, "bmi", None)
    return ClassifiedStatus(
        bmi=float(bmi) if bmi is not None else 0.0,
        bmi_status=coerce_bmi_status(getattr(record, "bmi_status", None)),
        hfa_status=coerce_hfa_status(getattr(record, "hfa_status", None)),
    )
