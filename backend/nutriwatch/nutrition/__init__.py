# backend/nutriwatch/nutrition/__init__.py

from nutriwatch.nutrition.metrics import Age, age_years_at, compute_age, compute_bmi, is_plausible_bmi
from nutriwatch.nutrition.status import (
    BmiStatus,
    ClassifiedStatus,
    HfaStatus,
    classify_bmi,
    classify_hfa,
    classify_measurement,
    status_from_record,
)
from nutriwatch.nutrition.resolver import baselines_per_student, latest_at_or_before, latest_per_student
from nutriwatch.nutrition.eligibility import (
    EligibleStudent,
    ExclusionScope,
    GrowthTrend,
    ProgramStatus,
    Tier,
    classify_eligibility,
    compute_growth_trend,
    eligible_students,
    is_currently_enrolled_active,
    is_program_truly_active,
)
