from types import SimpleNamespace

import pytest

from nutriwatch.nutrition.status import (
    BmiStatus,
    ClassifiedStatus,
    HfaStatus,
    classify_bmi,
    classify_hfa,
    classify_measurement,
    status_from_record,
)


@pytest.mark.parametrize(
    "bmi, expected",
    [
        (0.0, BmiStatus.SEVERELY_WASTED),
        (15.9, BmiStatus.SEVERELY_WASTED),
        (15.99, BmiStatus.SEVERELY_WASTED),
        (16.0, BmiStatus.WASTED),
        (18.49, BmiStatus.WASTED),
        (18.5, BmiStatus.NORMAL),
        (24.99, BmiStatus.NORMAL),
        (25.0, BmiStatus.OVERWEIGHT),
        (29.99, BmiStatus.OVERWEIGHT),
        (30.0, BmiStatus.OBESE),
        (45.0, BmiStatus.OBESE),
    ],
)
def test_classify_bmi_thresholds(bmi, expected):
    assert classify_bmi(bmi) == expected


def test_classify_bmi_never_returns_underweight():
    seen = {classify_bmi(x / 10) for x in range(0, 600)}
    assert BmiStatus.UNDERWEIGHT not in seen


@pytest.mark.parametrize(
    "height, age, expected",
    [
        (95, 6, HfaStatus.SEVERELY_STUNTED),
        (95, 5, HfaStatus.NORMAL),
        (105, 7, HfaStatus.STUNTED),
        (112, 8, HfaStatus.STUNTED),
        (118, 9, HfaStatus.STUNTED),
        (122, 10, HfaStatus.STUNTED),
        (129, 11, HfaStatus.STUNTED),
        (130, 11, HfaStatus.NORMAL),
        (155, 9, HfaStatus.TALL),
        (155, 10, HfaStatus.NORMAL),
        (160, 8, HfaStatus.TALL),
        (140, 8, HfaStatus.NORMAL),
        (120, 6, HfaStatus.NORMAL),
    ],
)
def test_classify_hfa_rules(height, age, expected):
    assert classify_hfa(height, age) == expected


@pytest.mark.parametrize("height, age", [(95, 0), (0, 8), (-3, 8), (95, -1)])
def test_classify_hfa_missing_inputs_are_normal(height, age):
    assert classify_hfa(height, age) == HfaStatus.NORMAL


def test_classify_measurement_combines_both():
    status = classify_measurement(14, 95, 6)
    assert status == ClassifiedStatus(
        bmi=15.51,
        bmi_status=BmiStatus.SEVERELY_WASTED,
        hfa_status=HfaStatus.SEVERELY_STUNTED,
    )


def test_status_values_are_plain_strings():
    assert BmiStatus.SEVERELY_WASTED == "Severely Wasted"
    assert HfaStatus.TALL.value == "Tall"


def test_status_from_record_reads_stored_values():
    record = SimpleNamespace(bmi="17.20", bmi_status="Wasted", hfa_status="Stunted")
    status = status_from_record(record)
    assert status.bmi == 17.2
    assert status.bmi_status == BmiStatus.WASTED
    assert status.hfa_status == HfaStatus.STUNTED


def test_status_from_record_missing_or_unknown():
    assert status_from_record(None) is None
    status = status_from_record(SimpleNamespace(bmi=None, bmi_status="Skinny", hfa_status=None))
    assert status.bmi == 0.0
    assert status.bmi_status is None
    assert status.hfa_status is None
