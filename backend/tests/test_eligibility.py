from datetime import date, datetime
from types import SimpleNamespace

import pytest

from nutriwatch.nutrition.eligibility import (
    ExclusionScope,
    GrowthTrend,
    Tier,
    classify_eligibility,
    compute_growth_trend,
    eligible_students,
    is_currently_enrolled_active,
    is_program_truly_active,
)
from nutriwatch.nutrition.status import BmiStatus, ClassifiedStatus, HfaStatus

TODAY = date(2024, 6, 15)


def status(bmi_status, hfa_status=HfaStatus.NORMAL, bmi=17.0):
    return ClassifiedStatus(bmi=bmi, bmi_status=bmi_status, hfa_status=hfa_status)


def program(program_id, status="active", end_date=None):
    return SimpleNamespace(program_id=program_id, status=status, end_date=end_date)


def enrolled(student_id, program_id):
    return SimpleNamespace(student_id=student_id, program_id=program_id, enrollment_date=date(2024, 6, 1))


@pytest.mark.parametrize(
    "bmi_status, hfa_status, expected",
    [
        (BmiStatus.SEVERELY_WASTED, HfaStatus.NORMAL, Tier.PRIMARY),
        (BmiStatus.WASTED, HfaStatus.SEVERELY_STUNTED, Tier.PRIMARY),
        (BmiStatus.NORMAL, HfaStatus.SEVERELY_STUNTED, Tier.SECONDARY),
        (BmiStatus.OBESE, HfaStatus.STUNTED, Tier.SECONDARY),
        (BmiStatus.UNDERWEIGHT, HfaStatus.NORMAL, Tier.NONE),
        (BmiStatus.NORMAL, HfaStatus.TALL, Tier.NONE),
        (None, None, Tier.NONE),
    ],
)
def test_classify_eligibility(bmi_status, hfa_status, expected):
    assert classify_eligibility(status(bmi_status, hfa_status)) == expected


def test_classify_eligibility_accepts_stored_strings():
    stored = ClassifiedStatus(bmi=15.0, bmi_status="Wasted", hfa_status="Normal")
    assert classify_eligibility(stored) == Tier.PRIMARY


def test_classify_eligibility_without_status():
    assert classify_eligibility(None) == Tier.NONE


def test_truly_active_requires_flag_and_future_end():
    assert is_program_truly_active(program("p", end_date=None), TODAY)
    assert is_program_truly_active(program("p", end_date=TODAY), TODAY)
    assert is_program_truly_active(program("p", end_date=date(2024, 9, 30)), TODAY)
    assert not is_program_truly_active(program("p", status="ended", end_date=date(2024, 9, 30)), TODAY)
    assert not is_program_truly_active(program("p", end_date=date(2024, 6, 14)), TODAY)
    assert not is_program_truly_active(None, TODAY)


def test_truly_active_normalizes_datetimes():
    p = program("p", end_date=datetime(2024, 6, 15, 0, 0))
    assert is_program_truly_active(p, datetime(2024, 6, 15, 18, 0))


def test_enrolled_active_checks_program_match():
    p = program("p1", end_date=date(2024, 9, 30))
    assert is_currently_enrolled_active(enrolled("s", "p1"), p, TODAY)
    assert not is_currently_enrolled_active(enrolled("s", "p2"), p, TODAY)
    assert not is_currently_enrolled_active(enrolled("s", "p1"), program("p1", end_date=date(2024, 1, 1)), TODAY)
    assert not is_currently_enrolled_active(None, p, TODAY)


@pytest.fixture
def statuses():
    # Insertion order is the input order for the stable sort.
    return {
        "wasted": status(BmiStatus.WASTED),
        "stunted": status(BmiStatus.NORMAL, HfaStatus.STUNTED),
        "severe": status(BmiStatus.SEVERELY_WASTED, HfaStatus.SEVERELY_STUNTED),
        "healthy": status(BmiStatus.NORMAL),
        "severe2": status(BmiStatus.SEVERELY_WASTED),
    }


def test_eligible_students_sorts_severely_wasted_first(statuses):
    result = eligible_students(statuses, [], [], scope=ExclusionScope.GLOBAL, today=TODAY)
    assert [e.student_id for e in result] == ["severe", "severe2", "wasted", "stunted"]
    assert {e.student_id: e.tier for e in result}["stunted"] == Tier.SECONDARY


def test_global_scope_excludes_truly_active_enrollments(statuses):
    programs = [program("running", end_date=date(2024, 9, 30))]
    result = eligible_students(
        statuses, [enrolled("severe", "running")], programs, scope=ExclusionScope.GLOBAL, today=TODAY
    )
    assert "severe" not in {e.student_id for e in result}


def test_global_scope_ignores_stale_active_program(statuses):
    # Flag still says active but the end date has passed.
    programs = [program("stale", status="active", end_date=date(2024, 5, 31))]
    result = eligible_students(
        statuses, [enrolled("severe", "stale")], programs, scope=ExclusionScope.GLOBAL, today=TODAY
    )
    assert "severe" in {e.student_id for e in result}


def test_global_scope_ignores_ended_program(statuses):
    programs = [program("done", status="ended", end_date=date(2024, 9, 30))]
    result = eligible_students(statuses, [enrolled("wasted", "done")], programs, scope="global", today=TODAY)
    assert "wasted" in {e.student_id for e in result}


def test_program_scope_excludes_only_that_roster(statuses):
    programs = [program("p1", end_date=date(2024, 9, 30)), program("p2", end_date=date(2024, 9, 30))]
    beneficiaries = [enrolled("severe", "p1"), enrolled("wasted", "p2")]

    result = eligible_students(
        statuses, beneficiaries, programs, scope=ExclusionScope.PROGRAM, today=TODAY, program_id="p1"
    )
    ids = {e.student_id for e in result}
    assert "severe" not in ids
    assert "wasted" in ids


def test_program_scope_excludes_roster_of_ended_program(statuses):
    programs = [program("old", status="ended", end_date=date(2024, 1, 31))]
    result = eligible_students(
        statuses, [enrolled("stunted", "old")], programs, scope=ExclusionScope.PROGRAM, today=TODAY, program_id="old"
    )
    assert "stunted" not in {e.student_id for e in result}


def test_program_scope_without_program_excludes_nobody(statuses):
    programs = [program("p1", end_date=date(2024, 9, 30))]
    result = eligible_students(statuses, [enrolled("severe", "p1")], programs, scope=ExclusionScope.PROGRAM, today=TODAY)
    assert len(result) == 4


def test_eligible_students_reads_records():
    records = {
        "s1": SimpleNamespace(
            student_id="s1", bmi="15.51", bmi_status="Severely Wasted", hfa_status="Severely Stunted",
            measured_at=datetime(2024, 6, 1, 8),
        ),
        "s2": SimpleNamespace(
            student_id="s2", bmi="20.00", bmi_status="Normal", hfa_status="Normal",
            measured_at=datetime(2024, 6, 1, 8),
        ),
    }
    result = eligible_students(records, [], [], scope=ExclusionScope.GLOBAL, today=TODAY)
    assert len(result) == 1
    assert result[0].student_id == "s1"
    assert result[0].tier == Tier.PRIMARY
    assert result[0].status.bmi == 15.51
    assert result[0].measured_at == datetime(2024, 6, 1, 8)


def test_eligible_students_skips_students_without_status():
    result = eligible_students({"ghost": None}, [], [], scope=ExclusionScope.GLOBAL, today=TODAY)
    assert result == []


@pytest.mark.parametrize(
    "baseline, current, expected",
    [
        ("Severely Wasted", "Wasted", GrowthTrend.IMPROVE),
        ("Wasted", "Normal", GrowthTrend.IMPROVE),
        ("Underweight", "Normal", GrowthTrend.IMPROVE),
        ("Wasted", "Wasted", GrowthTrend.NO_DECLINE),
        ("Normal", "Wasted", GrowthTrend.NO_DECLINE),
        ("Normal", "Normal", GrowthTrend.NO_DECLINE),
        ("Wasted", "Overweight", GrowthTrend.OVERDONE),
        ("Normal", "Obese", GrowthTrend.OVERDONE),
        ("Obese", "Obese", GrowthTrend.OVERDONE),
        (None, "Normal", GrowthTrend.NOT_AVAILABLE),
        ("Wasted", None, GrowthTrend.NOT_AVAILABLE),
        ("N/A", "Normal", GrowthTrend.NOT_AVAILABLE),
        ("", "Normal", GrowthTrend.NOT_AVAILABLE),
        ("Mystery", "Wasted", GrowthTrend.IMPROVE),
        ("Wasted", "Mystery", GrowthTrend.NO_DECLINE),
    ],
)
def test_growth_trend(baseline, current, expected):
    assert compute_growth_trend(baseline, current) == expected


def test_growth_trend_accepts_enums():
    assert compute_growth_trend(BmiStatus.SEVERELY_WASTED, BmiStatus.NORMAL) == GrowthTrend.IMPROVE
