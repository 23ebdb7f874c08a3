"""Module: resolver."""

from __future__ import annotations

from datetime import UTC, date, datetime, time
from typing import Any, Hashable, Iterable, Mapping, TypeVar

R = TypeVar("R")


def _as_naive_utc(value: datetime) -> datetime:
    if value.tzinfo is None:
        return value
    return value.astimezone(UTC).replace(tzinfo=None)


# Comparable timestamp for a record. Naive values are taken as UTC; a bare
# date counts as the start of that day.
def _measured_key(record: Any) -> datetime | None:
    value = getattr(record, "measured_at", None)
    if value is None:
        return None
    if isinstance(value, datetime):
        return _as_naive_utc(value)
    return datetime.combine(value, time.min)


# Inclusive upper bound. A bare date means midnight at the start of that day,
# so later weigh-ins on the same day are not at-or-before it.
def _cutoff_bound(cutoff: date | datetime) -> datetime:
    if isinstance(cutoff, datetime):
        return _as_naive_utc(cutoff)
    return datetime.combine(cutoff, time.min)


def latest_per_student(measurements: Iterable[R]) -> dict[Hashable, R]:
    """
    Most recent record per student in a single pass.

    Input order does not matter. On equal timestamps the first record seen is
    kept, so a fixed input order always gives the same answer.
    """
    best: dict[Hashable, R] = {}
    best_key: dict[Hashable, datetime] = {}
    for record in measurements:
        key = _measured_key(record)
        if key is None:
            continue
        student_id = getattr(record, "student_id")
        current = best_key.get(student_id)
        if current is None or key > current:
            best[student_id] = record
            best_key[student_id] = key
    return best


def latest_at_or_before(measurements: Iterable[R], student_id: Hashable, cutoff: date | datetime) -> R | None:
    bound = _cutoff_bound(cutoff)
    best: R | None = None
    best_key: datetime | None = None
    for record in measurements:
        if getattr(record, "student_id", None) != student_id:
            continue
        key = _measured_key(record)
        if key is None or key > bound:
            continue
        if best_key is None or key > best_key:
            best = record
            best_key = key
    return best


def baselines_per_student(
    measurements: Iterable[R],
    cutoffs: Mapping[Hashable, date | datetime],
) -> dict[Hashable, R]:
    """
    Latest record at or before each student's own cutoff, in one pass.

    Students without a record on or before their cutoff are left out rather
    than matched to a later record.
    """
    bounds = {student_id: _cutoff_bound(cutoff) for student_id, cutoff in cutoffs.items() if cutoff is not None}
    best: dict[Hashable, R] = {}
    best_key: dict[Hashable, datetime] = {}
    for record in measurements:
        student_id = getattr(record, "student_id", None)
        bound = bounds.get(student_id)
        if bound is None:
            continue
        key = _measured_key(record)
        if key is None or key > bound:
            continue
        current = best_key.get(student_id)
        if current is None or key > current:
            best[student_id] = record
            best_key[student_id] = key
    return best
