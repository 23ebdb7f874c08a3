"""Module: snapshots.

Read-only loaders that hand plain ORM rows to the nutrition engine. Each
request works on its own snapshot; nothing here is cached between requests.
"""

from __future__ import annotations

import uuid
from typing import Iterable

from sqlalchemy import select
from sqlalchemy.orm import Session

from nutriwatch.db.models.beneficiary import Beneficiary
from nutriwatch.db.models.bmi_record import BmiRecord
from nutriwatch.db.models.feeding_program import FeedingProgram
from nutriwatch.db.models.student import Student


def load_students(db: Session, grade: int | None = None) -> list[Student]:
    stmt = select(Student)
    if grade is not None:
        stmt = stmt.where(Student.grade_level == grade)
    return list(db.execute(stmt).scalars().all())


def load_records(db: Session, student_ids: Iterable[uuid.UUID] | None = None) -> list[BmiRecord]:
    stmt = select(BmiRecord)
    if student_ids is not None:
        ids = list(student_ids)
        if not ids:
            return []
        stmt = stmt.where(BmiRecord.student_id.in_(ids))
    return list(db.execute(stmt).scalars().all())


def load_programs(db: Session) -> list[FeedingProgram]:
    return list(db.execute(select(FeedingProgram)).scalars().all())


def load_beneficiaries(db: Session) -> list[Beneficiary]:
    return list(db.execute(select(Beneficiary)).scalars().all())
