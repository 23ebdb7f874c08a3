"""Module: student."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, Integer, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from nutriwatch.db.base import Base


# Student profile; age is derived from birthdate whenever one is on file.
class Student(Base):
    __tablename__ = "students"

    # Primary Key
    student_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    # Learner reference number (12 digits)
    lrn: Mapped[str] = mapped_column(String(12), unique=True, nullable=True)

    first_name: Mapped[str] = mapped_column(String, nullable=False)
    middle_name: Mapped[str] = mapped_column(String, nullable=True)
    last_name: Mapped[str] = mapped_column(String, nullable=False)
    gender: Mapped[str] = mapped_column(String, nullable=True)
    birthdate: Mapped[date] = mapped_column(Date, nullable=True)
    # Legacy fallback for rows imported without a birthdate.
    age: Mapped[int] = mapped_column(Integer, nullable=True)

    grade_level: Mapped[int] = mapped_column(Integer, nullable=True)
    section: Mapped[str] = mapped_column(String, nullable=True)
    parent_guardian: Mapped[str] = mapped_column(String, nullable=True)
    contact_number: Mapped[str] = mapped_column(String, nullable=True)

    # Audit
    created_at: Mapped[datetime] = mapped_column(DateTime, default=datetime.utcnow)
