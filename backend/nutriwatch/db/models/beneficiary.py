"""Module: beneficiary."""

import uuid
from datetime import date

from sqlalchemy import Date, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from nutriwatch.db.base import Base


class Beneficiary(Base):
    __tablename__ = "feeding_program_beneficiaries"
    __table_args__ = (UniqueConstraint("program_id", "student_id", name="uq_beneficiary_program_student"),)

    beneficiary_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    program_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("feeding_programs.program_id", ondelete="CASCADE"),
        nullable=False,
    )
    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.student_id", ondelete="CASCADE"),
        nullable=False,
    )
    enrollment_date: Mapped[date] = mapped_column(Date, nullable=False)
    # Baseline classification at enrollment (null when no record existed yet).
    bmi_status_at_enrollment: Mapped[str] = mapped_column(String, nullable=True)
    hfa_status_at_enrollment: Mapped[str] = mapped_column(String, nullable=True)
