"""Module: attendance."""

import uuid
from datetime import date

from sqlalchemy import Boolean, Date, ForeignKey, String, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from nutriwatch.db.base import Base


# Daily feeding attendance; one row per beneficiary per day.
class Attendance(Base):
    __tablename__ = "feeding_program_attendance"
    __table_args__ = (UniqueConstraint("beneficiary_id", "attendance_date", name="uq_attendance_beneficiary_date"),)

    attendance_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    beneficiary_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("feeding_program_beneficiaries.beneficiary_id", ondelete="CASCADE"),
        nullable=False,
    )
    attendance_date: Mapped[date] = mapped_column(Date, nullable=False)
    present: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    notes: Mapped[str] = mapped_column(String, nullable=True)
