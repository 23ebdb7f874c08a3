"""Module: bmi_record."""

import uuid
from datetime import datetime

from sqlalchemy import DateTime, ForeignKey, Index, Numeric, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from nutriwatch.db.base import Base

# One weigh-in. Rows are never updated; a newer record supersedes an older one.
class BmiRecord(Base):
    __tablename__ = "bmi_records"
    __table_args__ = (Index("idx_bmi_records_student_measured", "student_id", "measured_at"),)

    record_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)

    student_id: Mapped[uuid.UUID] = mapped_column(
        Uuid,
        ForeignKey("students.student_id", ondelete="CASCADE"),
        nullable=False
    )
    weight_kg: Mapped[float] = mapped_column(Numeric(5, 2), nullable=False)
    height_cm: Mapped[float] = mapped_column(Numeric(5, 2), nullable=False)
    bmi: Mapped[float] = mapped_column(Numeric(5, 2), nullable=False)
    bmi_status: Mapped[str] = mapped_column(String, nullable=False)
    hfa_status: Mapped[str] = mapped_column(String, nullable=False)
    measured_at: Mapped[datetime] = mapped_column(DateTime, nullable=False)
    # "manual" (typed in) or "sensor" (weighing-station bridge)
    source: Mapped[str] = mapped_column(String, nullable=False, default="manual")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
