"""Module: feeding_program."""

import uuid
from datetime import date, datetime

from sqlalchemy import Date, DateTime, String, Text, Uuid
from sqlalchemy.orm import Mapped, mapped_column

from nutriwatch.db.base import Base


# Feeding program window. `status` can lag behind `end_date`; consumers must
# go through nutrition.is_program_truly_active instead of reading it directly.
class FeedingProgram(Base):
    __tablename__ = "feeding_programs"

    program_id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String, nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=True)
    start_date: Mapped[date] = mapped_column(Date, nullable=False)
    end_date: Mapped[date] = mapped_column(Date, nullable=True)
    status: Mapped[str] = mapped_column(String, nullable=False, default="active")
    created_at: Mapped[datetime] = mapped_column(DateTime, nullable=False, default=datetime.utcnow)
