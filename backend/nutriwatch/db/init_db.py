"""Module: init_db."""

import logging

from nutriwatch.db.base import Base
from nutriwatch.db.session import engine

# Registers students, bmi_records and the feeding program tables on Base.metadata.
import nutriwatch.db.models  # noqa: F401

logger = logging.getLogger(__name__)


# Create any missing tables. Schema changes to existing tables go through Alembic.
def init_db() -> None:
    Base.metadata.create_all(bind=engine)
    logger.info("Database tables ensured: %s", ", ".join(sorted(Base.metadata.tables)))
