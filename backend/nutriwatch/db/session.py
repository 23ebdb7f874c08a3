"""Module: session."""

from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from nutriwatch.core.config import settings

# SQLite (local runs, tests) needs cross-thread access for FastAPI's threadpool.
connect_args = {"check_same_thread": False} if settings.database_url.startswith("sqlite") else {}

engine = create_engine(settings.database_url, pool_pre_ping=True, connect_args=connect_args)
SessionLocal = sessionmaker(bind=engine, autocommit=False, autoflush=False)
