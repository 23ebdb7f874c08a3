"""Module: base."""

from sqlalchemy.orm import DeclarativeBase

# Declarative base shared by every ORM model; its metadata drives create_all
# at startup and Alembic autogeneration.
class Base(DeclarativeBase):
    pass
