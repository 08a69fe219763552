"""SQLAlchemy Declarative Base — shared base class for all ORM mirrors.

Invariants:
    - All models inherit from Base
    - Base.metadata describes the external tables as this service reads them

Design Decisions:
    - Separate file for Base: avoids circular imports between models
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all TaskHive ORM models."""
    pass
