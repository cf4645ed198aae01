"""SQLAlchemy Declarative Base — shared base class for all ORM models.

Invariants:
    - All models inherit from Base
    - Base.metadata is the single source of truth for table metadata (alembic, tests)

Design Decisions:
    - Separate file for Base: models and alembic env import it without import cycles
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all subscription aggregator ORM models."""
    pass
