"""
SQLAlchemy declarative base.

All workspace tables inherit from this Base class so Alembic and the
test fixtures can see them through ``Base.metadata``.
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all SQLAlchemy models."""
    pass
