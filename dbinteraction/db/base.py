"""
SQLAlchemy declarative base and metadata.
Challenge: Single place for table definitions (schema creation in tests and the seed script).
"""

from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Base class for all ORM models."""

    pass
