"""SQLAlchemy declarative Base and shared model configuration."""

from sqlalchemy import Boolean, Column, false
from sqlalchemy.orm import DeclarativeBase


class Base(DeclarativeBase):
    """Declarative base for all ORM models."""

    pass


class SoftDeleteMixin:
    """Tombstone column for entities that are hidden instead of physically removed."""

    is_deleted = Column(Boolean, nullable=False, default=False, server_default=false())
