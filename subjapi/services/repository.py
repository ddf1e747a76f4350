"""Generic create/read/update/soft-delete repository over an ORM entity."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from contextlib import AbstractContextManager, contextmanager
from typing import Any, Generic, TypeVar

from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Query, Session

from subjapi.core.errors import ConflictError, StorageError
from subjapi.models.base import Base

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=Base)

# Postgres SQLSTATE for unique_violation.
UNIQUE_VIOLATION_PGCODE = "23505"


def is_unique_violation(error: IntegrityError) -> bool:
    """True when the integrity error comes from a unique constraint (Postgres or SQLite)."""
    if getattr(error.orig, "pgcode", None) == UNIQUE_VIOLATION_PGCODE:
        return True
    return "unique" in str(error.orig).lower()


@contextmanager
def storage_errors(session: Session, table: str) -> Iterator[None]:
    """
    Translate SQLAlchemy failures into the service error taxonomy.

    Unique-constraint violations become ConflictError; any other database
    failure, other constraint violations included, becomes StorageError. The
    session is rolled back in both cases.
    """
    try:
        yield
    except IntegrityError as e:
        session.rollback()
        if not is_unique_violation(e):
            logger.exception("Constraint violation on %s", table)
            raise StorageError("Storage operation failed") from e
        logger.info("Unique constraint violation on %s", table)
        raise ConflictError("Record violates a uniqueness constraint") from e
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("Storage failure on %s", table)
        raise StorageError("Storage operation failed") from e


class GenericRepository(Generic[ModelT]):
    """
    Data access for one entity type.

    Entities with an ``is_deleted`` column are soft-deleted: ``delete_soft`` sets
    the tombstone and the read methods hide tombstoned rows. ``delete`` removes
    the row physically.
    """

    def __init__(self, session: Session, model: type[ModelT]) -> None:
        self.session = session
        self.model = model

    @property
    def supports_soft_delete(self) -> bool:
        return hasattr(self.model, "is_deleted")

    def errors(self) -> AbstractContextManager[None]:
        return storage_errors(self.session, self.model.__tablename__)

    def query(self) -> Query:
        """Base query for live rows (tombstoned rows excluded)."""
        query = self.session.query(self.model)
        if self.supports_soft_delete:
            query = query.filter(self.model.is_deleted.is_(False))
        return query

    def get_all(self) -> list[ModelT]:
        with self.errors():
            return self.query().order_by(self.model.id).all()

    def get_by_id(self, entity_id: int) -> ModelT | None:
        with self.errors():
            return self.query().filter(self.model.id == entity_id).first()

    def create(self, entity: ModelT) -> ModelT:
        with self.errors():
            self.session.add(entity)
            self.session.commit()
            self.session.refresh(entity)
        return entity

    def update(self, entity: ModelT, **changes: Any) -> ModelT:
        for field, value in changes.items():
            if not hasattr(self.model, field):
                raise AttributeError(f"{self.model.__name__} has no attribute {field!r}")
            setattr(entity, field, value)
        with self.errors():
            self.session.commit()
        return entity

    def delete(self, entity_id: int) -> bool:
        """Physically remove the row. Returns False when it does not exist."""
        with self.errors():
            entity = self.session.get(self.model, entity_id)
            if entity is None:
                return False
            self.session.delete(entity)
            self.session.commit()
        return True

    def delete_soft(self, entity_id: int) -> ModelT | None:
        """Mark the row deleted and return it, or None when missing or already deleted."""
        if not self.supports_soft_delete:
            raise TypeError(f"{self.model.__name__} does not support soft delete")
        entity = self.get_by_id(entity_id)
        if entity is None:
            return None
        with self.errors():
            entity.is_deleted = True
            self.session.commit()
        return entity
