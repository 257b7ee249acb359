"""Generic base for database-backed services."""

from __future__ import annotations

from typing import Generic, Optional, Type, TypeVar
from uuid import UUID

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from engagement.db import Base
from engagement.exceptions import PersistenceError
from engagement.infra.logging_config import get_logger

ModelType = TypeVar("ModelType", bound=Base)

logger = get_logger("services")


class BaseService(Generic[ModelType]):
    def __init__(self, db: Session, model: Type[ModelType]) -> None:
        self.db = db
        self.model = model

    def get_record(self, record_id: UUID) -> Optional[ModelType]:
        return self.db.query(self.model).filter(self.model.id == record_id).first()

    def lock_record(self, record_id: UUID) -> Optional[ModelType]:
        """
        Re-read a row with fresh values and hold a row lock until commit.

        Read-modify-write paths call this before changing a record so a
        concurrent writer on the same row waits instead of being overwritten.
        The lock is a no-op on SQLite, where writes are already serialized.
        """
        return (
            self.db.query(self.model)
            .filter(self.model.id == record_id)
            .populate_existing()
            .with_for_update()
            .first()
        )

    def save(self, record: Optional[ModelType] = None) -> Optional[ModelType]:
        """
        Commit the session and refresh ``record`` when given.

        Any SQLAlchemy failure rolls the session back and is re-raised as
        PersistenceError.
        """
        if record is not None:
            self.db.add(record)
        try:
            self.db.commit()
        except SQLAlchemyError as exc:
            self.db.rollback()
            logger.error(
                "Failed to persist %s: %s", self.model.__tablename__, exc
            )
            raise PersistenceError(
                f"Failed to persist {self.model.__tablename__}"
            ) from exc
        if record is not None:
            self.db.refresh(record)
        return record

    def delete_record(self, record_id: UUID) -> bool:
        record = self.get_record(record_id)
        if record is None:
            return False
        self.db.delete(record)
        self.save()
        return True
