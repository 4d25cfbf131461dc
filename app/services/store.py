# app/services/store.py
"""
Persistence layer used by the import pipeline and the CRUD routes.

RecordStore wraps one SQLAlchemy session. Every write method commits its own
database transaction; on failure the session is rolled back and the error
re-raised as CommitError, so nothing is ever half-written.
"""

from __future__ import annotations

from typing import Any, Iterable, List, Sequence

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.logging_setup import get_logger
from db import Base

logger = get_logger("store")


class CommitError(Exception):
    """The database rejected a write; nothing was persisted."""


class RecordNotFound(LookupError):
    """No record with the requested id."""


class RecordStore:
    def __init__(self, db: Session):
        self.db = db

    # ---- Reads ----

    def query(self, model, *filters, order_by: Sequence[Any] = ()) -> List[Any]:
        q = self.db.query(model)
        if filters:
            q = q.filter(*filters)
        if order_by:
            q = q.order_by(*order_by)
        return q.all()

    def get(self, model, record_id: int):
        record = self.db.get(model, record_id)
        if record is None:
            raise RecordNotFound(f"{model.__tablename__} #{record_id} not found")
        return record

    # ---- Writes ----

    def batch_write(self, records: Iterable[Base]) -> int:
        """
        Insert all `records` in one database transaction (all-or-nothing).
        Returns the number of inserted records.
        """
        records = list(records)
        try:
            self.db.add_all(records)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Batch write of %d records failed", len(records))
            raise CommitError(str(e.orig if getattr(e, "orig", None) else e)) from e

        logger.info("Inserted %d records", len(records))
        return len(records)

    def add_one(self, record: Base):
        self.batch_write([record])
        self.db.refresh(record)
        return record

    def update_one(self, model, record_id: int, fields: dict):
        """Overwrite the given fields of one record."""
        record = self.get(model, record_id)
        for name, value in fields.items():
            setattr(record, name, value)
        try:
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Update of %s #%s failed", model.__tablename__, record_id)
            raise CommitError(str(e)) from e
        self.db.refresh(record)
        return record

    def delete_one(self, model, record_id: int) -> None:
        record = self.get(model, record_id)
        try:
            self.db.delete(record)
            self.db.commit()
        except SQLAlchemyError as e:
            self.db.rollback()
            logger.exception("Delete of %s #%s failed", model.__tablename__, record_id)
            raise CommitError(str(e)) from e
