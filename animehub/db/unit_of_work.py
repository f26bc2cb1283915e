"""Explicit unit of work over a SQLAlchemy session.

Managers receive a ``UnitOfWork`` instead of a bare session so every write
they issue (tracked inserts/updates/deletes and set-based statements alike)
lands in one transaction and is committed by a single ``commit()`` call that
reports how many rows were affected.
"""

from __future__ import annotations

import logging
from typing import Any, TypeVar

from sqlalchemy import Delete, Update
from sqlalchemy.orm import Session

logger = logging.getLogger(__name__)

T = TypeVar("T")


class UnitOfWork:
    def __init__(self, db: Session):
        self.db = db
        self._bulk_rows = 0

    # reads

    def get(self, model: type[T], ident: Any) -> T | None:
        return self.db.get(model, ident)

    def scalar(self, stmt):
        return self.db.execute(stmt).scalars().first()

    def scalars(self, stmt) -> list:
        return list(self.db.execute(stmt).scalars().all())

    def pending(self, model: type[T]) -> list[T]:
        """Instances of ``model`` queued for insert and not yet flushed."""
        return [obj for obj in self.db.new if isinstance(obj, model)]

    # writes

    def add(self, entity: object) -> None:
        self.db.add(entity)

    def delete(self, entity: object) -> None:
        self.db.delete(entity)

    def flush(self) -> None:
        self.db.flush()

    def bulk_update(self, stmt: Update) -> int:
        """Run a set-based UPDATE inside the current transaction."""
        return self._execute_bulk(stmt)

    def bulk_delete(self, stmt: Delete) -> int:
        """Run a set-based DELETE inside the current transaction."""
        return self._execute_bulk(stmt)

    def _execute_bulk(self, stmt) -> int:
        result = self.db.execute(stmt)
        rowcount = max(result.rowcount or 0, 0)
        self._bulk_rows += rowcount
        return rowcount

    def commit(self) -> int:
        """Commit everything queued so far and return the affected row count."""
        modified = sum(1 for obj in self.db.dirty if self.db.is_modified(obj))
        affected = self._bulk_rows + len(self.db.new) + len(self.db.deleted) + modified
        try:
            self.db.commit()
        except Exception:
            self.rollback()
            raise
        self._bulk_rows = 0
        logger.debug("unit_of_work_committed", extra={"rows_affected": affected})
        return affected

    def rollback(self) -> None:
        self.db.rollback()
        self._bulk_rows = 0
