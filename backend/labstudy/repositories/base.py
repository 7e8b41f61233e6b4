# labstudy/repositories/base.py
from __future__ import annotations
import logging
from typing import Generic, Iterable, Optional, TypeVar

from sqlalchemy import func, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from labstudy.errors import StorageError

T = TypeVar("T")  # SQLAlchemy model type

log = logging.getLogger(__name__)

class BaseRepository(Generic[T]):
    """Lightweight base for repositories using SQLAlchemy 2.0 style.

    Every SQLAlchemyError is rolled back and re-raised as StorageError so
    routers never see driver exceptions.
    """
    model: type[T]

    def __init__(self, db: Session):
        self.db = db

    def _fail(self, exc: SQLAlchemyError, action: str) -> StorageError:
        self.db.rollback()
        log.exception("%s failed on %s", action, self.model.__tablename__)
        return StorageError(f"Could not {action} {self.model.__tablename__}")

    # READS
    def get(self, entity_id: str) -> Optional[T]:
        try:
            return self.db.get(self.model, entity_id)
        except SQLAlchemyError as e:
            raise self._fail(e, "read") from e

    def list(self) -> list[T]:
        stmt = select(self.model).order_by(self.model.created_at.asc())
        try:
            return list(self.db.execute(stmt).scalars().all())
        except SQLAlchemyError as e:
            raise self._fail(e, "list") from e

    def get_many(self, ids: Iterable[str]) -> dict[str, T]:
        wanted = sorted({i for i in ids if i})
        if not wanted:
            return {}
        stmt = select(self.model).where(self.model.id.in_(wanted))
        try:
            return {row.id: row for row in self.db.execute(stmt).scalars().all()}
        except SQLAlchemyError as e:
            raise self._fail(e, "read") from e

    def count(self) -> int:
        try:
            return self.db.execute(select(func.count()).select_from(self.model)).scalar_one()
        except SQLAlchemyError as e:
            raise self._fail(e, "count") from e

    # WRITES
    def add_and_refresh(self, entity: T) -> T:
        try:
            self.db.add(entity)
            self.db.commit()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            raise self._fail(e, "create") from e

    def update(self, entity_id: str, fields: dict) -> Optional[T]:
        entity = self.get(entity_id)
        if entity is None:
            return None
        try:
            for key, value in fields.items():
                setattr(entity, key, value)
            self.db.commit()
            self.db.refresh(entity)
            return entity
        except SQLAlchemyError as e:
            raise self._fail(e, "update") from e

    def delete(self, entity_id: str) -> bool:
        entity = self.get(entity_id)
        if entity is None:
            return False
        try:
            self.db.delete(entity)
            self.db.commit()
            return True
        except SQLAlchemyError as e:
            raise self._fail(e, "delete") from e
