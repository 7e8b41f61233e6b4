# labstudy/repositories/user_repo.py
from __future__ import annotations
from typing import Optional

from sqlalchemy import select, func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError

from labstudy.models import User
from labstudy.repositories.base import BaseRepository

class UserRepository(BaseRepository[User]):
    model = User

    # READS
    def get_by_email(self, email: str) -> Optional[User]:
        stmt = select(User).where(func.lower(User.email) == email.lower())
        try:
            return self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._fail(e, "read") from e

    def find_conflict(self, *, email: str, name: str) -> Optional[User]:
        """First user holding this email or this name, if any."""
        stmt = select(User).where(or_(func.lower(User.email) == email.lower(), User.name == name)).limit(1)
        try:
            return self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._fail(e, "read") from e

    # WRITES
    def create(self, *, email: str, name: str, password_hash: str, role: str = "viewer") -> User:
        user = User(email=email, name=name, password_hash=password_hash, role=role)
        try:
            self.db.add(user)
            self.db.commit()
            self.db.refresh(user)
            return user
        except IntegrityError:
            self.db.rollback()
            # Re-raise a clean marker the router can map to 409
            raise ValueError("user_already_exists")

    def set_role(self, user_id: str, *, role: str) -> Optional[User]:
        """Use from an admin-only path; DB enum validates role values."""
        return self.update(user_id, {"role": role})
