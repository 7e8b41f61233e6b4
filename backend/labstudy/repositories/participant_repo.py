from __future__ import annotations
from typing import Optional
from sqlalchemy import select
from sqlalchemy.exc import SQLAlchemyError
from labstudy.models import Participant
from labstudy.repositories.base import BaseRepository

class ParticipantRepository(BaseRepository[Participant]):
    model = Participant

    def get_by_external_id(self, external_id: str) -> Optional[Participant]:
        stmt = select(Participant).where(Participant.external_id == external_id).limit(1)
        try:
            return self.db.execute(stmt).scalar_one_or_none()
        except SQLAlchemyError as e:
            raise self._fail(e, "read") from e

    def create(self, *, external_id: str, name: str | None, email: str | None,
               phone: str | None, notes: str | None) -> Participant:
        p = Participant(external_id=external_id, name=name, email=email, phone=phone, notes=notes)
        return self.add_and_refresh(p)
