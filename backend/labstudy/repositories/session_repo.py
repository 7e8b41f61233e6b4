from __future__ import annotations
from typing import Any, Optional
from sqlalchemy.exc import SQLAlchemyError
from labstudy.models import StudySession
from labstudy.repositories.base import BaseRepository

class SessionRepository(BaseRepository[StudySession]):
    model = StudySession

    def create(self, session: StudySession) -> StudySession:
        return self.add_and_refresh(session)

    def update_fields(
        self,
        session_id: str,
        fields: dict[str, Any],
        append_history: list[dict[str, Any]],
    ) -> Optional[StudySession]:
        """Set `fields` and extend `history` in one commit. None if the row is gone."""
        sess = self.get(session_id)
        if sess is None:
            return None
        try:
            for key, value in fields.items():
                setattr(sess, key, value)
            if append_history:
                # Reassign so the JSON column is flagged dirty
                sess.history = [*(sess.history or []), *append_history]
            self.db.commit()
            self.db.refresh(sess)
            return sess
        except SQLAlchemyError as e:
            raise self._fail(e, "update") from e
