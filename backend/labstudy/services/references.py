"""Resolve the weak study/participant references held by sessions."""
from __future__ import annotations

from typing import Any, Iterable, Optional

from labstudy.models import Participant, Study, StudySession
from labstudy.repositories.participant_repo import ParticipantRepository
from labstudy.repositories.study_repo import StudyRepository

DELETED = "(deleted)"


def study_view(ref: Optional[str], study: Optional[Study]) -> Optional[dict[str, Any]]:
    if not ref:
        return None
    if study is None:
        return {"id": ref, "title": DELETED}
    return {"id": study.id, "title": study.title}


def participant_view(ref: Optional[str], participant: Optional[Participant]) -> Optional[dict[str, Any]]:
    if not ref:
        return None
    if participant is None:
        return {"id": ref, "name": DELETED}
    return {"id": participant.id, "name": participant.name}


class ReferenceResolver:
    """Attaches ``study`` and ``participant`` views to sessions, batching lookups."""

    def __init__(self, studies: StudyRepository, participants: ParticipantRepository):
        self.studies = studies
        self.participants = participants

    def resolve(self, sessions: Iterable[StudySession]) -> list[dict[str, Any]]:
        sessions = list(sessions)
        studies = self.studies.get_many(s.study_id for s in sessions)
        participants = self.participants.get_many(s.participant_id for s in sessions)
        return [
            {
                "session": s,
                "study": study_view(s.study_id, studies.get(s.study_id)),
                "participant": participant_view(s.participant_id, participants.get(s.participant_id)),
            }
            for s in sessions
        ]

    def resolve_one(self, session: StudySession) -> dict[str, Any]:
        return self.resolve([session])[0]
