"""Session lifecycle: creation, field-level diffing and the audit trail.

Every accepted change to a tracked field (status, started_at, notes,
ended_at) appends exactly one ``{"at", "event", "actor"}`` entry to the
session history. History entries are never edited or removed.

Updates read the stored session, diff against it and write the staged
fields in a second step without a version check, so two concurrent
updates of the same session resolve as last-writer-wins.
"""
from __future__ import annotations

import logging
from collections.abc import Callable, Mapping
from dataclasses import dataclass, field
from datetime import datetime
from typing import Any, Optional, Protocol

from labstudy.errors import NoChangeError, NotFoundError, ValidationError
from labstudy.models import StudySession
from labstudy.models.base import as_utc, gen_id, utcnow

log = logging.getLogger(__name__)

SYSTEM_ACTOR = "System"
INITIAL_STATUS = "Scheduled"
STATUS_MAX_LENGTH = 40

UPDATABLE_FIELDS = ("status", "started_at", "ended_at", "notes", "results")


class SessionStore(Protocol):
    """Persistence interface for sessions."""

    def get(self, session_id: str) -> Optional[StudySession]:
        """Return a session by id, if present."""

    def create(self, session: StudySession) -> StudySession:
        """Persist a new session and return it."""

    def update_fields(
        self,
        session_id: str,
        fields: dict[str, Any],
        append_history: list[dict[str, Any]],
    ) -> Optional[StudySession]:
        """Apply fields and append history atomically. None if missing."""


@dataclass(frozen=True)
class SessionChanges:
    """Fields to write and history entries to append for one update."""

    fields: dict[str, Any]
    history: list[dict[str, Any]] = field(default_factory=list)


def derive_sid(session_id: str) -> str:
    """Short display code from the tail of the session id, e.g. ``S-3F9A``."""
    return f"S-{session_id[-4:].upper()}"


def parse_timestamp(value: Any, field_name: str) -> Optional[datetime]:
    """Parse an ISO-8601 timestamp. ``None`` passes through, garbage raises."""
    if value is None:
        return None
    try:
        if isinstance(value, datetime):
            return as_utc(value)
        if isinstance(value, str):
            return as_utc(datetime.fromisoformat(value.strip()))
    # OverflowError: in range locally but not once shifted to UTC
    except (ValueError, OverflowError):
        pass
    raise ValidationError(f"Invalid date for {field_name}")


def history_entry(event: str, actor: str, at: datetime) -> dict[str, Any]:
    return {"at": at.isoformat(), "event": event, "actor": actor}


def _normalize_status(value: Any) -> str:
    if not isinstance(value, str) or not value.strip():
        raise ValidationError("status cannot be blank")
    value = value.strip()
    if len(value) > STATUS_MAX_LENGTH:
        raise ValidationError(f"status must be at most {STATUS_MAX_LENGTH} characters")
    return value


def _normalize_notes(value: Any) -> Optional[str]:
    if value is None or value == "":
        return None
    if not isinstance(value, str):
        raise ValidationError("notes must be text")
    return value


def _normalize_started_at(value: Any) -> datetime:
    if value is None or value == "":
        raise ValidationError("started_at is required")
    return parse_timestamp(value, "started_at")


def _normalize_ended_at(value: Any) -> Optional[datetime]:
    if value == "":
        return None
    return parse_timestamp(value, "ended_at")


def _normalize_results(value: Any) -> Optional[list]:
    return list(value) if isinstance(value, (list, tuple)) else None


def apply_update(
    current: StudySession,
    proposed: Mapping[str, Any],
    actor: str,
    now: datetime,
) -> SessionChanges:
    """Diff ``proposed`` against ``current`` without touching storage.

    Only keys present in ``proposed`` are considered. All values are
    normalised first, so an invalid date rejects the whole update before
    anything is staged. Raises ``NoChangeError`` when nothing differs.
    """
    unknown = set(proposed) - set(UPDATABLE_FIELDS)
    if unknown:
        raise ValidationError(f"Unknown fields: {', '.join(sorted(unknown))}")

    normalized: dict[str, Any] = {}
    if "status" in proposed:
        normalized["status"] = _normalize_status(proposed["status"])
    if "started_at" in proposed:
        normalized["started_at"] = _normalize_started_at(proposed["started_at"])
    if "notes" in proposed:
        normalized["notes"] = _normalize_notes(proposed["notes"])
    if "ended_at" in proposed:
        normalized["ended_at"] = _normalize_ended_at(proposed["ended_at"])
    if "results" in proposed:
        normalized["results"] = _normalize_results(proposed["results"])

    staged: dict[str, Any] = {}
    history: list[dict[str, Any]] = []

    if "status" in normalized and normalized["status"] != current.status:
        staged["status"] = normalized["status"]
        history.append(history_entry(f"Status changed to {normalized['status']} by {actor}", actor, now))

    if "started_at" in normalized and normalized["started_at"] != as_utc(current.started_at):
        staged["started_at"] = normalized["started_at"]
        history.append(history_entry(f"Start time updated by {actor}", actor, now))

    if "notes" in normalized and normalized["notes"] != _normalize_notes(current.notes):
        staged["notes"] = normalized["notes"]
        history.append(history_entry(f"Notes updated by {actor}", actor, now))

    if "ended_at" in normalized and normalized["ended_at"] != as_utc(current.ended_at):
        staged["ended_at"] = normalized["ended_at"]
        history.append(history_entry(f"End time updated by {actor}", actor, now))

    # results are stored but not audited
    if "results" in normalized and normalized["results"] != current.results:
        staged["results"] = normalized["results"]

    if not staged and not history:
        raise NoChangeError()

    staged["updated_at"] = now
    return SessionChanges(fields=staged, history=history)


@dataclass
class SessionLifecycleManager:
    """Creates sessions and applies audited partial updates."""

    repository: SessionStore
    clock: Callable[[], datetime] = utcnow

    def create_session(
        self,
        *,
        study_id: Optional[str] = None,
        participant_id: Optional[str] = None,
        started_at: Any = None,
        notes: Optional[str] = None,
        actor: str = SYSTEM_ACTOR,
    ) -> StudySession:
        actor = actor or SYSTEM_ACTOR
        now = self.clock()
        start = parse_timestamp(started_at, "started_at") if started_at not in (None, "") else now
        session_id = gen_id()
        session = StudySession(
            id=session_id,
            sid=derive_sid(session_id),
            study_id=study_id or None,
            participant_id=participant_id or None,
            started_at=start,
            ended_at=None,
            notes=notes or None,
            results=None,
            status=INITIAL_STATUS,
            created_at=now,
            updated_at=now,
            created_by=actor,
            history=[history_entry(f"Session created by {actor}", actor, now)],
        )
        created = self.repository.create(session)
        log.info("session %s (%s) created by %s", created.id, created.sid, actor)
        return created

    def update_session(self, session_id: str, proposed: Mapping[str, Any], actor: str) -> StudySession:
        actor = actor or SYSTEM_ACTOR
        current = self.repository.get(session_id)
        if current is None:
            raise NotFoundError("Session not found")

        changes = apply_update(current, proposed, actor, self.clock())
        updated = self.repository.update_fields(session_id, changes.fields, changes.history)
        if updated is None:
            raise NotFoundError("Session not found")
        log.info(
            "session %s updated by %s: %s",
            session_id, actor, ", ".join(k for k in changes.fields if k != "updated_at"),
        )
        return updated
