from typing import Annotated, Any
from pydantic import BaseModel, ConfigDict, Field
from labstudy.schemas.common import UtcDateTime

# Notes: up to 5000 chars; "" is turned into null by the lifecycle manager
NotesStr = Annotated[str, Field(max_length=5000)]

# Ids are 32-char hex; the columns are String(32)
RefStr = Annotated[str, Field(max_length=32)]

class SessionCreate(BaseModel):
    study_id: RefStr | None = None
    participant_id: RefStr | None = None
    # Raw string on purpose: unparseable dates are a 400, not a 422
    started_at: str | None = None
    notes: NotesStr | None = None

class SessionUpdate(BaseModel):
    """Sparse update; only fields present in the request body are diffed."""
    status: str | None = None
    started_at: str | None = None
    ended_at: str | None = None
    notes: NotesStr | None = None
    results: Any = None

    model_config = ConfigDict(extra="forbid")

class HistoryEntry(BaseModel):
    at: UtcDateTime
    event: str
    actor: str | None = None

class StudyRef(BaseModel):
    id: str
    title: str | None = None

class ParticipantRef(BaseModel):
    id: str
    name: str | None = None

class SessionRead(BaseModel):
    id: str
    sid: str
    study_id: str | None = None
    participant_id: str | None = None
    started_at: UtcDateTime
    ended_at: UtcDateTime | None = None
    status: str
    notes: str | None = None
    results: list[Any] | None = None
    created_by: str
    created_at: UtcDateTime
    updated_at: UtcDateTime
    history: list[HistoryEntry] = []

    # Resolved weak references; "(deleted)" when the target is gone
    study: StudyRef | None = None
    participant: ParticipantRef | None = None

    model_config = {"from_attributes": True}
