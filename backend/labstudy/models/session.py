from datetime import datetime
from typing import Any
from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import DateTime, JSON, String, Text
from labstudy.db import Base
from labstudy.models.base import IdMixin, TimestampMixin

class StudySession(IdMixin, TimestampMixin, Base):
    __tablename__ = "sessions"

    sid: Mapped[str] = mapped_column(String(16), index=True, nullable=False)
    # Weak references: no FK, the study or participant may be deleted independently
    study_id: Mapped[str | None] = mapped_column(String(32), index=True, nullable=True)
    participant_id: Mapped[str | None] = mapped_column(String(32), index=True, nullable=True)
    started_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False)
    ended_at: Mapped[datetime | None] = mapped_column(DateTime(timezone=True), nullable=True)
    status: Mapped[str] = mapped_column(String(40), nullable=False, default="Scheduled")
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    results: Mapped[list[Any] | None] = mapped_column(JSON, nullable=True)
    created_by: Mapped[str] = mapped_column(String(255), nullable=False, default="System")
    # Append-only audit trail of {"at", "event", "actor"} entries
    history: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)
