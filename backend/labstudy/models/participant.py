from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import String, Text
from labstudy.db import Base
from labstudy.models.base import IdMixin, TimestampMixin

class Participant(IdMixin, TimestampMixin, Base):
    __tablename__ = "participants"

    external_id: Mapped[str] = mapped_column(String(40), index=True, nullable=False)
    name: Mapped[str | None] = mapped_column(String(120), nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(40), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
