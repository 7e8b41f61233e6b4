from sqlalchemy.orm import Mapped, mapped_column
from sqlalchemy import JSON, String, Text
from labstudy.db import Base
from labstudy.models.base import IdMixin, TimestampMixin

class Study(IdMixin, TimestampMixin, Base):
    __tablename__ = "studies"

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    slug: Mapped[str | None] = mapped_column(String(200), index=True, nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(40), nullable=False, default="draft")
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
