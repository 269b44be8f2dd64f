"""Exercise model - catalog entries referenced by templates, sessions and records."""

from __future__ import annotations

import uuid
from datetime import datetime, timezone

from sqlalchemy import DateTime, String, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.db.base import Base


class Exercise(Base):
    """Exercise definition. user_id is null for global catalog entries."""

    __tablename__ = "exercises"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(255), nullable=False, index=True)
    description: Mapped[str | None] = mapped_column(String(1000), nullable=True)
    muscle_group: Mapped[str | None] = mapped_column(String(50), nullable=True, index=True)
    unit: Mapped[str] = mapped_column(String(20), default="kg")
    user_id: Mapped[uuid.UUID | None] = mapped_column(Uuid, nullable=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    template_entries: Mapped[list["TemplateExercise"]] = relationship(
        "TemplateExercise", back_populates="exercise", cascade="all, delete-orphan"
    )
