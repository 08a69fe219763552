"""Task ORM — a unit of paid work posted by a client.

Invariants:
    - client_id is always set; worker_id is NULL until a worker is assigned
    - status is an open string (the external schema does not constrain it)
    - worker relationship is view-only: joined for display, never written

Design Decisions:
    - Submission/review columns live on the task row, not a separate table
    - primaryjoin on worker_id -> user_profiles.id without a FK constraint:
      the external schema owns referential rules
"""

import uuid
from typing import Optional
from datetime import datetime, timezone

from sqlalchemy import String, Text, Float, Integer, Boolean, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from taskhive.db.base import Base


class Task(Base):
    __tablename__ = "tasks"

    id: Mapped[str] = mapped_column(
        Uuid(as_uuid=False), primary_key=True,
        default=lambda: str(uuid.uuid4()),
    )
    client_id: Mapped[str] = mapped_column(Uuid(as_uuid=False), nullable=False)
    worker_id: Mapped[str | None] = mapped_column(Uuid(as_uuid=False), nullable=True)
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False, default="")
    payment: Mapped[float] = mapped_column(Float, nullable=False)
    time_taken: Mapped[int | None] = mapped_column(Integer, nullable=True)
    status: Mapped[str] = mapped_column(String(30), nullable=False, default="pending")
    payment_status: Mapped[str | None] = mapped_column(String(30), nullable=True)

    # Submission / review
    submission_text: Mapped[str | None] = mapped_column(Text, nullable=True)
    comment: Mapped[str | None] = mapped_column(Text, nullable=True)
    file_path: Mapped[str | None] = mapped_column(String(512), nullable=True)
    submitted_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    completed_at: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )
    requires_human_review: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    ai_validation_summary: Mapped[str | None] = mapped_column(Text, nullable=True)
    score: Mapped[float | None] = mapped_column(Float, nullable=True)

    # Posting details
    category: Mapped[str | None] = mapped_column(String(50), nullable=True)
    difficulty: Mapped[str | None] = mapped_column(String(20), nullable=True)
    deadline: Mapped[datetime | None] = mapped_column(
        DateTime(timezone=True), nullable=True,
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )
    updated_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        nullable=False,
        default=lambda: datetime.now(timezone.utc),
    )

    worker_profile: Mapped[Optional["UserProfile"]] = relationship(
        "UserProfile",
        primaryjoin="foreign(Task.worker_id) == UserProfile.id",
        viewonly=True, lazy="selectin",
    )
