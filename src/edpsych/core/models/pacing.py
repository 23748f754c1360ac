"""
Progress Pacing Models

Saved learning-pace plans generated for a student or curriculum plan.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, Boolean, CheckConstraint, Float, ForeignKey, Index, String
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class ProgressPacing(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A pacing plan requested by a member of staff."""

    __tablename__ = "progress_pacings"
    __table_args__ = (
        CheckConstraint("source IN ('ai', 'rules')", name="check_pacing_source"),
        Index("idx_progress_pacings_user_created", "user_id", "created_at"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    student_id: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)
    curriculum_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("curriculum_plans.id"), nullable=True
    )

    standard_pace: Mapped[float] = mapped_column(Float, nullable=False)
    adjusted_pace: Mapped[float] = mapped_column(Float, nullable=False)
    adaptation_type: Mapped[str] = mapped_column(String(20), nullable=False)
    estimated_completion: Mapped[str | None] = mapped_column(String(50), nullable=True)
    pacing_data: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False)
    settings: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    subject: Mapped[str | None] = mapped_column(String(50), nullable=True)
    key_stage: Mapped[str | None] = mapped_column(String(20), nullable=True)
    progress_metrics_used: Mapped[bool] = mapped_column(Boolean, default=False)
    source: Mapped[str] = mapped_column(String(10), nullable=False, default="rules")
