"""
Assessment Models

Assessments (metadata, settings and question content), student attempts,
and per-question responses.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    Float,
    ForeignKey,
    Index,
    Integer,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class Assessment(Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin):
    """An assessment aligned to a UK key stage and subject.

    Questions are stored as a validated JSON document; each carries its own
    stable string id so responses can reference it.
    """

    __tablename__ = "assessments"
    __table_args__ = (
        CheckConstraint("passing_score BETWEEN 0 AND 100", name="check_assessment_passing_score"),
        CheckConstraint("max_attempts >= 1", name="check_assessment_max_attempts"),
        Index("idx_assessments_stage_subject", "key_stage", "subject"),
    )

    created_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    # Metadata
    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    key_stage: Mapped[str] = mapped_column(String(20), nullable=False)
    subject: Mapped[str] = mapped_column(String(40), nullable=False)
    assessment_type: Mapped[str] = mapped_column(String(30), nullable=False)
    difficulty_level: Mapped[str] = mapped_column(String(20), nullable=False)
    topics: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    estimated_duration: Mapped[int] = mapped_column(Integer, nullable=False, default=30)

    # Content
    questions: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False)
    sections: Mapped[list[dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    # Settings
    passing_score: Mapped[float] = mapped_column(Float, nullable=False, default=60)
    max_attempts: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    time_limit: Mapped[int | None] = mapped_column(Integer, nullable=True, comment="Minutes")
    randomize_questions: Mapped[bool] = mapped_column(Boolean, default=False)
    show_feedback: Mapped[str] = mapped_column(String(10), nullable=False, default="end")

    attempts: Mapped[list[AssessmentAttempt]] = relationship(back_populates="assessment")


class AssessmentAttempt(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """One student's sitting of an assessment."""

    __tablename__ = "assessment_attempts"
    __table_args__ = (Index("idx_attempts_assessment_student", "assessment_id", "student_id"),)

    assessment_id: Mapped[UUID] = mapped_column(ForeignKey("assessments.id"), nullable=False)
    student_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    start_time: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
    end_time: Mapped[datetime | None] = mapped_column(nullable=True)
    is_complete: Mapped[bool] = mapped_column(Boolean, default=False)

    # Result summary (populated on completion)
    score: Mapped[float | None] = mapped_column(Float, nullable=True)
    max_score: Mapped[float | None] = mapped_column(Float, nullable=True)
    percentage: Mapped[float | None] = mapped_column(Float, nullable=True)
    passed: Mapped[bool | None] = mapped_column(Boolean, nullable=True)
    result: Mapped[dict[str, Any] | None] = mapped_column(
        JSON, nullable=True, comment="Full result: question results, analytics, feedback"
    )

    assessment: Mapped[Assessment] = relationship(back_populates="attempts")
    responses: Mapped[list[AttemptResponse]] = relationship(
        back_populates="attempt", cascade="all, delete-orphan"
    )


class AttemptResponse(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A student's answer to one question within an attempt."""

    __tablename__ = "attempt_responses"
    __table_args__ = (
        UniqueConstraint("attempt_id", "question_id", name="uq_attempt_question_response"),
    )

    attempt_id: Mapped[UUID] = mapped_column(
        ForeignKey("assessment_attempts.id", ondelete="CASCADE"), nullable=False
    )
    question_id: Mapped[str] = mapped_column(String(100), nullable=False)
    response: Mapped[Any] = mapped_column(JSON, nullable=True)
    time_spent: Mapped[int] = mapped_column(Integer, nullable=False, default=0, comment="Seconds")

    attempt: Mapped[AssessmentAttempt] = relationship(back_populates="responses")
