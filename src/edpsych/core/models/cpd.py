"""
Continuing Professional Development (CPD) Models

Activities, goals, reflections and evidence logged by educators.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import (
    JSON,
    CheckConstraint,
    Float,
    ForeignKey,
    Index,
    SmallInteger,
    String,
    Text,
    UniqueConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin

CPD_STATUSES = ("Planned", "In Progress", "Completed")


class CPDActivity(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A single CPD activity (course, webinar, reading, observation...)."""

    __tablename__ = "cpd_activities"
    __table_args__ = (
        CheckConstraint(
            "status IN ('Planned', 'In Progress', 'Completed')", name="check_cpd_activity_status"
        ),
        CheckConstraint("duration >= 0", name="check_cpd_duration"),
        CheckConstraint("points >= 0", name="check_cpd_points"),
        Index("idx_cpd_activities_user_date", "user_id", "date"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    provider: Mapped[str | None] = mapped_column(String(200), nullable=True)
    date: Mapped[datetime] = mapped_column(nullable=False)
    duration: Mapped[float] = mapped_column(Float, nullable=False, comment="Hours")
    points: Mapped[float] = mapped_column(Float, nullable=False)
    categories: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    standards: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="Planned")
    evidence: Mapped[str | None] = mapped_column(Text, nullable=True)
    reflection: Mapped[str | None] = mapped_column(Text, nullable=True)

    reflections: Mapped[list[CPDReflection]] = relationship(
        back_populates="activity", cascade="all, delete-orphan"
    )
    evidence_items: Mapped[list[CPDEvidence]] = relationship(
        back_populates="activity", cascade="all, delete-orphan"
    )

    @property
    def is_completed(self) -> bool:
        return self.status == "Completed"


class CPDGoal(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A points target tied to CPD categories and professional standards."""

    __tablename__ = "cpd_goals"
    __table_args__ = (
        CheckConstraint("target_points >= 0", name="check_cpd_goal_target"),
        Index("idx_cpd_goals_user_deadline", "user_id", "deadline"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    target_points: Mapped[float] = mapped_column(Float, nullable=False)
    categories: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    standards: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    deadline: Mapped[datetime] = mapped_column(nullable=False)


class CPDReflection(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Reflection on a completed activity (one per activity per user)."""

    __tablename__ = "cpd_reflections"
    __table_args__ = (
        UniqueConstraint("activity_id", "user_id", name="uq_cpd_reflection_activity_user"),
        CheckConstraint(
            "impact_rating IS NULL OR (impact_rating BETWEEN 1 AND 5)",
            name="check_cpd_impact_rating",
        ),
    )

    activity_id: Mapped[UUID] = mapped_column(
        ForeignKey("cpd_activities.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    content: Mapped[str] = mapped_column(Text, nullable=False)
    impact_rating: Mapped[int | None] = mapped_column(SmallInteger, nullable=True)
    next_steps: Mapped[str | None] = mapped_column(Text, nullable=True)

    activity: Mapped[CPDActivity] = relationship(back_populates="reflections")


class CPDEvidence(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Uploaded evidence (certificate, slides, notes) for an activity."""

    __tablename__ = "cpd_evidence"

    activity_id: Mapped[UUID] = mapped_column(
        ForeignKey("cpd_activities.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_type: Mapped[str] = mapped_column(String(50), nullable=False)

    activity: Mapped[CPDActivity] = relationship(back_populates="evidence_items")
