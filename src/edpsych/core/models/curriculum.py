"""
Curriculum Planning Models

Curriculum plans and the teacher/TA collaboration around them:
collaborators with roles, comments and tasks.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, String, Text, UniqueConstraint
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, SoftDeleteMixin, TimestampMixin, UUIDPrimaryKeyMixin


class CurriculumPlan(Base, UUIDPrimaryKeyMixin, TimestampMixin, SoftDeleteMixin):
    """A curriculum plan owned by one educator."""

    __tablename__ = "curriculum_plans"
    __table_args__ = (Index("idx_curriculum_plans_user", "user_id"),)

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    subject: Mapped[str | None] = mapped_column(String(50), nullable=True)
    key_stage: Mapped[str | None] = mapped_column(String(20), nullable=True)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    objectives: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    content: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    collaborators: Mapped[list[CurriculumPlanCollaborator]] = relationship(
        back_populates="plan", cascade="all, delete-orphan"
    )
    comments: Mapped[list[CurriculumPlanComment]] = relationship(
        back_populates="plan", cascade="all, delete-orphan"
    )
    tasks: Mapped[list[CurriculumPlanTask]] = relationship(
        back_populates="plan", cascade="all, delete-orphan"
    )


class CurriculumPlanCollaborator(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A user granted editor or viewer rights on a plan."""

    __tablename__ = "curriculum_plan_collaborators"
    __table_args__ = (
        UniqueConstraint("plan_id", "user_id", name="uq_plan_collaborator"),
        CheckConstraint("role IN ('editor', 'viewer')", name="check_collaborator_role"),
    )

    plan_id: Mapped[UUID] = mapped_column(
        ForeignKey("curriculum_plans.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    role: Mapped[str] = mapped_column(String(10), nullable=False)

    plan: Mapped[CurriculumPlan] = relationship(back_populates="collaborators")


class CurriculumPlanComment(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Discussion comment on a plan."""

    __tablename__ = "curriculum_plan_comments"

    plan_id: Mapped[UUID] = mapped_column(
        ForeignKey("curriculum_plans.id", ondelete="CASCADE"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)

    plan: Mapped[CurriculumPlan] = relationship(back_populates="comments")


class CurriculumPlanTask(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A to-do item on a plan, optionally assigned to a collaborator."""

    __tablename__ = "curriculum_plan_tasks"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'in_progress', 'completed')", name="check_plan_task_status"
        ),
    )

    plan_id: Mapped[UUID] = mapped_column(
        ForeignKey("curriculum_plans.id", ondelete="CASCADE"), nullable=False
    )
    creator_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    assigned_to_id: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="pending")
    due_date: Mapped[datetime | None] = mapped_column(nullable=True)

    plan: Mapped[CurriculumPlan] = relationship(back_populates="tasks")
