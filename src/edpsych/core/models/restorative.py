"""
Restorative Justice Models

Conversation frameworks and the records of conversations held with them.
"""

from __future__ import annotations

from typing import Any
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class RestorativeFramework(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A structured script for a restorative conversation."""

    __tablename__ = "restorative_frameworks"
    __table_args__ = (
        CheckConstraint(
            "age_group IN ('all', 'primary', 'secondary')", name="check_framework_age_group"
        ),
        Index("idx_frameworks_scenario", "scenario"),
    )

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    age_group: Mapped[str] = mapped_column(String(20), nullable=False, default="all")
    scenario: Mapped[str] = mapped_column(String(100), nullable=False)
    steps: Mapped[list[dict[str, Any]]] = mapped_column(
        JSON, nullable=False, comment="[{title, description, questions[]}]"
    )

    created_by_id: Mapped[UUID | None] = mapped_column(ForeignKey("users.id"), nullable=True)

    conversations: Mapped[list[RestorativeConversation]] = relationship(
        back_populates="framework"
    )


class RestorativeConversation(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Record of a restorative conversation run by a member of staff."""

    __tablename__ = "restorative_conversations"
    __table_args__ = (
        CheckConstraint(
            "status IN ('draft', 'in_progress', 'completed')", name="check_conversation_status"
        ),
        Index("idx_conversations_user", "user_id"),
    )

    framework_id: Mapped[UUID] = mapped_column(
        ForeignKey("restorative_frameworks.id"), nullable=False
    )
    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    participants: Mapped[list[dict[str, str]]] = mapped_column(
        JSON, nullable=False, comment="[{name, role}]"
    )
    key_points: Mapped[str | None] = mapped_column(Text, nullable=True)
    agreements: Mapped[str | None] = mapped_column(Text, nullable=True)
    follow_up_plan: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(20), nullable=False, default="draft")

    framework: Mapped[RestorativeFramework] = relationship(back_populates="conversations")
