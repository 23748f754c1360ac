"""
Emotional Regulation Models

Emotion check-ins, journals, per-user regulation settings and an activity log.
Records are strictly owner-scoped.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin, utcnow


class EmotionRecord(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A single emotion check-in."""

    __tablename__ = "emotion_records"
    __table_args__ = (
        CheckConstraint("intensity BETWEEN 1 AND 10", name="check_emotion_intensity"),
        Index("idx_emotion_records_user_time", "user_id", "timestamp"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    emotion: Mapped[str] = mapped_column(String(50), nullable=False)
    intensity: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    triggers: Mapped[str | None] = mapped_column(String(500), nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    timestamp: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class EmotionJournal(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Free-text journal entry tagged with emotions."""

    __tablename__ = "emotion_journals"
    __table_args__ = (Index("idx_emotion_journals_user_time", "user_id", "timestamp"),)

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    emotions: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    timestamp: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)


class EmotionalRegulationSettings(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Per-user preferences for pattern recognition and strategy suggestions."""

    __tablename__ = "emotional_regulation_settings"
    __table_args__ = (
        CheckConstraint(
            "reminder_frequency IN ('low', 'medium', 'high')", name="check_reminder_frequency"
        ),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), unique=True, nullable=False)

    pattern_recognition_enabled: Mapped[bool] = mapped_column(default=True)
    pattern_recognition_settings: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict
    )
    strategy_preferences: Mapped[dict[str, Any]] = mapped_column(
        JSON,
        nullable=False,
        default=dict,
        comment="{preferred_types, complexity, auto_suggest, favorites}",
    )
    reminder_frequency: Mapped[str] = mapped_column(String(10), nullable=False, default="medium")


class RegulationLog(Base, UUIDPrimaryKeyMixin):
    """Append-only log of settings changes and strategy feedback."""

    __tablename__ = "emotional_regulation_logs"
    __table_args__ = (Index("idx_regulation_logs_user_action", "user_id", "action"),)

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    action: Mapped[str] = mapped_column(String(50), nullable=False)
    details: Mapped[dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)
    timestamp: Mapped[datetime] = mapped_column(nullable=False, default=utcnow)
