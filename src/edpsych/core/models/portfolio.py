"""
Professional Portfolio Models

A public-facing record of an educator's profile, qualifications,
achievements, evidence and reflections.
"""

from __future__ import annotations

from datetime import datetime
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class PortfolioProfile(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "portfolio_profiles"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)

    name: Mapped[str] = mapped_column(String(100), nullable=False)
    title: Mapped[str] = mapped_column(String(100), nullable=False)
    school: Mapped[str | None] = mapped_column(String(100), nullable=True)
    years_experience: Mapped[int | None] = mapped_column(nullable=True)
    email: Mapped[str | None] = mapped_column(String(255), nullable=True)
    phone: Mapped[str | None] = mapped_column(String(50), nullable=True)
    biography: Mapped[str | None] = mapped_column(Text, nullable=True)
    teaching_philosophy: Mapped[str | None] = mapped_column(Text, nullable=True)
    specialisations: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    avatar_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)


class PortfolioQualification(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "portfolio_qualifications"

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False, index=True)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    institution: Mapped[str] = mapped_column(String(100), nullable=False)
    year: Mapped[str] = mapped_column(String(4), nullable=False)
    verified: Mapped[bool] = mapped_column(default=False)
    certificate_url: Mapped[str | None] = mapped_column(String(1000), nullable=True)


class _VisibilityMixin:
    visibility: Mapped[str] = mapped_column(String(10), nullable=False, default="public")


class PortfolioAchievement(Base, UUIDPrimaryKeyMixin, TimestampMixin, _VisibilityMixin):
    __tablename__ = "portfolio_achievements"
    __table_args__ = (
        CheckConstraint(
            "visibility IN ('public', 'private')", name="check_portfolio_achievement_visibility"
        ),
        Index("idx_portfolio_achievements_user_date", "user_id", "date"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)


class PortfolioEvidence(Base, UUIDPrimaryKeyMixin, TimestampMixin, _VisibilityMixin):
    """An evidence file, optionally backing one or more achievements."""

    __tablename__ = "portfolio_evidence"
    __table_args__ = (
        CheckConstraint(
            "visibility IN ('public', 'private')", name="check_portfolio_evidence_visibility"
        ),
        Index("idx_portfolio_evidence_user_date", "user_id", "date"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    description: Mapped[str] = mapped_column(Text, nullable=False)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    file_url: Mapped[str] = mapped_column(String(1000), nullable=False)
    file_type: Mapped[str] = mapped_column(String(50), nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    achievement_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)


class PortfolioReflection(Base, UUIDPrimaryKeyMixin, TimestampMixin, _VisibilityMixin):
    __tablename__ = "portfolio_reflections"
    __table_args__ = (
        CheckConstraint(
            "visibility IN ('public', 'private')", name="check_portfolio_reflection_visibility"
        ),
        Index("idx_portfolio_reflections_user_date", "user_id", "date"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(100), nullable=False)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    date: Mapped[datetime] = mapped_column(nullable=False)
    tags: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    evidence_ids: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
