"""
Mentoring Models

Mentor/mentee profiles, mentorship requests and the mentorships they turn
into, with meetings, shared resources and feedback.
"""

from __future__ import annotations

from datetime import datetime
from typing import Any
from uuid import UUID

from sqlalchemy import JSON, CheckConstraint, ForeignKey, Index, SmallInteger, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from .base import Base, TimestampMixin, UUIDPrimaryKeyMixin


class MentorProfile(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """One profile per user describing what they offer or are looking for."""

    __tablename__ = "mentor_profiles"
    __table_args__ = (
        CheckConstraint("role IN ('mentor', 'mentee', 'both')", name="check_mentor_profile_role"),
        CheckConstraint("years_experience >= 0", name="check_mentor_years_experience"),
    )

    user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False, unique=True)

    role: Mapped[str] = mapped_column(String(10), nullable=False)
    school: Mapped[str] = mapped_column(String(100), nullable=False)
    phase: Mapped[str] = mapped_column(String(50), nullable=False)
    years_experience: Mapped[int] = mapped_column(nullable=False, default=0)
    expertise: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    subjects: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    bio: Mapped[str | None] = mapped_column(Text, nullable=True)
    availability: Mapped[str | None] = mapped_column(String(200), nullable=True)
    goals: Mapped[str | None] = mapped_column(Text, nullable=True)
    preferences: Mapped[dict[str, Any]] = mapped_column(
        JSON, nullable=False, default=dict, comment="{frequency, formats, focus_areas}"
    )

    @property
    def is_mentor(self) -> bool:
        return self.role in ("mentor", "both")


class MentorshipRequest(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """A mentee's request to be mentored, answered by the mentor."""

    __tablename__ = "mentorship_requests"
    __table_args__ = (
        CheckConstraint(
            "status IN ('pending', 'accepted', 'declined')", name="check_mentorship_request_status"
        ),
        CheckConstraint("duration_months > 0", name="check_mentorship_request_duration"),
        Index("idx_mentorship_requests_mentor", "mentor_id", "status"),
    )

    mentor_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    mentee_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    message: Mapped[str] = mapped_column(Text, nullable=False)
    focus_areas: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    goals: Mapped[list[str]] = mapped_column(JSON, nullable=False, default=list)
    duration_months: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    frequency: Mapped[str] = mapped_column(String(50), nullable=False)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="pending")


class Mentorship(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """An accepted request.

    Each participant gets a "Mentorship" CPD activity that completed meetings
    add hours and points to.
    """

    __tablename__ = "mentorships"
    __table_args__ = (
        CheckConstraint("status IN ('active', 'completed')", name="check_mentorship_status"),
        Index("idx_mentorships_mentor", "mentor_id"),
        Index("idx_mentorships_mentee", "mentee_id"),
    )

    request_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("mentorship_requests.id"), nullable=True
    )
    mentor_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    mentee_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    mentor_activity_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("cpd_activities.id", ondelete="SET NULL"), nullable=True
    )
    mentee_activity_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("cpd_activities.id", ondelete="SET NULL"), nullable=True
    )

    status: Mapped[str] = mapped_column(String(10), nullable=False, default="active")
    start_date: Mapped[datetime] = mapped_column(nullable=False)
    end_date: Mapped[datetime] = mapped_column(nullable=False)
    frequency: Mapped[str] = mapped_column(String(50), nullable=False)
    focus_areas: Mapped[list[int]] = mapped_column(JSON, nullable=False, default=list)
    goals: Mapped[list[dict[str, str]]] = mapped_column(
        JSON, nullable=False, default=list, comment="[{text, status}]"
    )
    completed_at: Mapped[datetime | None] = mapped_column(nullable=True)

    def has_participant(self, user_id: UUID) -> bool:
        return user_id in (self.mentor_id, self.mentee_id)

    def partner_of(self, user_id: UUID) -> UUID:
        return self.mentee_id if user_id == self.mentor_id else self.mentor_id


class MentorshipMeeting(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "mentorship_meetings"
    __table_args__ = (
        CheckConstraint(
            "status IN ('scheduled', 'completed', 'cancelled')",
            name="check_mentorship_meeting_status",
        ),
        CheckConstraint("duration > 0", name="check_mentorship_meeting_duration"),
        Index("idx_mentorship_meetings_date", "mentorship_id", "date"),
    )

    mentorship_id: Mapped[UUID] = mapped_column(
        ForeignKey("mentorships.id", ondelete="CASCADE"), nullable=False
    )

    date: Mapped[datetime] = mapped_column(nullable=False)
    duration: Mapped[int] = mapped_column(nullable=False, comment="Minutes")
    format: Mapped[str] = mapped_column(String(50), nullable=False)
    agenda: Mapped[str | None] = mapped_column(Text, nullable=True)
    notes: Mapped[str | None] = mapped_column(Text, nullable=True)
    status: Mapped[str] = mapped_column(String(10), nullable=False, default="scheduled")


class MentorshipResource(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    __tablename__ = "mentorship_resources"

    mentorship_id: Mapped[UUID] = mapped_column(
        ForeignKey("mentorships.id", ondelete="CASCADE"), nullable=False
    )
    shared_by_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)

    title: Mapped[str] = mapped_column(String(200), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    type: Mapped[str] = mapped_column(String(50), nullable=False)
    url: Mapped[str | None] = mapped_column(String(1000), nullable=True)


class MentorshipFeedback(Base, UUIDPrimaryKeyMixin, TimestampMixin):
    """Rating left by one participant for the other."""

    __tablename__ = "mentorship_feedback"
    __table_args__ = (
        CheckConstraint("rating BETWEEN 1 AND 5", name="check_mentorship_feedback_rating"),
    )

    mentorship_id: Mapped[UUID] = mapped_column(
        ForeignKey("mentorships.id", ondelete="CASCADE"), nullable=False
    )
    from_user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    to_user_id: Mapped[UUID] = mapped_column(ForeignKey("users.id"), nullable=False)
    meeting_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("mentorship_meetings.id", ondelete="SET NULL"), nullable=True
    )

    rating: Mapped[int] = mapped_column(SmallInteger, nullable=False)
    comment: Mapped[str] = mapped_column(Text, nullable=False)
