"""
Mentoring Pydantic Schemas
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edpsych.core.schemas.base import PartialUpdate
from edpsych.core.validation import validate_file_url

MentorRole = Literal["mentor", "mentee", "both"]
MeetingStatus = Literal["scheduled", "completed", "cancelled"]
GoalStatus = Literal["not_started", "in_progress", "completed"]


class ExpertiseArea(BaseModel):
    id: int
    name: str
    category: str


# Profiles
class MentorPreferences(BaseModel):
    frequency: str | None = Field(default=None, max_length=50)
    formats: list[str] = Field(default_factory=list)
    focus_areas: list[int] = Field(default_factory=list)


class MentorProfileUpdate(BaseModel):
    """Create or replace the caller's mentoring profile."""

    role: MentorRole
    school: str = Field(min_length=2, max_length=100)
    phase: str = Field(min_length=1, max_length=50)
    years_experience: int = Field(ge=0)
    expertise: list[int] = Field(default_factory=list)
    subjects: list[str] = Field(default_factory=list)
    bio: str | None = None
    availability: str | None = Field(default=None, max_length=200)
    goals: str | None = None
    preferences: MentorPreferences = Field(default_factory=MentorPreferences)


class MentorProfileSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    role: str
    school: str
    phase: str
    years_experience: int
    expertise: list[int]
    subjects: list[str]
    bio: str | None = None
    availability: str | None = None
    goals: str | None = None
    preferences: MentorPreferences
    updated_at: datetime


# Requests
class MentorshipRequestCreate(BaseModel):
    mentor_id: UUID
    message: str = Field(min_length=1)
    focus_areas: list[int] = Field(default_factory=list)
    goals: list[str] = Field(default_factory=list)
    duration_months: int = Field(ge=1, le=24)
    frequency: str = Field(min_length=1, max_length=50)


class MentorshipRequestSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    mentor_id: UUID
    mentee_id: UUID
    message: str
    focus_areas: list[int]
    goals: list[str]
    duration_months: int
    frequency: str
    status: str
    created_at: datetime


class RequestDecision(BaseModel):
    accept: bool


# Mentorships
class MentorshipGoal(BaseModel):
    text: str
    status: GoalStatus


class MentorshipSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    request_id: UUID | None = None
    mentor_id: UUID
    mentee_id: UUID
    mentor_activity_id: UUID | None = None
    mentee_activity_id: UUID | None = None
    status: str
    start_date: datetime
    end_date: datetime
    frequency: str
    focus_areas: list[int]
    goals: list[MentorshipGoal]
    completed_at: datetime | None = None


class RequestDecisionResponse(BaseModel):
    request: MentorshipRequestSchema
    mentorship: MentorshipSchema | None = None


class GoalStatusUpdate(BaseModel):
    status: GoalStatus


class MentorshipCompletion(BaseModel):
    reflection: str | None = None


# Meetings, resources and feedback
class MeetingCreate(BaseModel):
    date: datetime
    duration: int = Field(gt=0, description="Minutes")
    format: str = Field(min_length=1, max_length=50)
    agenda: str | None = None
    notes: str | None = None
    status: MeetingStatus = "scheduled"


class MeetingUpdate(PartialUpdate):
    nullable_fields = frozenset({"agenda", "notes"})

    date: datetime | None = None
    duration: int | None = Field(default=None, gt=0)
    format: str | None = Field(default=None, min_length=1, max_length=50)
    agenda: str | None = None
    notes: str | None = None
    status: MeetingStatus | None = None


class MeetingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    mentorship_id: UUID
    date: datetime
    duration: int
    format: str
    agenda: str | None = None
    notes: str | None = None
    status: str


class ResourceCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str | None = None
    type: str = Field(min_length=1, max_length=50)
    url: str | None = None

    @field_validator("url")
    @classmethod
    def check_url(cls, v: str | None) -> str | None:
        return validate_file_url(v) if v is not None else v


class ResourceSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    mentorship_id: UUID
    shared_by_id: UUID
    title: str
    description: str | None = None
    type: str
    url: str | None = None
    created_at: datetime


class FeedbackCreate(BaseModel):
    rating: int = Field(ge=1, le=5)
    comment: str = Field(min_length=1)
    meeting_id: UUID | None = None


class FeedbackSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    mentorship_id: UUID
    from_user_id: UUID
    to_user_id: UUID
    meeting_id: UUID | None = None
    rating: int
    comment: str
    created_at: datetime


class MentorshipDetail(BaseModel):
    mentorship: MentorshipSchema
    meetings: list[MeetingSchema]
    resources: list[ResourceSchema]
    feedback: list[FeedbackSchema]


# Analytics
class MentoringOverview(BaseModel):
    active_mentorships: int
    completed_mentorships: int
    completed_meetings: int
    total_meeting_hours: float
    completed_goals: int
    in_progress_goals: int
    total_cpd_points: float


class MonthlyMeetings(BaseModel):
    month: str
    meetings: int


class MentoringAnalytics(BaseModel):
    overview: MentoringOverview
    expertise_distribution: dict[int, int]
    monthly: list[MonthlyMeetings]
