"""
CPD Pydantic Schemas

Request/response models for activities, goals, reflections, evidence,
analytics and reports.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edpsych.core.schemas.base import PartialUpdate
from edpsych.core.validation import validate_file_url

CPDStatus = Literal["Planned", "In Progress", "Completed"]


# Activities
class CPDActivityCreate(BaseModel):
    """Request schema for logging a CPD activity."""

    title: str = Field(min_length=3, max_length=200)
    type: str = Field(min_length=1, max_length=50)
    provider: str | None = Field(default=None, max_length=200)
    date: datetime
    duration: float = Field(ge=0, description="Hours")
    points: float = Field(ge=0)
    categories: list[int] = Field(default_factory=list)
    standards: list[int] = Field(default_factory=list)
    status: CPDStatus = "Planned"
    evidence: str | None = None
    reflection: str | None = None


class CPDActivityUpdate(PartialUpdate):
    """Request schema for updating a CPD activity (partial)."""

    nullable_fields = frozenset({"provider", "evidence", "reflection"})

    title: str | None = Field(default=None, min_length=3, max_length=200)
    type: str | None = Field(default=None, min_length=1, max_length=50)
    provider: str | None = Field(default=None, max_length=200)
    date: datetime | None = None
    duration: float | None = Field(default=None, ge=0)
    points: float | None = Field(default=None, ge=0)
    categories: list[int] | None = None
    standards: list[int] | None = None
    status: CPDStatus | None = None
    evidence: str | None = None
    reflection: str | None = None


class CPDActivitySchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    type: str
    provider: str | None = None
    date: datetime
    duration: float
    points: float
    categories: list[int]
    standards: list[int]
    status: str
    evidence: str | None = None
    reflection: str | None = None
    created_at: datetime
    updated_at: datetime


# Reflections and evidence
class CPDReflectionCreate(BaseModel):
    content: str = Field(min_length=1)
    impact_rating: int | None = Field(default=None, ge=1, le=5)
    next_steps: str | None = None


class CPDReflectionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    activity_id: UUID
    user_id: UUID
    content: str
    impact_rating: int | None = None
    next_steps: str | None = None
    created_at: datetime
    updated_at: datetime


class CPDEvidenceCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    file_url: str
    file_type: str = Field(min_length=1, max_length=50)

    @field_validator("file_url")
    @classmethod
    def check_file_url(cls, v: str) -> str:
        return validate_file_url(v)


class CPDEvidenceSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    activity_id: UUID
    user_id: UUID
    title: str
    file_url: str
    file_type: str
    created_at: datetime


class CPDActivityDetail(CPDActivitySchema):
    """Activity with its reflections and evidence."""

    reflections: list[CPDReflectionSchema] = Field(default_factory=list)
    evidence_items: list[CPDEvidenceSchema] = Field(default_factory=list)


# Goals
class CPDGoalCreate(BaseModel):
    """Request schema for setting a CPD goal."""

    title: str = Field(min_length=3, max_length=200)
    description: str | None = None
    target_points: float = Field(ge=0)
    categories: list[int] = Field(default_factory=list)
    standards: list[int] = Field(default_factory=list)
    deadline: datetime


class CPDGoalUpdate(PartialUpdate):
    nullable_fields = frozenset({"description"})

    title: str | None = Field(default=None, min_length=3, max_length=200)
    description: str | None = None
    target_points: float | None = Field(default=None, ge=0)
    categories: list[int] | None = None
    standards: list[int] | None = None
    deadline: datetime | None = None


class CPDGoalSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str | None = None
    target_points: float
    categories: list[int]
    standards: list[int]
    deadline: datetime
    created_at: datetime
    updated_at: datetime


class CPDGoalProgress(BaseModel):
    points_achieved: float
    target_points: float
    progress_percentage: float


class CPDGoalDetail(BaseModel):
    """Goal with the activities that count towards it."""

    goal: CPDGoalSchema
    related_activities: list[CPDActivitySchema]
    progress: CPDGoalProgress


# Analytics and reports
class CPDAnalytics(BaseModel):
    total_points: float
    total_hours: float
    total: int
    completed: int
    planned: int
    in_progress: int
    completion_rate: float
    category_points: dict[int, float]
    standard_points: dict[int, float]


class CPDReportPeriod(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None


class CPDReport(BaseModel):
    generated_at: datetime
    period: CPDReportPeriod
    total_points: float
    total_hours: float
    completed_activities: int
    activities: list[CPDActivityDetail]


class CPDRecommendation(BaseModel):
    """A suggested CPD opportunity."""

    type: str
    title: str
    description: str
    points: float
    duration: float
    relevance: str
    categories: list[int]
    standards: list[int]
