"""
Progress Pacing Pydantic Schemas
"""

from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field


class PacingSettings(BaseModel):
    """Teacher-chosen options for the pacing plan."""

    baseline_pace: float = Field(default=50, ge=0, le=100)
    adaptation_strength: float = Field(default=50, ge=0, le=100)
    adapt_to_progress: bool = False
    include_reinforcement_activities: bool = True
    include_acceleration_options: bool = True
    auto_assess_mastery: bool = True
    enable_breakpoints: bool = True


class ProgressMetrics(BaseModel):
    """Recent progress indicators (percentages)."""

    learning_velocity: float | None = Field(default=None, ge=0, le=100)
    mastery_level: float | None = Field(default=None, ge=0, le=100)
    engagement_consistency: float | None = Field(default=None, ge=0, le=100)
    knowledge_retention: float | None = Field(default=None, ge=0, le=100)
    recommended_pace: float | None = Field(default=None, ge=0, le=100)


class PacingRequest(BaseModel):
    """Request schema for generating a pacing plan."""

    student_id: UUID | None = None
    curriculum_id: UUID | None = None
    subject: str | None = Field(default=None, max_length=50)
    key_stage: str | None = Field(default=None, max_length=20)
    settings: PacingSettings = Field(default_factory=PacingSettings)
    progress_metrics: ProgressMetrics | None = None


class TimelineStep(BaseModel):
    timeframe: str
    milestone: str
    description: str


class AIPacingPlan(BaseModel):
    """Shape an AI-generated plan must have before it is saved.

    Unknown keys are dropped; classification fields are filled in from the
    rules by the planner.
    """

    standard_pace: float = Field(default=50, ge=0, le=100)
    adjusted_pace: float = Field(ge=0, le=100)
    estimated_completion: str | None = Field(default=None, max_length=50)
    standard_description: str = ""
    adjusted_description: str = ""
    standard_timeline: list[TimelineStep] = Field(default_factory=list)
    adjusted_timeline: list[TimelineStep]
    reinforcement_activities: list[str] = Field(default_factory=list)
    acceleration_options: list[str] = Field(default_factory=list)
    mastery_checkpoints: list[str] = Field(default_factory=list)
    breakpoints: list[str] = Field(default_factory=list)


class ProgressPacingSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    student_id: UUID | None = None
    curriculum_id: UUID | None = None
    standard_pace: float
    adjusted_pace: float
    adaptation_type: str
    estimated_completion: str | None = None
    pacing_data: dict[str, Any]
    settings: dict[str, Any]
    subject: str | None = None
    key_stage: str | None = None
    progress_metrics_used: bool
    source: str
    created_at: datetime
