"""
Restorative Justice Pydantic Schemas
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from edpsych.core.schemas.base import PartialUpdate

AgeGroup = Literal["all", "primary", "secondary"]
ConversationStatus = Literal["draft", "in_progress", "completed"]


class FrameworkStep(BaseModel):
    """One stage of a restorative conversation script."""

    title: str = Field(min_length=1, max_length=200)
    description: str
    questions: list[str] = Field(default_factory=list)


class Participant(BaseModel):
    name: str = Field(min_length=1, max_length=200)
    role: str = Field(min_length=1, max_length=100)


# Frameworks
class RestorativeFrameworkCreate(BaseModel):
    """Request schema for creating a framework."""

    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    age_group: AgeGroup = "all"
    scenario: str = Field(min_length=1, max_length=100)
    steps: list[FrameworkStep] = Field(min_length=1)


class RestorativeFrameworkUpdate(PartialUpdate):
    """Request schema for updating a framework (partial)."""

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    age_group: AgeGroup | None = None
    scenario: str | None = Field(default=None, min_length=1, max_length=100)
    steps: list[FrameworkStep] | None = Field(default=None, min_length=1)


class RestorativeFrameworkSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    title: str
    description: str
    age_group: str
    scenario: str
    steps: list[FrameworkStep]
    created_by_id: UUID | None = None
    created_at: datetime
    updated_at: datetime


# Conversations
class ConversationCreate(BaseModel):
    """Request schema for recording a restorative conversation."""

    framework_id: UUID
    title: str = Field(min_length=1, max_length=200)
    participants: list[Participant] = Field(min_length=1)
    key_points: str | None = None
    agreements: str | None = None
    follow_up_plan: str | None = None
    status: ConversationStatus = "draft"


class ConversationUpdate(PartialUpdate):
    """Request schema for updating a conversation record (partial)."""

    nullable_fields = frozenset({"key_points", "agreements", "follow_up_plan"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    participants: list[Participant] | None = Field(default=None, min_length=1)
    key_points: str | None = None
    agreements: str | None = None
    follow_up_plan: str | None = None
    status: ConversationStatus | None = None


class ConversationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    framework_id: UUID
    user_id: UUID
    title: str
    participants: list[Participant]
    key_points: str | None = None
    agreements: str | None = None
    follow_up_plan: str | None = None
    status: str
    created_at: datetime
    updated_at: datetime
