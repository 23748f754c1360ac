"""
Curriculum Planning Pydantic Schemas
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from edpsych.core.schemas.base import PartialUpdate
from edpsych.core.validation import validate_email

CollaboratorRole = Literal["editor", "viewer"]
TaskStatus = Literal["pending", "in_progress", "completed"]


# Plans
class CurriculumPlanCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    subject: str | None = Field(default=None, max_length=50)
    key_stage: str | None = Field(default=None, max_length=20)
    description: str | None = None
    objectives: list[str] = Field(default_factory=list)
    content: dict[str, Any] = Field(default_factory=dict)


class CurriculumPlanUpdate(PartialUpdate):
    nullable_fields = frozenset({"subject", "key_stage", "description"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    subject: str | None = Field(default=None, max_length=50)
    key_stage: str | None = Field(default=None, max_length=20)
    description: str | None = None
    objectives: list[str] | None = None
    content: dict[str, Any] | None = None


class CurriculumPlanSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    subject: str | None = None
    key_stage: str | None = None
    description: str | None = None
    objectives: list[str]
    content: dict[str, Any]
    created_at: datetime
    updated_at: datetime


# Collaborators
class CollaboratorAdd(BaseModel):
    """Add a collaborator by user id or email."""

    user_id: UUID | None = None
    email: str | None = None
    role: CollaboratorRole

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return validate_email(v) if v is not None else None

    @model_validator(mode="after")
    def require_user_reference(self) -> "CollaboratorAdd":
        if self.user_id is None and self.email is None:
            raise ValueError("Either user_id or email is required")
        return self


class CollaboratorSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plan_id: UUID
    user_id: UUID
    role: str
    created_at: datetime


class CollaboratorAddResponse(BaseModel):
    collaborator: CollaboratorSchema
    updated: bool = False


# Comments
class CommentCreate(BaseModel):
    content: str = Field(min_length=1, max_length=5000)


class CommentSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plan_id: UUID
    user_id: UUID
    content: str
    created_at: datetime


# Tasks
class TaskCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    description: str = Field(min_length=1)
    status: TaskStatus = "pending"
    due_date: datetime | None = None
    assigned_to_id: UUID | None = None


class TaskUpdate(PartialUpdate):
    nullable_fields = frozenset({"due_date", "assigned_to_id"})

    title: str | None = Field(default=None, min_length=1, max_length=200)
    description: str | None = Field(default=None, min_length=1)
    status: TaskStatus | None = None
    due_date: datetime | None = None
    assigned_to_id: UUID | None = None


class TaskSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    plan_id: UUID
    creator_id: UUID
    assigned_to_id: UUID | None = None
    title: str
    description: str
    status: str
    due_date: datetime | None = None
    created_at: datetime
    updated_at: datetime


class CollaborationView(BaseModel):
    """Everything needed to render a plan's collaboration panel."""

    plan: CurriculumPlanSchema
    collaborators: list[CollaboratorSchema]
    comments: list[CommentSchema]
    tasks: list[TaskSchema]
    user_role: Literal["owner", "editor", "viewer", "admin"]
