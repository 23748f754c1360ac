"""
User Pydantic Schemas

Request/response models for registration, login and user management.
"""

from datetime import datetime
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edpsych.core.models.users import UserRole
from edpsych.core.schemas.base import PartialUpdate
from edpsych.core.validation import validate_email


# Request schemas
class UserCreate(BaseModel):
    """Request schema for self-registration. The tenant is assigned by an admin."""

    email: str
    name: str = Field(min_length=1, max_length=200)
    password: str = Field(min_length=8, max_length=128)
    role: UserRole = UserRole.TEACHER
    key_stage: str | None = Field(default=None, max_length=20)

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str) -> str:
        return validate_email(v)


class UserUpdate(PartialUpdate):
    """Request schema for updating a user. `role`, `is_active` and `tenant_id` are admin only."""

    nullable_fields = frozenset({"tenant_id", "key_stage"})

    name: str | None = Field(default=None, min_length=1, max_length=200)
    email: str | None = None
    password: str | None = Field(default=None, min_length=8, max_length=128)
    tenant_id: str | None = Field(default=None, max_length=100)
    key_stage: str | None = Field(default=None, max_length=20)
    role: UserRole | None = None
    is_active: bool | None = None

    @field_validator("email")
    @classmethod
    def normalize_email(cls, v: str | None) -> str | None:
        return validate_email(v) if v is not None else None


# Response schemas
class UserSchema(BaseModel):
    """User response schema (never includes the password hash)."""

    model_config = ConfigDict(from_attributes=True)

    id: UUID
    email: str
    name: str
    role: str
    tenant_id: str | None = None
    key_stage: str | None = None
    is_active: bool
    last_login_at: datetime | None = None
    created_at: datetime


class Token(BaseModel):
    """Bearer token issued at login."""

    access_token: str
    token_type: str = "bearer"
