"""
Professional Portfolio Pydantic Schemas
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field, field_validator

from edpsych.core.schemas.base import PartialUpdate
from edpsych.core.schemas.cpd import CPDActivitySchema
from edpsych.core.validation import validate_email, validate_file_url

Visibility = Literal["public", "private"]


def _optional_url(v: str | None) -> str | None:
    return validate_file_url(v) if v is not None else v


# Profile and qualifications
class PortfolioProfileUpdate(BaseModel):
    """Create or replace the caller's portfolio profile."""

    name: str = Field(min_length=2, max_length=100)
    title: str = Field(min_length=2, max_length=100)
    school: str | None = Field(default=None, max_length=100)
    years_experience: int | None = Field(default=None, ge=0)
    email: str | None = None
    phone: str | None = Field(default=None, max_length=50)
    biography: str | None = None
    teaching_philosophy: str | None = None
    specialisations: list[str] = Field(default_factory=list)
    avatar_url: str | None = None

    @field_validator("email")
    @classmethod
    def check_email(cls, v: str | None) -> str | None:
        return validate_email(v) if v is not None else v

    @field_validator("avatar_url")
    @classmethod
    def check_avatar_url(cls, v: str | None) -> str | None:
        return _optional_url(v)


class PortfolioProfileSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    name: str
    title: str
    school: str | None = None
    years_experience: int | None = None
    email: str | None = None
    phone: str | None = None
    biography: str | None = None
    teaching_philosophy: str | None = None
    specialisations: list[str]
    avatar_url: str | None = None
    updated_at: datetime


class QualificationCreate(BaseModel):
    title: str = Field(min_length=2, max_length=100)
    institution: str = Field(min_length=2, max_length=100)
    year: str = Field(pattern=r"^\d{4}$")
    verified: bool = False
    certificate_url: str | None = None

    @field_validator("certificate_url")
    @classmethod
    def check_certificate_url(cls, v: str | None) -> str | None:
        return _optional_url(v)


class QualificationUpdate(PartialUpdate):
    nullable_fields = frozenset({"certificate_url"})

    title: str | None = Field(default=None, min_length=2, max_length=100)
    institution: str | None = Field(default=None, min_length=2, max_length=100)
    year: str | None = Field(default=None, pattern=r"^\d{4}$")
    verified: bool | None = None
    certificate_url: str | None = None

    @field_validator("certificate_url")
    @classmethod
    def check_certificate_url(cls, v: str | None) -> str | None:
        return _optional_url(v)


class QualificationSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    institution: str
    year: str
    verified: bool
    certificate_url: str | None = None


# Achievements, evidence and reflections
class AchievementCreate(BaseModel):
    title: str = Field(min_length=2, max_length=100)
    description: str
    date: datetime
    type: str = Field(min_length=1, max_length=50)
    visibility: Visibility = "public"


class AchievementUpdate(PartialUpdate):
    title: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = None
    date: datetime | None = None
    type: str | None = Field(default=None, min_length=1, max_length=50)
    visibility: Visibility | None = None


class AchievementSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    date: datetime
    type: str
    visibility: str
    created_at: datetime


class EvidenceCreate(BaseModel):
    title: str = Field(min_length=2, max_length=100)
    description: str
    type: str = Field(min_length=1, max_length=50)
    date: datetime
    file_url: str
    file_type: str = Field(min_length=1, max_length=50)
    tags: list[str] = Field(default_factory=list)
    visibility: Visibility = "public"
    achievement_ids: list[UUID] = Field(default_factory=list)

    @field_validator("file_url")
    @classmethod
    def check_file_url(cls, v: str) -> str:
        return validate_file_url(v)


class EvidenceUpdate(PartialUpdate):
    title: str | None = Field(default=None, min_length=2, max_length=100)
    description: str | None = None
    type: str | None = Field(default=None, min_length=1, max_length=50)
    date: datetime | None = None
    file_url: str | None = None
    file_type: str | None = Field(default=None, min_length=1, max_length=50)
    tags: list[str] | None = None
    visibility: Visibility | None = None
    achievement_ids: list[UUID] | None = None

    @field_validator("file_url")
    @classmethod
    def check_file_url(cls, v: str | None) -> str | None:
        return _optional_url(v)


class EvidenceSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    description: str
    type: str
    date: datetime
    file_url: str
    file_type: str
    tags: list[str]
    visibility: str
    achievement_ids: list[UUID]
    created_at: datetime


class ReflectionCreate(BaseModel):
    title: str = Field(min_length=2, max_length=100)
    content: str = Field(min_length=1)
    date: datetime
    tags: list[str] = Field(default_factory=list)
    visibility: Visibility = "public"
    evidence_ids: list[UUID] = Field(default_factory=list)


class ReflectionUpdate(PartialUpdate):
    title: str | None = Field(default=None, min_length=2, max_length=100)
    content: str | None = Field(default=None, min_length=1)
    date: datetime | None = None
    tags: list[str] | None = None
    visibility: Visibility | None = None
    evidence_ids: list[UUID] | None = None


class ReflectionSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    content: str
    date: datetime
    tags: list[str]
    visibility: str
    evidence_ids: list[UUID]
    created_at: datetime


class AchievementDetail(BaseModel):
    achievement: AchievementSchema
    evidence: list[EvidenceSchema]


class EvidenceDetail(BaseModel):
    evidence: EvidenceSchema
    achievements: list[AchievementSchema]
    reflections: list[ReflectionSchema]


class ReflectionDetail(BaseModel):
    reflection: ReflectionSchema
    evidence: list[EvidenceSchema]


# Whole portfolio
class PortfolioCounts(BaseModel):
    achievements: int
    evidence: int
    reflections: int
    qualifications: int


class PortfolioAnalytics(BaseModel):
    counts: PortfolioCounts
    completeness: int
    recent_cpd_activities: list[CPDActivitySchema]
    total_cpd_points: float
    total_cpd_hours: float


class PortfolioView(BaseModel):
    """Everything in a portfolio; private items are left out for other viewers."""

    user_id: UUID
    profile: PortfolioProfileSchema | None = None
    qualifications: list[QualificationSchema]
    achievements: list[AchievementSchema]
    evidence: list[EvidenceSchema]
    reflections: list[ReflectionSchema]
    cpd_activities: list[CPDActivitySchema]
