"""
Emotional Regulation Pydantic Schemas

Check-ins, journals, settings, pattern analysis and strategy recommendations.
"""

from datetime import datetime
from typing import Any, Literal
from uuid import UUID

from pydantic import BaseModel, ConfigDict, Field

from edpsych.core.schemas.base import PartialUpdate

Complexity = Literal["simple", "moderate", "advanced"]
ReminderFrequency = Literal["low", "medium", "high"]
AnalysisType = Literal["all", "insights", "triggers", "time", "trends", "correlations"]


# Emotion records
class EmotionRecordCreate(BaseModel):
    """Request schema for an emotion check-in."""

    emotion: str = Field(min_length=1, max_length=50)
    intensity: int = Field(ge=1, le=10)
    triggers: str | None = Field(default=None, max_length=500)
    notes: str | None = None
    timestamp: datetime | None = None


class EmotionRecordSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    emotion: str
    intensity: int
    triggers: str | None = None
    notes: str | None = None
    timestamp: datetime


# Journals
class EmotionJournalCreate(BaseModel):
    title: str = Field(min_length=1, max_length=200)
    content: str = Field(min_length=1)
    emotions: list[str] = Field(default_factory=list)
    timestamp: datetime | None = None


class EmotionJournalSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    title: str
    content: str
    emotions: list[str]
    timestamp: datetime


# Settings
class StrategyPreferences(BaseModel):
    """Stored preferences that shape strategy recommendations."""

    preferred_types: list[str] = Field(default_factory=lambda: ["physical", "cognitive", "social"])
    complexity: Complexity = "moderate"
    auto_suggest: bool = True
    favorites: list[str] = Field(default_factory=list)


class RegulationSettingsSchema(BaseModel):
    model_config = ConfigDict(from_attributes=True)

    id: UUID
    user_id: UUID
    pattern_recognition_enabled: bool
    pattern_recognition_settings: dict[str, Any]
    strategy_preferences: dict[str, Any]
    reminder_frequency: str
    updated_at: datetime


class RegulationSettingsUpdate(PartialUpdate):
    """Partial update of a user's regulation settings."""

    pattern_recognition_enabled: bool | None = None
    pattern_recognition_settings: dict[str, Any] | None = None
    strategy_preferences: StrategyPreferences | None = None
    reminder_frequency: ReminderFrequency | None = None


class PatternSettingsUpdate(BaseModel):
    enabled: bool
    settings: dict[str, Any] | None = None


class StrategyPreferencesUpdate(BaseModel):
    preferences: StrategyPreferences
    reminder_frequency: ReminderFrequency | None = None


class StrategyFeedbackCreate(BaseModel):
    """How well a strategy worked for the user."""

    strategy_id: str = Field(min_length=1, max_length=100)
    effectiveness: int = Field(ge=1, le=5)
    notes: str | None = None
    emotion: str | None = Field(default=None, max_length=50)


# Strategy recommendations
class StrategySchema(BaseModel):
    """A regulation strategy from the catalogue."""

    id: str
    name: str
    description: str
    category: str
    complexity: str
    time_required: str
    time_required_minutes: int
    emotions: list[str]
    steps: list[str]
    evidence_base: str


class StrategyRecommendation(BaseModel):
    strategy: StrategySchema
    score: float
    reason: str
    reason_type: str
    suitability: int


class StrategyRecommendations(BaseModel):
    recommendations: list[StrategyRecommendation]
    common_emotions: list[str]
    effective_strategy_ids: list[str]


# Pattern analysis
class PatternAnalysis(BaseModel):
    """Analysis results; sections not requested are omitted."""

    record_count: int
    start_date: datetime
    end_date: datetime
    insights: list[dict[str, Any]] | None = None
    triggers: list[dict[str, Any]] | None = None
    time: dict[str, Any] | None = None
    trends: list[dict[str, Any]] | None = None
    correlations: list[dict[str, Any]] | None = None
