"""
Emotional Regulation API Endpoints

Emotion check-ins and journals, per-user regulation settings, pattern
recognition over a user's check-ins and personalised strategy
recommendations. Every row is scoped to the signed-in user.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from datetime import datetime, timedelta
from typing import Any

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import (
    EmotionalRegulationSettings,
    EmotionJournal,
    EmotionRecord,
    RegulationLog,
    User,
)
from edpsych.core.models.base import as_utc, utcnow
from edpsych.core.schemas import (
    EmotionJournalCreate,
    EmotionJournalSchema,
    EmotionRecordCreate,
    EmotionRecordSchema,
    PatternAnalysis,
    PatternSettingsUpdate,
    RegulationSettingsSchema,
    RegulationSettingsUpdate,
    StrategyFeedbackCreate,
    StrategyPreferencesUpdate,
    StrategyRecommendations,
)
from edpsych.core.schemas.wellbeing import AnalysisType, Complexity, StrategyPreferences
from edpsych.core.security import get_current_user
from edpsych.wellbeing import StrategyRecommender, analyze_patterns

router = APIRouter()

PATTERN_LOOKBACK = timedelta(days=30)
STRATEGY_LOOKBACK = timedelta(days=90)


def _split_csv(value: str | None) -> list[str]:
    if not value:
        return []
    return [item.strip() for item in value.split(",") if item.strip()]


def _log(db: AsyncSession, user: User, action: str, details: dict[str, Any]) -> None:
    db.add(RegulationLog(user_id=user.id, action=action, details=details, timestamp=utcnow()))


async def _get_settings(db: AsyncSession, user: User) -> EmotionalRegulationSettings | None:
    result = await db.execute(
        select(EmotionalRegulationSettings).where(EmotionalRegulationSettings.user_id == user.id)
    )
    return result.scalar_one_or_none()


async def _get_or_create_settings(db: AsyncSession, user: User) -> EmotionalRegulationSettings:
    """Load the user's settings, creating them with defaults on first use."""
    settings_row = await _get_settings(db, user)
    if settings_row is None:
        settings_row = EmotionalRegulationSettings(
            user_id=user.id,
            pattern_recognition_enabled=True,
            pattern_recognition_settings={},
            strategy_preferences=StrategyPreferences().model_dump(),
            reminder_frequency="medium",
        )
        db.add(settings_row)
        await db.flush()
    return settings_row


# ----------------------------------------------------------------------
# Emotion records and journals
# ----------------------------------------------------------------------


@router.post("/records", response_model=EmotionRecordSchema, status_code=status.HTTP_201_CREATED)
async def create_record(
    record_data: EmotionRecordCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmotionRecord:
    """Record an emotion check-in."""
    record = EmotionRecord(
        **record_data.model_dump(exclude={"timestamp"}),
        timestamp=record_data.timestamp or utcnow(),
        user_id=current_user.id,
    )

    db.add(record)
    await db.commit()
    await db.refresh(record)

    return record


@router.get("/records", response_model=list[EmotionRecordSchema])
async def list_records(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    emotions: str | None = Query(default=None, description="Comma-separated emotions"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EmotionRecord]:
    """List the caller's check-ins, newest first."""
    stmt = select(EmotionRecord).where(EmotionRecord.user_id == current_user.id)

    if start_date:
        stmt = stmt.where(EmotionRecord.timestamp >= start_date)
    if end_date:
        stmt = stmt.where(EmotionRecord.timestamp <= end_date)
    emotion_filter = _split_csv(emotions)
    if emotion_filter:
        stmt = stmt.where(EmotionRecord.emotion.in_(emotion_filter))

    result = await db.execute(stmt.order_by(EmotionRecord.timestamp.desc()))
    return list(result.scalars().all())


@router.post("/journal", response_model=EmotionJournalSchema, status_code=status.HTTP_201_CREATED)
async def create_journal_entry(
    journal_data: EmotionJournalCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmotionJournal:
    entry = EmotionJournal(
        **journal_data.model_dump(exclude={"timestamp"}),
        timestamp=journal_data.timestamp or utcnow(),
        user_id=current_user.id,
    )

    db.add(entry)
    await db.commit()
    await db.refresh(entry)

    return entry


@router.get("/journal", response_model=list[EmotionJournalSchema])
async def list_journal_entries(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[EmotionJournal]:
    stmt = select(EmotionJournal).where(EmotionJournal.user_id == current_user.id)

    if start_date:
        stmt = stmt.where(EmotionJournal.timestamp >= start_date)
    if end_date:
        stmt = stmt.where(EmotionJournal.timestamp <= end_date)

    result = await db.execute(stmt.order_by(EmotionJournal.timestamp.desc()))
    return list(result.scalars().all())


# ----------------------------------------------------------------------
# Settings
# ----------------------------------------------------------------------


@router.get("/settings", response_model=RegulationSettingsSchema)
async def get_settings(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmotionalRegulationSettings:
    """Get the caller's regulation settings, creating defaults on first use."""
    settings_row = await _get_or_create_settings(db, current_user)
    await db.commit()
    await db.refresh(settings_row)

    return settings_row


@router.put("/settings", response_model=RegulationSettingsSchema)
async def update_settings(
    settings_update: RegulationSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmotionalRegulationSettings:
    """Update the caller's regulation settings (partial)."""
    settings_row = await _get_or_create_settings(db, current_user)

    update_data = settings_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(settings_row, field, value)

    _log(db, current_user, "update_settings", update_data)
    await db.commit()
    await db.refresh(settings_row)

    return settings_row


# ----------------------------------------------------------------------
# Pattern recognition
# ----------------------------------------------------------------------


@router.get("/patterns", response_model=PatternAnalysis, response_model_exclude_none=True)
async def get_patterns(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    emotions: str | None = Query(default=None, description="Comma-separated emotions or 'all'"),
    analysis_type: AnalysisType = Query(default="all"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Analyse the caller's check-ins over a date range (default: last 30 days)."""
    end = as_utc(end_date) if end_date else utcnow()
    start = as_utc(start_date) if start_date else end - PATTERN_LOOKBACK

    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be before end_date",
        )

    stmt = select(EmotionRecord).where(
        EmotionRecord.user_id == current_user.id,
        EmotionRecord.timestamp >= start,
        EmotionRecord.timestamp <= end,
    )
    emotion_filter = _split_csv(emotions)
    if emotion_filter and "all" not in emotion_filter:
        stmt = stmt.where(EmotionRecord.emotion.in_(emotion_filter))

    result = await db.execute(stmt.order_by(EmotionRecord.timestamp))
    records = list(result.scalars().all())

    return {
        "record_count": len(records),
        "start_date": start,
        "end_date": end,
        **analyze_patterns(records, analysis_type),
    }


@router.put("/patterns/settings", response_model=RegulationSettingsSchema)
async def update_pattern_settings(
    pattern_update: PatternSettingsUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmotionalRegulationSettings:
    """Turn pattern recognition on or off."""
    settings_row = await _get_or_create_settings(db, current_user)

    settings_row.pattern_recognition_enabled = pattern_update.enabled
    if pattern_update.settings is not None:
        settings_row.pattern_recognition_settings = pattern_update.settings

    _log(db, current_user, "update_pattern_recognition_settings", pattern_update.model_dump())
    await db.commit()
    await db.refresh(settings_row)

    return settings_row


# ----------------------------------------------------------------------
# Strategy recommendations
# ----------------------------------------------------------------------


@router.get("/strategies", response_model=StrategyRecommendations)
async def recommend_strategies(
    emotion: str | None = Query(default=None, max_length=50),
    categories: str | None = Query(default=None, description="Comma-separated categories"),
    complexity: Complexity | None = Query(default=None),
    limit: int = Query(default=10, ge=1, le=20),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Rank regulation strategies for the caller."""
    settings_row = await _get_settings(db, current_user)
    if settings_row is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="Emotional regulation settings not found",
        )

    records = await db.execute(
        select(EmotionRecord).where(
            EmotionRecord.user_id == current_user.id,
            EmotionRecord.timestamp >= utcnow() - STRATEGY_LOOKBACK,
        )
    )
    feedback = await db.execute(
        select(RegulationLog).where(
            RegulationLog.user_id == current_user.id,
            RegulationLog.action == "strategy_feedback",
        )
    )

    recommender = StrategyRecommender(preferences=settings_row.strategy_preferences or {})
    return recommender.recommend(
        list(records.scalars().all()),
        list(feedback.scalars().all()),
        emotion=emotion,
        categories=_split_csv(categories) or None,
        complexity=complexity,
        limit=limit,
    )


@router.post("/strategies/feedback", status_code=status.HTTP_201_CREATED)
async def record_strategy_feedback(
    feedback_data: StrategyFeedbackCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Rate how well a strategy worked."""
    _log(db, current_user, "strategy_feedback", feedback_data.model_dump())
    await db.commit()

    return {"success": True, "strategy_id": feedback_data.strategy_id}


@router.put("/strategies/preferences", response_model=RegulationSettingsSchema)
async def update_strategy_preferences(
    preferences_update: StrategyPreferencesUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> EmotionalRegulationSettings:
    settings_row = await _get_or_create_settings(db, current_user)

    settings_row.strategy_preferences = preferences_update.preferences.model_dump()
    if preferences_update.reminder_frequency is not None:
        settings_row.reminder_frequency = preferences_update.reminder_frequency

    _log(db, current_user, "update_strategy_preferences", preferences_update.model_dump())
    await db.commit()
    await db.refresh(settings_row)

    return settings_row
