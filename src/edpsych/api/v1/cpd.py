"""
CPD Tracking API Endpoints

Continuing professional development: activities, goals, reflections,
evidence, analytics, reports and recommendations. Every row is scoped to
the educator who logged it.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from datetime import datetime
from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import Select, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from edpsych.core.database import get_db
from edpsych.core.models import CPDActivity, CPDEvidence, CPDGoal, CPDReflection, User
from edpsych.core.models.base import as_utc, utcnow
from edpsych.core.schemas import (
    CPDActivityCreate,
    CPDActivityDetail,
    CPDActivitySchema,
    CPDActivityUpdate,
    CPDAnalytics,
    CPDEvidenceCreate,
    CPDEvidenceSchema,
    CPDGoalCreate,
    CPDGoalDetail,
    CPDGoalSchema,
    CPDGoalUpdate,
    CPDRecommendation,
    CPDReflectionCreate,
    CPDReflectionSchema,
    CPDReport,
)
from edpsych.core.security import get_current_user
from edpsych.cpd import build_recommendations, goal_progress, related_activities, summarize_activities

router = APIRouter()

RECENT_ACTIVITY_LIMIT = 20


def _check_date_range(start_date: datetime | None, end_date: datetime | None) -> None:
    if start_date and end_date and as_utc(start_date) > as_utc(end_date):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date must be before end_date",
        )


def _activities_in_range(
    user: User, start_date: datetime | None, end_date: datetime | None
) -> Select[tuple[CPDActivity]]:
    _check_date_range(start_date, end_date)
    stmt = select(CPDActivity).where(CPDActivity.user_id == user.id)
    if start_date:
        stmt = stmt.where(CPDActivity.date >= start_date)
    if end_date:
        stmt = stmt.where(CPDActivity.date <= end_date)
    return stmt.order_by(CPDActivity.date.desc())


async def _get_activity_or_404(
    db: AsyncSession, activity_id: UUID, user: User, *, with_details: bool = False
) -> CPDActivity:
    stmt = select(CPDActivity).where(CPDActivity.id == activity_id, CPDActivity.user_id == user.id)
    if with_details:
        stmt = stmt.options(
            selectinload(CPDActivity.reflections), selectinload(CPDActivity.evidence_items)
        )
    result = await db.execute(stmt)
    activity = result.scalar_one_or_none()

    if not activity:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"CPD activity not found with ID: {activity_id}",
        )

    return activity


async def _get_goal_or_404(db: AsyncSession, goal_id: UUID, user: User) -> CPDGoal:
    result = await db.execute(
        select(CPDGoal).where(CPDGoal.id == goal_id, CPDGoal.user_id == user.id)
    )
    goal = result.scalar_one_or_none()

    if not goal:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"CPD goal not found with ID: {goal_id}",
        )

    return goal


# ----------------------------------------------------------------------
# Activities
# ----------------------------------------------------------------------


@router.post("/activities", response_model=CPDActivitySchema, status_code=status.HTTP_201_CREATED)
async def create_activity(
    activity_data: CPDActivityCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CPDActivity:
    """Log a CPD activity."""
    activity = CPDActivity(**activity_data.model_dump(), user_id=current_user.id)

    db.add(activity)
    await db.commit()
    await db.refresh(activity)

    return activity


@router.get("/activities", response_model=list[CPDActivitySchema])
async def list_activities(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[CPDActivity]:
    """List the caller's activities in a date range, newest first."""
    result = await db.execute(_activities_in_range(current_user, start_date, end_date))
    return list(result.scalars().all())


@router.get("/activities/{activity_id}", response_model=CPDActivityDetail)
async def get_activity(
    activity_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CPDActivity:
    """Get an activity with its reflections and evidence."""
    return await _get_activity_or_404(db, activity_id, current_user, with_details=True)


@router.put("/activities/{activity_id}", response_model=CPDActivitySchema)
async def update_activity(
    activity_id: UUID,
    activity_update: CPDActivityUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CPDActivity:
    activity = await _get_activity_or_404(db, activity_id, current_user)

    update_data = activity_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(activity, field, value)

    await db.commit()
    await db.refresh(activity)

    return activity


@router.delete("/activities/{activity_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_activity(
    activity_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete an activity with its reflections and evidence."""
    activity = await _get_activity_or_404(db, activity_id, current_user, with_details=True)

    await db.delete(activity)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post("/activities/{activity_id}/reflection", response_model=CPDReflectionSchema)
async def save_reflection(
    activity_id: UUID,
    reflection_data: CPDReflectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CPDReflection:
    """Create or replace the caller's reflection on an activity."""
    await _get_activity_or_404(db, activity_id, current_user)

    result = await db.execute(
        select(CPDReflection).where(
            CPDReflection.activity_id == activity_id, CPDReflection.user_id == current_user.id
        )
    )
    reflection = result.scalar_one_or_none()

    if reflection:
        for field, value in reflection_data.model_dump().items():
            setattr(reflection, field, value)
    else:
        reflection = CPDReflection(
            **reflection_data.model_dump(),
            activity_id=activity_id,
            user_id=current_user.id,
        )
        db.add(reflection)

    await db.commit()
    await db.refresh(reflection)

    return reflection


@router.post(
    "/activities/{activity_id}/evidence",
    response_model=CPDEvidenceSchema,
    status_code=status.HTTP_201_CREATED,
)
async def add_evidence(
    activity_id: UUID,
    evidence_data: CPDEvidenceCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CPDEvidence:
    """Attach evidence (certificate, slides, notes) to an activity."""
    await _get_activity_or_404(db, activity_id, current_user)

    evidence = CPDEvidence(
        **evidence_data.model_dump(),
        activity_id=activity_id,
        user_id=current_user.id,
    )

    db.add(evidence)
    await db.commit()
    await db.refresh(evidence)

    return evidence


# ----------------------------------------------------------------------
# Goals
# ----------------------------------------------------------------------


@router.post("/goals", response_model=CPDGoalSchema, status_code=status.HTTP_201_CREATED)
async def create_goal(
    goal_data: CPDGoalCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CPDGoal:
    goal = CPDGoal(**goal_data.model_dump(), user_id=current_user.id)

    db.add(goal)
    await db.commit()
    await db.refresh(goal)

    return goal


@router.get("/goals", response_model=list[CPDGoalSchema])
async def list_goals(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[CPDGoal]:
    """List the caller's goals, nearest deadline first."""
    result = await db.execute(
        select(CPDGoal).where(CPDGoal.user_id == current_user.id).order_by(CPDGoal.deadline)
    )
    return list(result.scalars().all())


@router.get("/goals/{goal_id}", response_model=CPDGoalDetail)
async def get_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Get a goal with the activities that count towards it and its progress."""
    goal = await _get_goal_or_404(db, goal_id, current_user)

    result = await db.execute(_activities_in_range(current_user, None, None))
    related = related_activities(goal, result.scalars().all())

    return {
        "goal": goal,
        "related_activities": related,
        "progress": goal_progress(goal, related),
    }


@router.put("/goals/{goal_id}", response_model=CPDGoalSchema)
async def update_goal(
    goal_id: UUID,
    goal_update: CPDGoalUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> CPDGoal:
    goal = await _get_goal_or_404(db, goal_id, current_user)

    update_data = goal_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(goal, field, value)

    await db.commit()
    await db.refresh(goal)

    return goal


@router.delete("/goals/{goal_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_goal(
    goal_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    goal = await _get_goal_or_404(db, goal_id, current_user)

    await db.delete(goal)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Analytics, reports and recommendations
# ----------------------------------------------------------------------


@router.get("/analytics", response_model=CPDAnalytics)
async def get_analytics(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Points, hours and completion summary for a date range."""
    result = await db.execute(_activities_in_range(current_user, start_date, end_date))
    return summarize_activities(result.scalars().all())


@router.get("/report", response_model=CPDReport)
async def get_report(
    start_date: datetime | None = Query(default=None),
    end_date: datetime | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """CPD record for a period, with reflections and evidence."""
    stmt = _activities_in_range(current_user, start_date, end_date).options(
        selectinload(CPDActivity.reflections), selectinload(CPDActivity.evidence_items)
    )
    result = await db.execute(stmt)
    activities = list(result.scalars().all())
    completed = [activity for activity in activities if activity.is_completed]

    return {
        "generated_at": utcnow(),
        "period": {"start_date": start_date, "end_date": end_date},
        "total_points": sum(activity.points for activity in completed),
        "total_hours": sum(activity.duration for activity in activities),
        "completed_activities": len(completed),
        "activities": activities,
    }


@router.get("/recommendations", response_model=list[CPDRecommendation])
async def get_recommendations(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[dict[str, Any]]:
    """Suggested opportunities tagged with the caller's focus areas and goals."""
    recent = await db.execute(
        select(CPDActivity)
        .where(CPDActivity.user_id == current_user.id, CPDActivity.status == "Completed")
        .order_by(CPDActivity.date.desc())
        .limit(RECENT_ACTIVITY_LIMIT)
    )
    goals = await db.execute(
        select(CPDGoal)
        .where(CPDGoal.user_id == current_user.id, CPDGoal.deadline >= utcnow())
        .order_by(CPDGoal.deadline)
    )

    return build_recommendations(recent.scalars().all(), goals.scalars().all())
