"""
Progress Pacing API Endpoints

Generate and retrieve progress-adaptive learning pace plans for a student
or a curriculum plan.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import asyncio
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.ai import get_ai_client
from edpsych.core.database import get_db
from edpsych.core.models import STAFF_ROLES, CurriculumPlan, ProgressPacing, User
from edpsych.core.schemas import PacingRequest, ProgressPacingSchema
from edpsych.core.security import get_current_user, require_roles
from edpsych.pacing import PacingContext, PacingPlanner

router = APIRouter()

RECENT_PLAN_LIMIT = 10


def get_pacing_planner() -> PacingPlanner:
    """Planner backed by the configured AI providers."""
    return PacingPlanner(get_ai_client())


@router.post("/", response_model=ProgressPacingSchema, status_code=status.HTTP_201_CREATED)
async def create_pacing_plan(
    request: PacingRequest,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    planner: PacingPlanner = Depends(get_pacing_planner),
    db: AsyncSession = Depends(get_db),
) -> ProgressPacing:
    """Generate and save a pacing plan (staff only).

    The AI provider is tried first; a rule-based plan is used when it is
    unavailable.
    """
    if request.student_id is None and request.curriculum_id is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Either student_id or curriculum_id is required",
        )

    context = PacingContext(subject=request.subject, key_stage=request.key_stage)

    if request.student_id:
        result = await db.execute(
            select(User).where(User.id == request.student_id, User.deleted_at.is_(None))
        )
        student = result.scalar_one_or_none()
        if not student:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Student not found with ID: {request.student_id}",
            )
        context.student_name = student.name
        context.key_stage = context.key_stage or student.key_stage

    if request.curriculum_id:
        result = await db.execute(
            select(CurriculumPlan).where(
                CurriculumPlan.id == request.curriculum_id, CurriculumPlan.deleted_at.is_(None)
            )
        )
        plan = result.scalar_one_or_none()
        if not plan:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Curriculum plan not found with ID: {request.curriculum_id}",
            )
        context.curriculum_title = plan.title
        context.objectives = list(plan.objectives or [])
        context.subject = context.subject or plan.subject
        context.key_stage = context.key_stage or plan.key_stage

    # Provider SDK calls are blocking
    pacing_data, source = await asyncio.to_thread(
        planner.generate, request.settings, request.progress_metrics, context
    )

    pacing = ProgressPacing(
        user_id=current_user.id,
        student_id=request.student_id,
        curriculum_id=request.curriculum_id,
        standard_pace=pacing_data.get("standard_pace", 50),
        adjusted_pace=pacing_data["adjusted_pace"],
        adaptation_type=pacing_data["adaptation_type"],
        estimated_completion=pacing_data.get("estimated_completion"),
        pacing_data=pacing_data,
        settings=request.settings.model_dump(),
        subject=context.subject,
        key_stage=context.key_stage,
        progress_metrics_used=request.progress_metrics is not None,
        source=source,
    )

    db.add(pacing)
    await db.commit()
    await db.refresh(pacing)

    return pacing


@router.get("/", response_model=list[ProgressPacingSchema])
async def list_pacing_plans(
    student_id: UUID | None = Query(default=None),
    curriculum_id: UUID | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[ProgressPacing]:
    """The caller's most recent pacing plans."""
    stmt = select(ProgressPacing).where(ProgressPacing.user_id == current_user.id)

    if student_id:
        stmt = stmt.where(ProgressPacing.student_id == student_id)
    if curriculum_id:
        stmt = stmt.where(ProgressPacing.curriculum_id == curriculum_id)

    result = await db.execute(
        stmt.order_by(ProgressPacing.created_at.desc()).limit(RECENT_PLAN_LIMIT)
    )
    return list(result.scalars().all())
