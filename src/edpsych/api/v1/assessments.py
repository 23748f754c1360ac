"""
Assessment API Endpoints

Assessment authoring (staff), attempts and auto-marking, per-assessment
analytics and per-student progress.

Three routers are exported:
- router: /assessments
- attempt_router: /attempts
- student_router: /students
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from edpsych.assessment import (
    AssessmentValidationError,
    assessment_analytics,
    calculate_results,
    student_progress,
    student_view,
    validate_assessment,
)
from edpsych.core.database import get_db
from edpsych.core.models import (
    STAFF_ROLES,
    Assessment,
    AssessmentAttempt,
    AttemptResponse,
    User,
)
from edpsych.core.models.base import utcnow
from edpsych.core.pagination import Page, PageParams, page_params, paginate
from edpsych.core.schemas import (
    AssessmentAnalytics,
    AssessmentCreate,
    AssessmentSchema,
    AssessmentSummary,
    AssessmentUpdate,
    AttemptDetail,
    AttemptSchema,
    ResponseSubmit,
    StudentProgress,
)
from edpsych.core.schemas.assessments import (
    AssessmentType,
    AttemptResponseSchema,
    KeyStage,
    Subject,
)
from edpsych.core.security import get_current_user, require_roles

router = APIRouter()
attempt_router = APIRouter()
student_router = APIRouter()


def _validate_or_400(questions: list[dict[str, Any]], sections: list[dict[str, Any]]) -> None:
    try:
        validate_assessment(questions, sections)
    except AssessmentValidationError as e:
        raise HTTPException(status_code=status.HTTP_400_BAD_REQUEST, detail=str(e)) from e


async def _get_assessment_or_404(db: AsyncSession, assessment_id: UUID) -> Assessment:
    result = await db.execute(
        select(Assessment).where(Assessment.id == assessment_id, Assessment.deleted_at.is_(None))
    )
    assessment = result.scalar_one_or_none()

    if not assessment:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Assessment not found with ID: {assessment_id}",
        )

    return assessment


def _check_author(assessment: Assessment, user: User) -> None:
    if assessment.created_by_id != user.id and not user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the creator or an admin can modify this assessment",
        )


async def _get_attempt_or_404(
    db: AsyncSession, attempt_id: UUID, *, with_responses: bool = False
) -> AssessmentAttempt:
    stmt = (
        select(AssessmentAttempt)
        .where(AssessmentAttempt.id == attempt_id)
        .options(selectinload(AssessmentAttempt.assessment))
    )
    if with_responses:
        stmt = stmt.options(selectinload(AssessmentAttempt.responses))
    result = await db.execute(stmt)
    attempt = result.scalar_one_or_none()

    if not attempt:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Attempt not found with ID: {attempt_id}",
        )

    return attempt


def _check_attempt_owner(attempt: AssessmentAttempt, user: User) -> None:
    if attempt.student_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only answer your own attempts",
        )


# ----------------------------------------------------------------------
# Assessments
# ----------------------------------------------------------------------


@router.post("/", response_model=AssessmentSchema, status_code=status.HTTP_201_CREATED)
async def create_assessment(
    assessment_data: AssessmentCreate,
    current_user: User = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> Assessment:
    """Create an assessment (staff only)."""
    data = assessment_data.model_dump(mode="json")
    _validate_or_400(data["questions"], data["sections"])

    assessment = Assessment(**data, created_by_id=current_user.id)

    db.add(assessment)
    await db.commit()
    await db.refresh(assessment)

    return assessment


@router.get("/", response_model=Page[AssessmentSummary])
async def list_assessments(
    key_stage: KeyStage | None = Query(default=None),
    subject: Subject | None = Query(default=None),
    assessment_type: AssessmentType | None = Query(default=None),
    params: PageParams = Depends(page_params),
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List assessments, newest first."""
    stmt = select(Assessment).where(Assessment.deleted_at.is_(None))

    if key_stage:
        stmt = stmt.where(Assessment.key_stage == key_stage.value)
    if subject:
        stmt = stmt.where(Assessment.subject == subject.value)
    if assessment_type:
        stmt = stmt.where(Assessment.assessment_type == assessment_type.value)

    return await paginate(db, stmt.order_by(Assessment.created_at.desc()), params)


@router.get("/{assessment_id}", response_model=AssessmentSchema)
async def get_assessment(
    assessment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AssessmentSchema:
    """Get an assessment. Non-staff callers receive questions without answer keys."""
    assessment = await _get_assessment_or_404(db, assessment_id)
    schema = AssessmentSchema.model_validate(assessment)

    if not current_user.is_staff:
        schema = schema.model_copy(
            update={"questions": [student_view(question) for question in assessment.questions]}
        )

    return schema


@router.put("/{assessment_id}", response_model=AssessmentSchema)
async def update_assessment(
    assessment_id: UUID,
    assessment_update: AssessmentUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Assessment:
    """Update an assessment (creator or admin).

    Questions and sections are re-validated together when either changes.
    """
    assessment = await _get_assessment_or_404(db, assessment_id)
    _check_author(assessment, current_user)

    update_data = assessment_update.model_dump(mode="json", exclude_unset=True)
    if "questions" in update_data or "sections" in update_data:
        _validate_or_400(
            update_data.get("questions", assessment.questions),
            update_data.get("sections", assessment.sections),
        )

    for field, value in update_data.items():
        setattr(assessment, field, value)

    await db.commit()
    await db.refresh(assessment)

    return assessment


@router.delete("/{assessment_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_assessment(
    assessment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Soft delete an assessment (creator or admin)."""
    assessment = await _get_assessment_or_404(db, assessment_id)
    _check_author(assessment, current_user)

    assessment.soft_delete()
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


@router.post(
    "/{assessment_id}/attempts", response_model=AttemptSchema, status_code=status.HTTP_201_CREATED
)
async def start_attempt(
    assessment_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AssessmentAttempt:
    """Start a new attempt. Refused once max_attempts attempts are complete."""
    assessment = await _get_assessment_or_404(db, assessment_id)

    result = await db.execute(
        select(AssessmentAttempt).where(
            AssessmentAttempt.assessment_id == assessment_id,
            AssessmentAttempt.student_id == current_user.id,
            AssessmentAttempt.is_complete.is_(True),
        )
    )
    completed = len(result.scalars().all())

    if completed >= assessment.max_attempts:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"Maximum attempts ({assessment.max_attempts}) reached for this assessment",
        )

    attempt = AssessmentAttempt(
        assessment_id=assessment_id,
        student_id=current_user.id,
        start_time=utcnow(),
        is_complete=False,
    )

    db.add(attempt)
    await db.commit()
    await db.refresh(attempt)

    return attempt


@router.get("/{assessment_id}/analytics", response_model=AssessmentAnalytics)
async def get_assessment_analytics(
    assessment_id: UUID,
    _staff: User = Depends(require_roles(*STAFF_ROLES)),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Per-question and overall statistics over completed attempts (staff only)."""
    assessment = await _get_assessment_or_404(db, assessment_id)

    result = await db.execute(
        select(AssessmentAttempt).where(
            AssessmentAttempt.assessment_id == assessment_id,
            AssessmentAttempt.is_complete.is_(True),
        )
    )

    return assessment_analytics(assessment, result.scalars().all())


# ----------------------------------------------------------------------
# Attempts
# ----------------------------------------------------------------------


@attempt_router.get("/{attempt_id}", response_model=AttemptDetail)
async def get_attempt(
    attempt_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AssessmentAttempt:
    """Get an attempt with its responses (the student or staff)."""
    attempt = await _get_attempt_or_404(db, attempt_id, with_responses=True)

    if attempt.student_id != current_user.id and not current_user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You do not have access to this attempt",
        )

    return attempt


@attempt_router.post("/{attempt_id}/responses", response_model=AttemptResponseSchema)
async def submit_response(
    attempt_id: UUID,
    response_data: ResponseSubmit,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AttemptResponse:
    """Save an answer. Answering the same question again replaces the answer."""
    attempt = await _get_attempt_or_404(db, attempt_id)
    _check_attempt_owner(attempt, current_user)

    if attempt.is_complete:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This attempt has already been completed",
        )

    question_ids = {question["id"] for question in attempt.assessment.questions}
    if response_data.question_id not in question_ids:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Question not found in this assessment: {response_data.question_id}",
        )

    result = await db.execute(
        select(AttemptResponse).where(
            AttemptResponse.attempt_id == attempt_id,
            AttemptResponse.question_id == response_data.question_id,
        )
    )
    response = result.scalar_one_or_none()

    if response:
        response.response = response_data.response
        response.time_spent = response_data.time_spent
    else:
        response = AttemptResponse(attempt_id=attempt_id, **response_data.model_dump())
        db.add(response)

    await db.commit()
    await db.refresh(response)

    return response


@attempt_router.post("/{attempt_id}/complete", response_model=AttemptDetail)
async def complete_attempt(
    attempt_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> AssessmentAttempt:
    """Mark the attempt and store its result."""
    attempt = await _get_attempt_or_404(db, attempt_id, with_responses=True)
    _check_attempt_owner(attempt, current_user)

    if attempt.is_complete:
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail="This attempt has already been completed",
        )

    completed_at = utcnow()
    responses = {
        response.question_id: (response.response, response.time_spent)
        for response in attempt.responses
    }
    result = calculate_results(attempt.assessment, attempt, responses, completed_at)

    attempt.end_time = completed_at
    attempt.is_complete = True
    attempt.score = result["score"]
    attempt.max_score = result["max_score"]
    attempt.percentage = result["percentage"]
    attempt.passed = result["passed"]
    attempt.result = result

    await db.commit()

    return attempt


# ----------------------------------------------------------------------
# Student progress
# ----------------------------------------------------------------------


@student_router.get("/{student_id}/progress", response_model=StudentProgress)
async def get_student_progress(
    student_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Completed-attempt history for a student (the student or staff)."""
    if student_id != current_user.id and not current_user.is_staff:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only view your own progress",
        )

    result = await db.execute(
        select(AssessmentAttempt)
        .where(
            AssessmentAttempt.student_id == student_id,
            AssessmentAttempt.is_complete.is_(True),
        )
        .options(selectinload(AssessmentAttempt.assessment))
    )
    attempts = [(attempt, attempt.assessment) for attempt in result.scalars().all()]

    return student_progress(student_id, attempts)
