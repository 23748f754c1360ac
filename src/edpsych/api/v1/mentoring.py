"""
Mentor Matching API Endpoints

Staff publish a mentoring profile, search for mentors in their school,
request mentoring and run the resulting mentorship (meetings, resources,
feedback, goals). Each side's time is logged as a "Mentorship" CPD activity.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

import logging
from typing import Any, Literal
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, status
from sqlalchemy import func, or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import (
    STAFF_ROLES,
    CPDActivity,
    MentorProfile,
    Mentorship,
    MentorshipFeedback,
    MentorshipMeeting,
    MentorshipRequest,
    MentorshipResource,
    PortfolioAchievement,
    PortfolioReflection,
    User,
)
from edpsych.core.models.base import utcnow
from edpsych.core.schemas import (
    ExpertiseArea,
    FeedbackCreate,
    FeedbackSchema,
    GoalStatusUpdate,
    MeetingCreate,
    MeetingSchema,
    MeetingUpdate,
    MentoringAnalytics,
    MentorProfileSchema,
    MentorProfileUpdate,
    MentorshipCompletion,
    MentorshipDetail,
    MentorshipRequestCreate,
    MentorshipRequestSchema,
    MentorshipSchema,
    RequestDecision,
    RequestDecisionResponse,
    ResourceCreate,
    ResourceSchema,
)
from edpsych.core.security import require_roles
from edpsych.cpd import (
    EXPERTISE_AREAS,
    MENTORSHIP_ACTIVITY_TYPE,
    add_months,
    credit_activity,
    initial_goals,
    matches_filters,
    mentoring_analytics,
    unknown_expertise,
)

logger = logging.getLogger(__name__)

router = APIRouter()

staff_user = require_roles(*STAFF_ROLES)

ParticipantRole = Literal["mentor", "mentee"]


def _check_expertise(ids: list[int]) -> None:
    unknown = unknown_expertise(ids)
    if unknown:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown expertise area(s): {unknown}",
        )


def _participant_filter(
    model: type[MentorshipRequest] | type[Mentorship], user: User, role: str | None
):
    if role == "mentor":
        return model.mentor_id == user.id
    if role == "mentee":
        return model.mentee_id == user.id
    return or_(model.mentor_id == user.id, model.mentee_id == user.id)


async def _get_mentorship(db: AsyncSession, mentorship_id: UUID, user: User) -> Mentorship:
    """Load a mentorship the caller takes part in (404 missing, 403 not a participant)."""
    mentorship = await db.get(Mentorship, mentorship_id)

    if not mentorship:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Mentorship not found with ID: {mentorship_id}",
        )
    if not mentorship.has_participant(user.id):
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You are not part of this mentorship",
        )

    return mentorship


def _require_active(mentorship: Mentorship) -> None:
    if mentorship.status != "active":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Mentorship is {mentorship.status}",
        )


async def _mentorship_activities(db: AsyncSession, mentorship: Mentorship) -> list[CPDActivity]:
    ids = [i for i in (mentorship.mentor_activity_id, mentorship.mentee_activity_id) if i]
    if not ids:
        return []
    result = await db.execute(select(CPDActivity).where(CPDActivity.id.in_(ids)))
    return list(result.scalars().all())


# ----------------------------------------------------------------------
# Catalogue and profiles
# ----------------------------------------------------------------------


@router.get("/expertise", response_model=list[ExpertiseArea])
async def list_expertise() -> tuple[dict[str, Any], ...]:
    return EXPERTISE_AREAS


@router.get("/profile", response_model=MentorProfileSchema)
async def get_profile(
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> MentorProfile:
    result = await db.execute(select(MentorProfile).where(MentorProfile.user_id == current_user.id))
    profile = result.scalar_one_or_none()

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No mentoring profile yet",
        )

    return profile


@router.put("/profile", response_model=MentorProfileSchema)
async def save_profile(
    profile_data: MentorProfileUpdate,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> MentorProfile:
    """Create or replace the caller's mentoring profile."""
    _check_expertise(profile_data.expertise + profile_data.preferences.focus_areas)

    result = await db.execute(select(MentorProfile).where(MentorProfile.user_id == current_user.id))
    profile = result.scalar_one_or_none()

    if profile:
        for field, value in profile_data.model_dump().items():
            setattr(profile, field, value)
    else:
        profile = MentorProfile(**profile_data.model_dump(), user_id=current_user.id)
        db.add(profile)

    await db.commit()
    await db.refresh(profile)

    return profile


@router.get("/mentors", response_model=list[MentorProfileSchema])
async def search_mentors(
    expertise: int | None = Query(default=None),
    phase: str | None = Query(default=None),
    subject: str | None = Query(default=None),
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> list[MentorProfile]:
    """Mentors in the caller's tenant, most experienced first."""
    result = await db.execute(
        select(MentorProfile)
        .join(User, User.id == MentorProfile.user_id)
        .where(
            MentorProfile.user_id != current_user.id,
            MentorProfile.role.in_(("mentor", "both")),
            func.coalesce(User.tenant_id, "default") == current_user.effective_tenant,
            User.is_active.is_(True),
            User.deleted_at.is_(None),
        )
        .order_by(MentorProfile.years_experience.desc())
    )
    return [
        profile
        for profile in result.scalars().all()
        if matches_filters(profile, expertise=expertise, phase=phase, subject=subject)
    ]


# ----------------------------------------------------------------------
# Requests
# ----------------------------------------------------------------------


@router.post(
    "/requests", response_model=MentorshipRequestSchema, status_code=status.HTTP_201_CREATED
)
async def create_request(
    request_data: MentorshipRequestCreate,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> MentorshipRequest:
    """Ask a mentor in the caller's tenant for mentoring."""
    if request_data.mentor_id == current_user.id:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="You cannot request mentoring from yourself",
        )
    _check_expertise(request_data.focus_areas)

    result = await db.execute(
        select(MentorProfile, User)
        .join(User, User.id == MentorProfile.user_id)
        .where(MentorProfile.user_id == request_data.mentor_id, User.deleted_at.is_(None))
    )
    row = result.one_or_none()
    if (
        row is None
        or not row.MentorProfile.is_mentor
        or row.User.effective_tenant != current_user.effective_tenant
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Mentor not found with ID: {request_data.mentor_id}",
        )

    request = MentorshipRequest(**request_data.model_dump(), mentee_id=current_user.id)

    db.add(request)
    await db.commit()
    await db.refresh(request)

    return request


@router.get("/requests", response_model=list[MentorshipRequestSchema])
async def list_requests(
    role: ParticipantRole | None = Query(default=None),
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> list[MentorshipRequest]:
    result = await db.execute(
        select(MentorshipRequest)
        .where(_participant_filter(MentorshipRequest, current_user, role))
        .order_by(MentorshipRequest.created_at.desc())
    )
    return list(result.scalars().all())


@router.post("/requests/{request_id}/respond", response_model=RequestDecisionResponse)
async def respond_to_request(
    request_id: UUID,
    decision: RequestDecision,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Accept or decline a pending request (mentor only).

    Accepting starts the mentorship and opens an "In Progress" Mentorship
    CPD activity for each side.
    """
    request = await db.get(MentorshipRequest, request_id)

    if not request or request.mentor_id != current_user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Mentorship request not found with ID: {request_id}",
        )
    if request.status != "pending":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Request already {request.status}",
        )

    if not decision.accept:
        request.status = "declined"
        await db.commit()
        await db.refresh(request)
        return {"request": request, "mentorship": None}

    mentee = await db.get(User, request.mentee_id)
    mentee_name = mentee.name if mentee else "mentee"
    start = utcnow()

    mentor_activity = CPDActivity(
        user_id=request.mentor_id,
        title=f"Mentoring {mentee_name}",
        type=MENTORSHIP_ACTIVITY_TYPE,
        date=start,
        duration=0,
        points=0,
        categories=[],
        standards=[],
        status="In Progress",
    )
    mentee_activity = CPDActivity(
        user_id=request.mentee_id,
        title=f"Mentored by {current_user.name}",
        type=MENTORSHIP_ACTIVITY_TYPE,
        date=start,
        duration=0,
        points=0,
        categories=[],
        standards=[],
        status="In Progress",
    )
    db.add_all([mentor_activity, mentee_activity])

    mentorship = Mentorship(
        request_id=request.id,
        mentor_id=request.mentor_id,
        mentee_id=request.mentee_id,
        mentor_activity_id=mentor_activity.id,
        mentee_activity_id=mentee_activity.id,
        status="active",
        start_date=start,
        end_date=add_months(start, request.duration_months),
        frequency=request.frequency,
        focus_areas=list(request.focus_areas),
        goals=initial_goals(request.goals),
    )
    db.add(mentorship)
    request.status = "accepted"

    await db.commit()
    await db.refresh(request)
    await db.refresh(mentorship)

    logger.info(f"Mentorship {mentorship.id} started by mentor {current_user.id}")

    return {"request": request, "mentorship": mentorship}


# ----------------------------------------------------------------------
# Mentorships
# ----------------------------------------------------------------------


@router.get("/mentorships", response_model=list[MentorshipSchema])
async def list_mentorships(
    role: ParticipantRole | None = Query(default=None),
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> list[Mentorship]:
    result = await db.execute(
        select(Mentorship)
        .where(_participant_filter(Mentorship, current_user, role))
        .order_by(Mentorship.start_date.desc())
    )
    return list(result.scalars().all())


@router.get("/mentorships/{mentorship_id}", response_model=MentorshipDetail)
async def get_mentorship(
    mentorship_id: UUID,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Mentorship with its meetings (oldest first), resources and feedback."""
    mentorship = await _get_mentorship(db, mentorship_id, current_user)

    meetings = await db.execute(
        select(MentorshipMeeting)
        .where(MentorshipMeeting.mentorship_id == mentorship_id)
        .order_by(MentorshipMeeting.date)
    )
    resources = await db.execute(
        select(MentorshipResource)
        .where(MentorshipResource.mentorship_id == mentorship_id)
        .order_by(MentorshipResource.created_at.desc())
    )
    feedback = await db.execute(
        select(MentorshipFeedback)
        .where(MentorshipFeedback.mentorship_id == mentorship_id)
        .order_by(MentorshipFeedback.created_at.desc())
    )

    return {
        "mentorship": mentorship,
        "meetings": list(meetings.scalars().all()),
        "resources": list(resources.scalars().all()),
        "feedback": list(feedback.scalars().all()),
    }


@router.put("/mentorships/{mentorship_id}/goals/{goal_index}", response_model=MentorshipSchema)
async def update_goal_status(
    mentorship_id: UUID,
    goal_index: int,
    goal_update: GoalStatusUpdate,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> Mentorship:
    """Move a goal along; completing one adds an achievement to the mentee's portfolio."""
    mentorship = await _get_mentorship(db, mentorship_id, current_user)

    if not 0 <= goal_index < len(mentorship.goals):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Goal {goal_index} not found",
        )

    goals = [dict(goal) for goal in mentorship.goals]
    goal = goals[goal_index]
    newly_completed = goal_update.status == "completed" and goal["status"] != "completed"
    goal["status"] = goal_update.status
    mentorship.goals = goals

    if newly_completed:
        db.add(
            PortfolioAchievement(
                user_id=mentorship.mentee_id,
                title=f"Mentorship Goal: {goal['text']}"[:100],
                description=f"Completed mentorship goal: {goal['text']}",
                date=utcnow(),
                type="Mentorship",
            )
        )

    await db.commit()
    await db.refresh(mentorship)

    return mentorship


@router.post("/mentorships/{mentorship_id}/complete", response_model=MentorshipSchema)
async def complete_mentorship(
    mentorship_id: UUID,
    completion: MentorshipCompletion,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> Mentorship:
    """Close the mentorship.

    Both CPD activities are completed and each side gets a portfolio
    achievement; a reflection, if given, goes into the caller's portfolio.
    """
    mentorship = await _get_mentorship(db, mentorship_id, current_user)
    _require_active(mentorship)

    now = utcnow()
    mentorship.status = "completed"
    mentorship.completed_at = now

    for activity in await _mentorship_activities(db, mentorship):
        activity.status = "Completed"
        activity.reflection = completion.reflection or "Mentorship completed successfully."

    for user_id, title in (
        (mentorship.mentor_id, "Completed Mentorship as Mentor"),
        (mentorship.mentee_id, "Completed Mentorship as Mentee"),
    ):
        db.add(
            PortfolioAchievement(
                user_id=user_id,
                title=title,
                description=f"Mentorship from {mentorship.start_date:%d %B %Y} to {now:%d %B %Y}",
                date=now,
                type="Mentorship",
            )
        )

    if completion.reflection:
        db.add(
            PortfolioReflection(
                user_id=current_user.id,
                title="Mentorship Reflection",
                content=completion.reflection,
                date=now,
                tags=["mentorship", "professional development"],
            )
        )

    await db.commit()
    await db.refresh(mentorship)

    return mentorship


# ----------------------------------------------------------------------
# Meetings, resources and feedback
# ----------------------------------------------------------------------


@router.post(
    "/mentorships/{mentorship_id}/meetings",
    response_model=MeetingSchema,
    status_code=status.HTTP_201_CREATED,
)
async def schedule_meeting(
    mentorship_id: UUID,
    meeting_data: MeetingCreate,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> MentorshipMeeting:
    mentorship = await _get_mentorship(db, mentorship_id, current_user)
    _require_active(mentorship)

    meeting = MentorshipMeeting(**meeting_data.model_dump(), mentorship_id=mentorship_id)
    db.add(meeting)
    if meeting.status == "completed":
        for activity in await _mentorship_activities(db, mentorship):
            credit_activity(activity, meeting.duration)

    await db.commit()
    await db.refresh(meeting)

    return meeting


@router.get("/mentorships/{mentorship_id}/meetings", response_model=list[MeetingSchema])
async def list_meetings(
    mentorship_id: UUID,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> list[MentorshipMeeting]:
    await _get_mentorship(db, mentorship_id, current_user)

    result = await db.execute(
        select(MentorshipMeeting)
        .where(MentorshipMeeting.mentorship_id == mentorship_id)
        .order_by(MentorshipMeeting.date)
    )
    return list(result.scalars().all())


@router.put(
    "/mentorships/{mentorship_id}/meetings/{meeting_id}", response_model=MeetingSchema
)
async def update_meeting(
    mentorship_id: UUID,
    meeting_id: UUID,
    meeting_update: MeetingUpdate,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> MentorshipMeeting:
    """Update a meeting; the first move to "completed" credits both CPD activities."""
    mentorship = await _get_mentorship(db, mentorship_id, current_user)
    meeting = await db.get(MentorshipMeeting, meeting_id)

    if not meeting or meeting.mentorship_id != mentorship_id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Meeting not found with ID: {meeting_id}",
        )

    was_completed = meeting.status == "completed"
    for field, value in meeting_update.model_dump(exclude_unset=True).items():
        setattr(meeting, field, value)

    if meeting.status == "completed" and not was_completed:
        for activity in await _mentorship_activities(db, mentorship):
            credit_activity(activity, meeting.duration)

    await db.commit()
    await db.refresh(meeting)

    return meeting


@router.post(
    "/mentorships/{mentorship_id}/resources",
    response_model=ResourceSchema,
    status_code=status.HTTP_201_CREATED,
)
async def share_resource(
    mentorship_id: UUID,
    resource_data: ResourceCreate,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> MentorshipResource:
    await _get_mentorship(db, mentorship_id, current_user)

    resource = MentorshipResource(
        **resource_data.model_dump(), mentorship_id=mentorship_id, shared_by_id=current_user.id
    )

    db.add(resource)
    await db.commit()
    await db.refresh(resource)

    return resource


@router.post(
    "/mentorships/{mentorship_id}/feedback",
    response_model=FeedbackSchema,
    status_code=status.HTTP_201_CREATED,
)
async def leave_feedback(
    mentorship_id: UUID,
    feedback_data: FeedbackCreate,
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> MentorshipFeedback:
    """Rate the other participant, optionally for a specific meeting."""
    mentorship = await _get_mentorship(db, mentorship_id, current_user)

    if feedback_data.meeting_id is not None:
        meeting = await db.get(MentorshipMeeting, feedback_data.meeting_id)
        if not meeting or meeting.mentorship_id != mentorship_id:
            raise HTTPException(
                status_code=status.HTTP_404_NOT_FOUND,
                detail=f"Meeting not found with ID: {feedback_data.meeting_id}",
            )

    feedback = MentorshipFeedback(
        **feedback_data.model_dump(),
        mentorship_id=mentorship_id,
        from_user_id=current_user.id,
        to_user_id=mentorship.partner_of(current_user.id),
    )

    db.add(feedback)
    await db.commit()
    await db.refresh(feedback)

    return feedback


# ----------------------------------------------------------------------
# Analytics
# ----------------------------------------------------------------------


@router.get("/analytics", response_model=MentoringAnalytics)
async def get_analytics(
    current_user: User = Depends(staff_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Mentoring totals, focus areas mentored and completed meetings over the last year."""
    result = await db.execute(
        select(Mentorship).where(_participant_filter(Mentorship, current_user, None))
    )
    mentorships = list(result.scalars().all())

    meetings: list[MentorshipMeeting] = []
    if mentorships:
        result = await db.execute(
            select(MentorshipMeeting).where(
                MentorshipMeeting.mentorship_id.in_([m.id for m in mentorships])
            )
        )
        meetings = list(result.scalars().all())

    activities = await db.execute(
        select(CPDActivity).where(
            CPDActivity.user_id == current_user.id,
            CPDActivity.type == MENTORSHIP_ACTIVITY_TYPE,
        )
    )

    return mentoring_analytics(
        current_user.id, mentorships, meetings, list(activities.scalars().all()), utcnow()
    )
