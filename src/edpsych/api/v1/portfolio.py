"""
Professional Portfolio API Endpoints

An educator's profile, qualifications, achievements, evidence and
reflections, with the CPD record alongside. Items are private to their
owner for editing; colleagues in the same tenant can view the public ones.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any, TypeVar
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import (
    CPDActivity,
    PortfolioAchievement,
    PortfolioEvidence,
    PortfolioProfile,
    PortfolioQualification,
    PortfolioReflection,
    User,
)
from edpsych.core.schemas import (
    AchievementCreate,
    AchievementDetail,
    AchievementSchema,
    AchievementUpdate,
    EvidenceCreate,
    EvidenceDetail,
    EvidenceSchema,
    EvidenceUpdate,
    PortfolioAnalytics,
    PortfolioProfileSchema,
    PortfolioProfileUpdate,
    PortfolioView,
    QualificationCreate,
    QualificationSchema,
    QualificationUpdate,
    ReflectionCreate,
    ReflectionDetail,
    ReflectionSchema,
    ReflectionUpdate,
)
from edpsych.core.schemas.portfolio import Visibility
from edpsych.core.security import get_current_user
from edpsych.cpd import link_ids, portfolio_completeness, without_link

router = APIRouter()

RECENT_CPD_LIMIT = 5

Item = TypeVar(
    "Item", PortfolioQualification, PortfolioAchievement, PortfolioEvidence, PortfolioReflection
)
Dated = TypeVar("Dated", PortfolioAchievement, PortfolioEvidence, PortfolioReflection)


async def _get_owned_or_404(db: AsyncSession, model: type[Item], item_id: UUID, user: User) -> Item:
    item = await db.get(model, item_id)

    if not item or item.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Portfolio item not found with ID: {item_id}",
        )

    return item


async def _check_links(
    db: AsyncSession, model: type[Dated], ids: list[UUID], user: User
) -> list[str]:
    """Stored link list, after checking every id is one of the caller's items (400 otherwise)."""
    stored = link_ids(ids)
    if not stored:
        return stored

    result = await db.execute(
        select(func.count()).select_from(model).where(model.id.in_(ids), model.user_id == user.id)
    )
    if result.scalar_one() != len(stored):
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail=f"Unknown {model.__tablename__.removeprefix('portfolio_')} reference",
        )

    return stored


async def _by_ids(db: AsyncSession, model: type[Dated], ids: list[str]) -> list[Dated]:
    if not ids:
        return []
    result = await db.execute(
        select(model).where(model.id.in_([UUID(i) for i in ids])).order_by(model.date.desc())
    )
    return list(result.scalars().all())


async def _list_dated(
    db: AsyncSession, model: type[Dated], user_id: UUID, visibility: str | None
) -> list[Dated]:
    """Newest first; `visibility="public"` leaves private items out."""
    stmt = select(model).where(model.user_id == user_id)
    if visibility == "public":
        stmt = stmt.where(model.visibility == "public")
    result = await db.execute(stmt.order_by(model.date.desc()))
    return list(result.scalars().all())


async def _portfolio_view(
    db: AsyncSession, user_id: UUID, visibility: str | None
) -> dict[str, Any]:
    profile = await db.execute(select(PortfolioProfile).where(PortfolioProfile.user_id == user_id))
    qualifications = await db.execute(
        select(PortfolioQualification)
        .where(PortfolioQualification.user_id == user_id)
        .order_by(PortfolioQualification.year.desc())
    )
    activities = await db.execute(
        select(CPDActivity)
        .where(CPDActivity.user_id == user_id, CPDActivity.status == "Completed")
        .order_by(CPDActivity.date.desc())
    )

    return {
        "user_id": user_id,
        "profile": profile.scalar_one_or_none(),
        "qualifications": list(qualifications.scalars().all()),
        "achievements": await _list_dated(db, PortfolioAchievement, user_id, visibility),
        "evidence": await _list_dated(db, PortfolioEvidence, user_id, visibility),
        "reflections": await _list_dated(db, PortfolioReflection, user_id, visibility),
        "cpd_activities": list(activities.scalars().all()),
    }


# ----------------------------------------------------------------------
# Whole portfolio
# ----------------------------------------------------------------------


@router.get("", response_model=PortfolioView)
async def get_portfolio(
    visibility: Visibility | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """The caller's complete portfolio (pass visibility=public to preview what others see)."""
    return await _portfolio_view(db, current_user.id, visibility)


@router.get("/users/{user_id}", response_model=PortfolioView)
async def view_colleague_portfolio(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Public items of a colleague in the same tenant."""
    owner = await db.get(User, user_id)

    if (
        not owner
        or owner.deleted_at is not None
        or owner.effective_tenant != current_user.effective_tenant
    ):
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found: {user_id}",
        )

    return await _portfolio_view(db, user_id, "public" if owner.id != current_user.id else None)


@router.get("/analytics", response_model=PortfolioAnalytics)
async def get_analytics(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Item counts, completeness score and completed CPD totals."""
    counts = {}
    for name, model in (
        ("achievements", PortfolioAchievement),
        ("evidence", PortfolioEvidence),
        ("reflections", PortfolioReflection),
        ("qualifications", PortfolioQualification),
    ):
        result = await db.execute(
            select(func.count()).select_from(model).where(model.user_id == current_user.id)
        )
        counts[name] = result.scalar_one()

    profile = await db.execute(
        select(PortfolioProfile.id).where(PortfolioProfile.user_id == current_user.id)
    )
    activities = await db.execute(
        select(CPDActivity)
        .where(CPDActivity.user_id == current_user.id, CPDActivity.status == "Completed")
        .order_by(CPDActivity.date.desc())
    )
    completed = list(activities.scalars().all())

    return {
        "counts": counts,
        "completeness": portfolio_completeness(profile.scalar_one_or_none() is not None, counts),
        "recent_cpd_activities": completed[:RECENT_CPD_LIMIT],
        "total_cpd_points": sum(activity.points for activity in completed),
        "total_cpd_hours": sum(activity.duration for activity in completed),
    }


# ----------------------------------------------------------------------
# Profile and qualifications
# ----------------------------------------------------------------------


@router.get("/profile", response_model=PortfolioProfileSchema)
async def get_profile(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioProfile:
    result = await db.execute(
        select(PortfolioProfile).where(PortfolioProfile.user_id == current_user.id)
    )
    profile = result.scalar_one_or_none()

    if not profile:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail="No portfolio profile yet",
        )

    return profile


@router.put("/profile", response_model=PortfolioProfileSchema)
async def save_profile(
    profile_data: PortfolioProfileUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioProfile:
    """Create or replace the caller's portfolio profile."""
    result = await db.execute(
        select(PortfolioProfile).where(PortfolioProfile.user_id == current_user.id)
    )
    profile = result.scalar_one_or_none()

    if profile:
        for field, value in profile_data.model_dump().items():
            setattr(profile, field, value)
    else:
        profile = PortfolioProfile(**profile_data.model_dump(), user_id=current_user.id)
        db.add(profile)

    await db.commit()
    await db.refresh(profile)

    return profile


@router.post(
    "/qualifications", response_model=QualificationSchema, status_code=status.HTTP_201_CREATED
)
async def add_qualification(
    qualification_data: QualificationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioQualification:
    qualification = PortfolioQualification(
        **qualification_data.model_dump(), user_id=current_user.id
    )

    db.add(qualification)
    await db.commit()
    await db.refresh(qualification)

    return qualification


@router.get("/qualifications", response_model=list[QualificationSchema])
async def list_qualifications(
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[PortfolioQualification]:
    """Most recent first."""
    result = await db.execute(
        select(PortfolioQualification)
        .where(PortfolioQualification.user_id == current_user.id)
        .order_by(PortfolioQualification.year.desc())
    )
    return list(result.scalars().all())


@router.put("/qualifications/{qualification_id}", response_model=QualificationSchema)
async def update_qualification(
    qualification_id: UUID,
    qualification_update: QualificationUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioQualification:
    qualification = await _get_owned_or_404(
        db, PortfolioQualification, qualification_id, current_user
    )

    for field, value in qualification_update.model_dump(exclude_unset=True).items():
        setattr(qualification, field, value)

    await db.commit()
    await db.refresh(qualification)

    return qualification


@router.delete("/qualifications/{qualification_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_qualification(
    qualification_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    qualification = await _get_owned_or_404(
        db, PortfolioQualification, qualification_id, current_user
    )

    await db.delete(qualification)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Achievements
# ----------------------------------------------------------------------


@router.post(
    "/achievements", response_model=AchievementSchema, status_code=status.HTTP_201_CREATED
)
async def add_achievement(
    achievement_data: AchievementCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioAchievement:
    achievement = PortfolioAchievement(**achievement_data.model_dump(), user_id=current_user.id)

    db.add(achievement)
    await db.commit()
    await db.refresh(achievement)

    return achievement


@router.get("/achievements", response_model=list[AchievementSchema])
async def list_achievements(
    visibility: Visibility | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[PortfolioAchievement]:
    return await _list_dated(db, PortfolioAchievement, current_user.id, visibility)


@router.get("/achievements/{achievement_id}", response_model=AchievementDetail)
async def get_achievement(
    achievement_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Achievement with the evidence that backs it."""
    achievement = await _get_owned_or_404(db, PortfolioAchievement, achievement_id, current_user)

    evidence = await _list_dated(db, PortfolioEvidence, current_user.id, None)

    return {
        "achievement": achievement,
        "evidence": [item for item in evidence if str(achievement_id) in item.achievement_ids],
    }


@router.put("/achievements/{achievement_id}", response_model=AchievementSchema)
async def update_achievement(
    achievement_id: UUID,
    achievement_update: AchievementUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioAchievement:
    achievement = await _get_owned_or_404(db, PortfolioAchievement, achievement_id, current_user)

    for field, value in achievement_update.model_dump(exclude_unset=True).items():
        setattr(achievement, field, value)

    await db.commit()
    await db.refresh(achievement)

    return achievement


@router.delete("/achievements/{achievement_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_achievement(
    achievement_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete an achievement and unlink it from evidence."""
    achievement = await _get_owned_or_404(db, PortfolioAchievement, achievement_id, current_user)

    for item in await _list_dated(db, PortfolioEvidence, current_user.id, None):
        if str(achievement_id) in item.achievement_ids:
            item.achievement_ids = without_link(item.achievement_ids, achievement_id)

    await db.delete(achievement)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Evidence
# ----------------------------------------------------------------------


@router.post("/evidence", response_model=EvidenceSchema, status_code=status.HTTP_201_CREATED)
async def add_evidence(
    evidence_data: EvidenceCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioEvidence:
    """Add evidence, optionally linked to the caller's achievements."""
    data = evidence_data.model_dump()
    data["achievement_ids"] = await _check_links(
        db, PortfolioAchievement, evidence_data.achievement_ids, current_user
    )
    evidence = PortfolioEvidence(**data, user_id=current_user.id)

    db.add(evidence)
    await db.commit()
    await db.refresh(evidence)

    return evidence


@router.get("/evidence", response_model=list[EvidenceSchema])
async def list_evidence(
    visibility: Visibility | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[PortfolioEvidence]:
    return await _list_dated(db, PortfolioEvidence, current_user.id, visibility)


@router.get("/evidence/{evidence_id}", response_model=EvidenceDetail)
async def get_evidence(
    evidence_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """Evidence with the achievements it backs and the reflections citing it."""
    evidence = await _get_owned_or_404(db, PortfolioEvidence, evidence_id, current_user)

    reflections = await _list_dated(db, PortfolioReflection, current_user.id, None)

    return {
        "evidence": evidence,
        "achievements": await _by_ids(db, PortfolioAchievement, evidence.achievement_ids),
        "reflections": [item for item in reflections if str(evidence_id) in item.evidence_ids],
    }


@router.put("/evidence/{evidence_id}", response_model=EvidenceSchema)
async def update_evidence(
    evidence_id: UUID,
    evidence_update: EvidenceUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioEvidence:
    """Partial update; `achievement_ids`, when given, replaces the links."""
    evidence = await _get_owned_or_404(db, PortfolioEvidence, evidence_id, current_user)

    update_data = evidence_update.model_dump(exclude_unset=True)
    if "achievement_ids" in update_data:
        update_data["achievement_ids"] = await _check_links(
            db, PortfolioAchievement, update_data["achievement_ids"], current_user
        )
    for field, value in update_data.items():
        setattr(evidence, field, value)

    await db.commit()
    await db.refresh(evidence)

    return evidence


@router.delete("/evidence/{evidence_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_evidence(
    evidence_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Delete evidence and unlink it from reflections."""
    evidence = await _get_owned_or_404(db, PortfolioEvidence, evidence_id, current_user)

    for item in await _list_dated(db, PortfolioReflection, current_user.id, None):
        if str(evidence_id) in item.evidence_ids:
            item.evidence_ids = without_link(item.evidence_ids, evidence_id)

    await db.delete(evidence)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)


# ----------------------------------------------------------------------
# Reflections
# ----------------------------------------------------------------------


@router.post("/reflections", response_model=ReflectionSchema, status_code=status.HTTP_201_CREATED)
async def add_reflection(
    reflection_data: ReflectionCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioReflection:
    data = reflection_data.model_dump()
    data["evidence_ids"] = await _check_links(
        db, PortfolioEvidence, reflection_data.evidence_ids, current_user
    )
    reflection = PortfolioReflection(**data, user_id=current_user.id)

    db.add(reflection)
    await db.commit()
    await db.refresh(reflection)

    return reflection


@router.get("/reflections", response_model=list[ReflectionSchema])
async def list_reflections(
    visibility: Visibility | None = Query(default=None),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[PortfolioReflection]:
    return await _list_dated(db, PortfolioReflection, current_user.id, visibility)


@router.get("/reflections/{reflection_id}", response_model=ReflectionDetail)
async def get_reflection(
    reflection_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    reflection = await _get_owned_or_404(db, PortfolioReflection, reflection_id, current_user)

    return {
        "reflection": reflection,
        "evidence": await _by_ids(db, PortfolioEvidence, reflection.evidence_ids),
    }


@router.put("/reflections/{reflection_id}", response_model=ReflectionSchema)
async def update_reflection(
    reflection_id: UUID,
    reflection_update: ReflectionUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> PortfolioReflection:
    """Partial update; `evidence_ids`, when given, replaces the links."""
    reflection = await _get_owned_or_404(db, PortfolioReflection, reflection_id, current_user)

    update_data = reflection_update.model_dump(exclude_unset=True)
    if "evidence_ids" in update_data:
        update_data["evidence_ids"] = await _check_links(
            db, PortfolioEvidence, update_data["evidence_ids"], current_user
        )
    for field, value in update_data.items():
        setattr(reflection, field, value)

    await db.commit()
    await db.refresh(reflection)

    return reflection


@router.delete("/reflections/{reflection_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_reflection(
    reflection_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    reflection = await _get_owned_or_404(db, PortfolioReflection, reflection_id, current_user)

    await db.delete(reflection)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
