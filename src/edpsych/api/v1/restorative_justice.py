"""
Restorative Justice API Endpoints

Conversation frameworks shared across a school, and the records staff keep
of the restorative conversations they facilitate.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import RestorativeConversation, RestorativeFramework, User, UserRole
from edpsych.core.pagination import Page, PageParams, page_params, paginate
from edpsych.core.schemas import (
    ConversationCreate,
    ConversationSchema,
    ConversationUpdate,
    RestorativeFrameworkCreate,
    RestorativeFrameworkSchema,
    RestorativeFrameworkUpdate,
)
from edpsych.core.schemas.restorative import AgeGroup
from edpsych.core.security import get_current_user, require_roles

router = APIRouter()

FRAMEWORK_AUTHORS = (UserRole.ADMIN, UserRole.TEACHER, UserRole.EDUCATIONAL_PSYCHOLOGIST)


async def _get_framework_or_404(db: AsyncSession, framework_id: UUID) -> RestorativeFramework:
    result = await db.execute(
        select(RestorativeFramework).where(RestorativeFramework.id == framework_id)
    )
    framework = result.scalar_one_or_none()

    if not framework:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Framework not found with ID: {framework_id}",
        )

    return framework


async def _get_own_conversation(
    db: AsyncSession, conversation_id: UUID, user: User
) -> RestorativeConversation:
    result = await db.execute(
        select(RestorativeConversation).where(RestorativeConversation.id == conversation_id)
    )
    conversation = result.scalar_one_or_none()

    if not conversation:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"Conversation record not found with ID: {conversation_id}",
        )

    if conversation.user_id != user.id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own conversation records",
        )

    return conversation


# ----------------------------------------------------------------------
# Frameworks
# ----------------------------------------------------------------------


@router.post(
    "/frameworks",
    response_model=RestorativeFrameworkSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_framework(
    framework_data: RestorativeFrameworkCreate,
    current_user: User = Depends(require_roles(*FRAMEWORK_AUTHORS)),
    db: AsyncSession = Depends(get_db),
) -> RestorativeFramework:
    """Create a restorative conversation framework."""
    framework = RestorativeFramework(
        **framework_data.model_dump(),
        created_by_id=current_user.id,
    )

    db.add(framework)
    await db.commit()
    await db.refresh(framework)

    return framework


@router.get("/frameworks", response_model=list[RestorativeFrameworkSchema])
async def list_frameworks(
    age_group: AgeGroup | None = Query(default=None),
    scenario: str | None = Query(default=None, max_length=100),
    search: str | None = Query(default=None, max_length=200),
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> list[RestorativeFramework]:
    """List frameworks.

    Frameworks marked `all` match every requested age group.
    """
    stmt = select(RestorativeFramework)

    if age_group and age_group != "all":
        stmt = stmt.where(RestorativeFramework.age_group.in_([age_group, "all"]))
    if scenario:
        stmt = stmt.where(RestorativeFramework.scenario == scenario)
    if search:
        pattern = f"%{search}%"
        stmt = stmt.where(
            or_(
                RestorativeFramework.title.ilike(pattern),
                RestorativeFramework.description.ilike(pattern),
            )
        )

    result = await db.execute(stmt.order_by(RestorativeFramework.title))
    return list(result.scalars().all())


@router.get("/frameworks/{framework_id}", response_model=RestorativeFrameworkSchema)
async def get_framework(
    framework_id: UUID,
    _user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> RestorativeFramework:
    """Get a framework with its steps."""
    return await _get_framework_or_404(db, framework_id)


@router.put("/frameworks/{framework_id}", response_model=RestorativeFrameworkSchema)
async def update_framework(
    framework_id: UUID,
    framework_update: RestorativeFrameworkUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> RestorativeFramework:
    """Update a framework (creator or admin)."""
    framework = await _get_framework_or_404(db, framework_id)

    if framework.created_by_id != current_user.id and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only the creator or an admin can update this framework",
        )

    update_data = framework_update.model_dump(exclude_unset=True)
    for field, value in update_data.items():
        setattr(framework, field, value)

    await db.commit()
    await db.refresh(framework)

    return framework


# ----------------------------------------------------------------------
# Conversation records
# ----------------------------------------------------------------------


@router.post(
    "/conversations",
    response_model=ConversationSchema,
    status_code=status.HTTP_201_CREATED,
)
async def create_conversation(
    conversation_data: ConversationCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> RestorativeConversation:
    """Record a restorative conversation held with a framework."""
    await _get_framework_or_404(db, conversation_data.framework_id)

    conversation = RestorativeConversation(
        **conversation_data.model_dump(),
        user_id=current_user.id,
    )

    db.add(conversation)
    await db.commit()
    await db.refresh(conversation)

    return conversation


@router.get("/conversations", response_model=Page[ConversationSchema])
async def list_conversations(
    params: PageParams = Depends(page_params),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List the caller's conversation records, newest first."""
    stmt = (
        select(RestorativeConversation)
        .where(RestorativeConversation.user_id == current_user.id)
        .order_by(RestorativeConversation.created_at.desc())
    )
    return await paginate(db, stmt, params)


@router.get("/conversations/{conversation_id}", response_model=ConversationSchema)
async def get_conversation(
    conversation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> RestorativeConversation:
    return await _get_own_conversation(db, conversation_id, current_user)


@router.put("/conversations/{conversation_id}", response_model=ConversationSchema)
async def update_conversation(
    conversation_id: UUID,
    conversation_update: ConversationUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> RestorativeConversation:
    """Update a conversation record.

    A completed record cannot be moved back to draft.
    """
    conversation = await _get_own_conversation(db, conversation_id, current_user)

    update_data = conversation_update.model_dump(exclude_unset=True)
    if conversation.status == "completed" and update_data.get("status") == "draft":
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="A completed conversation cannot be returned to draft",
        )

    for field, value in update_data.items():
        setattr(conversation, field, value)

    await db.commit()
    await db.refresh(conversation)

    return conversation


@router.delete("/conversations/{conversation_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_conversation(
    conversation_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> Response:
    conversation = await _get_own_conversation(db, conversation_id, current_user)

    await db.delete(conversation)
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
