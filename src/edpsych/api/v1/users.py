"""
User Management API Endpoints

Admin listing and account maintenance. Non-admins can only see and edit
their own account.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from typing import Any
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query, Response, status
from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import User, UserRole
from edpsych.core.pagination import Page, PageParams, page_params, paginate
from edpsych.core.schemas import UserSchema, UserUpdate
from edpsych.core.security import get_current_user, hash_password, require_roles

router = APIRouter()

ADMIN_ONLY_FIELDS = {"role", "is_active", "tenant_id"}


async def _get_user_or_404(db: AsyncSession, user_id: UUID) -> User:
    result = await db.execute(select(User).where(User.id == user_id, User.deleted_at.is_(None)))
    user = result.scalar_one_or_none()

    if not user:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"User not found with ID: {user_id}",
        )

    return user


def _check_self_or_admin(current_user: User, user_id: UUID) -> None:
    if not current_user.is_admin and current_user.id != user_id:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="You can only access your own account",
        )


@router.get("/", response_model=Page[UserSchema])
async def list_users(
    role: UserRole | None = Query(default=None),
    search: str | None = Query(default=None, max_length=200),
    params: PageParams = Depends(page_params),
    _admin: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> dict[str, Any]:
    """List users (admin only), filtered by role and name/email search."""
    stmt = select(User).where(User.deleted_at.is_(None))

    if role:
        stmt = stmt.where(User.role == role.value)
    if search:
        pattern = f"%{search.lower()}%"
        stmt = stmt.where(or_(User.name.ilike(pattern), User.email.ilike(pattern)))

    return await paginate(db, stmt.order_by(User.created_at.desc()), params)


@router.get("/{user_id}", response_model=UserSchema)
async def get_user(
    user_id: UUID,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Get a user by ID."""
    _check_self_or_admin(current_user, user_id)
    return await _get_user_or_404(db, user_id)


@router.put("/{user_id}", response_model=UserSchema)
async def update_user(
    user_id: UUID,
    user_update: UserUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_db),
) -> User:
    """Update a user.

    Only updates fields that are explicitly provided. Role, active flag
    and tenant changes require an admin.
    """
    _check_self_or_admin(current_user, user_id)
    user = await _get_user_or_404(db, user_id)

    update_data = user_update.model_dump(exclude_unset=True)

    if ADMIN_ONLY_FIELDS.intersection(update_data) and not current_user.is_admin:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Only admins can change role, active status or tenant",
        )

    if "email" in update_data and update_data["email"] != user.email:
        result = await db.execute(select(User).where(User.email == update_data["email"]))
        if result.scalar_one_or_none():
            raise HTTPException(
                status_code=status.HTTP_409_CONFLICT,
                detail=f"User already exists with email {update_data['email']}",
            )

    password = update_data.pop("password", None)
    if password:
        user.password_hash = hash_password(password)

    for field, value in update_data.items():
        setattr(user, field, value.value if isinstance(value, UserRole) else value)

    await db.commit()
    await db.refresh(user)

    return user


@router.delete("/{user_id}", status_code=status.HTTP_204_NO_CONTENT)
async def delete_user(
    user_id: UUID,
    _admin: User = Depends(require_roles(UserRole.ADMIN)),
    db: AsyncSession = Depends(get_db),
) -> Response:
    """Soft delete and deactivate a user (admin only)."""
    user = await _get_user_or_404(db, user_id)

    user.soft_delete()
    user.is_active = False
    await db.commit()

    return Response(status_code=status.HTTP_204_NO_CONTENT)
