"""
Authentication API Endpoints

Self-registration, password login and the current-user lookup.
"""
# ruff: noqa: B008 - FastAPI Depends in function defaults is standard pattern

from fastapi import APIRouter, Depends, HTTPException, status
from fastapi.security import OAuth2PasswordRequestForm
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.core.database import get_db
from edpsych.core.models import User, UserRole
from edpsych.core.models.base import utcnow
from edpsych.core.schemas import Token, UserCreate, UserSchema
from edpsych.core.security import (
    create_access_token,
    get_current_user,
    hash_password,
    verify_password,
)

router = APIRouter()


@router.post("/register", response_model=UserSchema, status_code=status.HTTP_201_CREATED)
async def register(user_data: UserCreate, db: AsyncSession = Depends(get_db)) -> User:
    """Create an account. Admin accounts cannot be self-registered."""
    if user_data.role == UserRole.ADMIN:
        raise HTTPException(
            status_code=status.HTTP_403_FORBIDDEN,
            detail="Admin accounts cannot be self-registered",
        )

    result = await db.execute(select(User).where(User.email == user_data.email))
    if result.scalar_one_or_none():
        raise HTTPException(
            status_code=status.HTTP_409_CONFLICT,
            detail=f"User already exists with email {user_data.email}",
        )

    user = User(
        email=user_data.email,
        name=user_data.name,
        password_hash=hash_password(user_data.password),
        role=user_data.role.value,
        key_stage=user_data.key_stage,
        is_active=True,
    )

    db.add(user)
    await db.commit()
    await db.refresh(user)

    return user


@router.post("/token", response_model=Token)
async def login(
    form_data: OAuth2PasswordRequestForm = Depends(), db: AsyncSession = Depends(get_db)
) -> Token:
    """Exchange email (as `username`) and password for a bearer token."""
    result = await db.execute(
        select(User).where(
            User.email == form_data.username.strip().lower(), User.deleted_at.is_(None)
        )
    )
    user = result.scalar_one_or_none()

    if not user or not user.is_active or not verify_password(form_data.password, user.password_hash):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Incorrect email or password",
            headers={"WWW-Authenticate": "Bearer"},
        )

    user.last_login_at = utcnow()
    await db.commit()

    return Token(access_token=create_access_token(user))


@router.get("/me", response_model=UserSchema)
async def read_current_user(current_user: User = Depends(get_current_user)) -> User:
    """Get the authenticated user."""
    return current_user
