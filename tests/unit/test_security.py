"""
Unit Tests for Authentication Helpers
"""

from datetime import timedelta

import pytest
from fastapi import HTTPException
from jose import JWTError

from edpsych.core.models import UserRole
from edpsych.core.security import (
    create_access_token,
    decode_access_token,
    get_current_user,
    hash_password,
    require_roles,
    verify_password,
)


def test_password_hashing():
    hashed = hash_password("correct horse")

    assert hashed != "correct horse"
    assert verify_password("correct horse", hashed)
    assert not verify_password("wrong horse", hashed)


async def test_token_round_trip(teacher):
    payload = decode_access_token(create_access_token(teacher))

    assert payload["sub"] == str(teacher.id)
    assert payload["role"] == "teacher"


async def test_expired_token_rejected(teacher):
    token = create_access_token(teacher, expires_delta=timedelta(seconds=-1))

    with pytest.raises(JWTError):
        decode_access_token(token)


async def test_get_current_user(teacher, db_session):
    user = await get_current_user(create_access_token(teacher), db_session)

    assert user.id == teacher.id


async def test_get_current_user_rejects_inactive(teacher, db_session):
    teacher.is_active = False
    await db_session.commit()

    with pytest.raises(HTTPException) as exc_info:
        await get_current_user(create_access_token(teacher), db_session)

    assert exc_info.value.status_code == 401


async def test_get_current_user_rejects_garbage(db_session):
    with pytest.raises(HTTPException) as exc_info:
        await get_current_user("garbage", db_session)

    assert exc_info.value.status_code == 401


async def test_require_roles(teacher, student):
    checker = require_roles(UserRole.ADMIN, UserRole.TEACHER)

    assert await checker(teacher) is teacher
    with pytest.raises(HTTPException) as exc_info:
        await checker(student)
    assert exc_info.value.status_code == 403
