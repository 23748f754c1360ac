"""
Unit Tests for Pagination Helpers
"""

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from edpsych.core.models import RestorativeFramework
from edpsych.core.pagination import PageParams, paginate


def test_offset_and_pages():
    params = PageParams(page=3, page_size=10)

    assert params.offset == 20
    assert params.pages_for(0) == 0
    assert params.pages_for(21) == 3


def test_page_size_is_bounded():
    with pytest.raises(ValidationError):
        PageParams(page=1, page_size=1000)
    with pytest.raises(ValidationError):
        PageParams(page=0)


async def test_paginate(db_session):
    for number in range(5):
        db_session.add(
            RestorativeFramework(
                title=f"Framework {number}",
                description="d",
                age_group="all",
                scenario="test",
                steps=[],
            )
        )
    await db_session.commit()

    page = await paginate(
        db_session,
        select(RestorativeFramework).order_by(RestorativeFramework.title),
        PageParams(page=2, page_size=2),
    )

    assert page["total"] == 5
    assert page["pages"] == 3
    assert [item.title for item in page["items"]] == ["Framework 2", "Framework 3"]
