"""
Pagination Helpers

Page/page_size query parameters and a generic page envelope shared by every
list endpoint.
"""

from __future__ import annotations

import math
from typing import Any, Generic, TypeVar

from fastapi import Query
from pydantic import BaseModel, ConfigDict, Field
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

from edpsych.config import settings

T = TypeVar("T")


class PageParams(BaseModel):
    """Validated pagination parameters."""

    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE)

    @property
    def offset(self) -> int:
        return (self.page - 1) * self.page_size

    def pages_for(self, total: int) -> int:
        """Number of pages needed for `total` rows (0 when there are none)."""
        return math.ceil(total / self.page_size)


class Page(BaseModel, Generic[T]):
    """Paginated response envelope."""

    model_config = ConfigDict(from_attributes=True)

    items: list[T]
    total: int
    page: int
    page_size: int
    pages: int


def page_params(
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=settings.DEFAULT_PAGE_SIZE, ge=1, le=settings.MAX_PAGE_SIZE),
) -> PageParams:
    """FastAPI dependency reading page/page_size from the query string."""
    return PageParams(page=page, page_size=page_size)


async def paginate(db: AsyncSession, stmt: Select[Any], params: PageParams) -> dict[str, Any]:
    """Run `stmt` for one page and count the full result set.

    Returns a dict matching `Page` so routes can declare
    `response_model=Page[SomeSchema]` and return ORM rows as items.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()

    result = await db.execute(stmt.offset(params.offset).limit(params.page_size))
    items = list(result.scalars().all())

    return {
        "items": items,
        "total": total,
        "page": params.page,
        "page_size": params.page_size,
        "pages": params.pages_for(total),
    }
