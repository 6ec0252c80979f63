# src/common/pagination.py

import math
from typing import Generic, List, TypeVar

from fastapi import Query
from pydantic import BaseModel
from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.sql import Select

T = TypeVar("T")

DEFAULT_PAGE_SIZE = 10
MAX_PAGE_SIZE = 100

class PageParams(BaseModel):
    page: int = 0
    size: int = DEFAULT_PAGE_SIZE

    @property
    def offset(self) -> int:
        return self.page * self.size

def page_params(
    page: int = Query(0, ge=0, description="Zero-based page number."),
    size: int = Query(DEFAULT_PAGE_SIZE, ge=1, le=MAX_PAGE_SIZE, description="Page size."),
) -> PageParams:
    return PageParams(page=page, size=size)

class Page(BaseModel, Generic[T]):
    content: List[T]
    total_elements: int
    total_pages: int
    page: int
    size: int

    @property
    def is_empty(self) -> bool:
        return not self.content

    @classmethod
    def build(cls, content: list, total: int, params: PageParams) -> "Page":
        return cls(
            content=content,
            total_elements=total,
            total_pages=math.ceil(total / params.size) if params.size else 0,
            page=params.page,
            size=params.size,
        )

    def map(self, func) -> "Page":
        return Page(
            content=[func(item) for item in self.content],
            total_elements=self.total_elements,
            total_pages=self.total_pages,
            page=self.page,
            size=self.size,
        )

async def paginate(db: AsyncSession, stmt: Select, params: PageParams) -> Page:
    """
    Execute `stmt` for one page and count the full result set.
    """
    count_stmt = select(func.count()).select_from(stmt.order_by(None).subquery())
    total = (await db.execute(count_stmt)).scalar_one()
    result = await db.execute(stmt.offset(params.offset).limit(params.size))
    items = list(result.unique().scalars().all())
    return Page.build(items, total, params)
