"""페이지네이션 유틸리티 모듈.

Pagination utility module for SQLAlchemy async queries.
``paginate`` runs a count query plus an OFFSET/LIMIT query; ``Page`` is the
response envelope every list endpoint returns.
"""

import math
from typing import Any, Generic, Sequence, TypeVar

from pydantic import BaseModel
from sqlalchemy import Select, func, select
from sqlalchemy.ext.asyncio import AsyncSession

T = TypeVar("T")

DEFAULT_PER_PAGE: int = 20
MAX_PER_PAGE: int = 100


class Page(BaseModel, Generic[T]):
    """페이지네이션 결과 모델.

    Attributes:
        items: 현재 페이지 항목 목록 (Items for the current page)
        total: 전체 항목 수 (Total count across all pages)
        page: 현재 페이지 번호 — 1부터 시작 (Current page, 1-indexed)
        per_page: 페이지당 항목 수 (Items per page)
        pages: 전체 페이지 수 (ceil(total / per_page))
    """

    items: list[T]
    total: int
    page: int
    per_page: int
    pages: int

    @classmethod
    def build(cls, items: list[T], total: int, page: int, per_page: int) -> "Page[T]":
        pages: int = math.ceil(total / per_page) if per_page else 0
        return cls(items=items, total=total, page=page, per_page=per_page, pages=pages)


async def paginate(
    db: AsyncSession,
    query: Select[Any],
    page: int = 1,
    per_page: int = DEFAULT_PER_PAGE,
) -> tuple[Sequence[Any], int]:
    """SQLAlchemy 쿼리에 대한 페이지네이션을 수행합니다.

    Returns:
        tuple[Sequence[Any], int]: (항목 목록, 전체 개수)
            (Tuple of paginated items and total count)
    """
    # 전체 개수 — 정렬/eager 옵션 없이 서브쿼리로 COUNT (Count without ORDER BY)
    count_query = select(func.count()).select_from(query.order_by(None).subquery())
    total: int = (await db.execute(count_query)).scalar() or 0

    offset: int = (page - 1) * per_page
    result = await db.execute(query.offset(offset).limit(per_page))
    items: Sequence[Any] = result.scalars().unique().all()

    return items, total
