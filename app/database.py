"""데이터베이스 엔진 및 세션 설정 모듈.

Database engine and session configuration module.
Builds the async SQLAlchemy engine for members/posts storage, the session
factory used per request, and the declarative base shared by every model.
"""

from collections.abc import AsyncGenerator
from typing import Any

from sqlalchemy.engine import make_url
from sqlalchemy.ext.asyncio import AsyncSession, AsyncEngine, create_async_engine, async_sessionmaker
from sqlalchemy.orm import DeclarativeBase

from app.config import settings


def engine_options(database_url: str) -> dict[str, Any]:
    """드라이버별 엔진 옵션을 반환합니다.

    Connection pool sizing only applies to server databases; SQLite
    (used for local runs and tests) keeps SQLAlchemy's defaults.
    """
    options: dict[str, Any] = {"echo": settings.DEBUG, "pool_pre_ping": True}
    if make_url(database_url).get_backend_name() == "postgresql":
        options.update(pool_size=5, max_overflow=10)
    return options


# 비동기 데이터베이스 엔진 — Async database engine (asyncpg driver in production)
engine: AsyncEngine = create_async_engine(
    settings.DATABASE_URL,
    **engine_options(settings.DATABASE_URL),
)

# 비동기 세션 팩토리 — Async session factory
# expire_on_commit=False: 커밋 후에도 객체 속성 접근 가능 (Allows attribute access after commit)
async_session: async_sessionmaker[AsyncSession] = async_sessionmaker(
    engine,
    class_=AsyncSession,
    expire_on_commit=False,
)


class Base(DeclarativeBase):
    """SQLAlchemy 선언적 베이스 클래스 — 회원/게시글 모델의 공통 부모."""

    pass


async def get_db() -> AsyncGenerator[AsyncSession, None]:
    """요청 범위의 비동기 세션을 제공합니다.

    FastAPI dependency yielding one session per request. Routers commit
    explicitly after the service call; anything left uncommitted when the
    request fails is rolled back before the session closes.

    Yields:
        AsyncSession: SQLAlchemy 비동기 세션 인스턴스 (Async session instance)
    """
    async with async_session() as session:
        try:
            yield session
        except Exception:
            await session.rollback()
            raise
        finally:
            await session.close()
