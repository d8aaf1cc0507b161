"""해시태그 레포지토리 — 이름으로 조회/생성.

Hashtag Repository — get-or-create by name so posts share hashtag rows.
"""

import logging

from sqlalchemy import select
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.post import Hashtag
from app.repositories.base import BaseRepository

logger = logging.getLogger(__name__)


class HashtagRepository(BaseRepository[Hashtag]):
    """hashtags 테이블 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Hashtag)

    async def find_by_name(self, db: AsyncSession, name: str) -> Hashtag | None:
        result = await db.execute(select(Hashtag).where(Hashtag.name == name))
        return result.scalar_one_or_none()

    async def get_or_create(self, db: AsyncSession, name: str) -> Hashtag:
        """해시태그를 조회하고 없으면 생성합니다.

        The insert runs inside a SAVEPOINT. When a concurrent request
        created the same name first, only the savepoint is rolled back and
        the winner's row is selected instead.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            name: 정규화된 해시태그 이름 (Normalized name, without "#")

        Returns:
            Hashtag: 기존 또는 새로 생성된 해시태그 (Existing or new hashtag)
        """
        hashtag: Hashtag | None = await self.find_by_name(db, name)
        if hashtag is not None:
            return hashtag

        try:
            async with db.begin_nested():
                return await self.create(db, {"name": name})
        except IntegrityError:
            logger.info("Hashtag %r was created concurrently; reusing it", name)

        result = await db.execute(select(Hashtag).where(Hashtag.name == name))
        return result.scalar_one()


hashtag_repository: HashtagRepository = HashtagRepository()
