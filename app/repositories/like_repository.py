"""좋아요 레포지토리 — 회원별 게시글 좋아요 기록.

Like Repository — one row per (post, member) pair.
"""

from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.post import PostLike
from app.repositories.base import BaseRepository


class LikeRepository(BaseRepository[PostLike]):
    """post_likes 테이블 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(PostLike)

    async def find(
        self,
        db: AsyncSession,
        post_id: UUID,
        member_id: UUID,
    ) -> PostLike | None:
        """회원이 게시글에 누른 좋아요를 조회합니다."""
        result = await db.execute(
            select(PostLike).where(
                PostLike.post_id == post_id,
                PostLike.member_id == member_id,
            )
        )
        return result.scalar_one_or_none()


like_repository: LikeRepository = LikeRepository()
