"""게시글 레포지토리 — 게시글 조회, 목록, 해시태그 필터 쿼리.

Post Repository — Detail/list queries with member, media files and
hashtags eagerly loaded (async sessions cannot lazy-load).
"""

from typing import Sequence
from uuid import UUID

from sqlalchemy import Select, case, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from app.models.post import Hashtag, Post, PostHashtag
from app.repositories.base import BaseRepository


def _with_details(query: Select) -> Select:
    """응답 직렬화에 필요한 관계를 함께 로드합니다."""
    return query.options(
        selectinload(Post.member),
        selectinload(Post.media_files),
        selectinload(Post.post_hashtags).selectinload(PostHashtag.hashtag),
    )


class PostRepository(BaseRepository[Post]):
    """posts 테이블 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Post)

    async def get_detail(
        self,
        db: AsyncSession,
        post_id: UUID,
    ) -> Post | None:
        """게시글을 작성자/첨부파일/해시태그와 함께 조회합니다.

        ``populate_existing`` refreshes a post already in the identity map
        so freshly added media and hashtags are visible.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            post_id: 게시글 ID (Post UUID)

        Returns:
            Post | None: 관계가 로드된 게시글 또는 None
        """
        query: Select = (
            _with_details(select(Post).where(Post.id == post_id))
            .execution_options(populate_existing=True)
        )
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def get_page(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
        member_id: UUID | None = None,
    ) -> tuple[Sequence[Post], int]:
        """최신순 게시글 목록 — member_id가 주어지면 해당 회원 글만."""
        query: Select = select(Post)
        if member_id is not None:
            query = query.where(Post.member_id == member_id)
        query = _with_details(query).order_by(Post.created_at.desc(), Post.id)
        return await self.get_paginated(db, query, page, per_page)

    async def get_page_by_hashtag(
        self,
        db: AsyncSession,
        hashtag_name: str,
        page: int = 1,
        per_page: int = 20,
    ) -> tuple[Sequence[Post], int]:
        """해시태그가 달린 게시글 목록 (최신순)."""
        query: Select = (
            select(Post)
            .join(PostHashtag, PostHashtag.post_id == Post.id)
            .join(Hashtag, Hashtag.id == PostHashtag.hashtag_id)
            .where(Hashtag.name == hashtag_name)
        )
        query = _with_details(query).order_by(Post.created_at.desc(), Post.id)
        return await self.get_paginated(db, query, page, per_page)

    async def increase_count_liked(self, db: AsyncSession, post: Post) -> int:
        """좋아요 수를 SQL에서 1 증가시키고 최신 값을 반환합니다.

        The increment is a single UPDATE (`count_liked = count_liked + 1`)
        so concurrent likes never overwrite each other.
        """
        await db.execute(
            update(Post)
            .where(Post.id == post.id)
            .values(count_liked=Post.count_liked + 1)
            .execution_options(synchronize_session=False)
        )
        await db.refresh(post, ["count_liked"])
        return post.count_liked

    async def decrease_count_liked(self, db: AsyncSession, post: Post) -> int:
        """좋아요 수를 SQL에서 1 감소시킵니다 — 0 미만으로 내려가지 않음."""
        await db.execute(
            update(Post)
            .where(Post.id == post.id)
            .values(count_liked=case((Post.count_liked > 0, Post.count_liked - 1), else_=0))
            .execution_options(synchronize_session=False)
        )
        await db.refresh(post, ["count_liked"])
        return post.count_liked


post_repository: PostRepository = PostRepository()
