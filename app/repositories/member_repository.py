"""회원 레포지토리 — 회원 조회 및 삭제 쿼리.

Member Repository — lookup by email and the storage keys that must be
cleaned up when an account is removed.
"""

from sqlalchemy import Select, case, func, select, update
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member
from app.models.post import MediaFile, Post, PostLike
from app.repositories.base import BaseRepository


class MemberRepository(BaseRepository[Member]):
    """members 테이블 쿼리를 담당하는 레포지토리."""

    def __init__(self) -> None:
        super().__init__(Member)

    async def find_by_email(
        self,
        db: AsyncSession,
        email: str,
    ) -> Member | None:
        """이메일로 회원을 조회합니다 (대소문자 구분 없음).

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            email: 로그인 이메일 (Login email)

        Returns:
            Member | None: 회원 또는 None (Member or None)
        """
        query: Select = select(Member).where(func.lower(Member.email) == email.lower())
        result = await db.execute(query)
        return result.scalar_one_or_none()

    async def exists_by_email(self, db: AsyncSession, email: str) -> bool:
        return await self.find_by_email(db, email) is not None

    async def get_media_keys(
        self,
        db: AsyncSession,
        member: Member,
    ) -> list[str]:
        """회원의 모든 게시글 첨부 파일 스토리지 키를 조회합니다.

        Storage keys of every media file on the member's posts, collected
        before the account row is deleted.
        """
        query: Select = (
            select(MediaFile.file_key)
            .join(Post, Post.id == MediaFile.post_id)
            .where(Post.member_id == member.id)
        )
        result = await db.execute(query)
        return list(result.scalars().all())

    async def release_likes(
        self,
        db: AsyncSession,
        member: Member,
    ) -> None:
        """회원이 누른 좋아요 수만큼 각 게시글의 좋아요 수를 줄입니다.

        Run before the member row is deleted; the like rows themselves are
        removed by ON DELETE CASCADE.
        """
        liked_post_ids: Select = select(PostLike.post_id).where(PostLike.member_id == member.id)
        await db.execute(
            update(Post)
            .where(Post.id.in_(liked_post_ids))
            .values(count_liked=case((Post.count_liked > 0, Post.count_liked - 1), else_=0))
            .execution_options(synchronize_session=False)
        )


member_repository: MemberRepository = MemberRepository()
