"""게시글 서비스 — 작성, 조회, 수정, 삭제, 좋아요 비즈니스 로직.

Post Service — Business logic for creating, reading, updating and deleting
posts plus likes. Uploads go through the injected S3Uploader; a missing
temperature is filled from the weather service when one is configured.
"""

import logging
import re
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.models.member import Member
from app.models.post import Hashtag, MediaFile, Post, PostHashtag, PostLike
from app.repositories.hashtag_repository import hashtag_repository
from app.repositories.like_repository import like_repository
from app.repositories.post_repository import post_repository
from app.schemas.post import (
    LikeResponse,
    MediaFileResponse,
    PostAuthor,
    PostCreate,
    PostResponse,
    PostUpdateRequest,
)
from app.services.storage_service import S3Uploader, StoredFile
from app.services.weather_service import WeatherService
from app.utils.exceptions import (
    DuplicateError,
    FieldValidationError,
    ForbiddenError,
    NotFoundError,
    WeatherApiError,
)
from app.utils.pagination import Page
from app.utils.validators import validate_hashtag_names

logger = logging.getLogger(__name__)

_HASHTAG_SPLIT_RE = re.compile(r"[\s,]+")


def normalize_hashtags(raw_tags: list[str]) -> list[str]:
    """해시태그 입력을 정규화합니다.

    Splits on commas/whitespace, strips leading "#", lower-cases, drops
    blanks and collapses duplicates while keeping first-seen order.

    Example:
        normalize_hashtags(["#Seoul, #sunny", "seoul"])  # ["seoul", "sunny"]
    """
    names: list[str] = []
    for raw in raw_tags:
        for token in _HASHTAG_SPLIT_RE.split(raw):
            name: str = token.lstrip("#").strip().lower()
            if name and name not in names:
                names.append(name)
    return names


class PostService:
    """게시글 관련 비즈니스 로직을 처리하는 서비스.

    Args:
        uploader: 첨부 이미지 업로더 (Stores post media)
        weather: 날씨 서비스 (Fills in missing temperatures)
    """

    def __init__(self, uploader: S3Uploader, weather: WeatherService) -> None:
        self.uploader: S3Uploader = uploader
        self.weather: WeatherService = weather

    def _to_response(self, post: Post) -> PostResponse:
        """관계가 로드된 게시글을 응답 스키마로 변환합니다."""
        return PostResponse(
            id=str(post.id),
            content=post.content,
            location=post.location,
            temperature=post.temperature,
            created_at=post.created_at,
            count_liked=post.count_liked,
            member=PostAuthor(
                id=str(post.member.id),
                nickname=post.member.nickname,
                image_url=post.member.image_url,
            ),
            media_files=[
                MediaFileResponse(id=str(media.id), url=media.file_url, content_type=media.content_type)
                for media in post.media_files
            ],
            hashtags=post.hashtag_names,
        )

    def _to_page(self, posts: list[Post], total: int, page: int, per_page: int) -> Page[PostResponse]:
        return Page[PostResponse].build(
            items=[self._to_response(post) for post in posts],
            total=total,
            page=page,
            per_page=per_page,
        )

    async def _resolve_temperature(self, data: PostCreate) -> float | None:
        if data.temperature is not None or not data.location or not self.weather.is_enabled:
            return data.temperature
        try:
            return await self.weather.get_temperature(data.location)
        except WeatherApiError as exc:
            # 기온은 부가 정보 — 조회 실패 시 비워둠 (Post is still created without it)
            logger.warning("Temperature lookup failed for %r: %s", data.location, exc.detail)
            return None

    async def _get_post_or_404(self, db: AsyncSession, post_id: UUID) -> Post:
        post: Post | None = await post_repository.get_detail(db, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        return post

    async def _get_owned_post(self, db: AsyncSession, member: Member, post_id: UUID) -> Post:
        post: Post = await self._get_post_or_404(db, post_id)
        if post.member_id != member.id:
            raise ForbiddenError("Only the author can modify this post")
        return post

    async def create_post(
        self,
        db: AsyncSession,
        member: Member,
        data: PostCreate,
        files: list[UploadFile] | None = None,
    ) -> PostResponse:
        """게시글을 작성합니다.

        Files are uploaded best-effort (failures are skipped), hashtags are
        shared rows created on first use. If the insert fails, objects
        uploaded for this post are deleted again.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            member: 작성자 (Authenticated author)
            data: 게시글 데이터 (Post fields)
            files: 첨부 이미지 목록 (Uploaded media, optional)

        Returns:
            PostResponse: 생성된 게시글 (Created post with media and hashtags)

        Raises:
            FieldValidationError: 100자를 넘는 해시태그 (400 {"hashtags": ...})
        """
        hashtag_names: list[str] = normalize_hashtags(data.hashtags)
        hashtag_error: str | None = validate_hashtag_names(hashtag_names)
        if hashtag_error:
            raise FieldValidationError({"hashtags": hashtag_error})

        temperature: float | None = await self._resolve_temperature(data)
        stored_files: list[StoredFile] = self.uploader.upload_files(files)

        post = Post(
            content=data.content,
            location=data.location,
            temperature=temperature,
            member_id=member.id,
            count_liked=0,
        )
        for stored in stored_files:
            post.add_media_file(
                MediaFile(file_url=stored.url, file_key=stored.key, content_type=stored.content_type)
            )

        try:
            for name in hashtag_names:
                hashtag: Hashtag = await hashtag_repository.get_or_create(db, name)
                post.post_hashtags.append(PostHashtag(hashtag_id=hashtag.id))
            db.add(post)
            await db.flush()
        except Exception:
            self.uploader.delete_files([stored.key for stored in stored_files])
            raise

        logger.info("Post %s created by %s with %d media file(s)", post.id, member.id, len(stored_files))
        return self._to_response(await self._get_post_or_404(db, post.id))

    async def get_post(self, db: AsyncSession, post_id: UUID) -> PostResponse:
        return self._to_response(await self._get_post_or_404(db, post_id))

    async def list_posts(
        self,
        db: AsyncSession,
        page: int = 1,
        per_page: int = 20,
    ) -> Page[PostResponse]:
        """전체 게시글 목록 (최신순)."""
        posts, total = await post_repository.get_page(db, page, per_page)
        return self._to_page(list(posts), total, page, per_page)

    async def list_member_posts(
        self,
        db: AsyncSession,
        member_id: UUID,
        page: int = 1,
        per_page: int = 20,
    ) -> Page[PostResponse]:
        posts, total = await post_repository.get_page(db, page, per_page, member_id=member_id)
        return self._to_page(list(posts), total, page, per_page)

    async def list_posts_by_hashtag(
        self,
        db: AsyncSession,
        name: str,
        page: int = 1,
        per_page: int = 20,
    ) -> Page[PostResponse]:
        """해시태그로 게시글을 검색합니다 — 이름은 작성 시와 같은 규칙으로 정규화."""
        normalized: list[str] = normalize_hashtags([name])
        if not normalized:
            return self._to_page([], 0, page, per_page)
        posts, total = await post_repository.get_page_by_hashtag(db, normalized[0], page, per_page)
        return self._to_page(list(posts), total, page, per_page)

    async def update_post(
        self,
        db: AsyncSession,
        member: Member,
        post_id: UUID,
        data: PostUpdateRequest,
    ) -> PostResponse:
        """게시글의 본문/위치/기온을 수정합니다 (작성자만).

        Raises:
            NotFoundError: 게시글 없음 (404)
            ForbiddenError: 작성자가 아님 (403)
        """
        post: Post = await self._get_owned_post(db, member, post_id)
        post.update(content=data.content, location=data.location, temperature=data.temperature)
        await db.flush()
        return self._to_response(post)

    async def delete_post(
        self,
        db: AsyncSession,
        member: Member,
        post_id: UUID,
    ) -> None:
        """게시글을 삭제합니다 (작성자만).

        Media rows, hashtag links and likes are deleted with the post;
        the stored objects are removed afterwards, best-effort.
        """
        post: Post = await self._get_owned_post(db, member, post_id)
        keys: list[str] = [media.file_key for media in post.media_files]

        await post_repository.delete(db, post)
        self.uploader.delete_files(keys)

    async def like_post(
        self,
        db: AsyncSession,
        member: Member,
        post_id: UUID,
    ) -> LikeResponse:
        """좋아요 — 회원당 한 번.

        Raises:
            NotFoundError: 게시글 없음 (404)
            DuplicateError: 이미 좋아요 누름 (409 "Already liked")
        """
        post: Post | None = await post_repository.get_by_id(db, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        if await like_repository.find(db, post.id, member.id) is not None:
            raise DuplicateError("Already liked")

        try:
            # 동시 요청이 먼저 좋아요를 넣었다면 (post_id, member_id) 고유 제약 위반
            async with db.begin_nested():
                await like_repository.create(db, {"post_id": post.id, "member_id": member.id})
        except IntegrityError:
            logger.info("Like on %s by %s lost a race", post.id, member.id)
            raise DuplicateError("Already liked")

        count_liked: int = await post_repository.increase_count_liked(db, post)
        return LikeResponse(post_id=str(post.id), count_liked=count_liked, liked=True)

    async def unlike_post(
        self,
        db: AsyncSession,
        member: Member,
        post_id: UUID,
    ) -> LikeResponse:
        """좋아요 취소 — 좋아요 수는 0 미만으로 내려가지 않음.

        Raises:
            NotFoundError: 게시글 또는 좋아요 없음 (404)
        """
        post: Post | None = await post_repository.get_by_id(db, post_id)
        if post is None:
            raise NotFoundError("Post not found")
        like: PostLike | None = await like_repository.find(db, post.id, member.id)
        if like is None:
            raise NotFoundError("Like not found")

        await like_repository.delete(db, like)
        count_liked: int = await post_repository.decrease_count_liked(db, post)
        return LikeResponse(post_id=str(post.id), count_liked=count_liked, liked=False)
