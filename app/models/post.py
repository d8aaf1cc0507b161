"""게시글 및 부속 엔티티 SQLAlchemy ORM 모델 정의.

Post and subordinate entity SQLAlchemy ORM model definitions.
A post exclusively owns its media files, hashtag links and likes;
all of them are removed together with the post.

Tables:
    - posts: 게시글 (Posts with location/temperature metadata and like counter)
    - media_files: 첨부 이미지 (Uploaded images attached to a post)
    - hashtags: 해시태그 (Hashtag names, shared across posts)
    - post_hashtags: 게시글-해시태그 연결 (Post ↔ hashtag link)
    - post_likes: 좋아요 (Which member liked which post)
"""

import uuid
from datetime import datetime, timezone

from sqlalchemy import CheckConstraint, DateTime, Float, ForeignKey, Integer, String, Text, UniqueConstraint, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class Post(Base):
    """게시글 모델.

    Post model. Always belongs to exactly one member (member_id NOT NULL).
    count_liked is guarded by a CHECK constraint and only changes through
    the atomic UPDATEs in PostRepository (never below zero).

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        content: 본문 (Post body)
        location: 위치 (Free-form location, e.g. "Seoul")
        temperature: 작성 시점 기온 °C (Temperature at posting time, optional)
        created_at: 작성 일시 UTC (Set on insert)
        count_liked: 좋아요 수 (Like counter, never negative)
        member_id: 작성자 FK (Owning member)
    """

    __tablename__ = "posts"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    content: Mapped[str] = mapped_column(Text, nullable=False)
    location: Mapped[str | None] = mapped_column(String(255), nullable=True)
    temperature: Mapped[float | None] = mapped_column(Float, nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    count_liked: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    member_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        CheckConstraint("count_liked >= 0", name="ck_posts_count_liked_non_negative"),
    )

    member = relationship("Member", back_populates="posts")
    media_files = relationship(
        "MediaFile", back_populates="post", cascade="all, delete-orphan", passive_deletes=True,
        order_by="MediaFile.created_at",
    )
    post_hashtags = relationship("PostHashtag", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)
    likes = relationship("PostLike", back_populates="post", cascade="all, delete-orphan", passive_deletes=True)

    def update(self, content: str, location: str | None, temperature: float | None) -> None:
        """본문/위치/기온만 변경합니다 (Only these three fields are mutable)."""
        self.content = content
        self.location = location
        self.temperature = temperature

    def add_media_file(self, media_file: "MediaFile") -> None:
        self.media_files.append(media_file)

    @property
    def hashtag_names(self) -> list[str]:
        return [link.hashtag.name for link in self.post_hashtags]


class MediaFile(Base):
    """첨부 이미지 모델 — 게시글에 종속.

    Attributes:
        file_url: 공개 URL (Public URL returned by the uploader)
        file_key: 스토리지 키 (Object key used for deletion)
        content_type: MIME 타입 (Uploaded content type)
    """

    __tablename__ = "media_files"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    file_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    file_key: Mapped[str] = mapped_column(String(1024), nullable=False)
    content_type: Mapped[str | None] = mapped_column(String(100), nullable=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    post = relationship("Post", back_populates="media_files")


class Hashtag(Base):
    """해시태그 모델 — 이름은 전역 고유 (Names are globally unique)."""

    __tablename__ = "hashtags"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(100), nullable=False, unique=True, index=True)

    post_links = relationship("PostHashtag", back_populates="hashtag", passive_deletes=True)


class PostHashtag(Base):
    """게시글-해시태그 연결 모델 (Post ↔ hashtag association)."""

    __tablename__ = "post_hashtags"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    hashtag_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("hashtags.id", ondelete="CASCADE"), nullable=False, index=True)

    __table_args__ = (
        UniqueConstraint("post_id", "hashtag_id", name="uq_post_hashtag"),
    )

    post = relationship("Post", back_populates="post_hashtags")
    hashtag = relationship("Hashtag", back_populates="post_links")


class PostLike(Base):
    """좋아요 모델 — 회원당 게시글 하나에 한 번 (One like per member per post)."""

    __tablename__ = "post_likes"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    post_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("posts.id", ondelete="CASCADE"), nullable=False, index=True)
    member_id: Mapped[uuid.UUID] = mapped_column(Uuid, ForeignKey("members.id", ondelete="CASCADE"), nullable=False, index=True)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))

    __table_args__ = (
        UniqueConstraint("post_id", "member_id", name="uq_post_like_member"),
    )

    post = relationship("Post", back_populates="likes")
    member = relationship("Member", back_populates="likes")
