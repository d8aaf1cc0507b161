"""SQLAlchemy ORM 모델 패키지 — 모든 도메인 모델의 중앙 임포트 지점.

SQLAlchemy ORM models package — Central import point for all domain models.
Importing from this package registers every table with the metadata,
which Alembic and relationship resolution rely on.

Modules:
    member: 회원 (Member accounts)
    post: 게시글, 첨부 이미지, 해시태그, 좋아요 (Posts, media files, hashtags, likes)
"""

from app.models.member import Gender, Member, MemberRole
from app.models.post import Hashtag, MediaFile, Post, PostHashtag, PostLike

__all__ = [
    "Member", "MemberRole", "Gender",
    "Post", "MediaFile", "Hashtag", "PostHashtag", "PostLike",
]
