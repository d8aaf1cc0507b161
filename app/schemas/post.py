"""게시글 관련 Pydantic 요청/응답 스키마 정의.

Post-related request/response schemas. Post creation arrives as
multipart form data (files + fields) and is collected into ``PostCreate``
by the router; updates are plain JSON.
"""

from datetime import datetime

from pydantic import BaseModel, Field

from app.utils.validators import TEXT_MAX_LENGTH


class PostCreate(BaseModel):
    """게시글 작성 데이터 — 멀티파트 폼 필드에서 구성.

    Attributes:
        content: 본문 (Post body, required)
        location: 위치, 최대 255자 (Optional location, posts.location String(255))
        temperature: 기온 °C — 생략 시 날씨 API로 채움 (Filled from the weather API when omitted)
        hashtags: 해시태그 목록 — "#" 유무 무관 (With or without leading "#")
    """

    content: str = Field(min_length=1)
    location: str | None = Field(default=None, max_length=TEXT_MAX_LENGTH)
    temperature: float | None = None
    hashtags: list[str] = []


class PostUpdateRequest(BaseModel):
    """게시글 수정 요청 — 본문/위치/기온만 변경 가능."""

    content: str = Field(min_length=1)
    location: str | None = Field(default=None, max_length=TEXT_MAX_LENGTH)
    temperature: float | None = None


class MediaFileResponse(BaseModel):
    id: str
    url: str
    content_type: str | None


class PostAuthor(BaseModel):
    """게시글 작성자 요약 (Author summary embedded in posts)."""

    id: str
    nickname: str
    image_url: str


class PostResponse(BaseModel):
    """게시글 응답 스키마."""

    id: str  # 게시글 UUID 문자열 (Post UUID as string)
    content: str
    location: str | None
    temperature: float | None
    created_at: datetime
    count_liked: int
    member: PostAuthor
    media_files: list[MediaFileResponse] = []
    hashtags: list[str] = []


class LikeResponse(BaseModel):
    """좋아요/취소 결과 — 현재 좋아요 수와 본인 좋아요 여부."""

    post_id: str
    count_liked: int
    liked: bool


class WeatherResponse(BaseModel):
    location: str
    temperature: float
