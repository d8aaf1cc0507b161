"""회원 SQLAlchemy ORM 모델 정의.

Member SQLAlchemy ORM model definition.

Tables:
    - members: 회원 계정 (Member accounts, email is globally unique)
"""

import enum
import uuid
from datetime import datetime, timezone

from sqlalchemy import String, DateTime, Uuid
from sqlalchemy.orm import Mapped, mapped_column, relationship

from app.database import Base


class MemberRole(str, enum.Enum):
    """회원 권한 — Member authority."""

    USER = "USER"
    ADMIN = "ADMIN"


class Gender(str, enum.Enum):
    """성별 — Member gender."""

    MALE = "MALE"
    FEMALE = "FEMALE"


class Member(Base):
    """회원 모델 — 회원가입 시 생성, 프로필 수정 시 갱신, 탈퇴 시 삭제.

    Member model — created at signup, updated on profile edit,
    deleted on account removal. Deleting a member removes their posts
    and likes through ON DELETE CASCADE.

    Attributes:
        id: 고유 식별자 UUID (Unique identifier)
        name: 실명 (Real name)
        email: 로그인 이메일, 전역 고유 (Login email, unique)
        password_hash: bcrypt 해시 (Bcrypt password hash, never plaintext)
        address: 주소 (Postal address, optional)
        image_url: 프로필 이미지 URL (Profile image URL)
        profile_image_key: 업로드한 프로필 이미지 키 (Set only by our own upload; None for external URLs)
        nickname: 닉네임 (Display nickname)
        gender: 성별 (MALE/FEMALE, optional)
        phone_number: 휴대폰 번호 (Mobile phone number)
        message: 상태 메시지 (Profile status message, optional)
        role: 권한 (USER/ADMIN)
    """

    __tablename__ = "members"

    id: Mapped[uuid.UUID] = mapped_column(Uuid, primary_key=True, default=uuid.uuid4)
    name: Mapped[str] = mapped_column(String(50), nullable=False)
    # 이메일 — DB 레벨 고유 인덱스 (Unique index enforced by the data store)
    email: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    address: Mapped[str | None] = mapped_column(String(255), nullable=True)
    image_url: Mapped[str] = mapped_column(String(1024), nullable=False)
    # 본인이 업로드한 프로필 이미지만 삭제 대상 (Only this key is ever deleted on replace/removal)
    profile_image_key: Mapped[str | None] = mapped_column(String(1024), nullable=True)
    nickname: Mapped[str] = mapped_column(String(50), nullable=False)
    gender: Mapped[str | None] = mapped_column(String(10), nullable=True)
    phone_number: Mapped[str | None] = mapped_column(String(20), nullable=True)
    message: Mapped[str | None] = mapped_column(String(255), nullable=True)
    role: Mapped[str] = mapped_column(String(20), nullable=False, default=MemberRole.USER.value)
    created_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc))
    updated_at: Mapped[datetime] = mapped_column(DateTime(timezone=True), default=lambda: datetime.now(timezone.utc), onupdate=lambda: datetime.now(timezone.utc))

    # 관계 — DB의 ON DELETE CASCADE에 삭제를 위임 (Deletes are delegated to the database)
    posts = relationship("Post", back_populates="member", cascade="all, delete-orphan", passive_deletes=True)
    likes = relationship("PostLike", back_populates="member", cascade="all, delete-orphan", passive_deletes=True)
