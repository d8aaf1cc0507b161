"""회원 서비스 — 회원가입, 로그인, 프로필 관리 비즈니스 로직.

Member Service — Business logic for signup, login and profile management.
Validation, password hashing and duplicate-email checks happen here;
the token provider and uploader are handed in by the API dependencies.
"""

import logging
from uuid import UUID

from fastapi import UploadFile
from sqlalchemy.exc import IntegrityError
from sqlalchemy.ext.asyncio import AsyncSession

from app.config import settings
from app.models.member import Member, MemberRole
from app.repositories.member_repository import member_repository
from app.schemas.member import (
    LoginRequest,
    MemberResponse,
    MemberUpdateRequest,
    SignupRequest,
    TokenResponse,
)
from app.services.storage_service import S3Uploader, StoredFile
from app.utils.exceptions import (
    DuplicateError,
    FieldValidationError,
    NotFoundError,
    UnauthorizedError,
)
from app.utils.jwt import TokenProvider
from app.utils.password import hash_password, verify_password
from app.utils.validators import validate_profile_update, validate_signup

logger = logging.getLogger(__name__)


class MemberService:
    """회원 관련 비즈니스 로직을 처리하는 서비스.

    Args:
        token_provider: 토큰 발급기 (Issues login tokens)
        uploader: 이미지 업로더 (Stores profile images)
        default_image_url: 프로필 이미지 기본값 (Placeholder avatar URL)
    """

    def __init__(
        self,
        token_provider: TokenProvider,
        uploader: S3Uploader,
        default_image_url: str = settings.DEFAULT_PROFILE_IMAGE_URL,
    ) -> None:
        self.token_provider: TokenProvider = token_provider
        self.uploader: S3Uploader = uploader
        self.default_image_url: str = default_image_url

    def _to_response(self, member: Member) -> MemberResponse:
        return MemberResponse(
            id=str(member.id),
            name=member.name,
            email=member.email,
            address=member.address,
            image_url=member.image_url,
            nickname=member.nickname,
            gender=member.gender,
            phone_number=member.phone_number,
            message=member.message,
            role=member.role,
        )

    async def signup(
        self,
        db: AsyncSession,
        data: SignupRequest,
    ) -> Member:
        """회원가입을 처리합니다.

        Validate every field, reject a taken email, hash the password and
        substitute the placeholder avatar when no image URL is given.

        Args:
            db: 비동기 데이터베이스 세션 (Async database session)
            data: 회원가입 요청 데이터 (Signup request data)

        Returns:
            Member: 생성된 회원 (Created member)

        Raises:
            FieldValidationError: 형식 오류 필드가 있을 때 (400, field → message map)
            DuplicateError: 이미 가입된 이메일 (409 "Email already exists")
        """
        errors: dict[str, str] = validate_signup(
            name=data.name,
            email=data.email,
            password=data.password,
            nickname=data.nickname,
            phone_number=data.phone_number,
            gender=data.gender,
            address=data.address,
            message=data.message,
            image_url=data.image_url,
        )
        if errors:
            raise FieldValidationError(errors)

        email: str = data.email.strip().lower()
        if await member_repository.exists_by_email(db, email):
            raise DuplicateError("Email already exists")

        image_url: str = data.image_url.strip() if data.image_url and data.image_url.strip() else self.default_image_url

        try:
            # 동시 가입 시 고유 인덱스 위반은 SAVEPOINT만 되돌리고 409로 응답
            async with db.begin_nested():
                member: Member = await member_repository.create(db, {
                    "name": data.name.strip(),
                    "email": email,
                    "password_hash": hash_password(data.password),
                    "address": data.address,
                    "image_url": image_url,
                    "nickname": data.nickname.strip(),
                    "gender": data.gender,
                    "phone_number": data.phone_number,
                    "message": data.message,
                    "role": MemberRole.USER.value,
                })
        except IntegrityError:
            logger.info("Signup lost a race on email %s", email)
            raise DuplicateError("Email already exists")
        logger.info("Member signed up: %s", member.id)
        return member

    async def login(
        self,
        db: AsyncSession,
        data: LoginRequest,
    ) -> TokenResponse:
        """로그인을 처리하고 액세스 토큰을 발급합니다.

        Raises:
            UnauthorizedError: 이메일 또는 비밀번호 불일치 (401)
        """
        member: Member | None = await member_repository.find_by_email(db, data.email.strip())
        if member is None or not verify_password(data.password, member.password_hash):
            raise UnauthorizedError("Invalid email or password")

        token: str = self.token_provider.generate_token(member, self.token_provider.access_token_ttl)
        return TokenResponse(access_token=token)

    async def get_member(
        self,
        db: AsyncSession,
        member_id: UUID,
    ) -> MemberResponse:
        member: Member | None = await member_repository.get_by_id(db, member_id)
        if member is None:
            raise NotFoundError("Member not found")
        return self._to_response(member)

    def get_me(self, member: Member) -> MemberResponse:
        return self._to_response(member)

    async def update_profile(
        self,
        db: AsyncSession,
        member: Member,
        data: MemberUpdateRequest,
    ) -> MemberResponse:
        """프로필을 부분 수정합니다 — 요청에 포함된 필드만 반영.

        Raises:
            FieldValidationError: 전화번호/이름/닉네임/성별 형식 오류 (400)
        """
        update_data: dict[str, str | None] = data.model_dump(exclude_unset=True)
        errors: dict[str, str] = validate_profile_update(update_data)
        if errors:
            raise FieldValidationError(errors)

        for field in ("name", "nickname"):
            if field in update_data:
                update_data[field] = update_data[field].strip()

        member = await member_repository.update(db, member, update_data)
        return self._to_response(member)

    async def change_profile_image(
        self,
        db: AsyncSession,
        member: Member,
        file: UploadFile,
    ) -> MemberResponse:
        """프로필 이미지를 교체합니다.

        The new image is uploaded first. The previous one is deleted
        best-effort only when this member uploaded it (``profile_image_key``);
        URLs given at signup are never treated as ours.

        Raises:
            NotImageFileError: 이미지가 아닌 파일 (400 "Unsupported file type")
        """
        stored: StoredFile = self.uploader.upload_profile_image(file)
        previous_key: str | None = member.profile_image_key

        member = await member_repository.update(db, member, {
            "image_url": stored.url,
            "profile_image_key": stored.key,
        })
        if previous_key:
            self.uploader.delete_files([previous_key])
        return self._to_response(member)

    async def delete_member(
        self,
        db: AsyncSession,
        member: Member,
    ) -> None:
        """회원을 탈퇴 처리합니다.

        Posts, media rows, hashtag links and likes go with the member
        (ON DELETE CASCADE); stored objects are removed afterwards,
        best-effort.
        """
        keys: list[str] = await member_repository.get_media_keys(db, member)
        if member.profile_image_key:
            keys.append(member.profile_image_key)

        await member_repository.release_likes(db, member)
        await member_repository.delete(db, member)
        self.uploader.delete_files(keys)
        logger.info("Member deleted: %s", member.id)
