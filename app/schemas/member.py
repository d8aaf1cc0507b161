"""회원/인증 관련 Pydantic 요청/응답 스키마 정의.

Member and authentication request/response schemas.
Signup fields are deliberately loose here (plain optional strings);
format rules live in ``app.utils.validators`` so every failing field
is reported together with its own message.
"""

from pydantic import BaseModel


class SignupRequest(BaseModel):
    """회원가입 요청 스키마.

    Attributes:
        name: 실명 (Real name)
        email: 로그인 이메일 (Login email, unique)
        password: 비밀번호 — 8~20자, 영문/숫자/특수문자 포함 (Plain text, bcrypt-hashed on server)
        address: 주소 (Optional address)
        image_url: 프로필 이미지 URL — 없으면 기본 이미지 (Falls back to the placeholder avatar)
        nickname: 닉네임 (Display nickname)
        gender: 성별 MALE/FEMALE (Optional)
        phone_number: 휴대폰 번호 (e.g. 01012345678)
        message: 상태 메시지 (Optional status line)
    """

    name: str | None = None
    email: str | None = None
    password: str | None = None
    address: str | None = None
    image_url: str | None = None  # 빈 값이면 DEFAULT_PROFILE_IMAGE_URL 사용
    nickname: str | None = None
    gender: str | None = None
    phone_number: str | None = None
    message: str | None = None


class LoginRequest(BaseModel):
    """로그인 요청 스키마 (Email + plain text password)."""

    email: str
    password: str  # 평문 — 서버에서 bcrypt 해시와 비교 (Compared to the stored bcrypt hash)


class TokenResponse(BaseModel):
    """JWT 토큰 발급 응답 스키마.

    Attributes:
        access_token: JWT 액세스 토큰 (Access token, default TTL: 1 hour)
        token_type: 토큰 유형 (Always "bearer" for Authorization header)
    """

    access_token: str
    token_type: str = "bearer"


class MemberUpdateRequest(BaseModel):
    """프로필 수정 요청 스키마 (부분 업데이트).

    Only fields present in the request body are applied
    (``model_dump(exclude_unset=True)``).
    """

    name: str | None = None
    address: str | None = None
    nickname: str | None = None
    gender: str | None = None
    phone_number: str | None = None
    message: str | None = None


class MemberResponse(BaseModel):
    """회원 정보 응답 스키마 — 비밀번호 해시는 포함하지 않음."""

    id: str  # 회원 UUID 문자열 (Member UUID as string)
    name: str
    email: str
    address: str | None
    image_url: str
    nickname: str
    gender: str | None
    phone_number: str | None
    message: str | None
    role: str
