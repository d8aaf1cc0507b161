"""JWT 발급 및 검증 — TokenProvider.

JWT issuing and validation for member authentication.
The secret, issuer and TTL are passed in explicitly; the module-level
``token_provider`` is built once from ``Settings`` at startup.

JWT Payload Structure:
    {
        "iss": "project3",          # 발급자 (Issuer)
        "iat": 1700000000,          # 발급 시각 UNIX timestamp (Issued at)
        "exp": 1700003600,          # 만료 시각 UNIX timestamp (Expiration)
        "sub": "member@email.com",  # 회원 이메일 (Member email)
        "id": "member_uuid"         # 회원 ID (Member identifier)
    }
"""

import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone
from typing import Any, Protocol
from uuid import UUID

import jwt

from app.config import Settings, settings

logger = logging.getLogger(__name__)


class TokenSubject(Protocol):
    """토큰에 담을 회원 정보 (Anything carrying a member id and email)."""

    id: UUID
    email: str


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class TokenProvider:
    """회원 액세스 토큰을 발급하고 검증합니다.

    Issues HMAC-signed JWTs that embed the member id and email, and
    validates signature, expiry and issuer on protected requests.
    Invalid tokens are rejected outright; there is no retry or refresh.

    Args:
        secret_key: 서명 비밀키 (Signing secret)
        issuer: "iss" 클레임 (Issuer claim, checked on decode)
        algorithm: 서명 알고리즘 (Signing algorithm, default HS256)
        access_token_ttl: 기본 만료 기간 (Default access token lifetime)
        clock: 현재 시각 함수 (Returns the "now" used for iat/exp)
    """

    def __init__(
        self,
        secret_key: str,
        issuer: str,
        algorithm: str = "HS256",
        access_token_ttl: timedelta = timedelta(hours=1),
        clock: Callable[[], datetime] | None = None,
    ) -> None:
        self.secret_key: str = secret_key
        self.issuer: str = issuer
        self.algorithm: str = algorithm
        self.access_token_ttl: timedelta = access_token_ttl
        self._clock: Callable[[], datetime] = clock or _utcnow

    @classmethod
    def from_settings(cls, config: Settings) -> "TokenProvider":
        return cls(
            secret_key=config.JWT_SECRET_KEY,
            issuer=config.JWT_ISSUER,
            algorithm=config.JWT_ALGORITHM,
            access_token_ttl=timedelta(minutes=config.JWT_ACCESS_TOKEN_EXPIRE_MINUTES),
        )

    def _encode(self, email: str, member_id: UUID, expires_in: timedelta) -> str:
        # iat/exp는 초 단위로 잘라 같은 시각에 발급한 토큰이 동일하도록 함
        issued_at: datetime = self._clock().replace(microsecond=0)
        payload: dict[str, Any] = {
            "iss": self.issuer,
            "iat": issued_at,
            "exp": issued_at + expires_in,
            "sub": email,
            "id": str(member_id),
        }
        return jwt.encode(payload, self.secret_key, algorithm=self.algorithm)

    def generate_token(self, member: TokenSubject, expires_in: timedelta) -> str:
        """회원 정보로 토큰을 생성합니다.

        Generate a token for ``member`` valid for ``expires_in``.
        Two calls with the same member, clock instant and lifetime
        produce identical tokens.
        """
        return self._encode(member.email, member.id, expires_in)

    def create_access_token(self, email: str, member_id: UUID) -> str:
        """기본 만료 기간으로 액세스 토큰을 생성합니다."""
        return self._encode(email, member_id, self.access_token_ttl)

    def decode(self, token: str) -> dict[str, Any]:
        """토큰을 검증하고 클레임을 반환합니다.

        Raises:
            jwt.ExpiredSignatureError: 만료된 토큰 (Expired token)
            jwt.InvalidTokenError: 서명/발급자/형식 오류 (Bad signature, issuer or format)
        """
        return jwt.decode(
            token,
            self.secret_key,
            algorithms=[self.algorithm],
            issuer=self.issuer,
            options={"require": ["exp", "iat", "sub"]},
        )

    def valid_token(self, token: str) -> bool:
        """토큰 유효 여부 — 만료/위조/형식 오류면 False."""
        try:
            self.decode(token)
        except jwt.ExpiredSignatureError:
            logger.info("Rejected expired token")
            return False
        except jwt.InvalidTokenError as exc:
            logger.info("Rejected invalid token: %s", exc)
            return False
        return True

    def get_claims(self, token: str) -> dict[str, Any]:
        return self.decode(token)

    def get_member_id(self, token: str) -> UUID:
        """토큰의 "id" 클레임을 UUID로 반환합니다.

        Raises:
            jwt.InvalidTokenError: 클레임이 없거나 UUID가 아님 (Missing or malformed id claim)
        """
        raw: Any = self.decode(token).get("id")
        try:
            return UUID(str(raw))
        except ValueError as exc:
            raise jwt.InvalidTokenError("Token carries no valid member id") from exc

    def get_email(self, token: str) -> str:
        return self.decode(token)["sub"]


# 전역 토큰 프로바이더 — Built once from settings at import/startup
token_provider: TokenProvider = TokenProvider.from_settings(settings)
