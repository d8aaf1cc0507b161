"""FastAPI 의존성 주입 모듈 — 인증 및 서비스 구성.

FastAPI dependency injection module — Authentication and service wiring.
Collaborators (token provider, uploader, weather client) are module
singletons built from settings at startup; each is exposed through a
dependency function so tests can swap it via ``app.dependency_overrides``.

Authentication Flow:
    1. 클라이언트가 Authorization: Bearer <token> 헤더를 전송
       (Client sends Authorization: Bearer <token> header)
    2. HTTPBearer가 토큰을 추출 (HTTPBearer extracts the token)
    3. TokenProvider가 서명/만료/발급자를 검증하고 회원 ID를 반환
       (TokenProvider verifies signature, expiry and issuer, returns member id)
    4. 회원 ID로 DB에서 회원을 조회 (Member is fetched from DB)
"""

from typing import Annotated
from uuid import UUID

import jwt
from fastapi import Depends
from fastapi.security import HTTPBearer, HTTPAuthorizationCredentials
from sqlalchemy.ext.asyncio import AsyncSession

from app.database import get_db
from app.models.member import Member
from app.repositories.member_repository import member_repository
from app.services.member_service import MemberService
from app.services.post_service import PostService
from app.services.storage_service import S3Uploader, s3_uploader
from app.services.weather_service import WeatherService, weather_service
from app.utils.exceptions import UnauthorizedError
from app.utils.jwt import TokenProvider, token_provider

# HTTP Bearer 토큰 추출기 — Authorization 헤더에서 JWT 토큰 추출
security: HTTPBearer = HTTPBearer()


def get_token_provider() -> TokenProvider:
    return token_provider


def get_s3_uploader() -> S3Uploader:
    return s3_uploader


def get_weather_service() -> WeatherService:
    return weather_service


def get_member_service(
    tokens: Annotated[TokenProvider, Depends(get_token_provider)],
    uploader: Annotated[S3Uploader, Depends(get_s3_uploader)],
) -> MemberService:
    return MemberService(token_provider=tokens, uploader=uploader)


def get_post_service(
    uploader: Annotated[S3Uploader, Depends(get_s3_uploader)],
    weather: Annotated[WeatherService, Depends(get_weather_service)],
) -> PostService:
    return PostService(uploader=uploader, weather=weather)


async def get_current_member(
    credentials: Annotated[HTTPAuthorizationCredentials, Depends(security)],
    db: Annotated[AsyncSession, Depends(get_db)],
    tokens: Annotated[TokenProvider, Depends(get_token_provider)],
) -> Member:
    """JWT 토큰에서 현재 인증된 회원을 추출합니다.

    Args:
        credentials: HTTP Bearer 토큰 자격 증명 (Bearer token credentials from header)
        db: 비동기 DB 세션 (Async database session)
        tokens: 토큰 검증기 (Token provider)

    Returns:
        Member: 인증된 회원 ORM 인스턴스 (Authenticated member)

    Raises:
        UnauthorizedError: 토큰이 유효하지 않거나 만료됨, 또는 회원 없음
                           (Invalid/expired token, or member no longer exists)
    """
    try:
        member_id: UUID = tokens.get_member_id(credentials.credentials)
    except jwt.ExpiredSignatureError:
        raise UnauthorizedError("Token has expired")
    except jwt.InvalidTokenError:
        raise UnauthorizedError("Invalid token")

    member: Member | None = await member_repository.get_by_id(db, member_id)
    if member is None:
        raise UnauthorizedError("Member not found")
    return member


CurrentMember = Annotated[Member, Depends(get_current_member)]
DbSession = Annotated[AsyncSession, Depends(get_db)]
