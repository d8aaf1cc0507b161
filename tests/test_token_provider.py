"""토큰 프로바이더 테스트 — 발급, 검증, 만료, 위조.

TokenProvider tests — claims, validity checks and how protected
routes answer expired or tampered tokens.
"""

import uuid
from datetime import datetime, timedelta, timezone
from types import SimpleNamespace

import jwt
import pytest
from httpx import AsyncClient

from app.utils.jwt import TokenProvider
from tests.conftest import TEST_ISSUER, TEST_SECRET, auth_header


@pytest.fixture
def subject() -> SimpleNamespace:
    return SimpleNamespace(id=uuid.uuid4(), email="writer@example.com")


class TestTokenProvider:
    """토큰 발급/검증 단위 테스트."""

    def test_claims(self, tokens: TokenProvider, subject, now):
        token = tokens.generate_token(subject, timedelta(minutes=30))
        claims = tokens.get_claims(token)
        assert claims["iss"] == TEST_ISSUER
        assert claims["sub"] == "writer@example.com"
        assert claims["id"] == str(subject.id)
        assert claims["exp"] - claims["iat"] == 30 * 60
        assert claims["iat"] == int(now.timestamp())

    def test_same_instant_same_token(self, tokens: TokenProvider, subject):
        """같은 시각, 같은 회원, 같은 만료 기간이면 같은 토큰."""
        first = tokens.generate_token(subject, timedelta(hours=1))
        second = tokens.generate_token(subject, timedelta(hours=1))
        assert first == second
        assert tokens.create_access_token(subject.email, subject.id) == first

    def test_valid_token(self, subject):
        provider = TokenProvider(secret_key=TEST_SECRET, issuer=TEST_ISSUER)
        token = provider.generate_token(subject, timedelta(hours=1))
        assert provider.valid_token(token) is True
        assert provider.get_member_id(token) == subject.id
        assert provider.get_email(token) == subject.email

    def test_expired_token(self, subject):
        """만료된 토큰은 유효하지 않음."""
        past = datetime.now(timezone.utc) - timedelta(hours=2)
        issuer = TokenProvider(secret_key=TEST_SECRET, issuer=TEST_ISSUER, clock=lambda: past)
        token = issuer.generate_token(subject, timedelta(hours=1))

        provider = TokenProvider(secret_key=TEST_SECRET, issuer=TEST_ISSUER)
        assert provider.valid_token(token) is False
        with pytest.raises(jwt.ExpiredSignatureError):
            provider.get_member_id(token)

    def test_tampered_token(self, tokens: TokenProvider, subject):
        """페이로드가 바뀐 토큰은 서명이 맞지 않아 유효하지 않음."""
        token = tokens.generate_token(subject, timedelta(hours=1))
        intruder = SimpleNamespace(id=uuid.uuid4(), email="intruder@example.com")
        forged = tokens.generate_token(intruder, timedelta(hours=1))

        header, _, signature = token.split(".")
        forged_payload = forged.split(".")[1]
        assert tokens.valid_token(f"{header}.{forged_payload}.{signature}") is False

    def test_wrong_secret(self, subject):
        other = TokenProvider(secret_key="another-secret-key-of-enough-length", issuer=TEST_ISSUER)
        token = other.generate_token(subject, timedelta(hours=1))
        provider = TokenProvider(secret_key=TEST_SECRET, issuer=TEST_ISSUER)
        assert provider.valid_token(token) is False

    def test_wrong_issuer(self, subject):
        other = TokenProvider(secret_key=TEST_SECRET, issuer="someone-else")
        token = other.generate_token(subject, timedelta(hours=1))
        provider = TokenProvider(secret_key=TEST_SECRET, issuer=TEST_ISSUER)
        assert provider.valid_token(token) is False

    def test_garbage_token(self, tokens: TokenProvider):
        assert tokens.valid_token("not.a.jwt") is False
        assert tokens.valid_token("") is False

    def test_malformed_member_id(self, tokens: TokenProvider):
        """id 클레임이 UUID가 아니면 InvalidTokenError."""
        token = jwt.encode(
            {
                "iss": TEST_ISSUER,
                "iat": datetime.now(timezone.utc),
                "exp": datetime.now(timezone.utc) + timedelta(hours=1),
                "sub": "writer@example.com",
                "id": "not-a-uuid",
            },
            TEST_SECRET,
            algorithm="HS256",
        )
        with pytest.raises(jwt.InvalidTokenError):
            tokens.get_member_id(token)


class TestProtectedRoutes:
    """보호된 엔드포인트의 토큰 처리."""

    async def test_expired_token_rejected(self, client: AsyncClient, member):
        past = datetime.now(timezone.utc) - timedelta(hours=3)
        issuer = TokenProvider(secret_key=TEST_SECRET, issuer=TEST_ISSUER, clock=lambda: past)
        token = issuer.generate_token(member, timedelta(hours=1))

        res = await client.get("/members/me", headers=auth_header(token))
        assert res.status_code == 401
        assert res.json()["detail"] == "Token has expired"

    async def test_invalid_token_rejected(self, client: AsyncClient, member):
        res = await client.get("/posts", headers=auth_header("garbage"))
        assert res.status_code == 401
        assert res.json()["detail"] == "Invalid token"

    async def test_valid_token_accepted(self, client: AsyncClient, member_token):
        res = await client.get("/posts", headers=auth_header(member_token))
        assert res.status_code == 200
