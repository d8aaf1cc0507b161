"""테스트 인프라 — 임시 SQLite DB, 세션, httpx 클라이언트, 협력 객체 픽스처.

Test infrastructure — Per-test SQLite database (aiosqlite, foreign keys on),
session, httpx client, and overrides for the token provider (fixed clock),
uploader (local mode under tmp_path) and weather client (MockTransport).
"""

from collections.abc import AsyncGenerator
from datetime import datetime, timezone
from pathlib import Path

import httpx
import pytest
import pytest_asyncio
from httpx import ASGITransport, AsyncClient
from sqlalchemy import event
from sqlalchemy.ext.asyncio import (
    AsyncEngine,
    AsyncSession,
    async_sessionmaker,
    create_async_engine,
)

from app.api.deps import get_s3_uploader, get_token_provider, get_weather_service
from app.database import Base, get_db
from app.main import app
from app.models import *  # noqa: F401,F403 — register all models with metadata
from app.models.member import Member
from app.services.storage_service import S3Uploader
from app.services.weather_service import WeatherService
from app.utils.jwt import TokenProvider
from app.utils.password import hash_password

TEST_SECRET = "test-secret-key-for-jwt-signing-32b"
TEST_ISSUER = "project3-test"
WEATHER_URL = "https://weather.test/data/2.5/weather"
MEMBER_PASSWORD = "password12@"


# ---------------------------------------------------------------------------
# DB: 엔진, 세션
# ---------------------------------------------------------------------------
@pytest_asyncio.fixture
async def engine(tmp_path: Path) -> AsyncGenerator[AsyncEngine, None]:
    """테스트마다 새 SQLite 파일 DB를 만들고 스키마를 생성합니다."""
    eng = create_async_engine(f"sqlite+aiosqlite:///{tmp_path / 'test.db'}")

    @event.listens_for(eng.sync_engine, "connect")
    def _enable_foreign_keys(dbapi_connection, connection_record):
        # ON DELETE CASCADE 동작을 위해 필요 (SQLite keeps FKs off by default)
        cursor = dbapi_connection.cursor()
        cursor.execute("PRAGMA foreign_keys=ON")
        cursor.close()

    async with eng.begin() as conn:
        await conn.run_sync(Base.metadata.create_all)

    yield eng
    await eng.dispose()


@pytest_asyncio.fixture
async def db(engine: AsyncEngine) -> AsyncGenerator[AsyncSession, None]:
    """각 테스트에 격리된 DB 세션을 제공합니다."""
    factory = async_sessionmaker(engine, class_=AsyncSession, expire_on_commit=False)
    async with factory() as session:
        yield session


# ---------------------------------------------------------------------------
# 협력 객체: 토큰, 업로더, 날씨
# ---------------------------------------------------------------------------
@pytest.fixture
def now() -> datetime:
    return datetime.now(timezone.utc).replace(microsecond=0)


@pytest.fixture
def tokens(now: datetime) -> TokenProvider:
    """시각이 고정된 토큰 프로바이더 — 같은 클레임이면 같은 토큰."""
    return TokenProvider(secret_key=TEST_SECRET, issuer=TEST_ISSUER, clock=lambda: now)


@pytest.fixture
def uploader(tmp_path: Path) -> S3Uploader:
    """로컬 모드 업로더 — tmp_path/uploads 에 저장."""
    return S3Uploader(
        bucket="",
        region="ap-northeast-2",
        uploads_dir=tmp_path / "uploads",
        public_base_url="http://test",
    )


def _weather_handler(request: httpx.Request) -> httpx.Response:
    location = request.url.params.get("q")
    if location == "Seoul":
        return httpx.Response(200, json={"name": "Seoul", "main": {"temp": 21.5}})
    return httpx.Response(404, json={"cod": "404", "message": "city not found"})


@pytest.fixture
def weather() -> WeatherService:
    return WeatherService(
        api_key="test-key",
        base_url=WEATHER_URL,
        transport=httpx.MockTransport(_weather_handler),
    )


@pytest_asyncio.fixture
async def client(
    db: AsyncSession,
    tokens: TokenProvider,
    uploader: S3Uploader,
    weather: WeatherService,
) -> AsyncGenerator[AsyncClient, None]:
    """FastAPI 테스트 클라이언트 — DB 세션과 협력 객체를 오버라이드합니다."""
    async def _override_get_db() -> AsyncGenerator[AsyncSession, None]:
        yield db

    app.dependency_overrides[get_db] = _override_get_db
    app.dependency_overrides[get_token_provider] = lambda: tokens
    app.dependency_overrides[get_s3_uploader] = lambda: uploader
    app.dependency_overrides[get_weather_service] = lambda: weather

    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac

    app.dependency_overrides.clear()


# ---------------------------------------------------------------------------
# 헬퍼 픽스처: 테스트용 회원
# ---------------------------------------------------------------------------
async def _create_member(db: AsyncSession, email: str, nickname: str) -> Member:
    member = Member(
        name="홍길동",
        email=email,
        password_hash=hash_password(MEMBER_PASSWORD),
        address="서울특별시 중구 세종대로 110",
        image_url="https://example.com/avatar.png",
        nickname=nickname,
        gender="MALE",
        phone_number="01012345678",
    )
    db.add(member)
    await db.flush()
    await db.refresh(member)
    await db.commit()
    return member


@pytest_asyncio.fixture
async def member(db: AsyncSession) -> Member:
    return await _create_member(db, "writer@example.com", "writer")


@pytest_asyncio.fixture
async def other_member(db: AsyncSession) -> Member:
    return await _create_member(db, "reader@example.com", "reader")


@pytest.fixture
def member_token(tokens: TokenProvider, member: Member) -> str:
    return tokens.create_access_token(member.email, member.id)


@pytest.fixture
def other_token(tokens: TokenProvider, other_member: Member) -> str:
    return tokens.create_access_token(other_member.email, other_member.id)


def auth_header(token: str) -> dict[str, str]:
    return {"Authorization": f"Bearer {token}"}


PNG_BYTES = (
    b"\x89PNG\r\n\x1a\n\x00\x00\x00\rIHDR\x00\x00\x00\x01\x00\x00\x00\x01"
    b"\x08\x06\x00\x00\x00\x1f\x15\xc4\x89\x00\x00\x00\rIDATx\x9cc\xf8\x0f"
    b"\x00\x00\x01\x01\x00\x05\x18\xd8N\x00\x00\x00\x00IEND\xaeB`\x82"
)
