"""API 라우터 패키지 — 모든 엔드포인트 통합.

API Router package — Aggregates every endpoint into a single router
for inclusion in the FastAPI application.

Included routers:
    - members: 회원가입/로그인/프로필 (Signup, login, profile, member posts)
    - posts: 게시글/좋아요 (Posts and likes)
    - hashtags: 해시태그 검색 (Posts by hashtag)
    - weather: 현재 기온 (Current temperature lookup)
"""

from fastapi import APIRouter

from app.api.members import router as members_router
from app.api.posts import hashtag_router, router as posts_router
from app.api.weather import router as weather_router

api_router: APIRouter = APIRouter()

# 회원: /signup, /login, /members 하위 (Signup/login live at the root)
api_router.include_router(members_router, tags=["Members"])
api_router.include_router(posts_router, prefix="/posts", tags=["Posts"])
api_router.include_router(hashtag_router, prefix="/hashtags", tags=["Hashtags"])
api_router.include_router(weather_router, prefix="/weather", tags=["Weather"])
