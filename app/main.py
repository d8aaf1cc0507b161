"""FastAPI 애플리케이션 엔트리포인트 — 로깅, 미들웨어 및 라우터 등록.

FastAPI application entry point — Logging, middleware and router registration.
Configures logging, Axiom request logging, CORS, the local upload
directory, health check, and the API routers.
"""

import logging
import sys

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles

from app.config import settings
from app.middleware.axiom_logging import AxiomLoggingMiddleware
from app.services.storage_service import s3_uploader


def setup_logging() -> None:
    """루트 로거를 설정합니다 (Root logger to stdout, level from LOG_LEVEL)."""
    logging.basicConfig(
        level=getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO),
        format="%(asctime)s %(levelname)s %(name)s: %(message)s",
        handlers=[logging.StreamHandler(sys.stdout)],
        force=True,
    )
    # 라이브러리 로그 소음 줄이기 — Quiet chatty libraries
    logging.getLogger("botocore").setLevel(logging.WARNING)
    logging.getLogger("httpx").setLevel(logging.WARNING)
    logging.getLogger("httpcore").setLevel(logging.WARNING)


setup_logging()

app: FastAPI = FastAPI(
    title=settings.APP_NAME,
    version="1.0.0",
    docs_url="/docs",
    redoc_url="/redoc",
)

# Axiom API 로깅 미들웨어 — Axiom API request/response logging
# CORS보다 먼저 등록하여 모든 요청을 캡처 (Registered before CORS to capture all requests)
app.add_middleware(AxiomLoggingMiddleware)

# CORS 미들웨어 — Cross-Origin Resource Sharing middleware
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# 로컬 저장 모드 — S3 미설정 시 업로드 파일을 /uploads 로 서빙
if s3_uploader.is_local:
    app.mount(
        "/uploads",
        StaticFiles(directory=s3_uploader.uploads_dir, check_dir=False),
        name="uploads",
    )


@app.get("/health")
async def health_check() -> dict[str, str]:
    """서버 상태 확인 엔드포인트.

    Health check endpoint for load balancers and monitoring.
    """
    return {"status": "ok"}


# ---------------------------------------------------------------------------
# 라우터 등록 — Router registration
# ---------------------------------------------------------------------------
from app.api import api_router  # noqa: E402

app.include_router(api_router)
