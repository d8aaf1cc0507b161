"""Axiom API 로깅 미들웨어.

Axiom API logging middleware.
Sends one structured event per API request to Axiom: endpoint, method,
JSON body (masked), status code, duration and error reason.
Multipart uploads are logged without their body.
"""

import json
import logging
import re
import time
from typing import Any

from axiom_py import Client as AxiomClient
from starlette.middleware.base import BaseHTTPMiddleware, RequestResponseEndpoint
from starlette.requests import Request
from starlette.responses import Response

from app.config import settings

logger = logging.getLogger(__name__)

# 마스킹 대상 필드 패턴 — Fields to mask in request bodies
_SENSITIVE_KEYS = re.compile(
    r"(password|secret|token|authorization|api_key|apikey|credential)",
    re.IGNORECASE,
)

# 로깅 제외 경로 — Paths excluded from logging
_SKIP_PATHS = {"/health", "/docs", "/redoc", "/openapi.json"}
_SKIP_PREFIXES = ("/uploads/",)

_MAX_BODY_CHARS = 2000
_MAX_ERROR_CHARS = 500


def _mask_dict(data: Any, depth: int = 0) -> Any:
    """민감 필드 자동 마스킹 — Recursively mask sensitive fields in dicts/lists."""
    if depth > 5:
        return "..."
    if isinstance(data, dict):
        return {
            k: "***" if _SENSITIVE_KEYS.search(k) else _mask_dict(v, depth + 1)
            for k, v in data.items()
        }
    if isinstance(data, list):
        return [_mask_dict(item, depth + 1) for item in data[:20]]
    return data


def _should_skip(path: str) -> bool:
    return path in _SKIP_PATHS or path.startswith(_SKIP_PREFIXES)


async def _read_json_body(request: Request) -> Any:
    if request.method not in ("POST", "PUT", "PATCH"):
        return None
    if "multipart/form-data" in request.headers.get("content-type", ""):
        return "(multipart body)"
    body_bytes = await request.body()
    if not body_bytes:
        return None
    try:
        body = _mask_dict(json.loads(body_bytes))
    except (json.JSONDecodeError, UnicodeDecodeError):
        return "(non-json body)"
    serialized = json.dumps(body, ensure_ascii=False)
    if len(serialized) > _MAX_BODY_CHARS:
        return serialized[:_MAX_BODY_CHARS] + "...(truncated)"
    return body


class AxiomLoggingMiddleware(BaseHTTPMiddleware):
    """모든 API 요청/응답을 Axiom에 로깅하는 미들웨어.

    Pass-through when AXIOM_API_TOKEN / AXIOM_DATASET are not configured.
    """

    def __init__(self, app: Any) -> None:
        super().__init__(app)
        self._client: AxiomClient | None = None
        self._dataset: str = settings.AXIOM_DATASET

        if settings.AXIOM_API_TOKEN and settings.AXIOM_DATASET:
            self._client = AxiomClient(token=settings.AXIOM_API_TOKEN)

    async def _capture_error(self, response: Response) -> tuple[Response, str]:
        """에러 응답 body에서 사유를 추출하고 응답을 다시 만듭니다."""
        resp_body = b""
        async for chunk in response.body_iterator:
            resp_body += chunk if isinstance(chunk, bytes) else chunk.encode("utf-8")

        try:
            error_data = json.loads(resp_body)
            detail = error_data.get("detail", error_data) if isinstance(error_data, dict) else error_data
            error_detail = detail if isinstance(detail, str) else json.dumps(detail, ensure_ascii=False)
        except (json.JSONDecodeError, UnicodeDecodeError):
            error_detail = resp_body.decode("utf-8", errors="replace")

        rebuilt = Response(
            content=resp_body,
            status_code=response.status_code,
            headers=dict(response.headers),
            media_type=response.media_type,
        )
        return rebuilt, error_detail[:_MAX_ERROR_CHARS]

    async def dispatch(
        self, request: Request, call_next: RequestResponseEndpoint
    ) -> Response:
        if self._client is None or _should_skip(request.url.path):
            return await call_next(request)

        start_time = time.time()
        log_event: dict[str, Any] = {
            "method": request.method,
            "path": request.url.path,
            "status_code": 500,
        }
        if request.query_params:
            log_event["query_params"] = _mask_dict(dict(request.query_params))
        request_body = await _read_json_body(request)
        if request_body is not None:
            log_event["request_body"] = request_body

        try:
            response = await call_next(request)
            log_event["status_code"] = response.status_code
            if response.status_code >= 400:
                response, log_event["error"] = await self._capture_error(response)
        except Exception as exc:
            log_event["error"] = f"{type(exc).__name__}: {str(exc)[:300]}"
            raise
        finally:
            log_event["duration_ms"] = round((time.time() - start_time) * 1000, 2)
            try:
                self._client.ingest_events(self._dataset, [log_event])
            except Exception:
                # 로깅 실패가 요청 처리에 영향주지 않도록 — never break a request on log failure
                logger.warning("Axiom ingest failed for %s %s", log_event["method"], log_event["path"], exc_info=True)

        return response
