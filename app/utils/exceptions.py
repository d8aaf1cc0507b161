"""커스텀 HTTP 예외 클래스 모듈.

Custom HTTP exception classes module.
Pre-configured HTTPException subclasses raised by services and rendered
by FastAPI, so call sites never spell out status codes.

Usage:
    from app.utils.exceptions import NotFoundError, DuplicateError
    raise NotFoundError("Post not found")
    raise DuplicateError("Email already exists")
"""

from fastapi import HTTPException, status


class NotFoundError(HTTPException):
    """404 Not Found — 요청한 회원/게시글/좋아요가 없을 때."""

    def __init__(self, detail: str = "Resource not found") -> None:
        super().__init__(status_code=status.HTTP_404_NOT_FOUND, detail=detail)


class DuplicateError(HTTPException):
    """409 Conflict 예외 — 중복 리소스 생성 시도 시 사용.

    Raised when a uniqueness rule would be broken
    (duplicate signup email, liking the same post twice).
    """

    def __init__(self, detail: str = "Resource already exists") -> None:
        super().__init__(status_code=status.HTTP_409_CONFLICT, detail=detail)


class ForbiddenError(HTTPException):
    """403 Forbidden — 본인 게시글이 아닌 경우 (Not the owner of the post)."""

    def __init__(self, detail: str = "Insufficient permissions") -> None:
        super().__init__(status_code=status.HTTP_403_FORBIDDEN, detail=detail)


class UnauthorizedError(HTTPException):
    """401 Unauthorized 예외 — 인증 실패 시 사용.

    Raised when authentication is missing, invalid, or expired
    (tampered/expired JWT, wrong email or password at login).
    """

    def __init__(self, detail: str = "Authentication required") -> None:
        super().__init__(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=detail,
            headers={"WWW-Authenticate": "Bearer"},
        )


class FieldValidationError(HTTPException):
    """400 Bad Request — 필드별 검증 메시지 맵.

    Field-level validation failure. ``detail`` is a ``{field: message}``
    mapping so clients can show each message next to its input.

    Args:
        errors: 필드명 → 오류 메시지 (Field name to error message)
    """

    def __init__(self, errors: dict[str, str]) -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=errors)
        self.errors: dict[str, str] = errors


class NotImageFileError(HTTPException):
    """400 Bad Request — 프로필 이미지로 이미지가 아닌 파일을 올린 경우.

    Raised by the uploader when a profile upload's content type does not
    start with ``image/``.
    """

    def __init__(self, detail: str = "Unsupported file type") -> None:
        super().__init__(status_code=status.HTTP_400_BAD_REQUEST, detail=detail)


class WeatherApiError(HTTPException):
    """502 Bad Gateway — 날씨 API 호출 실패.

    Raised when the upstream weather API is unreachable, answers with a
    non-2xx status, or returns a payload without a temperature.
    """

    def __init__(self, detail: str = "Weather API request failed") -> None:
        super().__init__(status_code=status.HTTP_502_BAD_GATEWAY, detail=detail)
