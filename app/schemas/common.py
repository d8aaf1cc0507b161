"""공통 Pydantic 응답 스키마 정의.

Common response schemas shared across API domains.
"""

from pydantic import BaseModel


class MessageResponse(BaseModel):
    """단순 메시지 응답 스키마 (e.g. {"message": "Signup Successful"})."""

    message: str
