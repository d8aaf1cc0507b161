"""회원 입력 검증 함수 모듈.

Explicit validation functions for member and post input.
Each check returns an error message or None; ``validate_signup`` and
``validate_profile_update`` collect them into a ``{field: message}`` map
that services raise as ``FieldValidationError``.
Length limits mirror the column sizes in ``app.models``.
"""

import re

from app.models.member import Gender

INVALID_EMAIL: str = "Invalid Email"
INVALID_PASSWORD: str = "8 ~ 20자, 최소 한개의 특수문자와 숫자, 영문 알파벳을 포함해야 함."
INVALID_PHONE_NUMBER: str = "Invalid phone number"
INVALID_GENDER: str = "Gender must be MALE or FEMALE"
BLANK_FIELD: str = "must not be blank"

# 컬럼 길이 — members.name/nickname String(50), 나머지 텍스트 String(255)
NAME_MAX_LENGTH: int = 50
EMAIL_MAX_LENGTH: int = 255
TEXT_MAX_LENGTH: int = 255
URL_MAX_LENGTH: int = 1024
HASHTAG_MAX_LENGTH: int = 100

_EMAIL_RE = re.compile(r"^[A-Za-z0-9._%+-]+@[A-Za-z0-9-]+(\.[A-Za-z0-9-]+)*\.[A-Za-z]{2,}$")
# 영문, 숫자, 특수문자 각각 최소 1개, 8~20자
_PASSWORD_RE = re.compile(r"^(?=.*[A-Za-z])(?=.*\d)(?=.*[!@#$%^&*()_+\-=\[\]{};':\"\\|,.<>/?~`]).{8,20}$")
# 휴대폰 번호 — 010/011/016~019 + 7~8자리, 하이픈 선택
_PHONE_RE = re.compile(r"^01[016789]-?\d{3,4}-?\d{4}$")


def too_long_message(limit: int) -> str:
    return f"must be at most {limit} characters"


def validate_email(email: str | None) -> str | None:
    if not email or len(email) > EMAIL_MAX_LENGTH or not _EMAIL_RE.match(email):
        return INVALID_EMAIL
    return None


def validate_password(password: str | None) -> str | None:
    if not password or not _PASSWORD_RE.match(password):
        return INVALID_PASSWORD
    return None


def validate_phone_number(phone_number: str | None) -> str | None:
    """휴대폰 번호 형식 검증 — 비어있으면 통과 (Empty means "not provided")."""
    if phone_number and not _PHONE_RE.match(phone_number):
        return INVALID_PHONE_NUMBER
    return None


def validate_gender(gender: str | None) -> str | None:
    if gender is not None and gender not in {g.value for g in Gender}:
        return INVALID_GENDER
    return None


def validate_not_blank(value: str | None) -> str | None:
    if value is None or not value.strip():
        return BLANK_FIELD
    return None


def validate_max_length(value: str | None, limit: int) -> str | None:
    """선택 입력의 최대 길이 검증 — None은 통과."""
    if value is not None and len(value) > limit:
        return too_long_message(limit)
    return None


def validate_required_text(value: str | None, limit: int) -> str | None:
    """필수 텍스트 — 공백 불가, 앞뒤 공백 제거 후 최대 길이 이하."""
    return validate_not_blank(value) or validate_max_length(value.strip(), limit)


def validate_hashtag_names(names: list[str]) -> str | None:
    """정규화된 해시태그 이름 목록 검증 (hashtags.name String(100))."""
    if any(len(name) > HASHTAG_MAX_LENGTH for name in names):
        return too_long_message(HASHTAG_MAX_LENGTH)
    return None


def _collect(checks: dict[str, str | None]) -> dict[str, str]:
    return {field: message for field, message in checks.items() if message is not None}


def validate_signup(
    name: str | None,
    email: str | None,
    password: str | None,
    nickname: str | None,
    phone_number: str | None,
    gender: str | None = None,
    address: str | None = None,
    message: str | None = None,
    image_url: str | None = None,
) -> dict[str, str]:
    """회원가입 요청의 모든 필드를 검증합니다.

    Validate every signup field at once so the client gets all messages
    in a single response.

    Returns:
        dict[str, str]: 필드명 → 오류 메시지, 문제가 없으면 빈 dict
                        (Field to message; empty when the request is valid)
    """
    return _collect({
        "name": validate_required_text(name, NAME_MAX_LENGTH),
        "email": validate_email(email),
        "password": validate_password(password),
        "nickname": validate_required_text(nickname, NAME_MAX_LENGTH),
        "phone_number": validate_phone_number(phone_number),
        "gender": validate_gender(gender),
        "address": validate_max_length(address, TEXT_MAX_LENGTH),
        "message": validate_max_length(message, TEXT_MAX_LENGTH),
        "image_url": validate_max_length(image_url, URL_MAX_LENGTH),
    })


def validate_profile_update(fields: dict[str, str | None]) -> dict[str, str]:
    """프로필 부분 수정 시 전달된 필드만 검증합니다."""
    checks: dict[str, str | None] = {}
    for field in ("name", "nickname"):
        if field in fields:
            checks[field] = validate_required_text(fields[field], NAME_MAX_LENGTH)
    for field in ("address", "message"):
        if field in fields:
            checks[field] = validate_max_length(fields[field], TEXT_MAX_LENGTH)
    if "phone_number" in fields:
        checks["phone_number"] = validate_phone_number(fields["phone_number"])
    if "gender" in fields:
        checks["gender"] = validate_gender(fields["gender"])
    return _collect(checks)
