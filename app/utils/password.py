"""비밀번호 해싱 및 검증 유틸리티 모듈.

Password hashing and verification for member accounts.
Signup stores only the bcrypt hash; login compares against it.
"""

import bcrypt

# bcrypt는 72바이트까지만 사용 (bcrypt only consumes the first 72 bytes)
_BCRYPT_MAX_BYTES: int = 72


def _encode(password: str) -> bytes:
    return password.encode("utf-8")[:_BCRYPT_MAX_BYTES]


def hash_password(password: str) -> str:
    """평문 비밀번호를 bcrypt 해시로 변환합니다.

    Each call salts independently, so the same password never yields
    the same stored value.

    Example:
        hashed = hash_password("password12@")
        # "$2b$12$LJ3m4ys3..."
    """
    return bcrypt.hashpw(_encode(password), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """평문 비밀번호와 저장된 해시를 비교합니다.

    Returns False for a mismatch and for a stored value that is not a
    bcrypt hash.
    """
    try:
        return bcrypt.checkpw(_encode(plain_password), hashed_password.encode("utf-8"))
    except ValueError:
        return False
