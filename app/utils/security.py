import base64
import secrets
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, List, Optional

import bcrypt
from jose import JWTError, jwt

from app.core.config import settings


def _truncate_password(password: str) -> bytes:
    """
    bcrypt는 72바이트까지만 처리하므로, 초과하면 UTF-8 문자 경계를 고려하여 자름
    Returns bytes for bcrypt
    """
    password_bytes = password.encode("utf-8")
    if len(password_bytes) <= 72:
        return password_bytes

    # UTF-8 문자가 중간에 잘리지 않도록 문자 단위로 처리
    truncated = password
    while len(truncated.encode("utf-8")) > 72:
        truncated = truncated[:-1]
    return truncated.encode("utf-8")


def get_password_hash(password: str) -> str:
    """
    비밀번호를 bcrypt로 해시화합니다.
    """
    hashed = bcrypt.hashpw(_truncate_password(password), bcrypt.gensalt())
    return hashed.decode("utf-8")


def verify_password(plain: str, hashed: str) -> bool:
    """
    비밀번호를 검증합니다. 해시 형식이 잘못된 경우 False
    """
    try:
        return bcrypt.checkpw(_truncate_password(plain), hashed.encode("utf-8"))
    except ValueError:
        return False


def create_access_token(username: str, roles: List[str],
                        expires_delta: Optional[timedelta] = None) -> str:
    """
    sub=username, roles=권한 이름 목록을 담은 HS256 토큰 발급
    """
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(minutes=settings.JWT_EXPIRATION_MINUTES))
    claims = {
        "sub": username,
        "roles": list(roles),
        "iat": now,
        "exp": expire,
    }
    return jwt.encode(claims, settings.JWT_SECRET, algorithm=settings.JWT_ALGORITHM)


def decode_token(token: str) -> Optional[Dict[str, Any]]:
    try:
        return jwt.decode(token, settings.JWT_SECRET, algorithms=[settings.JWT_ALGORITHM])
    except JWTError:
        return None


def generate_secret_key(num_bytes: int = 32) -> str:
    """HS256용 256비트 랜덤 키 (base64)"""
    return base64.b64encode(secrets.token_bytes(num_bytes)).decode("ascii")
