"""
Security helpers: bcrypt password hashing and JWT access/refresh tokens.

Token subjects are user ids. Reading a token gives back the user id as a
UUID, or None for anything that is not a valid token of the expected type.
"""

from datetime import datetime, timezone, timedelta
from typing import Any, Dict, Optional
import uuid

from jose import JWTError, jwt

# Use bcrypt directly to avoid passlib/bcrypt version conflicts
import bcrypt

from app.core.config import settings


TOKEN_TYPE_ACCESS = "access"
TOKEN_TYPE_REFRESH = "refresh"


# =====================================================
# Passwords
# =====================================================
def get_password_hash(password: str) -> str:
    if not password:
        raise ValueError("Password cannot be empty")
    return bcrypt.hashpw(password.encode("utf-8"), bcrypt.gensalt()).decode("utf-8")


def verify_password(plain_password: str, hashed_password: str) -> bool:
    if not plain_password or not hashed_password:
        return False
    try:
        return bcrypt.checkpw(plain_password.encode("utf-8"), hashed_password.encode("utf-8"))
    except ValueError:
        # Stored value is not a bcrypt hash
        return False


# =====================================================
# Tokens
# =====================================================
def _encode(user_id: uuid.UUID, token_type: str, lifetime: timedelta) -> str:
    now = datetime.now(timezone.utc)
    claims = {
        "sub": str(user_id),
        "type": token_type,
        "iat": now,
        "exp": now + lifetime,
        "jti": str(uuid.uuid4()),
    }
    return jwt.encode(claims, settings.SECRET_KEY, algorithm=settings.ALGORITHM)


def create_access_token(user_id: uuid.UUID, lifetime: Optional[timedelta] = None) -> str:
    return _encode(
        user_id,
        TOKEN_TYPE_ACCESS,
        lifetime or timedelta(minutes=settings.ACCESS_TOKEN_EXPIRE_MINUTES),
    )


def create_refresh_token(user_id: uuid.UUID, lifetime: Optional[timedelta] = None) -> str:
    return _encode(
        user_id,
        TOKEN_TYPE_REFRESH,
        lifetime or timedelta(days=settings.REFRESH_TOKEN_EXPIRE_DAYS),
    )


def read_token(token: str, token_type: str) -> Optional[uuid.UUID]:
    """
    Return the user id a token was issued for.

    jose enforces `exp`; a token of the other type, or one whose subject
    is not a UUID, is treated like a bad signature.
    """
    try:
        claims = jwt.decode(token, settings.SECRET_KEY, algorithms=[settings.ALGORITHM])
    except JWTError:
        return None

    if claims.get("type") != token_type:
        return None
    try:
        return uuid.UUID(claims.get("sub") or "")
    except ValueError:
        return None


def read_access_token(token: str) -> Optional[uuid.UUID]:
    return read_token(token, TOKEN_TYPE_ACCESS)


def read_refresh_token(token: str) -> Optional[uuid.UUID]:
    return read_token(token, TOKEN_TYPE_REFRESH)


def create_token_pair(user_id: uuid.UUID) -> Dict[str, Any]:
    return {
        "access_token": create_access_token(user_id),
        "refresh_token": create_refresh_token(user_id),
        "token_type": "bearer",
        "expires_in": settings.ACCESS_TOKEN_EXPIRE_MINUTES * 60,
    }
