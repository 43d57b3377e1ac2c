# app/core/security.py
from datetime import datetime, timedelta, timezone
from typing import Any, Dict, Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext

from app.core.config import Settings
from app.core.exceptions import BadgeFinderError, ErrorKind

# Password hashing
pwd_context = CryptContext(schemes=["bcrypt"], deprecated="auto")


# Utility functions
def verify_password(plain_password: str, hashed_password: Optional[str]) -> bool:
    if not hashed_password:
        return False
    return pwd_context.verify(plain_password, hashed_password)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def create_access_token(
    settings: Settings,
    subject: str,
    claims: Optional[Dict[str, Any]] = None,
    expires_delta: Optional[timedelta] = None,
) -> str:
    """
    Create a signed JWT for a user id. Every token, whether sent back in the
    body or in the cookie, uses the same expiry.
    """
    to_encode = dict(claims or {})
    expire = datetime.now(tz=timezone.utc) + (
        expires_delta or timedelta(minutes=settings.access_token_expire_minutes)
    )
    to_encode.update({"sub": subject, "exp": expire})
    return jwt.encode(to_encode, settings.jwt_secret_key, algorithm=settings.algorithm)


def decode_token(settings: Settings, token: str) -> dict:
    """Decode and validate a JWT, enforcing algorithm lockdown."""
    try:
        payload = jwt.decode(token, settings.jwt_secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        raise BadgeFinderError(ErrorKind.TOKEN_EXPIRED)
    except JWTError:
        raise BadgeFinderError(ErrorKind.TOKEN_INVALID)
    if not payload.get("sub"):
        raise BadgeFinderError(ErrorKind.TOKEN_INVALID)
    return payload


def token_max_age(settings: Settings) -> int:
    """Cookie max-age in seconds, matching the token expiry."""
    return settings.access_token_expire_minutes * 60
