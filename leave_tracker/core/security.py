import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from werkzeug.security import check_password_hash, generate_password_hash

from ..config import Settings
from .errors import InvalidToken, TokenExpired

logger = logging.getLogger(__name__)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash"""
    return check_password_hash(hashed_password, plain_password)


def get_password_hash(password: str, settings: Settings) -> str:
    """Hash a password with salted PBKDF2-SHA256 at the configured work factor"""
    method = f"pbkdf2:sha256:{settings.password_hash_iterations}"
    return generate_password_hash(password, method=method, salt_length=16)


def create_access_token(data: dict, settings: Settings, expires_delta: Optional[timedelta] = None) -> str:
    """Create JWT access token"""
    to_encode = data.copy()
    now = datetime.now(timezone.utc)
    if expires_delta is not None:
        expire = now + expires_delta
    else:
        expire = now + timedelta(minutes=settings.access_token_expire_minutes)

    to_encode.update({"exp": expire, "iat": now})
    return jwt.encode(to_encode, settings.secret_key, algorithm=settings.algorithm)


def decode_access_token(token: str, settings: Settings) -> dict:
    """Verify signature and expiry; expired and otherwise bad tokens raise different errors."""
    try:
        payload = jwt.decode(token, settings.secret_key, algorithms=[settings.algorithm])
    except ExpiredSignatureError:
        logger.info("Rejected expired token")
        raise TokenExpired()
    except JWTError as exc:
        logger.info("Rejected invalid token: %s", exc)
        raise InvalidToken()

    if payload.get("sub") is None:
        raise InvalidToken()
    return payload


def token_claims_for(user) -> dict:
    return {
        "sub": str(user.id),
        "id": user.id,
        "email": user.email,
        "role": user.role,
        "department": user.department,
    }
