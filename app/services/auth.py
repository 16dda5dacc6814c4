"""
Password hashing and access token primitives.

Tokens are HS256 JWTs carrying the user's identity, role and company so
downstream dependencies can authorize without parsing anything else.
"""
import logging
from datetime import datetime, timedelta, timezone
from typing import Optional

from jose import ExpiredSignatureError, JWTError, jwt
from passlib.context import CryptContext
from pydantic import ValidationError

from app.core.config import settings
from app.core.exceptions import InvalidTokenError, MalformedHashError
from app.schemas.auth import TokenClaims

logger = logging.getLogger(__name__)

pwd_context = CryptContext(
    schemes=["bcrypt"],
    deprecated="auto",
    bcrypt__rounds=settings.bcrypt_rounds,
)


def get_password_hash(password: str) -> str:
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """
    Compare a plaintext password against a stored bcrypt hash.

    Returns False on mismatch. Raises MalformedHashError when the stored
    value is not a hash passlib can identify.
    """
    try:
        return pwd_context.verify(plain_password, hashed_password)
    except (ValueError, TypeError) as e:
        raise MalformedHashError(str(e)) from e


def create_access_token(user, expires_delta: Optional[timedelta] = None) -> str:
    now = datetime.now(timezone.utc)
    expire = now + (expires_delta or timedelta(hours=settings.access_token_expire_hours))
    role = user.role.value if hasattr(user.role, "value") else user.role
    to_encode = {
        "sub": str(user.id),
        "email": user.email,
        "role": role,
        "company_id": str(user.company_id) if user.company_id else None,
        "is_active": bool(user.is_active),
        "needs_password_change": bool(user.needs_password_change),
        "iat": int(now.timestamp()),
        "exp": int(expire.timestamp()),
        "iss": settings.jwt_issuer,
    }
    return jwt.encode(to_encode, settings.jwt_secret, algorithm=settings.jwt_algorithm)


def decode_access_token(token: str) -> TokenClaims:
    """Verify signature, expiry and issuer; raise InvalidTokenError on any failure."""
    try:
        payload = jwt.decode(
            token,
            settings.jwt_secret,
            algorithms=[settings.jwt_algorithm],
            issuer=settings.jwt_issuer,
        )
    except ExpiredSignatureError:
        logger.info("Token rejected: expired")
        raise InvalidTokenError()
    except JWTError as e:
        logger.warning(f"Token rejected: {e}")
        raise InvalidTokenError()

    try:
        return TokenClaims(**payload)
    except ValidationError:
        logger.warning("Token rejected: malformed claims")
        raise InvalidTokenError()
