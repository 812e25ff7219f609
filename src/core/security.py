"""Password hashing and JWT issuing/verification."""
from datetime import UTC, datetime, timedelta
from typing import Literal

import jwt
from passlib.context import CryptContext

from core.config import Settings

TokenType = Literal["access", "refresh"]

JWT_ALGORITHM = "HS256"

pwd_context = CryptContext(schemes=["pbkdf2_sha256"], deprecated="auto")


def hash_password(password: str) -> str:
    """Hash a password with a per-password random salt."""
    return pwd_context.hash(password)


def verify_password(plain_password: str, hashed_password: str) -> bool:
    """Verify a password against its hash."""
    return pwd_context.verify(plain_password, hashed_password)


def _secret_and_ttl(token_type: TokenType, settings: Settings) -> tuple[str, timedelta]:
    if token_type == "access":
        return settings.jwt_access_secret, settings.access_token_ttl
    return settings.jwt_refresh_secret, settings.refresh_token_ttl


def create_token(
    subject: str,
    role: str,
    token_type: TokenType,
    settings: Settings,
    now: datetime | None = None,
) -> str:
    """
    Create a signed JWT.

    Access and refresh tokens are signed with different secrets, so one can never
    be accepted in place of the other.
    """
    secret, ttl = _secret_and_ttl(token_type, settings)
    issued_at = now or datetime.now(UTC)
    payload = {
        "sub": subject,
        "role": role,
        "type": token_type,
        "iat": issued_at,
        "exp": issued_at + ttl,
    }
    return jwt.encode(payload, secret, algorithm=JWT_ALGORITHM)


def decode_token(token: str, token_type: TokenType, settings: Settings) -> dict:
    """
    Decode and validate a JWT.

    Raises:
        jwt.PyJWTError: If the token is invalid, expired, or of the wrong type.
    """
    secret, _ = _secret_and_ttl(token_type, settings)
    payload = jwt.decode(
        token,
        secret,
        algorithms=[JWT_ALGORITHM],
        options={"require": ["sub", "exp", "type"]},
    )
    if payload.get("type") != token_type:
        raise jwt.InvalidTokenError(f"Expected a {token_type} token")
    return payload
