"""Authentication dependencies: Bearer JWT validation and role checks."""
import logging
from uuid import UUID

import jwt
from fastapi import Depends, HTTPException, status
from fastapi.security import HTTPAuthorizationCredentials, HTTPBearer
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings, get_settings
from core.security import decode_token
from db.session import get_async_session
from models.user import User

logger = logging.getLogger(__name__)


# HTTP Bearer token scheme
security = HTTPBearer(auto_error=False)


def _unauthorized(detail: str) -> HTTPException:
    return HTTPException(
        status_code=status.HTTP_401_UNAUTHORIZED,
        detail=detail,
        headers={"WWW-Authenticate": "Bearer"},
    )


def decode_access_token(token: str, settings: Settings) -> UUID:
    """
    Decode an access token and return the subject's user id.

    Raises:
        HTTPException: If token is invalid, expired, or not an access token.
    """
    try:
        payload = decode_token(token, "access", settings)
        return UUID(payload["sub"])
    except jwt.ExpiredSignatureError:
        raise _unauthorized("Token has expired")
    except (jwt.PyJWTError, ValueError) as e:
        # Log full details for debugging (server-side only)
        logger.warning("JWT validation failed: %s", e)
        raise _unauthorized("Invalid token")


async def get_current_user(
    credentials: HTTPAuthorizationCredentials | None = Depends(security),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> User:
    """
    Resolve the authenticated user from the Bearer token.

    The user row is re-read on every request, so disabling an account takes
    effect before its tokens expire.
    """
    if credentials is None:
        raise _unauthorized("Not authenticated")

    user_id = decode_access_token(credentials.credentials, settings)
    user = await db.get(User, user_id)
    if user is None or user.is_disabled:
        raise _unauthorized("Invalid token")
    return user


async def get_current_admin(current_user: User = Depends(get_current_user)) -> User:
    """Require the authenticated user to have the ADMIN role."""
    if not current_user.is_admin:
        raise HTTPException(status_code=status.HTTP_403_FORBIDDEN, detail="Admin only")
    return current_user
