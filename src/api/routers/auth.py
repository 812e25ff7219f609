"""Login and token refresh endpoints."""
import logging
from uuid import UUID

import jwt
from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_settings
from core.config import Settings
from core.security import create_token, decode_token
from models.user import User
from schemas.user import (
    LoginRequest,
    LoginResponse,
    RefreshRequest,
    RefreshResponse,
    UserSummary,
)
from services import user_service

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/auth", tags=["auth"])


@router.post("/login", response_model=LoginResponse)
async def login(
    data: LoginRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> LoginResponse:
    """Exchange email and password for an access token and a refresh token."""
    user = await user_service.authenticate(db, data.email, data.password)
    if user is None:
        raise HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid credentials")

    return LoginResponse(
        access_token=create_token(str(user.id), user.role, "access", settings),
        refresh_token=create_token(str(user.id), user.role, "refresh", settings),
        user=UserSummary.model_validate(user),
    )


@router.post("/refresh", response_model=RefreshResponse)
async def refresh(
    data: RefreshRequest,
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> RefreshResponse:
    """
    Issue a new access token from a refresh token.

    The role is re-read from the database, so a role change applies on the next refresh.
    """
    invalid = HTTPException(status_code=status.HTTP_401_UNAUTHORIZED, detail="Invalid token")
    try:
        payload = decode_token(data.refresh_token, "refresh", settings)
        user_id = UUID(payload["sub"])
    except (jwt.PyJWTError, ValueError) as e:
        logger.info("Refresh token rejected: %s", e)
        raise invalid

    user = await db.get(User, user_id)
    if user is None or user.is_disabled:
        raise invalid
    return RefreshResponse(access_token=create_token(str(user.id), user.role, "access", settings))
