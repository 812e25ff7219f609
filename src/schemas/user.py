"""Pydantic schemas for users and authentication."""
from datetime import datetime
from typing import Literal
from uuid import UUID

from pydantic import EmailStr, Field

from schemas.base import CamelModel

Role = Literal["ADMIN", "USER"]


class UserSummary(CamelModel):
    """Identity returned at login."""

    id: UUID
    email: str
    role: Role


class UserResponse(UserSummary):
    """Full user view for /me and the admin console."""

    is_disabled: bool
    created_at: datetime


class MeResponse(CamelModel):
    """Schema for GET /me."""

    user: UserResponse


class UserListResponse(CamelModel):
    """Schema for GET /admin/users."""

    users: list[UserResponse]


class UserCreate(CamelModel):
    """Schema for an admin creating a user."""

    email: EmailStr
    password: str = Field(min_length=8)
    role: Role = "USER"


class UserUpdate(CamelModel):
    """Schema for an admin updating a user (all fields optional)."""

    password: str | None = Field(default=None, min_length=8)
    role: Role | None = None
    is_disabled: bool | None = None


class LoginRequest(CamelModel):
    """Schema for POST /auth/login."""

    email: EmailStr
    password: str = Field(min_length=1)


class LoginResponse(CamelModel):
    """Tokens issued at login."""

    access_token: str
    refresh_token: str
    user: UserSummary


class RefreshRequest(CamelModel):
    """Schema for POST /auth/refresh."""

    refresh_token: str = Field(min_length=1)


class RefreshResponse(CamelModel):
    """New access token issued from a refresh token."""

    access_token: str
