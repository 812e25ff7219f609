"""User model for storing accounts that own entries and tags."""
from enum import StrEnum

from sqlalchemy import Boolean, String
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin, UUIDv7Mixin


class UserRole(StrEnum):
    """Account roles."""

    ADMIN = "ADMIN"
    USER = "USER"


class User(Base, UUIDv7Mixin, TimestampMixin):
    """User model - credentials and role for JWT authentication."""

    __tablename__ = "users"

    email: Mapped[str] = mapped_column(String(255), unique=True, index=True)
    password_hash: Mapped[str] = mapped_column(String(255), nullable=False)
    role: Mapped[str] = mapped_column(String(16), default=UserRole.USER.value, nullable=False)
    is_disabled: Mapped[bool] = mapped_column(Boolean, default=False, nullable=False)

    @property
    def is_admin(self) -> bool:
        """Check if user has the ADMIN role."""
        return self.role == UserRole.ADMIN.value
