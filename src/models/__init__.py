"""SQLAlchemy models."""
from models.app_settings import APP_SETTINGS_ID, AppSettings
from models.base import Base, TimestampMixin, UUIDv7Mixin
from models.category import Category, Section
from models.tag import Tag, entry_tags  # Must be before entry due to import
from models.entry import Entry
from models.user import User, UserRole

__all__ = [
    "APP_SETTINGS_ID",
    "AppSettings",
    "Base",
    "Category",
    "Entry",
    "Section",
    "Tag",
    "TimestampMixin",
    "UUIDv7Mixin",
    "User",
    "UserRole",
    "entry_tags",
]
