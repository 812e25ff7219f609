"""Shared utility functions for service layer."""
from sqlalchemy.ext.asyncio import AsyncSession


def escape_ilike(value: str) -> str:
    r"""
    Escape special ILIKE characters for safe use in LIKE/ILIKE patterns.

    LIKE/ILIKE treats these characters specially:
    - % matches any sequence of characters
    - _ matches any single character
    - \\ is the escape character

    This function escapes them so they match literally. Patterns built from the
    result must be compared with ``escape="\\"``.
    """
    return value.replace("\\", "\\\\").replace("%", "\\%").replace("_", "\\_")


def dialect_name(db: AsyncSession) -> str:
    """Name of the SQL dialect the session is bound to ('postgresql', 'sqlite', ...)."""
    return db.get_bind().dialect.name
