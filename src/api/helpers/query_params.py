"""
Lenient query-string parsing for the entry list endpoint.

Clients send empty strings for unset filters (``categoryId=``); those are
treated as absent rather than rejected.
"""
from uuid import UUID

from fastapi import HTTPException

from schemas.entry import DEFAULT_ENTRY_LIMIT


def parse_optional_uuid(value: str | None, name: str) -> UUID | None:
    """Parse a UUID query parameter; blank means absent, garbage is a 422."""
    if value is None or not value.strip():
        return None
    try:
        return UUID(value.strip())
    except ValueError:
        raise HTTPException(status_code=422, detail=f"Invalid {name}")


def parse_include_deleted(value: str | None) -> bool:
    """Only the exact string 'true' selects the deleted view."""
    return value == "true"


def parse_take(value: str | None) -> int:
    """
    Parse the requested page size.

    Non-numeric values fall back to the default; range clamping is done by the
    entry service.
    """
    if value is None or not value.strip():
        return DEFAULT_ENTRY_LIMIT
    try:
        return int(value)
    except ValueError:
        return DEFAULT_ENTRY_LIMIT
