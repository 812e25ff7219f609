"""
Shared validation functions for Pydantic schemas.

Tag names are free text: trimmed, never lowercased, and compared
case-sensitively when stored.
"""

MAX_TAG_LENGTH = 100


def normalize_tag_names(tags: list[str]) -> list[str]:
    """
    Trim a list of tag names.

    Args:
        tags: Tag names as supplied by the client.

    Returns:
        Trimmed names with empty strings filtered out and exact duplicates removed
        (preserving first occurrence order). "Email" and "email" are both kept.

    Raises:
        ValueError: If a tag is longer than MAX_TAG_LENGTH.
    """
    normalized = []
    seen: set[str] = set()
    for tag in tags:
        trimmed = tag.strip()
        if not trimmed:
            continue  # Skip empty tags silently
        if len(trimmed) > MAX_TAG_LENGTH:
            raise ValueError(f"Tag name exceeds {MAX_TAG_LENGTH} characters: '{trimmed[:20]}...'")
        if trimmed not in seen:
            seen.add(trimmed)
            normalized.append(trimmed)
    return normalized


def check_not_null(value: object, field: str) -> object:
    """Reject an explicit null for a field that cannot be cleared."""
    if value is None:
        raise ValueError(f"{field} cannot be null")
    return value
