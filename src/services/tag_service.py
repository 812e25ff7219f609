"""Service layer for tag operations."""
import logging
from uuid import UUID

from sqlalchemy import delete, select
from sqlalchemy.dialects import postgresql, sqlite
from sqlalchemy.ext.asyncio import AsyncSession
from uuid6 import uuid7

from models.base import utc_now
from models.tag import Tag, entry_tags
from schemas.validators import normalize_tag_names
from services.utils import dialect_name

logger = logging.getLogger(__name__)


def _insert(db: AsyncSession):  # noqa: ANN202
    """Dialect-specific INSERT construct that supports ON CONFLICT DO NOTHING."""
    if dialect_name(db) == "postgresql":
        return postgresql.insert
    return sqlite.insert


async def get_or_create_tags(
    db: AsyncSession,
    user_id: UUID,
    tag_names: list[str],
) -> list[Tag]:
    """
    Get existing tags or create new ones.

    Creation is an atomic upsert against the (user_id, name) unique constraint:
    when two requests race on the same name, one inserts and the other's insert
    is a no-op, and both then read the single row.

    Args:
        db: Database session.
        user_id: User ID to scope tags.
        tag_names: Tag names to get or create (trimmed; blanks dropped).

    Returns:
        Tag objects in the order of the first occurrence of each name.
    """
    normalized = normalize_tag_names(tag_names)
    if not normalized:
        return []

    now = utc_now()
    await db.execute(
        _insert(db)(Tag)
        .values([
            {"id": uuid7(), "user_id": user_id, "name": name, "created_at": now}
            for name in normalized
        ])
        .on_conflict_do_nothing(index_elements=["user_id", "name"]),
    )

    result = await db.execute(
        select(Tag).where(
            Tag.user_id == user_id,
            Tag.name.in_(normalized),
        ),
    )
    by_name = {tag.name: tag for tag in result.scalars()}
    return [by_name[name] for name in normalized]


async def reconcile_entry_tags(
    db: AsyncSession,
    user_id: UUID,
    entry_id: UUID,
    tag_names: list[str],
    replace: bool,
) -> list[Tag]:
    """
    Make tag_names the entry's tag set.

    The entry row must already exist (associations reference it).

    Args:
        db: Database session.
        user_id: Owner of the entry; tags are created in this user's namespace.
        entry_id: The entry to associate.
        tag_names: Requested names. Order is irrelevant (set semantics).
        replace: True on update - all existing associations are removed first.
            False on create - there is nothing to remove.

    Returns:
        The tags now associated with the entry.
    """
    if replace:
        await db.execute(delete(entry_tags).where(entry_tags.c.entry_id == entry_id))

    tags = await get_or_create_tags(db, user_id, tag_names)
    if tags:
        await db.execute(
            _insert(db)(entry_tags)
            .values([{"entry_id": entry_id, "tag_id": tag.id} for tag in tags])
            .on_conflict_do_nothing(index_elements=["entry_id", "tag_id"]),
        )

    logger.debug("Entry %s tagged with %d tag(s)", entry_id, len(tags))
    return tags
