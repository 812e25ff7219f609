"""
Service layer for entry CRUD, search, and soft-delete lifecycle.

Every operation is scoped to the owning user. An entry id owned by someone
else behaves exactly like an id that does not exist (EntryNotFoundError).
"""
import logging
from dataclasses import dataclass
from uuid import UUID

from sqlalchemy import or_, select
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload
from sqlalchemy.sql import Select

from models.base import utc_now
from models.category import Category, Section
from models.entry import Entry
from schemas.entry import DEFAULT_ENTRY_LIMIT, MAX_ENTRY_LIMIT, EntryCreate, EntryUpdate
from services.exceptions import EntryNotFoundError, InvalidReferenceError
from services.tag_service import reconcile_entry_tags
from services.utils import escape_ilike

logger = logging.getLogger(__name__)


def clamp_limit(limit: int | None) -> int:
    """Default a missing limit to 100 and silently clamp into [1, 500]."""
    if limit is None:
        return DEFAULT_ENTRY_LIMIT
    return max(1, min(limit, MAX_ENTRY_LIMIT))


@dataclass
class EntrySearchCriteria:
    """
    Filters for listing entries.

    include_deleted toggles between the live view (False) and the trash view
    (True); the two views never overlap.
    """

    query: str | None = None
    category_id: UUID | None = None
    section_id: UUID | None = None
    tag: str | None = None
    include_deleted: bool = False
    limit: int = DEFAULT_ENTRY_LIMIT


class EntryService:
    """
    Entry service with full CRUD operations.

    Text search covers title, prompt_text and output_text. The tag filter runs
    in memory after the ordered, limited query, so a tag match that falls
    outside the first ``limit`` entries is not returned.
    """

    async def get(
        self,
        db: AsyncSession,
        user_id: UUID,
        entry_id: UUID,
    ) -> Entry:
        """
        Get a live or deleted entry by ID, scoped to user.

        Raises:
            EntryNotFoundError: If the entry does not exist or belongs to another user.
        """
        result = await db.execute(
            select(Entry)
            .options(selectinload(Entry.tag_objects))
            .where(
                Entry.id == entry_id,
                Entry.user_id == user_id,
            ),
        )
        entry = result.scalar_one_or_none()
        if entry is None:
            raise EntryNotFoundError()
        return entry

    async def search(
        self,
        db: AsyncSession,
        user_id: UUID,
        criteria: EntrySearchCriteria,
    ) -> list[Entry]:
        """
        Search and filter entries for a user.

        Args:
            db: Database session.
            user_id: User ID to scope entries (mandatory, not overridable).
            criteria: Filters, view toggle and limit.

        Returns:
            Entries ordered by updated_at descending, newest first.
        """
        query = (
            select(Entry)
            .options(selectinload(Entry.tag_objects))
            .where(Entry.user_id == user_id)
        )
        query = self._apply_view_filter(query, criteria.include_deleted)

        if criteria.query:
            pattern = f"%{escape_ilike(criteria.query)}%"
            query = query.where(
                or_(
                    Entry.title.ilike(pattern, escape="\\"),
                    Entry.prompt_text.ilike(pattern, escape="\\"),
                    Entry.output_text.ilike(pattern, escape="\\"),
                ),
            )
        if criteria.category_id is not None:
            query = query.where(Entry.category_id == criteria.category_id)
        if criteria.section_id is not None:
            query = query.where(Entry.section_id == criteria.section_id)

        query = query.order_by(Entry.updated_at.desc(), Entry.id.desc())
        query = query.limit(clamp_limit(criteria.limit))

        result = await db.execute(query)
        entries = list(result.scalars().all())

        if criteria.tag:
            tag_lower = criteria.tag.lower()
            entries = [
                e for e in entries
                if any(t.name.lower() == tag_lower for t in e.tag_objects)
            ]
        return entries

    async def create(
        self,
        db: AsyncSession,
        user_id: UUID,
        data: EntryCreate,
    ) -> Entry:
        """
        Create a new entry for a user.

        The entry row is flushed before tags are reconciled, since associations
        reference its id.

        Raises:
            InvalidReferenceError: If category_id or section_id does not exist.
        """
        await self._check_references(db, data.category_id, data.section_id)

        entry = Entry(
            user_id=user_id,
            category_id=data.category_id,
            section_id=data.section_id,
            title=data.title,
            prompt_text=data.prompt_text,
            output_text=data.output_text,
            model_used=data.model_used,
            comments=data.comments,
        )
        db.add(entry)
        await db.flush()

        await reconcile_entry_tags(db, user_id, entry.id, data.tags, replace=False)
        await self._refresh_with_tags(db, entry)
        logger.info("Created entry %s for user %s", entry.id, user_id)
        return entry

    async def update(
        self,
        db: AsyncSession,
        user_id: UUID,
        entry_id: UUID,
        data: EntryUpdate,
    ) -> Entry:
        """
        Apply a sparse update to a live or deleted entry.

        Fields absent from the payload keep their values. Tags are replaced only
        when the payload carries a tags field.

        Raises:
            EntryNotFoundError: If the entry does not exist or belongs to another user.
            InvalidReferenceError: If a new category_id or section_id does not exist.
        """
        entry = await self.get(db, user_id, entry_id)

        update_data = data.model_dump(exclude_unset=True)
        new_tags = update_data.pop("tags", None)

        await self._check_references(
            db, update_data.get("category_id"), update_data.get("section_id"),
        )

        for field, value in update_data.items():
            setattr(entry, field, value)
        entry.updated_at = utc_now()
        await db.flush()

        if new_tags is not None:
            await reconcile_entry_tags(db, user_id, entry.id, new_tags, replace=True)

        await self._refresh_with_tags(db, entry)
        return entry

    async def delete(
        self,
        db: AsyncSession,
        user_id: UUID,
        entry_id: UUID,
        permanent: bool = False,
    ) -> None:
        """
        Delete an entry (soft or permanent).

        A soft delete on an already-deleted entry moves deleted_at to now, which
        restarts its retention clock. A permanent delete works on live and
        deleted entries and removes tag associations with the row.

        Raises:
            EntryNotFoundError: If the entry does not exist or belongs to another user.
        """
        entry = await self.get(db, user_id, entry_id)

        if permanent:
            # tag_objects is loaded by get(), so the ORM removes the association rows
            await db.delete(entry)
            await db.flush()
            logger.info("Permanently deleted entry %s for user %s", entry_id, user_id)
        else:
            entry.deleted_at = utc_now()
            await db.flush()

    async def restore(
        self,
        db: AsyncSession,
        user_id: UUID,
        entry_id: UUID,
    ) -> Entry:
        """
        Clear deleted_at, returning the entry to the live view.

        Restoring a live entry is allowed and changes nothing.

        Raises:
            EntryNotFoundError: If the entry does not exist or belongs to another user.
        """
        entry = await self.get(db, user_id, entry_id)
        entry.deleted_at = None
        await db.flush()
        return entry

    # --- Private Helper Methods ---

    def _apply_view_filter(
        self,
        query: Select[tuple[Entry]],
        include_deleted: bool,
    ) -> Select[tuple[Entry]]:
        """Restrict to the trash view when include_deleted, else to live entries."""
        if include_deleted:
            return query.where(Entry.deleted_at.is_not(None))
        return query.where(Entry.deleted_at.is_(None))

    async def _check_references(
        self,
        db: AsyncSession,
        category_id: UUID | None,
        section_id: UUID | None,
    ) -> None:
        """Ensure referenced category/section rows exist before writing."""
        if category_id is not None and await db.get(Category, category_id) is None:
            raise InvalidReferenceError("Category does not exist")
        if section_id is not None and await db.get(Section, section_id) is None:
            raise InvalidReferenceError("Section does not exist")

    async def _refresh_with_tags(self, db: AsyncSession, entry: Entry) -> None:
        """Refresh entry and reload tag_objects after association changes."""
        await db.refresh(entry)
        await db.refresh(entry, attribute_names=["tag_objects"])
