"""Service layer for category and section administration."""
import logging
from uuid import UUID

from sqlalchemy import func, select, update
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.orm import selectinload

from models.app_settings import AppSettings
from models.category import Category, Section
from models.entry import Entry
from services.exceptions import (
    CategoryInUseError,
    CategoryNotFoundError,
    SectionNotFoundError,
)

logger = logging.getLogger(__name__)


def ordered_sections(category: Category) -> list[Section]:
    """Sections of a category by sort_order ascending, ties broken by name ascending."""
    return sorted(category.sections, key=lambda s: (s.sort_order, s.name))


async def list_categories(db: AsyncSession) -> list[Category]:
    """Get all categories ordered by name, with sections eagerly loaded."""
    result = await db.execute(
        select(Category)
        .options(selectinload(Category.sections))
        .order_by(Category.name.asc(), Category.id.asc()),
    )
    return list(result.scalars().all())


async def get_category(db: AsyncSession, category_id: UUID) -> Category:
    """
    Get a category by ID with its sections.

    Raises:
        CategoryNotFoundError: If the category doesn't exist.
    """
    result = await db.execute(
        select(Category)
        .options(selectinload(Category.sections))
        .where(Category.id == category_id),
    )
    category = result.scalar_one_or_none()
    if category is None:
        raise CategoryNotFoundError()
    return category


async def create_category(db: AsyncSession, name: str) -> Category:
    """Create a category."""
    category = Category(name=name)
    db.add(category)
    await db.flush()
    logger.info("Created category %s (%s)", category.id, name)
    return category


async def rename_category(db: AsyncSession, category_id: UUID, name: str) -> Category:
    """
    Rename a category.

    Raises:
        CategoryNotFoundError: If the category doesn't exist.
    """
    category = await get_category(db, category_id)
    category.name = name
    await db.flush()
    return category


async def delete_category(db: AsyncSession, category_id: UUID) -> None:
    """
    Delete a category together with its sections.

    Entries (live or soft-deleted) keep a mandatory category reference, so the
    delete is refused while any entry still points at the category. Defaults
    that reference the category or its sections are cleared in the same
    transaction.

    Raises:
        CategoryNotFoundError: If the category doesn't exist.
        CategoryInUseError: If entries still reference the category.
    """
    category = await get_category(db, category_id)

    entry_count = (
        await db.execute(
            select(func.count()).select_from(Entry).where(Entry.category_id == category_id),
        )
    ).scalar_one()
    if entry_count:
        raise CategoryInUseError(entry_count)

    section_ids = [s.id for s in category.sections]
    if section_ids:
        # Entries of other categories may still point at these sections
        await db.execute(
            update(Entry)
            .where(Entry.section_id.in_(section_ids))
            .values(section_id=None),
        )
    await db.execute(
        update(AppSettings)
        .where(AppSettings.default_category_id == category_id)
        .values(default_category_id=None, default_section_id=None),
    )
    if section_ids:
        await db.execute(
            update(AppSettings)
            .where(AppSettings.default_section_id.in_(section_ids))
            .values(default_section_id=None),
        )
    await db.delete(category)
    await db.flush()
    logger.info("Deleted category %s with %d section(s)", category_id, len(section_ids))


async def get_section(db: AsyncSession, section_id: UUID) -> Section:
    """
    Get a section by ID.

    Raises:
        SectionNotFoundError: If the section doesn't exist.
    """
    section = await db.get(Section, section_id)
    if section is None:
        raise SectionNotFoundError()
    return section


async def create_section(
    db: AsyncSession,
    category_id: UUID,
    name: str,
    sort_order: int = 0,
) -> Section:
    """
    Add a section to a category.

    Raises:
        CategoryNotFoundError: If the category doesn't exist.
    """
    if await db.get(Category, category_id) is None:
        raise CategoryNotFoundError()
    section = Section(category_id=category_id, name=name, sort_order=sort_order)
    db.add(section)
    await db.flush()
    return section


async def update_section(
    db: AsyncSession,
    section_id: UUID,
    name: str | None = None,
    sort_order: int | None = None,
) -> Section:
    """
    Rename and/or reorder a section.

    Raises:
        SectionNotFoundError: If the section doesn't exist.
    """
    section = await get_section(db, section_id)
    if name is not None:
        section.name = name
    if sort_order is not None:
        section.sort_order = sort_order
    await db.flush()
    return section


async def delete_section(db: AsyncSession, section_id: UUID) -> int:
    """
    Delete a section, first detaching every entry that references it.

    The detach, the defaults cleanup and the delete run in the caller's
    transaction, so they commit or roll back together.

    Returns:
        Number of entries whose section_id was cleared.

    Raises:
        SectionNotFoundError: If the section doesn't exist.
    """
    section = await get_section(db, section_id)

    result = await db.execute(
        update(Entry)
        .where(Entry.section_id == section_id)
        .values(section_id=None),
    )
    detached = result.rowcount or 0
    await db.execute(
        update(AppSettings)
        .where(AppSettings.default_section_id == section_id)
        .values(default_section_id=None),
    )
    await db.delete(section)
    await db.flush()
    logger.info("Deleted section %s, detached %d entr(ies)", section_id, detached)
    return detached
