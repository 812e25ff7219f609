"""Service layer for the application defaults record."""
from uuid import UUID

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from models.app_settings import APP_SETTINGS_ID, AppSettings
from models.category import Category, Section
from services.exceptions import InvalidReferenceError


async def get_app_settings(db: AsyncSession) -> AppSettings | None:
    """Get the defaults record, returns None if not exists."""
    result = await db.execute(select(AppSettings).where(AppSettings.id == APP_SETTINGS_ID))
    return result.scalar_one_or_none()


async def get_or_create_app_settings(db: AsyncSession) -> AppSettings:
    """Get the defaults record, creating an empty one if not exists."""
    settings = await get_app_settings(db)
    if settings is None:
        settings = AppSettings(id=APP_SETTINGS_ID)
        db.add(settings)
        await db.flush()
        await db.refresh(settings)
    return settings


async def update_app_settings(db: AsyncSession, changes: dict[str, UUID | None]) -> AppSettings:
    """
    Apply a sparse update to the defaults.

    Args:
        db: Database session.
        changes: Subset of default_category_id / default_section_id. An explicit
            None clears that default; absent keys are left unchanged.

    Raises:
        InvalidReferenceError: If a referenced category or section does not exist.
    """
    category_id = changes.get("default_category_id")
    section_id = changes.get("default_section_id")
    if category_id is not None and await db.get(Category, category_id) is None:
        raise InvalidReferenceError("Category does not exist")
    if section_id is not None and await db.get(Section, section_id) is None:
        raise InvalidReferenceError("Section does not exist")

    settings = await get_or_create_app_settings(db)
    for field, value in changes.items():
        setattr(settings, field, value)
    await db.flush()
    return settings
