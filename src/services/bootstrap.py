"""First-run initialization: admin account, starter category and defaults."""
import logging

from sqlalchemy import func, select
from sqlalchemy.ext.asyncio import AsyncSession

from core.config import Settings
from models.category import Section
from models.user import User
from services import category_service, settings_service, user_service

logger = logging.getLogger(__name__)

STARTER_CATEGORY = "General"
STARTER_SECTIONS = ("Inbox", "Reference")


async def bootstrap_if_needed(db: AsyncSession, settings: Settings) -> bool:
    """
    Seed an empty database.

    Creates the bootstrap admin, a "General" category with "Inbox" and
    "Reference" sections, and points the application defaults at it. Does
    nothing once any user exists.

    Returns:
        True if the database was seeded.
    """
    user_count = (await db.execute(select(func.count()).select_from(User))).scalar_one()
    if user_count > 0:
        return False

    await user_service.create_admin(
        db, settings.bootstrap_admin_email, settings.bootstrap_admin_password,
    )
    category = await category_service.create_category(db, STARTER_CATEGORY)
    for sort_order, name in enumerate(STARTER_SECTIONS):
        db.add(Section(category_id=category.id, name=name, sort_order=sort_order))
    await db.flush()

    await settings_service.update_app_settings(
        db, {"default_category_id": category.id, "default_section_id": None},
    )
    logger.info("Bootstrapped admin %s", settings.bootstrap_admin_email)
    return True
