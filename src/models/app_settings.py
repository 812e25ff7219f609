"""AppSettings model - the single application-wide defaults record."""
from uuid import UUID

from sqlalchemy import ForeignKey, Integer
from sqlalchemy.orm import Mapped, mapped_column

from models.base import Base, TimestampMixin

# Fixed primary key of the only row in app_settings
APP_SETTINGS_ID = 1


class AppSettings(Base, TimestampMixin):
    """
    Application defaults used by clients when creating entries.

    There is exactly one row, keyed by APP_SETTINGS_ID. Deleting the referenced
    category or section clears the matching default (see category_service).
    """

    __tablename__ = "app_settings"

    id: Mapped[int] = mapped_column(Integer, primary_key=True, default=APP_SETTINGS_ID)
    default_category_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("categories.id", ondelete="SET NULL"),
        nullable=True,
    )
    default_section_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("sections.id", ondelete="SET NULL"),
        nullable=True,
    )
