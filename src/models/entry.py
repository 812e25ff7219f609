"""Entry model for storing prompt/output pairs."""
from datetime import datetime
from typing import TYPE_CHECKING
from uuid import UUID

from sqlalchemy import ForeignKey, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UTCDateTime, UUIDv7Mixin
from models.tag import entry_tags

if TYPE_CHECKING:
    from models.tag import Tag


class Entry(Base, UUIDv7Mixin, TimestampMixin):
    """Entry model - a prompt, the model output, and metadata, owned by one user."""

    __tablename__ = "entries"

    user_id: Mapped[UUID] = mapped_column(
        ForeignKey("users.id", ondelete="CASCADE"),
        index=True,
    )
    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id"),
        index=True,
    )
    section_id: Mapped[UUID | None] = mapped_column(
        ForeignKey("sections.id", ondelete="SET NULL"),
        nullable=True,
        index=True,
    )
    title: Mapped[str | None] = mapped_column(String(500), nullable=True)
    prompt_text: Mapped[str] = mapped_column(Text, nullable=False)
    output_text: Mapped[str] = mapped_column(Text, nullable=False)
    model_used: Mapped[str] = mapped_column(String(200), nullable=False)
    comments: Mapped[str | None] = mapped_column(Text, nullable=True)

    # Soft delete tombstone (NULL means live)
    deleted_at: Mapped[datetime | None] = mapped_column(
        UTCDateTime, nullable=True, default=None, index=True,
    )

    tag_objects: Mapped[list["Tag"]] = relationship(
        secondary=entry_tags,
        back_populates="entries",
        passive_deletes=True,
        order_by="Tag.name",
    )
