"""Category and Section models - the global organization tree for entries."""
from uuid import UUID

from sqlalchemy import ForeignKey, Integer, String
from sqlalchemy.orm import Mapped, mapped_column, relationship

from models.base import Base, TimestampMixin, UUIDv7Mixin


class Category(Base, UUIDv7Mixin, TimestampMixin):
    """Category model - global (not per-user) top-level grouping."""

    __tablename__ = "categories"

    name: Mapped[str] = mapped_column(String(200), nullable=False)

    sections: Mapped[list["Section"]] = relationship(
        back_populates="category",
        cascade="all, delete-orphan",
        passive_deletes=True,
    )


class Section(Base, UUIDv7Mixin, TimestampMixin):
    """Section model - ordered subdivision of exactly one category."""

    __tablename__ = "sections"

    category_id: Mapped[UUID] = mapped_column(
        ForeignKey("categories.id", ondelete="CASCADE"),
        nullable=False,
        index=True,
    )
    name: Mapped[str] = mapped_column(String(200), nullable=False)
    sort_order: Mapped[int] = mapped_column(Integer, default=0, nullable=False)

    category: Mapped[Category] = relationship(back_populates="sections")
