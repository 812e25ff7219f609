"""Pydantic schemas for category and section endpoints."""
from uuid import UUID

from pydantic import Field, field_validator

from schemas.base import CamelModel


def _check_name(v: str | None) -> str | None:
    if v is not None and not v.strip():
        raise ValueError("Name cannot be empty")
    return v.strip() if v is not None else None


class SectionResponse(CamelModel):
    """A section within a category."""

    id: UUID
    category_id: UUID
    name: str
    sort_order: int


class CategoryResponse(CamelModel):
    """A category with its ordered sections."""

    id: UUID
    name: str
    sections: list[SectionResponse]


class CategoryListResponse(CamelModel):
    """Schema for the category list response."""

    categories: list[CategoryResponse]


class CategoryCreate(CamelModel):
    """Schema for creating or renaming a category."""

    name: str = Field(min_length=1, max_length=200)

    @field_validator("name")
    @classmethod
    def check_name_not_blank(cls, v: str) -> str:
        """Validate name is not blank."""
        return _check_name(v)


class SectionCreate(CamelModel):
    """Schema for adding a section to a category."""

    name: str = Field(min_length=1, max_length=200)
    sort_order: int = 0

    @field_validator("name")
    @classmethod
    def check_name_not_blank(cls, v: str) -> str:
        """Validate name is not blank."""
        return _check_name(v)


class SectionUpdate(CamelModel):
    """Schema for renaming or reordering a section."""

    name: str | None = Field(default=None, min_length=1, max_length=200)
    sort_order: int | None = None

    @field_validator("name")
    @classmethod
    def check_name_not_blank(cls, v: str | None) -> str | None:
        """Validate name is not blank (if provided)."""
        return _check_name(v)
