"""Pydantic schemas for entry endpoints."""
from datetime import datetime
from typing import Any
from uuid import UUID

from pydantic import Field, field_validator, model_validator

from schemas.base import CamelModel
from schemas.validators import check_not_null, normalize_tag_names

DEFAULT_ENTRY_LIMIT = 100
MAX_ENTRY_LIMIT = 500


class EntryCreate(CamelModel):
    """Schema for creating a new entry."""

    category_id: UUID
    section_id: UUID | None = None
    title: str | None = Field(default=None, max_length=500)
    prompt_text: str = Field(min_length=1)
    output_text: str = Field(min_length=1)
    model_used: str = Field(min_length=1, max_length=200)
    comments: str | None = None
    tags: list[str] = []

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str]:
        """Trim tags, dropping blanks and duplicates."""
        if v is None:
            return []
        return normalize_tag_names(v)


class EntryUpdate(CamelModel):
    """
    Schema for a sparse update of an entry.

    Only fields present in the payload are applied (``exclude_unset``). Nullable
    fields can be cleared with an explicit null; required fields cannot.
    """

    category_id: UUID | None = None
    section_id: UUID | None = None
    title: str | None = Field(default=None, max_length=500)
    prompt_text: str | None = Field(default=None, min_length=1)
    output_text: str | None = Field(default=None, min_length=1)
    model_used: str | None = Field(default=None, min_length=1, max_length=200)
    comments: str | None = None
    tags: list[str] | None = None

    @field_validator("category_id", "prompt_text", "output_text", "model_used")
    @classmethod
    def check_required_not_null(cls, v: Any, info: Any) -> Any:  # noqa: ANN401
        """Required entry fields may be omitted but not set to null."""
        return check_not_null(v, info.field_name)

    @field_validator("tags", mode="before")
    @classmethod
    def normalize_tags(cls, v: list[str] | None) -> list[str] | None:
        """Trim tags if provided; null means 'leave tags unchanged'."""
        if v is None:
            return None
        return normalize_tag_names(v)


class EntryTag(CamelModel):
    """A tag as attached to an entry."""

    id: UUID
    name: str


class EntryResponse(CamelModel):
    """
    Schema for entries in list responses.

    Uses model_validator to resolve tag_objects into (id, name) pairs when the
    relationship is eagerly loaded.
    """

    id: UUID
    title: str | None
    prompt_text: str
    output_text: str
    model_used: str
    comments: str | None
    category_id: UUID
    section_id: UUID | None
    created_at: datetime
    updated_at: datetime
    deleted_at: datetime | None = None
    tags: list[EntryTag]

    @model_validator(mode="before")
    @classmethod
    def extract_from_sqlalchemy(cls, data: Any) -> Any:  # noqa: ANN401
        """
        Extract fields from the SQLAlchemy model and tags from tag_objects.

        Only reads tag_objects if it is already loaded, to avoid triggering a lazy
        load outside the async context.
        """
        if hasattr(data, "__dict__") and not isinstance(data, dict):
            field_names = set(cls.model_fields.keys()) - {"tags"}
            data_dict = {key: getattr(data, key) for key in field_names if hasattr(data, key)}

            loaded = data.__dict__.get("tag_objects")
            data_dict["tags"] = (
                [{"id": tag.id, "name": tag.name} for tag in loaded] if loaded else []
            )
            return data_dict
        return data


class EntryListResponse(CamelModel):
    """Schema for the entry list response."""

    entries: list[EntryResponse]
