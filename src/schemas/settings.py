"""Pydantic schemas for application defaults, public config and retention."""
from datetime import datetime
from uuid import UUID

from pydantic import Field

from schemas.base import CamelModel


class AppDefaults(CamelModel):
    """Default category/section preselected by clients."""

    default_category_id: UUID | None = None
    default_section_id: UUID | None = None


class AppSettingsResponse(CamelModel):
    """Schema for GET /admin/settings."""

    settings: AppDefaults


class AppSettingsUpdateResponse(AppSettingsResponse):
    """Schema for PATCH /admin/settings."""

    ok: bool = True


class ConfigResponse(CamelModel):
    """Schema for the public GET /config endpoint."""

    app_version: str
    environment: str
    db_type: str
    db_path: str | None
    defaults: AppDefaults


class RetentionPurgeRequest(CamelModel):
    """Schema for POST /admin/retention/purge."""

    days: int | None = Field(default=None, ge=1, le=3650)


class RetentionPurgeResponse(CamelModel):
    """Result of a retention purge."""

    ok: bool = True
    purged: int
    cutoff: datetime
