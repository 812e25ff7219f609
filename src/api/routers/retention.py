"""Retention purge endpoint (admin)."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_admin, get_settings
from core.config import Settings
from models.user import User
from schemas.settings import RetentionPurgeRequest, RetentionPurgeResponse
from tasks.retention import purge_deleted_entries

router = APIRouter(prefix="/admin/retention", tags=["admin"])


@router.post("/purge", response_model=RetentionPurgeResponse)
async def purge(
    data: RetentionPurgeRequest | None = None,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
    settings: Settings = Depends(get_settings),
) -> RetentionPurgeResponse:
    """
    Permanently delete entries soft-deleted more than `days` days ago, for all users.

    `days` defaults to RETENTION_DAYS. Live entries are never removed.
    """
    days = data.days if data is not None and data.days is not None else settings.retention_days
    result = await purge_deleted_entries(db, days)
    return RetentionPurgeResponse(purged=result.purged, cutoff=result.cutoff)
