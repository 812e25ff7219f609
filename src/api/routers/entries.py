"""Entries CRUD endpoints."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, Query
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from api.helpers import parse_include_deleted, parse_optional_uuid, parse_take
from models.user import User
from schemas.base import CreatedResponse, OkResponse
from schemas.entry import EntryCreate, EntryListResponse, EntryResponse, EntryUpdate
from services.entry_service import EntrySearchCriteria, EntryService
from services.exceptions import EntryNotFoundError, InvalidReferenceError

router = APIRouter(prefix="/entries", tags=["entries"])

entry_service = EntryService()


def _not_found() -> HTTPException:
    return HTTPException(status_code=404, detail="Entry not found")


def _entry_uuid(entry_id: str) -> UUID:
    """Malformed ids cannot exist, so they get the same 404 as unknown ones."""
    try:
        return UUID(entry_id)
    except ValueError:
        raise _not_found()


@router.get("", response_model=EntryListResponse)
async def list_entries(
    query: str | None = Query(
        default=None,
        description="Case-insensitive substring match on title, prompt text or output text",
    ),
    category_id: str | None = Query(default=None, alias="categoryId"),
    section_id: str | None = Query(default=None, alias="sectionId"),
    tag: str | None = Query(default=None, description="Tag name (case-insensitive)"),
    include_deleted: str | None = Query(
        default=None,
        alias="includeDeleted",
        description="'true' shows only deleted entries; anything else shows only live entries",
    ),
    take: str | None = Query(default=None, description="Max entries (default 100, max 500)"),
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> EntryListResponse:
    """
    List entries for the current user, most recently updated first.

    The tag filter is applied after `take` has cut the result window, so tagged
    entries older than the window are not returned.
    """
    criteria = EntrySearchCriteria(
        query=query or None,
        category_id=parse_optional_uuid(category_id, "categoryId"),
        section_id=parse_optional_uuid(section_id, "sectionId"),
        tag=tag or None,
        include_deleted=parse_include_deleted(include_deleted),
        limit=parse_take(take),
    )
    entries = await entry_service.search(db, current_user.id, criteria)
    return EntryListResponse(entries=[EntryResponse.model_validate(e) for e in entries])


@router.post("", response_model=CreatedResponse, status_code=201)
async def create_entry(
    data: EntryCreate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> CreatedResponse:
    """Create a new entry. Tags are created on first use."""
    try:
        entry = await entry_service.create(db, current_user.id, data)
    except InvalidReferenceError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return CreatedResponse(id=str(entry.id))


@router.patch("/{entry_id}", response_model=OkResponse)
async def update_entry(
    entry_id: str,
    data: EntryUpdate,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """
    Partially update an entry (live or deleted).

    Omitted fields keep their value. `tags` replaces the full tag set when present.
    """
    try:
        await entry_service.update(db, current_user.id, _entry_uuid(entry_id), data)
    except EntryNotFoundError:
        raise _not_found()
    except InvalidReferenceError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return OkResponse()


@router.delete("/{entry_id}", response_model=OkResponse)
async def delete_entry(
    entry_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Soft delete an entry (moves it to the trash)."""
    try:
        await entry_service.delete(db, current_user.id, _entry_uuid(entry_id))
    except EntryNotFoundError:
        raise _not_found()
    return OkResponse()


@router.post("/{entry_id}/restore", response_model=OkResponse)
async def restore_entry(
    entry_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Restore a soft-deleted entry."""
    try:
        await entry_service.restore(db, current_user.id, _entry_uuid(entry_id))
    except EntryNotFoundError:
        raise _not_found()
    return OkResponse()


@router.delete("/{entry_id}/hard", response_model=OkResponse)
async def hard_delete_entry(
    entry_id: str,
    current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Permanently delete an entry and its tag associations."""
    try:
        await entry_service.delete(db, current_user.id, _entry_uuid(entry_id), permanent=True)
    except EntryNotFoundError:
        raise _not_found()
    return OkResponse()
