"""Admin endpoints: users, categories, sections and application defaults."""
from uuid import UUID

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_admin
from api.routers.categories import to_category_response
from models.user import User
from schemas.base import CreatedResponse, OkResponse
from schemas.category import (
    CategoryCreate,
    CategoryListResponse,
    SectionCreate,
    SectionUpdate,
)
from schemas.settings import AppDefaults, AppSettingsResponse, AppSettingsUpdateResponse
from schemas.user import UserCreate, UserListResponse, UserResponse, UserUpdate
from services import category_service, settings_service, user_service
from services.exceptions import (
    CategoryInUseError,
    CategoryNotFoundError,
    InvalidReferenceError,
    SectionNotFoundError,
    UserAlreadyExistsError,
    UserNotFoundError,
)

router = APIRouter(prefix="/admin", tags=["admin"])


# --- Users ---


@router.get("/users", response_model=UserListResponse)
async def list_users(
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> UserListResponse:
    """List all users, newest first."""
    users = await user_service.list_users(db)
    return UserListResponse(users=[UserResponse.model_validate(u) for u in users])


@router.post("/users", response_model=CreatedResponse, status_code=201)
async def create_user(
    data: UserCreate,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> CreatedResponse:
    """Create a user. Returns 409 if the email is taken."""
    try:
        user = await user_service.create_user(db, data)
    except UserAlreadyExistsError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return CreatedResponse(id=str(user.id))


@router.patch("/users/{user_id}", response_model=OkResponse)
async def update_user(
    user_id: UUID,
    data: UserUpdate,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Change a user's password, role or disabled flag."""
    try:
        await user_service.update_user(db, user_id, data)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OkResponse()


@router.delete("/users/{user_id}", response_model=OkResponse)
async def delete_user(
    user_id: UUID,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Delete a user along with their entries and tags."""
    try:
        await user_service.delete_user(db, user_id)
    except UserNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OkResponse()


# --- Categories & sections ---


@router.get("/categories", response_model=CategoryListResponse)
async def list_categories(
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> CategoryListResponse:
    """List categories with their sections."""
    categories = await category_service.list_categories(db)
    return CategoryListResponse(categories=[to_category_response(c) for c in categories])


@router.post("/categories", response_model=CreatedResponse, status_code=201)
async def create_category(
    data: CategoryCreate,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> CreatedResponse:
    """Create a category."""
    category = await category_service.create_category(db, data.name)
    return CreatedResponse(id=str(category.id))


@router.patch("/categories/{category_id}", response_model=OkResponse)
async def rename_category(
    category_id: UUID,
    data: CategoryCreate,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Rename a category."""
    try:
        await category_service.rename_category(db, category_id, data.name)
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OkResponse()


@router.delete("/categories/{category_id}", response_model=OkResponse)
async def delete_category(
    category_id: UUID,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """
    Delete a category and its sections.

    Returns 409 while entries still reference the category.
    """
    try:
        await category_service.delete_category(db, category_id)
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    except CategoryInUseError as e:
        raise HTTPException(status_code=status.HTTP_409_CONFLICT, detail=str(e))
    return OkResponse()


@router.post(
    "/categories/{category_id}/sections",
    response_model=CreatedResponse,
    status_code=201,
)
async def create_section(
    category_id: UUID,
    data: SectionCreate,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> CreatedResponse:
    """Add a section to a category."""
    try:
        section = await category_service.create_section(
            db, category_id, data.name, data.sort_order,
        )
    except CategoryNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return CreatedResponse(id=str(section.id))


@router.patch("/sections/{section_id}", response_model=OkResponse)
async def update_section(
    section_id: UUID,
    data: SectionUpdate,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Rename or reorder a section."""
    try:
        await category_service.update_section(db, section_id, data.name, data.sort_order)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OkResponse()


@router.delete("/sections/{section_id}", response_model=OkResponse)
async def delete_section(
    section_id: UUID,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> OkResponse:
    """Delete a section. Entries in it become section-less."""
    try:
        await category_service.delete_section(db, section_id)
    except SectionNotFoundError as e:
        raise HTTPException(status_code=404, detail=str(e))
    return OkResponse()


# --- Application defaults ---


@router.get("/settings", response_model=AppSettingsResponse)
async def get_settings_endpoint(
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> AppSettingsResponse:
    """Get the default category and section."""
    app_settings = await settings_service.get_or_create_app_settings(db)
    return AppSettingsResponse(settings=AppDefaults.model_validate(app_settings))


@router.patch("/settings", response_model=AppSettingsUpdateResponse)
async def update_settings_endpoint(
    data: AppDefaults,
    _current_admin: User = Depends(get_current_admin),
    db: AsyncSession = Depends(get_async_session),
) -> AppSettingsUpdateResponse:
    """
    Update the defaults.

    Omitted fields are unchanged; an explicit null clears a default.
    """
    try:
        app_settings = await settings_service.update_app_settings(
            db, data.model_dump(exclude_unset=True),
        )
    except InvalidReferenceError as e:
        raise HTTPException(status_code=422, detail=str(e))
    return AppSettingsUpdateResponse(settings=AppDefaults.model_validate(app_settings))
