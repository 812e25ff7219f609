"""Read-only category tree for entry editors."""
from fastapi import APIRouter, Depends
from sqlalchemy.ext.asyncio import AsyncSession

from api.dependencies import get_async_session, get_current_user
from models.category import Category
from models.user import User
from schemas.category import CategoryListResponse, CategoryResponse, SectionResponse
from services import category_service

router = APIRouter(prefix="/categories", tags=["categories"])


def to_category_response(category: Category) -> CategoryResponse:
    """Build a category response with sections in display order."""
    return CategoryResponse(
        id=category.id,
        name=category.name,
        sections=[
            SectionResponse.model_validate(s)
            for s in category_service.ordered_sections(category)
        ],
    )


@router.get("", response_model=CategoryListResponse)
async def list_categories(
    _current_user: User = Depends(get_current_user),
    db: AsyncSession = Depends(get_async_session),
) -> CategoryListResponse:
    """List categories by name, each with sections ordered by sortOrder then name."""
    categories = await category_service.list_categories(db)
    return CategoryListResponse(categories=[to_category_response(c) for c in categories])
