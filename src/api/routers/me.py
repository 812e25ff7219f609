"""Current user endpoint."""
from fastapi import APIRouter, Depends

from api.dependencies import get_current_user
from models.user import User
from schemas.user import MeResponse, UserResponse

router = APIRouter(tags=["users"])


@router.get("/me", response_model=MeResponse)
async def get_me(current_user: User = Depends(get_current_user)) -> MeResponse:
    """Get the authenticated user's account."""
    return MeResponse(user=UserResponse.model_validate(current_user))
