"""User listing endpoint."""

from fastapi import APIRouter, Depends

from app.auth.dependencies import get_user_store
from app.models.user import User
from app.schemas.auth import ErrorResponse
from app.schemas.user import UserResponse
from app.services.user_store import UserStore

router = APIRouter(tags=["users"])


@router.get(
    "/",
    response_model=list[UserResponse],
    responses={500: {"model": ErrorResponse}},
)
def list_users(users: UserStore = Depends(get_user_store)) -> list[User]:
    """List all users."""
    return users.list_users()
