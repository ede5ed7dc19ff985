"""Current user profile route."""

from typing import Any

from fastapi import APIRouter

from chatapp.auth import CurrentUser, UserPublic

router = APIRouter()


@router.get("/me", response_model=UserPublic)
def read_user_me(current_user: CurrentUser) -> Any:
    """Get current user profile."""
    return current_user
