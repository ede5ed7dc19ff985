"""User registration routes."""

from typing import Any

from fastapi import APIRouter, status

from chatapp.auth import (
    SessionDep,
    UserCreate,
    UserPublic,
    UserRegister,
    create_user,
    get_user_by_email,
    get_user_by_username,
)
from chatapp.core.exceptions import ResourceExistsError
from chatapp.core.logging import get_logger

router = APIRouter()
logger = get_logger(__name__)


@router.post(
    "/signup", response_model=UserPublic, status_code=status.HTTP_201_CREATED
)
def register_user(session: SessionDep, user_in: UserRegister) -> Any:
    """Create a new user account."""
    if get_user_by_email(session=session, email=user_in.email):
        raise ResourceExistsError("User", "email")
    if get_user_by_username(session=session, username=user_in.username):
        raise ResourceExistsError("User", "username")

    user = create_user(session=session, user_create=UserCreate.model_validate(user_in))
    logger.info("user_registered", user_id=str(user.id), username=user.username)
    return user
