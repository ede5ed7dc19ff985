"""Login and token authentication routes."""

from typing import Annotated

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.security import OAuth2PasswordRequestForm

from chatapp.auth import SessionDep, Token, authenticate
from chatapp.core.logging import get_logger
from chatapp.core.rate_limit import AUTH_RATE_LIMIT, limiter
from chatapp.core.security import create_access_token

router = APIRouter()
logger = get_logger(__name__)


@router.post("/login", response_model=Token)
@limiter.limit(AUTH_RATE_LIMIT)
async def login_access_token(
    request: Request,  # Required for rate limiter
    session: SessionDep,
    form_data: Annotated[OAuth2PasswordRequestForm, Depends()],
) -> Token:
    """OAuth2 compatible token login.

    The `username` form field accepts either a username or an email address.
    """
    user = authenticate(
        session=session, login=form_data.username, password=form_data.password
    )
    if not user:
        logger.warning("user_login_failed", login=form_data.username)
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Incorrect username or password",
        )
    if not user.is_active:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Inactive user",
        )

    access_token, expires_in = create_access_token(user.id)
    logger.info("user_login", user_id=str(user.id))

    return Token(access_token=access_token, expires_in=expires_in)
