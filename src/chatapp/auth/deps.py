from typing import Annotated
import uuid

from fastapi import Depends, HTTPException, status
from fastapi.security import OAuth2PasswordBearer
import jwt
from pydantic import ValidationError
from sqlmodel import Session

from chatapp.auth.models import TokenPayload, User
from chatapp.core.config import settings
from chatapp.core.db import get_db
from chatapp.core.security import decode_token

oauth2_scheme = OAuth2PasswordBearer(tokenUrl=f"{settings.API_V1_STR}/auth/login")

SessionDep = Annotated[Session, Depends(get_db)]
TokenDep = Annotated[str, Depends(oauth2_scheme)]


class InvalidTokenError(Exception):
    """Raised by resolve_user_from_token when a token cannot be trusted."""


def resolve_user_from_token(session: Session, token: str) -> User:
    """Validate an access token and return its active user.

    Shared by the bearer-header dependency and the WebSocket handshake,
    which can only pass the token as a query parameter.

    Raises:
        InvalidTokenError: With a human-readable reason
    """
    try:
        payload = decode_token(token)
        token_data = TokenPayload(**payload)
    except (jwt.InvalidTokenError, ValidationError) as e:
        raise InvalidTokenError("Could not validate credentials") from e

    if token_data.type != "access":
        raise InvalidTokenError("Invalid token type")

    user = session.get(User, _parse_subject(token_data.sub))
    if not user:
        raise InvalidTokenError("User not found")
    if not user.is_active:
        raise InvalidTokenError("Inactive user")
    return user


def _parse_subject(sub: str | None) -> uuid.UUID:
    try:
        return uuid.UUID(str(sub))
    except ValueError as e:
        raise InvalidTokenError("Could not validate credentials") from e


def get_current_user(session: SessionDep, token: TokenDep) -> User:
    """Get the current authenticated user from the bearer token.

    Raises:
        HTTPException: If token is invalid or user not found
    """
    try:
        return resolve_user_from_token(session, token)
    except InvalidTokenError as e:
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail=str(e),
            headers={"WWW-Authenticate": "Bearer"},
        ) from e


CurrentUser = Annotated[User, Depends(get_current_user)]
