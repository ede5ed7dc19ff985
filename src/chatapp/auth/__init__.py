from chatapp.auth.crud import (
    authenticate,
    create_user,
    get_user_by_email,
    get_user_by_id,
    get_user_by_username,
    get_users_by_ids,
)
from chatapp.auth.deps import (
    CurrentUser,
    InvalidTokenError,
    SessionDep,
    TokenDep,
    get_current_user,
    resolve_user_from_token,
)
from chatapp.auth.models import (
    Message,
    Token,
    TokenPayload,
    User,
    UserCreate,
    UserPublic,
    UserRegister,
    UserSummary,
)

__all__ = [
    "CurrentUser",
    "InvalidTokenError",
    "Message",
    # Dependencies
    "SessionDep",
    "Token",
    "TokenDep",
    "TokenPayload",
    # Models
    "User",
    "UserCreate",
    "UserPublic",
    "UserRegister",
    "UserSummary",
    # CRUD
    "authenticate",
    "create_user",
    "get_current_user",
    "get_user_by_email",
    "get_user_by_id",
    "get_user_by_username",
    "get_users_by_ids",
    "resolve_user_from_token",
]
