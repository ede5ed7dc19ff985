import uuid

from pydantic import EmailStr
from sqlmodel import Field, SQLModel

from chatapp.core.base_models import BaseTable


class UserBase(SQLModel):
    username: str = Field(unique=True, index=True, min_length=3, max_length=50)
    email: EmailStr = Field(unique=True, index=True, max_length=255)
    full_name: str | None = Field(default=None, max_length=255)
    avatar_url: str | None = Field(default=None, max_length=500)
    is_active: bool = True


class User(UserBase, BaseTable, table=True):
    hashed_password: str


class UserCreate(UserBase):
    password: str = Field(min_length=8, max_length=128)


class UserRegister(SQLModel):
    username: str = Field(min_length=3, max_length=50)
    email: EmailStr = Field(max_length=255)
    password: str = Field(min_length=8, max_length=128)
    full_name: str | None = Field(default=None, max_length=255)


class UserPublic(UserBase):
    id: uuid.UUID


class UserSummary(SQLModel):
    """Projection of a user embedded in chat payloads (message sender, participants)."""

    id: uuid.UUID
    username: str
    avatar_url: str | None = None
    email: str


class Token(SQLModel):
    access_token: str
    token_type: str = "bearer"
    expires_in: int  # Access token expiry in seconds


class TokenPayload(SQLModel):
    sub: str | None = None
    type: str = "access"
    jti: str | None = None


class Message(SQLModel):
    message: str
