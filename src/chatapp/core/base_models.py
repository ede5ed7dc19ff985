"""Base models and mixins shared by the SQLModel schemas.

Usage:
    - Database models (table=True) inherit from TimestampedTable or BaseTable
    - Response schemas use TimestampResponseMixin for timestamp fields
    - List responses use PaginatedResponse[T]

Example:
    class Chat(ChatBase, TimestampedTable, table=True):
        ...
"""

import uuid
from datetime import UTC, datetime
from typing import Generic, TypeVar

from sqlmodel import Field, SQLModel

T = TypeVar("T")


def utcnow() -> datetime:
    return datetime.now(UTC)


class UUIDPrimaryKeyMixin(SQLModel):
    """Standard UUID primary key for all models."""

    id: uuid.UUID = Field(default_factory=uuid.uuid4, primary_key=True)


class TimestampMixin(SQLModel):
    """Created/updated timestamps."""

    created_at: datetime = Field(default_factory=utcnow, index=True)
    updated_at: datetime = Field(default_factory=utcnow)


class BaseTable(UUIDPrimaryKeyMixin):
    """Base for simple tables (ID only).

    Use for: User
    """

    pass


class TimestampedTable(UUIDPrimaryKeyMixin, TimestampMixin):
    """Base for tables with timestamps.

    Use for: Chat, ChatParticipant, ChatMessage
    """

    pass


class TimestampResponseMixin(SQLModel):
    """For Public/Response schemas that include timestamps."""

    created_at: datetime
    updated_at: datetime


class PaginatedResponse(SQLModel, Generic[T]):
    """Standard paginated response wrapper.

    Example:
        @router.get("/{chat_id}", response_model=PaginatedResponse[ChatMessagePublic])
        def get_all_messages(...):
            return PaginatedResponse(data=messages, count=total)
    """

    data: list[T]
    count: int
