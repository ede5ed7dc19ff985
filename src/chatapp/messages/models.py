import json
from typing import Any
import uuid

from pydantic import field_validator
from sqlmodel import Field, SQLModel

from chatapp.auth.models import UserSummary
from chatapp.core.base_models import (
    PaginatedResponse,
    TimestampedTable,
    TimestampResponseMixin,
)
from chatapp.core.logging import get_logger

logger = get_logger(__name__)


class Attachment(SQLModel):
    """A media object stored on the provider and referenced by a message."""

    url: str
    public_id: str
    resource_type: str = "image"
    filename: str | None = None
    content_type: str | None = None
    size: int | None = None


class ChatMessage(TimestampedTable, table=True):
    """A message posted in a chat.

    Attachments are stored inline as a JSON array of Attachment objects;
    they have no life outside the message that owns them.
    """

    __tablename__ = "chat_message"

    chat_id: uuid.UUID = Field(
        foreign_key="chat.id", nullable=False, ondelete="CASCADE", index=True
    )
    sender_id: uuid.UUID = Field(
        foreign_key="user.id", nullable=False, ondelete="CASCADE", index=True
    )
    content: str = Field(default="")

    attachments_json: str | None = Field(
        default=None,
        description="JSON array of attachments for this message",
    )

    @field_validator("attachments_json", mode="before")
    @classmethod
    def validate_attachments_json(cls, v: Any) -> str | None:
        """Validate attachments_json is a valid JSON array."""
        if v is None:
            return None
        if isinstance(v, str):
            try:
                parsed = json.loads(v)
            except json.JSONDecodeError as e:
                logger.warning("attachments_json_invalid", error=str(e))
                return None
            else:
                if not isinstance(parsed, list):
                    logger.warning(
                        "attachments_json_not_array", value_type=type(parsed).__name__
                    )
                    return None
                return v
        return None

    @property
    def attachments(self) -> list[Attachment]:
        if not self.attachments_json:
            return []
        return [Attachment.model_validate(item) for item in json.loads(self.attachments_json)]


def dump_attachments(attachments: list[Attachment]) -> str | None:
    if not attachments:
        return None
    return json.dumps([attachment.model_dump() for attachment in attachments])


class ChatMessagePublic(TimestampResponseMixin):
    """A message as delivered to clients, with its sender resolved."""

    id: uuid.UUID
    chat_id: uuid.UUID
    sender: UserSummary | None
    content: str
    attachments: list[Attachment]


ChatMessagesPublic = PaginatedResponse[ChatMessagePublic]
