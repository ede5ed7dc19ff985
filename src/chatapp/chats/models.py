"""Chat rooms and their membership.

A chat is either one-on-one (exactly two participants, no admins) or a
group. Group chats carry a ``group_type``: in ``adminOnly`` groups only
admins may post.
"""

from enum import Enum
from typing import TYPE_CHECKING
import uuid

from sqlalchemy import UniqueConstraint
from sqlmodel import Field, Relationship, SQLModel

from chatapp.auth.models import UserSummary
from chatapp.core.base_models import (
    PaginatedResponse,
    TimestampedTable,
    TimestampResponseMixin,
)

if TYPE_CHECKING:
    from chatapp.auth.models import User


class GroupType(str, Enum):
    """Who may post in a group chat.

    ADMIN_ONLY: only chat admins can send messages
    EVERYONE: every participant can send messages
    """

    ADMIN_ONLY = "adminOnly"
    EVERYONE = "everyone"


class ChatBase(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    is_group_chat: bool = Field(default=False)
    description: str | None = Field(default=None, max_length=1000)
    profile_pic_url: str | None = Field(default=None, max_length=500)
    group_type: GroupType | None = Field(default=None)


class Chat(ChatBase, TimestampedTable, table=True):
    """Chat database model.

    last_message_id is a plain column rather than a foreign key: chat and
    chat_message would otherwise reference each other.
    """

    last_message_id: uuid.UUID | None = Field(default=None, index=True)

    members: list["ChatParticipant"] = Relationship(
        back_populates="chat",
        sa_relationship_kwargs={"cascade": "all, delete-orphan", "lazy": "selectin"},
    )

    @property
    def participant_ids(self) -> list[uuid.UUID]:
        return [member.user_id for member in self.members]

    @property
    def admin_ids(self) -> list[uuid.UUID]:
        return [member.user_id for member in self.members if member.is_admin]

    def is_participant(self, user_id: uuid.UUID) -> bool:
        return user_id in self.participant_ids

    def is_admin(self, user_id: uuid.UUID) -> bool:
        return user_id in self.admin_ids


class ChatParticipant(TimestampedTable, table=True):
    """Membership of a user in a chat, optionally as an admin."""

    __tablename__ = "chat_participant"
    __table_args__ = (
        UniqueConstraint("chat_id", "user_id", name="uq_chat_participant"),
    )

    chat_id: uuid.UUID = Field(
        foreign_key="chat.id", nullable=False, ondelete="CASCADE", index=True
    )
    user_id: uuid.UUID = Field(
        foreign_key="user.id", nullable=False, ondelete="CASCADE", index=True
    )
    is_admin: bool = Field(default=False)

    chat: Chat = Relationship(back_populates="members")
    user: "User" = Relationship(sa_relationship_kwargs={"lazy": "selectin"})


class GroupChatCreate(SQLModel):
    name: str = Field(min_length=1, max_length=255)
    participant_ids: list[uuid.UUID]
    group_type: GroupType = GroupType.EVERYONE
    description: str | None = Field(default=None, max_length=1000)


class ChatPublic(ChatBase, TimestampResponseMixin):
    id: uuid.UUID
    last_message_id: uuid.UUID | None
    participants: list[UserSummary]
    admins: list[uuid.UUID]


ChatsPublic = PaginatedResponse[ChatPublic]
