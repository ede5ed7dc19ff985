"""Chats module: one-on-one and group chat rooms with their participants."""

from chatapp.chats.crud import (
    create_group_chat,
    create_one_on_one_chat,
    get_chat,
    get_chats_for_user,
    get_one_on_one_chat,
    set_last_message,
    to_chat_public,
)
from chatapp.chats.models import (
    Chat,
    ChatParticipant,
    ChatPublic,
    ChatsPublic,
    GroupChatCreate,
    GroupType,
)

__all__ = [
    "Chat",
    "ChatParticipant",
    "ChatPublic",
    "ChatsPublic",
    "GroupChatCreate",
    "GroupType",
    "create_group_chat",
    "create_one_on_one_chat",
    "get_chat",
    "get_chats_for_user",
    "get_one_on_one_chat",
    "set_last_message",
    "to_chat_public",
]
