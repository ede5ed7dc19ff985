"""Messages module: chat messages, their attachments and delete rules."""

from chatapp.messages.models import (
    Attachment,
    ChatMessage,
    ChatMessagePublic,
    ChatMessagesPublic,
)
from chatapp.messages.service import (
    AttachmentUpload,
    authorize_message_delete,
    delete_message,
    ensure_attachment_count,
    get_all_messages,
    send_message,
)

__all__ = [
    "Attachment",
    "AttachmentUpload",
    "ChatMessage",
    "ChatMessagePublic",
    "ChatMessagesPublic",
    "authorize_message_delete",
    "delete_message",
    "ensure_attachment_count",
    "get_all_messages",
    "send_message",
]
