import uuid

from sqlmodel import Session, col, select

from chatapp.auth.crud import get_users_by_ids
from chatapp.auth.models import UserSummary
from chatapp.core.db import paginate
from chatapp.messages.models import (
    Attachment,
    ChatMessage,
    ChatMessagePublic,
    dump_attachments,
)


def create_message(
    *,
    session: Session,
    chat_id: uuid.UUID,
    sender_id: uuid.UUID,
    content: str | None,
    attachments: list[Attachment],
) -> ChatMessage:
    message = ChatMessage(
        chat_id=chat_id,
        sender_id=sender_id,
        content=content or "",
        attachments_json=dump_attachments(attachments),
    )
    session.add(message)
    session.commit()
    session.refresh(message)
    return message


def get_message(*, session: Session, message_id: uuid.UUID) -> ChatMessage | None:
    return session.get(ChatMessage, message_id)


def get_chat_messages(
    *,
    session: Session,
    chat_id: uuid.UUID,
    skip: int = 0,
    limit: int = 100,
) -> tuple[list[ChatMessage], int]:
    """Messages of a chat, newest first."""
    statement = select(ChatMessage).where(ChatMessage.chat_id == chat_id)
    return paginate(
        session,
        statement,
        skip=skip,
        limit=limit,
        order_by=col(ChatMessage.created_at).desc(),
    )


def get_latest_message(*, session: Session, chat_id: uuid.UUID) -> ChatMessage | None:
    statement = (
        select(ChatMessage)
        .where(ChatMessage.chat_id == chat_id)
        .order_by(col(ChatMessage.created_at).desc())
        .limit(1)
    )
    return session.exec(statement).first()


def delete_message(*, session: Session, message: ChatMessage) -> None:
    session.delete(message)
    session.commit()


def structure_messages(
    *, session: Session, messages: list[ChatMessage]
) -> list[ChatMessagePublic]:
    """Attach the sender summary (username, avatar, email) to each message.

    Senders are fetched in a single query regardless of page size.
    """
    sender_ids = list({message.sender_id for message in messages})
    senders = {
        user.id: UserSummary.model_validate(user, from_attributes=True)
        for user in get_users_by_ids(session=session, user_ids=sender_ids)
    }
    return [
        ChatMessagePublic(
            id=message.id,
            chat_id=message.chat_id,
            sender=senders.get(message.sender_id),
            content=message.content,
            attachments=message.attachments,
            created_at=message.created_at,
            updated_at=message.updated_at,
        )
        for message in messages
    ]


def structure_message(*, session: Session, message: ChatMessage) -> ChatMessagePublic:
    return structure_messages(session=session, messages=[message])[0]
