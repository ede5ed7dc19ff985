"""Message send / fetch / delete with attachment storage and event fan-out.

Each operation follows the same shape: authorize, mutate the database,
then notify the other participants over the socket channel.
"""

import asyncio
from dataclasses import dataclass
from datetime import UTC, datetime, timedelta
import uuid

from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from chatapp.auth.models import User
from chatapp.chats import crud as chat_crud
from chatapp.chats.models import Chat, GroupType
from chatapp.core.config import settings
from chatapp.core.exceptions import (
    AttachmentUploadError,
    AuthorizationError,
    BadRequestError,
    DeleteWindowExpiredError,
    MessageDeletionError,
    ResourceNotFoundError,
)
from chatapp.core.logging import get_logger
from chatapp.core.storage import StoredObject
from chatapp.core.storage import delete_attachment as storage_delete
from chatapp.core.storage import upload_attachment as storage_upload
from chatapp.messages import crud
from chatapp.messages.models import Attachment, ChatMessage, ChatMessagePublic
from chatapp.realtime import ChatEventEnum, manager

logger = get_logger(__name__)


@dataclass
class AttachmentUpload:
    """An attachment received with a send request, not yet stored."""

    filename: str
    content: bytes
    content_type: str | None = None


def get_chat_or_404(session: Session, chat_id: uuid.UUID) -> Chat:
    chat = chat_crud.get_chat(session=session, chat_id=chat_id)
    if not chat:
        raise ResourceNotFoundError("Chat", str(chat_id))
    return chat


def ensure_participant(chat: Chat, user_id: uuid.UUID) -> None:
    if not chat.is_participant(user_id):
        raise BadRequestError("User is not a part of this chat")


def ensure_can_post(chat: Chat, user_id: uuid.UUID) -> None:
    """Posting requires membership, and admin rights in admin-only groups."""
    ensure_participant(chat, user_id)
    if (
        chat.is_group_chat
        and chat.group_type == GroupType.ADMIN_ONLY
        and not chat.is_admin(user_id)
    ):
        raise AuthorizationError(
            "You are not authorised to send message in this chat only admins can"
        )


def message_age(message: ChatMessage, now: datetime | None = None) -> timedelta:
    now = now or datetime.now(UTC)
    created_at = message.created_at
    # SQLite hands back naive datetimes; everything is stored in UTC
    if created_at.tzinfo is None:
        created_at = created_at.replace(tzinfo=UTC)
    return now - created_at


def authorize_message_delete(
    *,
    chat: Chat,
    message: ChatMessage,
    user_id: uuid.UUID,
    now: datetime | None = None,
    window_minutes: int | None = None,
) -> None:
    """Decide whether ``user_id`` may delete ``message`` from ``chat``.

    Group admins may delete any message at any time. Otherwise only the
    sender may delete, and only while the message is younger than the
    delete window.

    Raises:
        AuthorizationError: caller is neither admin nor sender
        DeleteWindowExpiredError: caller is the sender but the window has passed
    """
    if window_minutes is None:
        window_minutes = settings.MESSAGE_DELETE_WINDOW_MINUTES

    if chat.is_group_chat and chat.is_admin(user_id):
        return

    if message.sender_id != user_id:
        raise AuthorizationError("You are not authorised to delete this message")

    if message_age(message, now) >= timedelta(minutes=window_minutes):
        raise DeleteWindowExpiredError(window_minutes)


def ensure_attachment_count(count: int) -> None:
    if count > settings.MAX_ATTACHMENTS_PER_MESSAGE:
        raise BadRequestError(
            f"Too many attachments: {count}. "
            f"Maximum: {settings.MAX_ATTACHMENTS_PER_MESSAGE}",
            field="attachments",
        )


def validate_send_request(content: str | None, uploads: list[AttachmentUpload]) -> None:
    if not content and not uploads:
        raise BadRequestError("Message content or attachment is required")

    ensure_attachment_count(len(uploads))

    for upload in uploads:
        if len(upload.content) > settings.max_attachment_size_bytes:
            raise BadRequestError(
                f"File too large: {upload.filename}. "
                f"Maximum size: {settings.MAX_ATTACHMENT_SIZE_MB}MB",
                field="attachments",
            )


async def remove_attachments(attachments: list[Attachment]) -> None:
    """Destroy attachments on the provider concurrently; failures are only logged."""
    if not attachments:
        return
    results = await asyncio.gather(
        *(
            asyncio.to_thread(storage_delete, item.public_id, item.resource_type)
            for item in attachments
        ),
        return_exceptions=True,
    )
    for item, result in zip(attachments, results, strict=True):
        if result is not True:
            logger.warning(
                "attachment_cleanup_failed",
                public_id=item.public_id,
                error=str(result) if isinstance(result, BaseException) else None,
            )


async def upload_attachments(uploads: list[AttachmentUpload]) -> list[Attachment]:
    """Upload all attachments concurrently.

    Either every upload succeeds or none is kept: when one fails, the ones
    that made it to the provider are destroyed before the error is raised.

    Raises:
        AttachmentUploadError: If any upload fails
    """
    if not uploads:
        return []

    results = await asyncio.gather(
        *(
            asyncio.to_thread(
                storage_upload, upload.content, upload.filename, upload.content_type
            )
            for upload in uploads
        ),
        return_exceptions=True,
    )

    stored: list[Attachment] = []
    failed: list[tuple[AttachmentUpload, BaseException]] = []
    for upload, result in zip(uploads, results, strict=True):
        if isinstance(result, StoredObject):
            stored.append(
                Attachment(
                    url=result.url,
                    public_id=result.public_id,
                    resource_type=result.resource_type,
                    filename=upload.filename,
                    content_type=result.content_type,
                    size=result.size,
                )
            )
        else:
            failed.append((upload, result))

    if failed:
        upload, error = failed[0]
        logger.warning(
            "attachment_upload_rolled_back",
            failed=[item.filename for item, _ in failed],
            rolled_back=[item.public_id for item in stored],
        )
        await remove_attachments(stored)
        if not isinstance(error, Exception):
            raise error
        raise AttachmentUploadError(upload.filename, str(error)) from error

    return stored


def get_all_messages(
    *,
    session: Session,
    chat_id: uuid.UUID,
    user: User,
    skip: int = 0,
    limit: int = 100,
) -> tuple[list[ChatMessagePublic], int]:
    chat = get_chat_or_404(session, chat_id)
    ensure_participant(chat, user.id)

    messages, total = crud.get_chat_messages(
        session=session, chat_id=chat.id, skip=skip, limit=limit
    )
    return crud.structure_messages(session=session, messages=messages), total


async def send_message(
    *,
    session: Session,
    chat_id: uuid.UUID,
    sender: User,
    content: str | None,
    uploads: list[AttachmentUpload],
) -> ChatMessagePublic:
    validate_send_request(content, uploads)

    chat = get_chat_or_404(session, chat_id)
    ensure_can_post(chat, sender.id)

    attachments = await upload_attachments(uploads)

    try:
        message = crud.create_message(
            session=session,
            chat_id=chat.id,
            sender_id=sender.id,
            content=content,
            attachments=attachments,
        )
    except SQLAlchemyError:
        session.rollback()
        await remove_attachments(attachments)
        raise

    chat = chat_crud.set_last_message(session=session, chat=chat, message_id=message.id)
    received = crud.structure_message(session=session, message=message)

    logger.info(
        "message_sent",
        chat_id=str(chat.id),
        message_id=str(message.id),
        sender_id=str(sender.id),
        attachment_count=len(attachments),
    )

    await manager.emit_to_participants(
        chat.participant_ids,
        ChatEventEnum.MESSAGE_RECEIVED_EVENT,
        received,
        exclude=sender.id,
    )
    return received


async def delete_message(
    *,
    session: Session,
    chat_id: uuid.UUID,
    message_id: uuid.UUID,
    user: User,
) -> None:
    chat = get_chat_or_404(session, chat_id)

    message = crud.get_message(session=session, message_id=message_id)
    if not message or message.chat_id != chat.id:
        raise ResourceNotFoundError("Message", str(message_id))

    authorize_message_delete(chat=chat, message=message, user_id=user.id)

    # Snapshot before the row goes away
    deleted = crud.structure_message(session=session, message=message)
    attachments = message.attachments

    try:
        crud.delete_message(session=session, message=message)
    except SQLAlchemyError as e:
        session.rollback()
        logger.exception("message_delete_failed", message_id=str(message_id))
        raise MessageDeletionError(str(message_id)) from e

    await remove_attachments(attachments)

    latest = crud.get_latest_message(session=session, chat_id=chat.id)
    chat = chat_crud.set_last_message(
        session=session, chat=chat, message_id=latest.id if latest else None
    )

    logger.info(
        "message_deleted",
        chat_id=str(chat.id),
        message_id=str(message_id),
        deleted_by=str(user.id),
        attachment_count=len(attachments),
    )

    await manager.emit_to_participants(
        chat.participant_ids,
        ChatEventEnum.MESSAGE_DELETED_EVENT,
        deleted,
        exclude=user.id,
    )
