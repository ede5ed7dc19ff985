"""Chat message routes: list, send (with attachments) and delete."""

from typing import Annotated, Any
import uuid

from fastapi import APIRouter, File, Form, Query, Request, UploadFile, status

from chatapp.auth import CurrentUser, Message, SessionDep
from chatapp.core.rate_limit import MESSAGE_RATE_LIMIT, limiter
from chatapp.messages import (
    AttachmentUpload,
    ChatMessagePublic,
    ChatMessagesPublic,
    delete_message,
    ensure_attachment_count,
    get_all_messages,
    send_message,
)

router = APIRouter(prefix="/messages", tags=["messages"])


@router.get("/{chat_id}", response_model=ChatMessagesPublic)
def read_messages(
    session: SessionDep,
    current_user: CurrentUser,
    chat_id: uuid.UUID,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=500),
) -> Any:
    """Fetch the messages of a chat, newest first.

    Only participants of the chat can read its messages.
    """
    messages, count = get_all_messages(
        session=session,
        chat_id=chat_id,
        user=current_user,
        skip=skip,
        limit=limit,
    )
    return ChatMessagesPublic(data=messages, count=count)


@router.post(
    "/{chat_id}",
    response_model=ChatMessagePublic,
    status_code=status.HTTP_201_CREATED,
)
@limiter.limit(MESSAGE_RATE_LIMIT)
async def send_message_endpoint(
    request: Request,  # Required for rate limiter
    session: SessionDep,
    current_user: CurrentUser,
    chat_id: uuid.UUID,
    content: Annotated[str | None, Form()] = None,
    attachments: Annotated[list[UploadFile] | None, File()] = None,
) -> Any:
    """Send a message with optional attachments.

    Attachments are uploaded to the storage provider before the message is
    saved. The other participants receive a `messageReceived` event.
    """
    attachments = attachments or []
    ensure_attachment_count(len(attachments))

    uploads = [
        AttachmentUpload(
            filename=upload.filename or "unnamed",
            content=await upload.read(),
            content_type=upload.content_type,
        )
        for upload in attachments
    ]
    return await send_message(
        session=session,
        chat_id=chat_id,
        sender=current_user,
        content=content,
        uploads=uploads,
    )


@router.delete("/{chat_id}/{message_id}", response_model=Message)
async def delete_message_endpoint(
    session: SessionDep,
    current_user: CurrentUser,
    chat_id: uuid.UUID,
    message_id: uuid.UUID,
) -> Any:
    """Delete a message and its attachments.

    Group admins can delete any message. Senders can delete their own
    message within the delete window (15 minutes by default).
    """
    await delete_message(
        session=session,
        chat_id=chat_id,
        message_id=message_id,
        user=current_user,
    )
    return Message(message="Message Deleted Successfully")
