from typing import Any
import uuid

from fastapi import APIRouter, Query

from chatapp.auth import CurrentUser, SessionDep, get_user_by_id, get_users_by_ids
from chatapp.chats import (
    ChatPublic,
    ChatsPublic,
    GroupChatCreate,
    create_group_chat,
    create_one_on_one_chat,
    get_chat,
    get_chats_for_user,
    get_one_on_one_chat,
    to_chat_public,
)
from chatapp.core.exceptions import BadRequestError, ResourceNotFoundError
from chatapp.core.logging import get_logger

logger = get_logger(__name__)

router = APIRouter(prefix="/chats", tags=["chats"])

# Members besides the creator
MIN_GROUP_MEMBERS = 2


@router.get("/", response_model=ChatsPublic)
def read_chats(
    session: SessionDep,
    current_user: CurrentUser,
    skip: int = Query(default=0, ge=0),
    limit: int = Query(default=100, ge=1, le=100),
) -> Any:
    """List the chats the current user participates in."""
    chats, count = get_chats_for_user(
        session=session, user_id=current_user.id, skip=skip, limit=limit
    )
    return ChatsPublic(data=[to_chat_public(chat) for chat in chats], count=count)


@router.post("/c/{receiver_id}", response_model=ChatPublic)
def create_or_get_one_on_one_chat(
    session: SessionDep,
    current_user: CurrentUser,
    receiver_id: uuid.UUID,
) -> Any:
    """Return the direct chat with the receiver, creating it on first contact."""
    if receiver_id == current_user.id:
        raise BadRequestError("You cannot chat with yourself")

    receiver = get_user_by_id(session=session, user_id=receiver_id)
    if not receiver:
        raise ResourceNotFoundError("Receiver", str(receiver_id))

    chat = get_one_on_one_chat(
        session=session, user_id=current_user.id, other_user_id=receiver_id
    )
    if chat is None:
        chat = create_one_on_one_chat(
            session=session, user_id=current_user.id, receiver_id=receiver_id
        )
        logger.info(
            "chat_created",
            chat_id=str(chat.id),
            is_group_chat=False,
            created_by=str(current_user.id),
        )
    return to_chat_public(chat)


@router.post("/group", response_model=ChatPublic)
def create_group_chat_endpoint(
    session: SessionDep,
    current_user: CurrentUser,
    chat_in: GroupChatCreate,
) -> Any:
    """Create a group chat. The creator becomes its admin."""
    member_ids = list(dict.fromkeys(chat_in.participant_ids))
    if current_user.id in member_ids:
        member_ids.remove(current_user.id)

    if len(member_ids) < MIN_GROUP_MEMBERS:
        raise BadRequestError(
            "Seems like you have passed duplicate participants. "
            "A group chat needs at least 3 members including you",
            field="participant_ids",
        )

    found = {user.id for user in get_users_by_ids(session=session, user_ids=member_ids)}
    missing = [member_id for member_id in member_ids if member_id not in found]
    if missing:
        raise ResourceNotFoundError("User", str(missing[0]))

    chat = create_group_chat(
        session=session,
        creator_id=current_user.id,
        chat_in=chat_in,
        member_ids=member_ids,
    )
    logger.info(
        "chat_created",
        chat_id=str(chat.id),
        is_group_chat=True,
        group_type=chat.group_type,
        created_by=str(current_user.id),
        member_count=len(member_ids) + 1,
    )
    return to_chat_public(chat)


@router.get("/{chat_id}", response_model=ChatPublic)
def read_chat(
    session: SessionDep,
    current_user: CurrentUser,
    chat_id: uuid.UUID,
) -> Any:
    chat = get_chat(session=session, chat_id=chat_id)
    if not chat:
        raise ResourceNotFoundError("Chat", str(chat_id))
    if not chat.is_participant(current_user.id):
        raise BadRequestError("User is not a part of this chat")
    return to_chat_public(chat)
