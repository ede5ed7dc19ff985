import uuid

from sqlmodel import Session, col, select

from chatapp.auth.models import User, UserSummary
from chatapp.chats.models import Chat, ChatParticipant, ChatPublic, GroupChatCreate
from chatapp.core.base_models import utcnow
from chatapp.core.db import paginate

ONE_ON_ONE_CHAT_NAME = "One on one chat"


def get_chat(*, session: Session, chat_id: uuid.UUID) -> Chat | None:
    return session.get(Chat, chat_id)


def get_one_on_one_chat(
    *, session: Session, user_id: uuid.UUID, other_user_id: uuid.UUID
) -> Chat | None:
    """Find the existing direct chat between two users, if any."""
    chats_of_user = select(ChatParticipant.chat_id).where(
        ChatParticipant.user_id == user_id
    )
    chats_of_other = select(ChatParticipant.chat_id).where(
        ChatParticipant.user_id == other_user_id
    )
    statement = select(Chat).where(
        Chat.is_group_chat == False,  # noqa: E712
        col(Chat.id).in_(chats_of_user),
        col(Chat.id).in_(chats_of_other),
    )
    return session.exec(statement).first()


def create_one_on_one_chat(
    *, session: Session, user_id: uuid.UUID, receiver_id: uuid.UUID
) -> Chat:
    chat = Chat(name=ONE_ON_ONE_CHAT_NAME, is_group_chat=False)
    chat.members = [
        ChatParticipant(user_id=user_id),
        ChatParticipant(user_id=receiver_id),
    ]
    session.add(chat)
    session.commit()
    session.refresh(chat)
    return chat


def create_group_chat(
    *,
    session: Session,
    creator_id: uuid.UUID,
    chat_in: GroupChatCreate,
    member_ids: list[uuid.UUID],
) -> Chat:
    """Create a group chat. The creator is added as participant and admin."""
    chat = Chat(
        name=chat_in.name,
        is_group_chat=True,
        description=chat_in.description,
        group_type=chat_in.group_type,
    )
    chat.members = [ChatParticipant(user_id=creator_id, is_admin=True)] + [
        ChatParticipant(user_id=member_id)
        for member_id in member_ids
        if member_id != creator_id
    ]
    session.add(chat)
    session.commit()
    session.refresh(chat)
    return chat


def get_chats_for_user(
    *,
    session: Session,
    user_id: uuid.UUID,
    skip: int = 0,
    limit: int = 100,
) -> tuple[list[Chat], int]:
    """Chats the user participates in, most recently active first."""
    member_of = select(ChatParticipant.chat_id).where(
        ChatParticipant.user_id == user_id
    )
    statement = select(Chat).where(col(Chat.id).in_(member_of))
    return paginate(
        session,
        statement,
        skip=skip,
        limit=limit,
        order_by=col(Chat.updated_at).desc(),
    )


def set_last_message(
    *, session: Session, chat: Chat, message_id: uuid.UUID | None
) -> Chat:
    chat.last_message_id = message_id
    chat.updated_at = utcnow()
    session.add(chat)
    session.commit()
    session.refresh(chat)
    return chat


def to_chat_public(chat: Chat) -> ChatPublic:
    participants = [
        UserSummary.model_validate(member.user, from_attributes=True)
        for member in chat.members
        if isinstance(member.user, User)
    ]
    return ChatPublic(
        id=chat.id,
        name=chat.name,
        is_group_chat=chat.is_group_chat,
        description=chat.description,
        profile_pic_url=chat.profile_pic_url,
        group_type=chat.group_type,
        last_message_id=chat.last_message_id,
        participants=participants,
        admins=chat.admin_ids,
        created_at=chat.created_at,
        updated_at=chat.updated_at,
    )
