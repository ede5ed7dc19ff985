import os

os.environ.setdefault("SECRET_KEY", "test-secret-key-that-is-long-enough-1234567890")
os.environ.setdefault("ENVIRONMENT", "local")

from datetime import UTC, datetime, timedelta
import uuid

import pytest
from fastapi.testclient import TestClient
from sqlalchemy.pool import StaticPool
from sqlmodel import Session, SQLModel, create_engine

from chatapp.api.routes import socket as socket_routes
from chatapp.auth import UserCreate, create_user
from chatapp.chats import GroupChatCreate, GroupType, create_group_chat, create_one_on_one_chat
from chatapp.core.db import get_db
from chatapp.core.security import create_access_token
from chatapp.core.storage import StorageError, StoredObject, resource_type_for
from chatapp.main import app
from chatapp.messages import service as message_service
from chatapp.messages.crud import create_message
from chatapp.realtime import manager


@pytest.fixture
def engine():
    """Fresh in-memory SQLite database shared by the test and the app."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    SQLModel.metadata.create_all(engine)
    yield engine
    SQLModel.metadata.drop_all(engine)


@pytest.fixture
def session(engine):
    with Session(engine) as session:
        yield session


@pytest.fixture
def client(engine, session, monkeypatch):
    monkeypatch.setattr(socket_routes, "engine", engine)
    app.dependency_overrides[get_db] = lambda: session
    yield TestClient(app)
    app.dependency_overrides.clear()


@pytest.fixture
def make_user(session):
    counter = {"n": 0}

    def _make_user(username: str | None = None):
        counter["n"] += 1
        username = username or f"user{counter['n']}"
        return create_user(
            session=session,
            user_create=UserCreate(
                username=username,
                email=f"{username}@example.com",
                password="password123",
            ),
        )

    return _make_user


@pytest.fixture
def auth_headers():
    def _auth_headers(user):
        token, _ = create_access_token(user.id)
        return {"Authorization": f"Bearer {token}"}

    return _auth_headers


@pytest.fixture
def direct_chat(session):
    def _direct_chat(user, other):
        return create_one_on_one_chat(
            session=session, user_id=user.id, receiver_id=other.id
        )

    return _direct_chat


@pytest.fixture
def group_chat(session):
    def _group_chat(admin, members, group_type=GroupType.EVERYONE):
        return create_group_chat(
            session=session,
            creator_id=admin.id,
            chat_in=GroupChatCreate(
                name="Team",
                participant_ids=[m.id for m in members],
                group_type=group_type,
            ),
            member_ids=[m.id for m in members],
        )

    return _group_chat


@pytest.fixture
def post_message(session):
    """Insert a message directly, optionally backdated by ``age``."""

    def _post_message(chat, sender, content="hello", attachments=None, age=None):
        message = create_message(
            session=session,
            chat_id=chat.id,
            sender_id=sender.id,
            content=content,
            attachments=attachments or [],
        )
        if age is not None:
            message.created_at = datetime.now(UTC) - age
            session.add(message)
            session.commit()
            session.refresh(message)
        return message

    return _post_message


class FakeStorage:
    """In-memory stand-in for the attachment storage provider."""

    def __init__(self):
        self.objects: dict[str, bytes] = {}
        self.deleted: list[str] = []
        self.fail_uploads: set[str] = set()
        self.fail_deletes = False

    def upload(self, content, filename, content_type=None):
        if filename in self.fail_uploads:
            raise StorageError(f"provider rejected {filename}")
        public_id = f"chat-attachments/{uuid.uuid4()}_{filename}"
        self.objects[public_id] = content
        return StoredObject(
            url=f"https://cdn.example.com/{public_id}",
            public_id=public_id,
            resource_type=resource_type_for(content_type),
            content_type=content_type or "application/octet-stream",
            size=len(content),
        )

    def delete(self, public_id, resource_type="image"):
        if self.fail_deletes:
            return False
        self.deleted.append(public_id)
        return self.objects.pop(public_id, None) is not None


@pytest.fixture
def fake_storage(monkeypatch):
    storage = FakeStorage()
    monkeypatch.setattr(message_service, "storage_upload", storage.upload)
    monkeypatch.setattr(message_service, "storage_delete", storage.delete)
    return storage


@pytest.fixture
def emitted(monkeypatch):
    """Record socket events instead of sending them."""
    events = []

    async def fake_emit(user_id, event, payload=None):
        events.append((user_id, event, payload))
        return 1

    monkeypatch.setattr(manager, "emit", fake_emit)
    return events


@pytest.fixture
def minutes():
    return lambda n: timedelta(minutes=n)
