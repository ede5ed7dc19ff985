import asyncio
import uuid

import pytest
from fastapi import WebSocketDisconnect
from fastapi.testclient import TestClient
from sqlalchemy.pool import QueuePool
from sqlmodel import Session, SQLModel, create_engine

from chatapp.api.routes import socket as socket_routes
from chatapp.auth import User, UserCreate, create_user
from chatapp.core.security import create_access_token
from chatapp.main import app
from chatapp.realtime import ChatEventEnum, ConnectionManager, manager


class FakeSocket:
    def __init__(self, fail: bool = False):
        self.accepted = False
        self.sent = []
        self.fail = fail

    async def accept(self):
        self.accepted = True

    async def send_json(self, data):
        if self.fail:
            raise RuntimeError("socket closed")
        self.sent.append(data)


def test_emit_reaches_every_socket_of_the_user():
    async def scenario():
        connections = ConnectionManager()
        user_id = uuid.uuid4()
        laptop, phone = FakeSocket(), FakeSocket()
        await connections.connect(user_id, laptop)
        await connections.connect(user_id, phone)

        delivered = await connections.emit(
            user_id, ChatEventEnum.MESSAGE_RECEIVED_EVENT, {"chat_id": user_id}
        )
        return user_id, laptop, phone, delivered

    user_id, laptop, phone, delivered = asyncio.run(scenario())

    assert delivered == 2
    assert laptop.accepted and phone.accepted
    assert laptop.sent == [
        {"event": "messageReceived", "data": {"chat_id": str(user_id)}}
    ]
    assert phone.sent == laptop.sent


def test_failing_socket_is_dropped():
    async def scenario():
        connections = ConnectionManager()
        user_id = uuid.uuid4()
        good, broken = FakeSocket(), FakeSocket(fail=True)
        await connections.connect(user_id, good)
        await connections.connect(user_id, broken)
        delivered = await connections.emit(user_id, "messageDeleted", {"id": 1})
        return connections, user_id, delivered

    connections, user_id, delivered = asyncio.run(scenario())

    assert delivered == 1
    assert connections.connection_count(user_id) == 1


def test_emit_to_offline_user_is_a_no_op():
    delivered = asyncio.run(
        ConnectionManager().emit(uuid.uuid4(), ChatEventEnum.MESSAGE_DELETED_EVENT)
    )

    assert delivered == 0


def test_emit_to_participants_skips_the_actor():
    async def scenario():
        connections = ConnectionManager()
        actor, first, second = uuid.uuid4(), uuid.uuid4(), uuid.uuid4()
        sockets = {uid: FakeSocket() for uid in (actor, first, second)}
        for uid, socket in sockets.items():
            await connections.connect(uid, socket)
        await connections.emit_to_participants(
            [actor, first, second],
            ChatEventEnum.MESSAGE_RECEIVED_EVENT,
            {"content": "hi"},
            exclude=actor,
        )
        return actor, first, second, sockets

    actor, first, second, sockets = asyncio.run(scenario())

    assert sockets[actor].sent == []
    assert len(sockets[first].sent) == 1
    assert len(sockets[second].sent) == 1


def test_disconnect_removes_empty_room():
    async def scenario():
        connections = ConnectionManager()
        user_id = uuid.uuid4()
        socket = FakeSocket()
        await connections.connect(user_id, socket)
        connections.disconnect(user_id, socket)
        return connections, user_id

    connections, user_id = asyncio.run(scenario())

    assert not connections.is_online(user_id)


def test_socket_connect_announces_connection(client, make_user):
    user = make_user()
    token, _ = create_access_token(user.id)

    with client.websocket_connect(f"/v1/ws?token={token}") as websocket:
        frame = websocket.receive_json()
        assert frame == {"event": "connected", "data": {"user_id": str(user.id)}}
        assert manager.is_online(user.id)


def test_socket_without_token_is_rejected(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/v1/ws") as websocket:
            websocket.receive_json()


def test_socket_with_invalid_token_is_rejected(client):
    with pytest.raises(WebSocketDisconnect):
        with client.websocket_connect("/v1/ws?token=not-a-jwt") as websocket:
            websocket.receive_json()


def test_open_socket_holds_no_database_connection(tmp_path, monkeypatch):
    engine = create_engine(
        f"sqlite:///{tmp_path / 'chat.db'}",
        connect_args={"check_same_thread": False},
        poolclass=QueuePool,
        pool_size=1,
        max_overflow=0,
        pool_timeout=1,
    )
    SQLModel.metadata.create_all(engine)
    with Session(engine) as session:
        user = create_user(
            session=session,
            user_create=UserCreate(
                username="listener",
                email="listener@example.com",
                password="password123",
            ),
        )
        user_id = user.id
    monkeypatch.setattr(socket_routes, "engine", engine)
    token, _ = create_access_token(user_id)

    with TestClient(app).websocket_connect(f"/v1/ws?token={token}") as websocket:
        assert websocket.receive_json()["event"] == "connected"
        assert engine.pool.checkedout() == 0

        with Session(engine) as session:
            assert session.get(User, user_id) is not None

    engine.dispose()
