"""WebSocket channel delivering chat events to connected users."""

from fastapi import APIRouter, Query, WebSocket, WebSocketDisconnect, status
from sqlmodel import Session

from chatapp.auth import InvalidTokenError, resolve_user_from_token
from chatapp.core.db import engine
from chatapp.core.logging import get_logger
from chatapp.realtime import ChatEventEnum, manager

router = APIRouter(tags=["socket"])
logger = get_logger(__name__)


@router.websocket("/ws")
async def chat_socket(
    websocket: WebSocket,
    token: str | None = Query(None, description="Access token"),
) -> None:
    """Join the caller's room and stream chat events until the client leaves.

    Browsers cannot set an Authorization header on a WebSocket handshake,
    so the access token travels as a query parameter.
    """
    if not token:
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    # The session only lives for the handshake; an open socket holds no connection
    try:
        with Session(engine) as session:
            user_id = resolve_user_from_token(session, token).id
    except InvalidTokenError as e:
        logger.warning("socket_auth_failed", reason=str(e))
        await websocket.close(code=status.WS_1008_POLICY_VIOLATION)
        return

    await manager.connect(user_id, websocket)
    await manager.emit(user_id, ChatEventEnum.CONNECTED_EVENT, {"user_id": user_id})

    try:
        while True:
            # Clients only listen; inbound frames are drained and ignored
            await websocket.receive_text()
    except WebSocketDisconnect:
        pass
    finally:
        manager.disconnect(user_id, websocket)
