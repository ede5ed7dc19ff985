"""In-process registry of connected sockets.

Every authenticated socket joins the room named after its user id, so an
event can be addressed to a user regardless of how many tabs or devices
they have open.
"""

from collections import defaultdict
from collections.abc import Iterable
from typing import Any
import uuid

from fastapi import WebSocket
from fastapi.encoders import jsonable_encoder

from chatapp.core.logging import get_logger
from chatapp.realtime.events import ChatEventEnum

logger = get_logger(__name__)


class ConnectionManager:
    def __init__(self) -> None:
        self._rooms: dict[str, set[WebSocket]] = defaultdict(set)

    async def connect(self, user_id: uuid.UUID | str, websocket: WebSocket) -> None:
        await websocket.accept()
        self._rooms[str(user_id)].add(websocket)
        logger.info("socket_connected", user_id=str(user_id))

    def disconnect(self, user_id: uuid.UUID | str, websocket: WebSocket) -> None:
        room = self._rooms.get(str(user_id))
        if room is None:
            return
        room.discard(websocket)
        if not room:
            del self._rooms[str(user_id)]
        logger.info("socket_disconnected", user_id=str(user_id))

    def is_online(self, user_id: uuid.UUID | str) -> bool:
        return bool(self._rooms.get(str(user_id)))

    def connection_count(self, user_id: uuid.UUID | str) -> int:
        return len(self._rooms.get(str(user_id), ()))

    async def emit(
        self,
        user_id: uuid.UUID | str,
        event: ChatEventEnum | str,
        payload: Any = None,
    ) -> int:
        """Send an event to every socket in the user's room.

        A socket that fails to receive is dropped; the failure never reaches
        the caller.

        Returns:
            Number of sockets the event was delivered to
        """
        event_name = event.value if isinstance(event, ChatEventEnum) else event
        frame = {"event": event_name, "data": jsonable_encoder(payload)}

        delivered = 0
        for websocket in list(self._rooms.get(str(user_id), ())):
            try:
                await websocket.send_json(frame)
            except Exception as e:
                logger.warning(
                    "socket_emit_failed",
                    user_id=str(user_id),
                    socket_event=event_name,
                    error=str(e),
                    error_type=type(e).__name__,
                )
                self.disconnect(user_id, websocket)
            else:
                delivered += 1
        return delivered

    async def emit_to_participants(
        self,
        participant_ids: Iterable[uuid.UUID],
        event: ChatEventEnum,
        payload: Any,
        exclude: uuid.UUID | None = None,
    ) -> None:
        """Fan an event out to chat participants, skipping the acting user."""
        for participant_id in participant_ids:
            if participant_id == exclude:
                continue
            await self.emit(participant_id, event, payload)


manager = ConnectionManager()
