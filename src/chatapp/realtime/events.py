from enum import Enum


class ChatEventEnum(str, Enum):
    """Event names pushed to clients over the socket channel."""

    CONNECTED_EVENT = "connected"
    DISCONNECT_EVENT = "disconnect"
    MESSAGE_RECEIVED_EVENT = "messageReceived"
    MESSAGE_DELETED_EVENT = "messageDeleted"
    SOCKET_ERROR_EVENT = "socketError"
