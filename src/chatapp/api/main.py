from fastapi import APIRouter

from chatapp.api.routes import auth, chats, messages, socket

api_router = APIRouter()
api_router.include_router(auth.router)
api_router.include_router(chats.router)
api_router.include_router(messages.router)
api_router.include_router(socket.router)
