from slowapi import Limiter
from slowapi.util import get_remote_address

from chatapp.core.config import settings

limiter = Limiter(
    key_func=get_remote_address,
    default_limits=["100/minute"] if settings.ENVIRONMENT != "local" else [],
    enabled=settings.ENVIRONMENT != "local",
)

AUTH_RATE_LIMIT = "5/minute"

MESSAGE_RATE_LIMIT = settings.MESSAGE_RATE_LIMIT
