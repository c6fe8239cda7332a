from . import auth_service
from . import user_service
from . import discovery_service
from . import match_service
from . import message_service

__all__ = [
    "auth_service",
    "user_service",
    "discovery_service",
    "match_service",
    "message_service",
]
