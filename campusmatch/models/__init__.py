# Import the Base class to make it accessible for models
# and for Alembic discovery via Base.metadata
from campusmatch.db.base_class import Base  # noqa: F401

from .user import User
from .photo import UserPhoto
from .swipe import Swipe
from .match import Match, MatchEntry
from .message import Message
from .enums import Gender, InterestedIn, SwipeAction, MessageType, MessageStatus

__all__ = [
    "User",
    "UserPhoto",
    "Swipe",
    "Match",
    "MatchEntry",
    "Message",
    "Gender",
    "InterestedIn",
    "SwipeAction",
    "MessageType",
    "MessageStatus",
]
