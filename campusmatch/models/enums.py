from __future__ import annotations
import enum


class Gender(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    OTHER = "other"


class InterestedIn(str, enum.Enum):
    MALE = "male"
    FEMALE = "female"
    BOTH = "both"


class SwipeAction(str, enum.Enum):
    LIKE = "like"
    DISLIKE = "dislike"


class MessageType(str, enum.Enum):
    TEXT = "text"
    IMAGE = "image"
    GIF = "gif"


class MessageStatus(str, enum.Enum):
    SENT = "sent"
    DELIVERED = "delivered"
    READ = "read"
