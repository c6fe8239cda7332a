from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel

from .user import UserPublic
from .message import MessageRead


class MatchRead(BaseModel):
    """A match as seen by one of its two users."""
    id: int
    user: UserPublic  # the other participant
    matched_at: datetime
    is_active: bool
    last_message: Optional[MessageRead] = None
    last_message_at: Optional[datetime] = None

    @classmethod
    def for_viewer(cls, match, viewer_id: int) -> "MatchRead":
        # Both users (with photos) and last_message must be eagerly loaded
        last_message = match.last_message
        return cls(
            id=match.id,
            user=UserPublic.from_user(match.other_user(viewer_id)),
            matched_at=match.matched_at,
            is_active=match.is_active,
            last_message=MessageRead.model_validate(last_message) if last_message else None,
            last_message_at=match.last_message_at,
        )


class MatchList(BaseModel):
    success: bool = True
    matches: List[MatchRead]
    count: int


class MatchDetail(BaseModel):
    success: bool = True
    match: MatchRead


class LikeResult(BaseModel):
    success: bool = True
    is_match: bool
    match: Optional[MatchRead] = None
    message: str
