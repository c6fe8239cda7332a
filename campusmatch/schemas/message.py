from datetime import datetime
from typing import Optional, List
from pydantic import BaseModel, ConfigDict

from campusmatch.models.enums import MessageType, MessageStatus


# Schema for receiving message content from client
class MessageCreate(BaseModel):
    # Emptiness and length are checked by the service so the error kind is stable
    content: str
    message_type: MessageType = MessageType.TEXT
    image_url: Optional[str] = None


class MessageRead(BaseModel):
    id: int
    match_id: int
    sender_id: int
    receiver_id: int
    content: str
    message_type: MessageType
    image_url: Optional[str] = None
    status: MessageStatus
    is_delivered: bool
    delivered_at: Optional[datetime] = None
    is_read: bool
    read_at: Optional[datetime] = None
    created_at: datetime

    model_config = ConfigDict(from_attributes=True)


class MessageSent(BaseModel):
    success: bool = True
    message: MessageRead


class MessageList(BaseModel):
    success: bool = True
    messages: List[MessageRead]
    count: int
    page: int
    limit: int


class MarkReadResult(BaseModel):
    success: bool = True
    modified_count: int


class UnreadCount(BaseModel):
    success: bool = True
    unread_count: int
