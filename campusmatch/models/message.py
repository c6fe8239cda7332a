from sqlalchemy import Boolean, Column, Integer, Text, String, ForeignKey, DateTime, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from campusmatch.db.base_class import Base
from campusmatch.utils.dates import utcnow
from .enums import MessageType, MessageStatus


class Message(Base):
    __tablename__ = "messages"

    id = Column(Integer, primary_key=True, index=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False)
    sender_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)
    receiver_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    content = Column(Text, nullable=False)
    message_type = Column(SQLEnum(MessageType, name="message_type_enum"), nullable=False, default=MessageType.TEXT)
    image_url = Column(String, nullable=True)

    # Delivery is immediate on send; read when the receiver views the thread
    is_delivered = Column(Boolean, default=False, nullable=False)
    delivered_at = Column(DateTime(timezone=True), nullable=True)
    is_read = Column(Boolean, default=False, nullable=False)
    read_at = Column(DateTime(timezone=True), nullable=True)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    match = relationship("Match", foreign_keys=[match_id])
    sender = relationship("User", foreign_keys=[sender_id])
    receiver = relationship("User", foreign_keys=[receiver_id])

    __table_args__ = (
        Index("ix_messages_match_created", "match_id", "created_at"),
        Index("ix_messages_receiver_unread", "receiver_id", "is_read"),
    )

    @property
    def status(self) -> MessageStatus:
        if self.is_read:
            return MessageStatus.READ
        if self.is_delivered:
            return MessageStatus.DELIVERED
        return MessageStatus.SENT
