from sqlalchemy import Column, Integer, DateTime, ForeignKey, Index, Enum as SQLEnum
from sqlalchemy.orm import relationship

from campusmatch.db.base_class import Base
from campusmatch.utils.dates import utcnow
from .enums import SwipeAction


class Swipe(Base):
    """A like or dislike of ``target`` by ``actor``.

    The composite primary key allows one swipe per ordered pair, so a user
    is in at most one of the actor's likes/dislikes at any time and the
    mutual-like test is a primary key lookup.
    """
    __tablename__ = "swipes"

    actor_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    target_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    action = Column(SQLEnum(SwipeAction, name="swipe_action_enum"), nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    actor = relationship("User", foreign_keys=[actor_id], back_populates="swipes")
    target = relationship("User", foreign_keys=[target_id])

    __table_args__ = (Index("ix_swipes_target_action", "target_id", "action"),)
