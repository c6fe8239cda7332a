from sqlalchemy import (
    Boolean, CheckConstraint, Column, Integer, DateTime, ForeignKey, UniqueConstraint
)
from sqlalchemy.orm import relationship

from campusmatch.db.base_class import Base
from campusmatch.utils.dates import utcnow
from campusmatch.core.errors import SelfActionError


class Match(Base):
    """Mutual interest between exactly two users.

    The pair is stored normalised (``user_low_id < user_high_id``) so the
    unique constraint covers the unordered pair: there is never more than one
    row per couple. Retired matches keep their row with ``is_active=False``.
    """
    __tablename__ = "matches"

    id = Column(Integer, primary_key=True, index=True)
    user_low_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    user_high_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)
    matched_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    # Points at messages.id; kept without a FK constraint to avoid a
    # matches <-> messages creation cycle
    last_message_id = Column(Integer, nullable=True)
    last_message_at = Column(DateTime(timezone=True), default=utcnow)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    user_low = relationship("User", foreign_keys=[user_low_id])
    user_high = relationship("User", foreign_keys=[user_high_id])
    last_message = relationship(
        "Message",
        primaryjoin="foreign(Match.last_message_id) == Message.id",
        viewonly=True,
    )

    __table_args__ = (
        UniqueConstraint('user_low_id', 'user_high_id', name='_match_user_pair_uc'),
        CheckConstraint('user_low_id < user_high_id', name='ck_match_distinct_ordered_users'),
    )

    @staticmethod
    def normalize_pair(user_a_id: int, user_b_id: int) -> tuple[int, int]:
        if user_a_id == user_b_id:
            raise SelfActionError("A user cannot match with themselves.")
        return (user_a_id, user_b_id) if user_a_id < user_b_id else (user_b_id, user_a_id)

    @classmethod
    def for_pair(cls, user_a_id: int, user_b_id: int, **kwargs) -> "Match":
        low, high = cls.normalize_pair(user_a_id, user_b_id)
        return cls(user_low_id=low, user_high_id=high, **kwargs)

    @property
    def user_ids(self) -> tuple[int, int]:
        return (self.user_low_id, self.user_high_id)

    def has_participant(self, user_id: int) -> bool:
        return user_id in self.user_ids

    def other_user_id(self, user_id: int) -> int:
        return self.user_high_id if user_id == self.user_low_id else self.user_low_id

    def other_user(self, user_id: int):
        return self.user_high if user_id == self.user_low_id else self.user_low

    def __repr__(self):
        return f"<Match(id={self.id}, users=({self.user_low_id}, {self.user_high_id}), active={self.is_active})>"


class MatchEntry(Base):
    """One user's view of an active match (the user's ``matches`` list)."""
    __tablename__ = "match_entries"

    user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    matched_user_id = Column(Integer, ForeignKey("users.id", ondelete="CASCADE"), primary_key=True)
    match_id = Column(Integer, ForeignKey("matches.id", ondelete="CASCADE"), nullable=False, index=True)
    matched_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)

    user = relationship("User", foreign_keys=[user_id], back_populates="match_entries")
    matched_user = relationship("User", foreign_keys=[matched_user_id])
    match = relationship("Match")
