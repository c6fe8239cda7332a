from sqlalchemy import Boolean, Column, Integer, String, Text, Float, DateTime, JSON, Enum as SQLEnum
from sqlalchemy.orm import relationship
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .photo import UserPhoto
    from .swipe import Swipe
    from .match import MatchEntry

from campusmatch.db.base_class import Base
from campusmatch.utils.dates import utcnow
from campusmatch.utils.geo import is_unset_location
from .enums import Gender, InterestedIn

# (0, 0) is stored for users that never shared a location
UNSET_COORDINATE = 0.0


class User(Base):
    __tablename__ = "users"

    id = Column(Integer, primary_key=True, index=True)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False, index=True)
    is_online = Column(Boolean, default=False, nullable=False)
    last_active = Column(DateTime(timezone=True), default=utcnow)
    created_at = Column(DateTime(timezone=True), default=utcnow)
    updated_at = Column(DateTime(timezone=True), default=utcnow, onupdate=utcnow)

    # Profile
    name = Column(String(50), nullable=False)
    age = Column(Integer, nullable=False, index=True)
    gender = Column(SQLEnum(Gender, name="gender_enum"), nullable=False, index=True)
    interested_in = Column(SQLEnum(InterestedIn, name="interested_in_enum"), nullable=False)
    bio = Column(Text, nullable=False, default="")
    interests = Column(JSON, nullable=False, default=list)
    education = Column(String, nullable=False, default="")
    occupation = Column(String, nullable=False, default="")
    latitude = Column(Float, nullable=False, default=UNSET_COORDINATE)
    longitude = Column(Float, nullable=False, default=UNSET_COORDINATE)
    city = Column(String, nullable=False, default="")

    # Preferences
    age_min = Column(Integer, nullable=False, default=18)
    age_max = Column(Integer, nullable=False, default=50)
    max_distance = Column(Integer, nullable=False, default=50)  # km

    photos = relationship(
        "UserPhoto", back_populates="user", order_by="UserPhoto.position", cascade="all, delete-orphan"
    )
    swipes = relationship(
        "Swipe", foreign_keys="Swipe.actor_id", back_populates="actor",
        cascade="all, delete-orphan"
    )
    match_entries = relationship(
        "MatchEntry", foreign_keys="MatchEntry.user_id", back_populates="user",
        cascade="all, delete-orphan"
    )

    @property
    def has_location(self) -> bool:
        return not is_unset_location(self.latitude, self.longitude)

    @property
    def main_photo_url(self) -> str | None:
        """URL of the flagged main photo, falling back to the first one."""
        if not self.photos:
            return None
        main = next((photo for photo in self.photos if photo.is_main), None)
        return (main or self.photos[0]).url

    def __repr__(self):
        return f"<User(id={self.id}, email='{self.email}')>"
