from typing import Optional, List
from pydantic import BaseModel, EmailStr, Field, ConfigDict, model_validator
from datetime import datetime

from campusmatch.models.enums import Gender, InterestedIn


class Location(BaseModel):
    latitude: float = Field(0.0, ge=-90, le=90)
    longitude: float = Field(0.0, ge=-180, le=180)
    city: str = ""


class LocationUpdate(BaseModel):
    latitude: Optional[float] = Field(None, ge=-90, le=90)
    longitude: Optional[float] = Field(None, ge=-180, le=180)
    city: Optional[str] = Field(None, max_length=100)


class Photo(BaseModel):
    url: str
    is_main: bool = False
    model_config = ConfigDict(from_attributes=True)


class PhotoRequest(BaseModel):
    url: str = Field(..., min_length=1, max_length=500, examples=["/uploads/profile-1700000000-1234.jpg"])


class AgeRange(BaseModel):
    min: int = Field(18, ge=18, le=100)
    max: int = Field(50, ge=18, le=100)

    @model_validator(mode="after")
    def check_order(self) -> "AgeRange":
        if self.min > self.max:
            raise ValueError("age range minimum cannot exceed maximum")
        return self


class Profile(BaseModel):
    name: str
    age: int
    gender: Gender
    interested_in: InterestedIn
    bio: str = ""
    interests: List[str] = []
    education: str = ""
    occupation: str = ""
    location: Location
    photos: List[Photo] = []
    main_photo: Optional[str] = None


class Preferences(BaseModel):
    age_range: AgeRange
    max_distance: int


class UserPublic(BaseModel):
    """What other users get to see."""
    id: int
    profile: Profile
    is_online: bool = False
    last_active: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserPublic":
        # ``user.photos`` must be eagerly loaded
        return cls(
            id=user.id,
            profile=_profile_of(user),
            is_online=user.is_online,
            last_active=user.last_active,
        )


class UserDetail(UserPublic):
    """The account owner's own view."""
    email: EmailStr
    preferences: Preferences
    created_at: Optional[datetime] = None

    @classmethod
    def from_user(cls, user) -> "UserDetail":
        return cls(
            id=user.id,
            email=user.email,
            profile=_profile_of(user),
            preferences=Preferences(
                age_range=AgeRange(min=user.age_min, max=user.age_max),
                max_distance=user.max_distance,
            ),
            is_online=user.is_online,
            last_active=user.last_active,
            created_at=user.created_at,
        )


def _profile_of(user) -> Profile:
    return Profile(
        name=user.name,
        age=user.age,
        gender=user.gender,
        interested_in=user.interested_in,
        bio=user.bio or "",
        interests=list(user.interests or []),
        education=user.education or "",
        occupation=user.occupation or "",
        location=Location(latitude=user.latitude, longitude=user.longitude, city=user.city or ""),
        photos=[Photo.model_validate(photo) for photo in user.photos],
        main_photo=user.main_photo_url,
    )


class UserCreate(BaseModel):
    email: EmailStr = Field(..., examples=["priya@example.com"])
    password: str = Field(..., min_length=6)
    name: str = Field(..., min_length=1, max_length=50, examples=["Priya Sharma"])
    age: int = Field(..., ge=18, le=100)
    gender: Gender
    interested_in: InterestedIn
    bio: str = Field("", max_length=500)
    location: Optional[Location] = None


class ProfileUpdate(BaseModel):
    name: Optional[str] = Field(None, min_length=1, max_length=50)
    age: Optional[int] = Field(None, ge=18, le=100)
    bio: Optional[str] = Field(None, max_length=500)
    interests: Optional[List[str]] = None
    education: Optional[str] = Field(None, max_length=100)
    occupation: Optional[str] = Field(None, max_length=100)
    location: Optional[LocationUpdate] = None


class PreferencesUpdate(BaseModel):
    age_range: Optional[AgeRange] = None
    max_distance: Optional[int] = Field(None, ge=1, le=500)
    interested_in: Optional[InterestedIn] = None


class PreferencesResponse(BaseModel):
    success: bool = True
    preferences: Preferences
    interested_in: InterestedIn


class PhotosResponse(BaseModel):
    success: bool = True
    photos: List[Photo]


class DiscoveryCandidate(BaseModel):
    user: UserPublic
    distance_km: Optional[float] = None


class DiscoveryPage(BaseModel):
    success: bool = True
    candidates: List[DiscoveryCandidate]
    count: int
    page: int
    limit: int
