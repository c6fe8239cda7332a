# flake8: noqa
from .common import ActionResponse, ErrorResponse
from .user import (
    Location, LocationUpdate, Photo, PhotoRequest, AgeRange, Profile, Preferences,
    UserPublic, UserDetail, UserCreate, ProfileUpdate, PreferencesUpdate,
    PreferencesResponse, PhotosResponse, DiscoveryCandidate, DiscoveryPage
)
from .message import MessageCreate, MessageRead, MessageSent, MessageList, MarkReadResult, UnreadCount
from .match import MatchRead, MatchList, MatchDetail, LikeResult
from .token import Token, TokenWithUser, TokenPayload
