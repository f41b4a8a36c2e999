from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional, Union
from uuid import uuid4

from pydantic import BaseModel, Field


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class ItemType(str, Enum):
    ARTISTS = "artists"
    TRACKS = "tracks"


class TimeRange(str, Enum):
    SHORT_TERM = "short_term"
    MEDIUM_TERM = "medium_term"
    LONG_TERM = "long_term"


DEFAULT_TOP_ITEMS_LIMIT = 39


class TopItemsQuery(BaseModel):
    """
    Validated "top items" request.

    `authorization` is the raw credential as received (with or without the
    "Bearer " prefix). It is checked by the fetcher, not here, so that a
    missing credential is rejected before any upstream call is attempted.
    """

    item_type: ItemType
    time_range: TimeRange = TimeRange.MEDIUM_TERM
    limit: int = Field(default=DEFAULT_TOP_ITEMS_LIMIT, ge=1, le=50)
    offset: int = Field(default=0, ge=0)
    authorization: Optional[str] = None


@dataclass
class UserRecord:
    """
    One end-user linked to a Spotify account.

    - spotify_id    : Spotify user id, unique and never changed
    - access_token  : current short-lived token (None after logout)
    - refresh_token : long-lived token used to mint new access tokens
    """

    spotify_id: str
    display_name: str
    access_token: Optional[str] = None
    refresh_token: Optional[str] = None
    email: Optional[str] = None
    profile_image_url: Optional[str] = None
    id: str = field(default_factory=lambda: uuid4().hex)
    created_at: datetime = field(default_factory=utc_now)
    updated_at: datetime = field(default_factory=utc_now)


class UserProfile(BaseModel):
    """Public projection of a UserRecord (tokens are never exposed)."""

    id: str
    spotify_id: str
    display_name: str
    email: Optional[str] = None
    profile_image_url: Optional[str] = None

    @classmethod
    def from_record(cls, user: UserRecord) -> "UserProfile":
        return cls(
            id=user.id,
            spotify_id=user.spotify_id,
            display_name=user.display_name,
            email=user.email,
            profile_image_url=user.profile_image_url,
        )


class SpotifyProfile(BaseModel):
    """Subset of the Spotify /me payload used to create a UserRecord."""

    id: str
    display_name: Optional[str] = None
    email: Optional[str] = None
    image_url: Optional[str] = None


class TokenPair(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None


class ResolutionError(str, Enum):
    USER_NOT_FOUND = "user_not_found"
    INVALID_REFRESH_TOKEN = "invalid_refresh_token"
    INTERNAL_ERROR = "internal_error"


class TokenValidationResult(BaseModel):
    is_valid: bool
    new_access_token: Optional[str] = None
    user: Optional[UserProfile] = None
    error: Optional[ResolutionError] = None


class SimplifiedArtist(BaseModel):
    name: str
    popularity: Union[int, float]


class ArtistsList(BaseModel):
    id: int
    artists: List[SimplifiedArtist]
    average_popularity: int


class ProcessedArtistsResponse(BaseModel):
    lists: List[ArtistsList]
    original_total: int
    processed_at: datetime = Field(default_factory=utc_now)
