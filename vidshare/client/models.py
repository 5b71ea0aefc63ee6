"""
Immutable client-side views of API records.

Unknown fields are kept (``extra="allow"``) so newer servers do not break
older clients. Set-like fields are tuples.
"""

from pydantic import BaseModel, ConfigDict, Field


class ClientModel(BaseModel):
    model_config = ConfigDict(frozen=True, extra="allow", populate_by_name=True)


class User(ClientModel):
    id: str
    email: str
    username: str | None = None
    avatar_url: str | None = None


class Tag(ClientModel):
    id: str
    name: str


class Video(ClientModel):
    id: str
    owner_id: str
    channel_id: str | None = None
    title: str
    description: str | None = None
    video_url: str
    thumbnail_url: str | None = None
    views: int = 0
    likes: tuple[str, ...] = ()
    tags: tuple[Tag, ...] = ()


class Channel(ClientModel):
    id: str
    owner_id: str
    name: str
    description: str | None = None
    avatar_url: str | None = None
    banner_url: str | None = None
    subscribers: tuple[str, ...] = ()
    subscriber_count: int = 0
    videos: tuple[Video, ...] = ()


class Session(ClientModel):
    user: User
    access_token: str = Field(..., alias="accessToken")
    has_channel: bool = Field(False, alias="hasChannel")


class LikeResult(ClientModel):
    """Body of a like/unlike response: who was added or removed, and the video."""

    user_id: str = Field(..., alias="userId")
    video: Video | None = Field(None, alias="data")
