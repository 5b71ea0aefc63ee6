from pydantic import BaseModel, ConfigDict, Field
from datetime import datetime
from .base import BaseSchema, Envelope
from .tag import TagOut

# --- Input Schemas ---


class LikeRequest(BaseModel):
    """Body of /like and /removelike."""

    model_config = ConfigDict(populate_by_name=True)

    video_id: str = Field(..., alias="videoId", min_length=1)
    user_id: str = Field(..., alias="userId", min_length=1)


def parse_tag_names(raw: str | None) -> list[str] | None:
    """Split a comma separated form value into tag names; None means "unchanged"."""
    if raw is None:
        return None
    return [name.strip() for name in raw.split(",") if name.strip()]


# --- Output Schema ---


class VideoOut(BaseSchema):
    """Schema for returning a video from the API."""

    id: str
    owner_id: str
    channel_id: str | None
    title: str
    description: str | None
    video_url: str
    thumbnail_url: str | None
    views: int
    likes: list[str]
    tags: list[TagOut] = []
    created_at: datetime
    last_updated: datetime


class DeletedVideo(BaseModel):
    id: str


class LikeEnvelope(Envelope[VideoOut]):
    """Like/unlike response; ``userId`` echoes the member added or removed."""

    model_config = ConfigDict(populate_by_name=True)

    user_id: str = Field(..., alias="userId")
