from pydantic import BaseModel, Field, field_validator
from datetime import datetime
from .base import BaseSchema
from .video import VideoOut

# --- Input Schemas ---


class ChannelCreate(BaseModel):
    """A user opens their channel with a display name and optional description."""

    name: str = Field(..., min_length=1, max_length=255)
    description: str | None = None

    @field_validator("name")
    @classmethod
    def _strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Channel name cannot be blank")
        return v


# --- Output Schema ---


class ChannelOut(BaseSchema):
    """Schema for returning a channel from the API."""

    id: str
    owner_id: str
    name: str
    description: str | None
    avatar_url: str | None
    banner_url: str | None
    subscribers: list[str]
    subscriber_count: int
    created_at: datetime
    last_updated: datetime


class ChannelDetail(ChannelOut):
    """Channel page payload: the channel plus its published videos."""

    videos: list[VideoOut] = []
