from datetime import datetime
from pydantic import BaseModel, ConfigDict, Field, field_validator
from .base import BaseSchema


class CommentCreate(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    video_id: str = Field(..., alias="videoId", min_length=1)
    text: str = Field(..., max_length=5000)

    @field_validator("text")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment text cannot be blank")
        return v


class CommentUpdate(BaseModel):
    text: str = Field(..., max_length=5000)

    @field_validator("text")
    @classmethod
    def _non_blank(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Comment text cannot be blank")
        return v


class CommentOut(BaseSchema):
    id: str
    video_id: str
    owner_id: str
    text: str
    created_at: datetime
    last_updated: datetime
