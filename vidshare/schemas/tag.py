"""
Pydantic schemas for Tag entity validation and serialization.
"""

from datetime import datetime
from pydantic import BaseModel, Field, field_validator
from .base import BaseSchema


# --- Create Schema ---


class TagCreate(BaseModel):
    """Schema for creating a new tag."""

    name: str = Field(..., min_length=1, max_length=255, description="Tag name")

    @field_validator("name")
    @classmethod
    def normalize_name(cls, v: str) -> str:
        """Normalize tag name to lowercase and strip whitespace."""
        v = v.strip().lower()
        if not v:
            raise ValueError("Tag name cannot be blank")
        return v


# --- Output Schema ---


class TagOut(BaseSchema):
    """Schema for tag output."""

    id: str
    name: str
    created_at: datetime | None = None
