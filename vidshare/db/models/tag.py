from __future__ import annotations
from typing import TYPE_CHECKING
from datetime import datetime, timezone
import uuid

from sqlalchemy import String, DateTime
from sqlalchemy.orm import Mapped, mapped_column, relationship
from ..base import Base
from .association_tables import video_tags

if TYPE_CHECKING:
    from .video import Video


class Tag(Base):
    __tablename__ = "tags"

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        index=True,
        default=lambda: str(uuid.uuid4()),
        comment="UUID as string",
    )
    name: Mapped[str] = mapped_column(String(255), nullable=False, unique=True, index=True)
    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True), default=lambda: datetime.now(timezone.utc)
    )

    videos: Mapped[list["Video"]] = relationship(
        secondary=video_tags, back_populates="tags", lazy="noload"
    )

    def __init__(self, **kwargs):
        """Initialize Tag and normalize name to lowercase for case-insensitive storage."""
        if "name" in kwargs:
            kwargs["name"] = kwargs["name"].strip().lower()
        super().__init__(**kwargs)
