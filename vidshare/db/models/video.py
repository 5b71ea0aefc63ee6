from __future__ import annotations
from typing import TYPE_CHECKING
from datetime import datetime, timezone
import uuid

from sqlalchemy import (
    String,
    Text,
    DateTime,
    Integer,
    ForeignKey,
    JSON,
    CheckConstraint,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship
from sqlalchemy.ext.mutable import MutableList
from ..base import Base
from .association_tables import video_tags

if TYPE_CHECKING:
    from .channel import Channel
    from .tag import Tag


class Video(Base):
    __tablename__ = "videos"
    __table_args__ = (CheckConstraint("views >= 0", name="ck_video_views_non_negative"),)

    id: Mapped[str] = mapped_column(
        String(36),
        primary_key=True,
        default=lambda: str(uuid.uuid4()),
        comment="UUID as string",
    )
    owner_id: Mapped[str] = mapped_column(String(36), nullable=False, index=True)
    channel_id: Mapped[str | None] = mapped_column(
        String(36), ForeignKey("channels.id", ondelete="CASCADE"), nullable=True, index=True
    )
    title: Mapped[str] = mapped_column(String(255), nullable=False)
    description: Mapped[str | None] = mapped_column(Text, nullable=True)
    video_url: Mapped[str] = mapped_column(String(512), nullable=False)
    thumbnail_url: Mapped[str | None] = mapped_column(String(512), nullable=True)

    views: Mapped[int] = mapped_column(
        Integer, default=0, server_default="0", nullable=False
    )
    # Use JSON for cross-database compatibility (works with both PostgreSQL and SQLite)
    # MutableList allows in-place modifications to be tracked by SQLAlchemy
    likes: Mapped[list[str]] = mapped_column(
        MutableList.as_mutable(JSON), default=list, nullable=False, server_default="[]"
    )

    created_at: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        nullable=False,
        index=True,
    )
    last_updated: Mapped[datetime] = mapped_column(
        DateTime(timezone=True),
        default=lambda: datetime.now(timezone.utc),
        onupdate=lambda: datetime.now(timezone.utc),
        nullable=False,
    )

    channel: Mapped["Channel"] = relationship(back_populates="videos")

    tags: Mapped[list["Tag"]] = relationship(
        secondary=video_tags,
        back_populates="videos",
        lazy="selectin",
        order_by="Tag.name",
    )

    def __repr__(self) -> str:
        return f"<Video(id={self.id}, title='{self.title}')>"
