from typing import Literal
from sqlalchemy import select, delete
from sqlalchemy.ext.asyncio import AsyncSession
from ..models.channel import Channel
from ..models.comment import Comment
from ..models.video import Video
from .crud_base import (
    base_get,
    base_create,
    base_update,
    _validate_pagination,
    _validate_order_by_field,
    _validate_order_direction,
)


async def get_channels(
    db: AsyncSession,
    *,
    id: str | None = None,
    owner_id: str | None = None,
    # Pagination
    limit: int | None = None,
    offset: int = 0,
    # Ordering
    order_by: str = "created_at",
    order_direction: Literal["asc", "desc"] = "desc",
    # Return type control
    first: bool = False,
) -> list[Channel] | Channel | None:
    """
    Retrieve channels with filtering, pagination, and ordering.

    Args:
        db: Database session
        id: Filter by channel ID
        owner_id: Filter by owning user (at most one match)
        limit: Maximum number of results
        offset: Number of results to skip
        order_by: Field to order by
        order_direction: Sort direction ('asc' or 'desc')
        first: If True, return single Channel or None instead of list
    """
    _validate_pagination(limit, offset)
    _validate_order_direction(order_direction)
    _validate_order_by_field(Channel, order_by)

    filters = {}
    if id is not None:
        filters["id"] = id
    if owner_id is not None:
        filters["owner_id"] = owner_id

    return await base_get(
        db,
        Channel,
        filters=filters,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order_direction,
        first=first,
    )


async def create_channel(db_session: AsyncSession, channel_to_create: Channel) -> Channel:
    """
    Adds a new Channel instance to the database.
    """
    return await base_create(db_session, channel_to_create)


async def update_channel(db_session: AsyncSession, channel: Channel) -> Channel:
    return await base_update(db_session, channel)


async def delete_channel(db_session: AsyncSession, channel_to_delete: Channel) -> None:
    """
    Deletes a channel. Its videos go with it through the ORM cascade;
    their comments are removed first.
    """
    video_ids = select(Video.id).where(Video.channel_id == channel_to_delete.id)
    await db_session.execute(delete(Comment).where(Comment.video_id.in_(video_ids)))
    await db_session.delete(channel_to_delete)
    await db_session.commit()
