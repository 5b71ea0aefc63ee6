from typing import Literal, Any
from sqlalchemy import select, update, delete
from sqlalchemy.ext.asyncio import AsyncSession
from ..models.video import Video
from ..models.comment import Comment
from ..models.association_tables import video_tags
from .crud_base import (
    base_get,
    base_create,
    base_update,
    _validate_pagination,
    _validate_order_by_field,
    _validate_order_direction,
    _validate_filter_field,
)


async def get_videos(
    db: AsyncSession,
    *,
    id: str | list[str] | None = None,
    owner_id: str | None = None,
    channel_id: str | None = None,
    tag_id: str | None = None,
    q: str | None = None,
    # Pagination
    limit: int | None = None,
    offset: int = 0,
    # Ordering
    order_by: str = "created_at",
    order_direction: Literal["asc", "desc"] = "desc",
    # Return type control
    first: bool = False,
    **kwargs: Any,
) -> list[Video] | Video | None:
    """
    Retrieve videos with filtering, pagination, and ordering.

    Args:
        db: Database session
        id: Filter by video ID (single ID or list of IDs)
        owner_id: Filter by uploading user
        channel_id: Filter by channel
        tag_id: Only videos carrying this tag (JOIN on video_tags)
        q: Case-insensitive substring match on the title
        limit: Maximum number of results
        offset: Number of results to skip
        order_by: Field to order by (created_at, title, views, ...)
        order_direction: Sort direction ('asc' or 'desc')
        first: If True, return single Video or None instead of list
        **kwargs: Additional column equality filters

    Returns:
        - If first=True: Single Video instance or None
        - If first=False: List of Video instances (empty list if no matches)
    """
    _validate_pagination(limit, offset)
    _validate_order_direction(order_direction)
    _validate_order_by_field(Video, order_by)

    filters = {}
    if id is not None:
        filters["id"] = id
    if owner_id is not None:
        filters["owner_id"] = owner_id
    if channel_id is not None:
        filters["channel_id"] = channel_id
    for key, value in kwargs.items():
        if value is not None:
            filters[key] = value

    for field_name in filters.keys():
        _validate_filter_field(Video, field_name)

    query = select(Video)
    if tag_id is not None:
        query = query.join(video_tags, video_tags.c.video_id == Video.id).where(
            video_tags.c.tag_id == tag_id
        )
    if q is not None and q.strip():
        query = query.where(Video.title.ilike(f"%{q.strip()}%"))

    return await base_get(
        db,
        Video,
        filters=filters,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order_direction,
        first=first,
        query=query,
    )


async def create_video(db_session: AsyncSession, video_to_create: Video) -> Video:
    """
    Adds a new Video instance to the database and returns it refreshed.
    """
    return await base_create(db_session, video_to_create)


async def update_video(db: AsyncSession, video: Video) -> Video:
    """
    Persists changes on a video instance.

    Args:
        db: Database session
        video: The video instance with modified attributes

    Returns:
        The refreshed video instance
    """
    return await base_update(db, video)


async def increment_views(db: AsyncSession, video: Video) -> Video:
    """
    Atomically add one view and return the refreshed video.
    The increment happens in SQL so concurrent requests never lose a view.
    """
    await db.execute(
        update(Video).where(Video.id == video.id).values(views=Video.views + 1)
    )
    return await base_update(db, video)


async def delete_video(db_session: AsyncSession, video_to_delete: Video) -> None:
    """
    Deletes a video together with its comments.
    Tag links are removed by the ORM through the loaded `tags` collection.

    Args:
        db_session: Database session
        video_to_delete: The video instance to delete
    """
    await db_session.execute(delete(Comment).where(Comment.video_id == video_to_delete.id))
    await db_session.delete(video_to_delete)
    await db_session.commit()


async def delete_videos_for_owner(db_session: AsyncSession, owner_id: str) -> int:
    """
    Deletes every video uploaded by a user, with comments and tag links.
    Does not commit; used inside the account deletion transaction.

    Returns:
        Number of videos deleted
    """
    video_ids = select(Video.id).where(Video.owner_id == owner_id)
    await db_session.execute(delete(Comment).where(Comment.video_id.in_(video_ids)))
    await db_session.execute(delete(video_tags).where(video_tags.c.video_id.in_(video_ids)))
    result = await db_session.execute(delete(Video).where(Video.owner_id == owner_id))
    return result.rowcount
