from typing import Literal
from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession
from ..models.tag import Tag
from ..models.association_tables import video_tags
from ..models.video import Video
from .crud_base import (
    base_get,
    base_create,
    _validate_pagination,
    _validate_order_by_field,
    _validate_order_direction,
)


async def get_tags(
    db: AsyncSession,
    *,
    id: str | None = None,
    name: str | list[str] | None = None,
    # Pagination
    limit: int | None = None,
    offset: int = 0,
    # Ordering
    order_by: str = "name",
    order_direction: Literal["asc", "desc"] = "asc",
    # Return type control
    first: bool = False,
) -> list[Tag] | Tag | None:
    """
    Retrieve tags with filtering, pagination, and ordering.

    Args:
        db: Database session
        id: Filter by tag ID
        name: Filter by tag name or list of names (case-insensitive)
        limit: Maximum number of results
        offset: Number of results to skip
        order_by: Field to order by (name, created_at, id)
        order_direction: Sort direction ('asc' or 'desc')
        first: If True, return single Tag or None instead of list
    """
    _validate_pagination(limit, offset)
    _validate_order_direction(order_direction)
    _validate_order_by_field(Tag, order_by)

    filters = {}
    if id is not None:
        filters["id"] = id
    if name is not None:
        # Names are stored lowercase
        if isinstance(name, list):
            filters["name"] = [n.strip().lower() for n in name]
        else:
            filters["name"] = name.strip().lower()

    return await base_get(
        db,
        Tag,
        filters=filters,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order_direction,
        first=first,
    )


async def create_tag(db_session: AsyncSession, tag_to_create: Tag) -> Tag:
    """
    Adds a new Tag instance to the database.
    Tag name will be normalized to lowercase automatically by the Tag model.
    """
    return await base_create(db_session, tag_to_create)


async def get_or_create_tags(db_session: AsyncSession, names: list[str]) -> list[Tag]:
    """
    Resolve tag names to Tag rows, creating the missing ones.
    Idempotent: repeated names and names differing only in case map to one tag.
    Changes are flushed, not committed; the caller owns the transaction.
    """
    wanted: list[str] = []
    for raw in names:
        normalized = raw.strip().lower()
        if normalized and normalized not in wanted:
            wanted.append(normalized)
    if not wanted:
        return []

    existing = {tag.name: tag for tag in await get_tags(db_session, name=wanted)}
    tags = []
    for name in wanted:
        tag = existing.get(name)
        if tag is None:
            tag = Tag(name=name)
            db_session.add(tag)
        tags.append(tag)
    await db_session.flush()
    return tags


async def delete_tag(db_session: AsyncSession, tag: Tag) -> Tag:
    """
    Deletes a tag after detaching it from every video carrying it.
    """
    result = await db_session.execute(
        select(Video).join(video_tags, video_tags.c.video_id == Video.id).where(
            video_tags.c.tag_id == tag.id
        ).execution_options(populate_existing=True)
    )
    for video in result.scalars().all():
        if tag in video.tags:
            video.tags.remove(tag)
    await db_session.delete(tag)
    await db_session.commit()
    return tag
