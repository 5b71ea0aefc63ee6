from typing import Literal
from sqlalchemy import delete
from sqlalchemy.ext.asyncio import AsyncSession
from ..models.comment import Comment
from .crud_base import (
    base_get,
    base_create,
    base_update,
    base_delete,
    _validate_pagination,
    _validate_order_by_field,
    _validate_order_direction,
)


async def get_comments(
    db: AsyncSession,
    *,
    id: str | None = None,
    video_id: str | None = None,
    owner_id: str | None = None,
    limit: int | None = None,
    offset: int = 0,
    order_by: str = "created_at",
    order_direction: Literal["asc", "desc"] = "asc",
    first: bool = False,
) -> list[Comment] | Comment | None:
    """Retrieve comments, oldest first by default."""
    _validate_pagination(limit, offset)
    _validate_order_direction(order_direction)
    _validate_order_by_field(Comment, order_by)

    filters = {}
    if id is not None:
        filters["id"] = id
    if video_id is not None:
        filters["video_id"] = video_id
    if owner_id is not None:
        filters["owner_id"] = owner_id

    return await base_get(
        db,
        Comment,
        filters=filters,
        limit=limit,
        offset=offset,
        order_by=order_by,
        order_direction=order_direction,
        first=first,
    )


async def create_comment(db_session: AsyncSession, comment: Comment) -> Comment:
    return await base_create(db_session, comment)


async def update_comment(db_session: AsyncSession, comment: Comment) -> Comment:
    return await base_update(db_session, comment)


async def delete_comment(db_session: AsyncSession, comment: Comment) -> None:
    await base_delete(db_session, comment)


async def delete_comments_for_owner(db_session: AsyncSession, owner_id: str) -> int:
    """Delete every comment a user wrote. Does not commit."""
    result = await db_session.execute(delete(Comment).where(Comment.owner_id == owner_id))
    return result.rowcount
