"""
Tag management service.

Tags are shared across all users; videos link to them by name on publish/update.
"""

from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy.exc import IntegrityError

from ..db.crud import crud_tag, crud_video
from ..db.models.tag import Tag
from ..db.models.video import Video
from ..schemas.tag import TagCreate


async def get_all_tags(db_session: AsyncSession) -> list[Tag]:
    """All tags ordered by name."""
    return await crud_tag.get_tags(db_session, order_by="name", order_direction="asc")


async def get_tag_by_id(tag_id: str, db_session: AsyncSession) -> Tag:
    """
    Get a tag by its ID.

    Raises:
        HTTPException: If tag not found
    """
    tag = await crud_tag.get_tags(db_session, id=tag_id, first=True)
    if not tag:
        raise HTTPException(status_code=404, detail="Tag not found")
    return tag


async def create_new_tag(payload: TagCreate, db_session: AsyncSession) -> Tag:
    """
    Create a new tag.

    Raises:
        HTTPException: If tag with same name already exists
    """
    existing_tag = await crud_tag.get_tags(db_session, name=payload.name, first=True)
    if existing_tag:
        raise HTTPException(
            status_code=409, detail=f"Tag with name '{payload.name}' already exists"
        )

    new_tag = Tag(name=payload.name)
    try:
        return await crud_tag.create_tag(db_session, new_tag)
    except IntegrityError:
        await db_session.rollback()
        raise HTTPException(
            status_code=409, detail=f"Tag with name '{payload.name}' already exists"
        )


async def delete_tag_by_id(tag_id: str, db_session: AsyncSession) -> None:
    """
    Delete a tag by its ID. Videos carrying it simply lose the tag.
    """
    tag = await get_tag_by_id(tag_id, db_session)
    await crud_tag.delete_tag(db_session, tag)


async def get_videos_for_tag(
    tag_id: str, db_session: AsyncSession, limit: int | None = None, offset: int = 0
) -> list[Video]:
    """
    Videos carrying the tag, newest first.

    Raises:
        HTTPException: If tag not found
    """
    tag = await get_tag_by_id(tag_id, db_session)
    return await crud_video.get_videos(
        db_session, tag_id=tag.id, limit=limit, offset=offset
    )
