import logging

from fastapi import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.models import User
from ..db.crud import crud_channel, crud_tag, crud_video
from ..db.models.video import Video
from ..schemas.video import LikeRequest
from ..uploads import MediaStore, StoredUpload

logger = logging.getLogger(__name__)

VIDEO_FILE_FIELD = "videoFile"
THUMBNAIL_FIELD = "thumbnail"


def _ensure_owner(video: Video, user: User) -> None:
    if video.owner_id != str(user.id):
        raise HTTPException(status_code=403, detail="You can only modify your own videos")


def _ensure_acting_user(payload: LikeRequest, user: User) -> None:
    if payload.user_id != str(user.id):
        raise HTTPException(status_code=403, detail="You can only like as yourself")


async def get_video_by_id(video_id: str, db_session: AsyncSession) -> Video:
    video = await crud_video.get_videos(db_session, id=video_id, first=True)
    if not video:
        raise HTTPException(status_code=404, detail="Video not found")
    return video


async def get_all_videos(
    db_session: AsyncSession,
    q: str | None = None,
    tag: str | None = None,
    limit: int | None = None,
    offset: int = 0,
) -> list[Video]:
    """
    All videos, newest first.

    Args:
        db_session: Database session
        q: Case-insensitive title search
        tag: Only videos carrying this tag name
        limit: Maximum number of videos to return (None = all)
        offset: Number of videos to skip
    """
    tag_id = None
    if tag is not None:
        found = await crud_tag.get_tags(db_session, name=tag, first=True)
        if found is None:
            return []
        tag_id = found.id

    return await crud_video.get_videos(
        db_session, q=q, tag_id=tag_id, limit=limit, offset=offset
    )


async def get_videos_for_owner(owner_id: str, db_session: AsyncSession) -> list[Video]:
    return await crud_video.get_videos(db_session, owner_id=owner_id)


async def publish_video(
    *,
    user: User,
    title: str | None,
    description: str | None,
    tag_names: list[str] | None,
    uploads: dict[str, StoredUpload],
    db_session: AsyncSession,
    media: MediaStore,
) -> Video:
    """
    Publish a new video for ``user``.

    Title and the ``videoFile`` upload are checked before anything is written.
    The video is attached to the user's channel when they have one.
    """
    title = (title or "").strip()
    video_file = uploads.get(VIDEO_FILE_FIELD)
    if not title or video_file is None:
        raise HTTPException(status_code=400, detail="Title and video file are required")

    owner_id = str(user.id)
    channel = await crud_channel.get_channels(db_session, owner_id=owner_id, first=True)

    thumbnail = uploads.get(THUMBNAIL_FIELD)
    video_url = media.save(video_file)
    thumbnail_url = media.save(thumbnail) if thumbnail is not None else None

    new_video = Video(
        owner_id=owner_id,
        channel_id=channel.id if channel else None,
        title=title,
        description=description,
        video_url=video_url,
        thumbnail_url=thumbnail_url,
        views=0,
        likes=[],
    )
    try:
        if tag_names:
            new_video.tags = await crud_tag.get_or_create_tags(db_session, tag_names)
        created = await crud_video.create_video(db_session, new_video)
    except SQLAlchemyError:
        await db_session.rollback()
        media.remove(video_url)
        media.remove(thumbnail_url)
        raise

    logger.info("User %s published video %s", owner_id, created.id)
    return created


async def update_video(
    *,
    video_id: str,
    user: User,
    title: str | None,
    description: str | None,
    tag_names: list[str] | None,
    uploads: dict[str, StoredUpload],
    db_session: AsyncSession,
    media: MediaStore,
) -> Video:
    """
    Update a video's details. Only the fields that were sent change; a new
    thumbnail or video file replaces the stored one.
    """
    video = await get_video_by_id(video_id, db_session)
    _ensure_owner(video, user)

    if title is not None:
        title = title.strip()
        if not title:
            raise HTTPException(status_code=400, detail="Title cannot be empty")
        video.title = title
    if description is not None:
        video.description = description
    if tag_names is not None:
        video.tags = await crud_tag.get_or_create_tags(db_session, tag_names)

    replaced = []
    added = []
    if VIDEO_FILE_FIELD in uploads:
        replaced.append(video.video_url)
        video.video_url = media.save(uploads[VIDEO_FILE_FIELD])
        added.append(video.video_url)
    if THUMBNAIL_FIELD in uploads:
        replaced.append(video.thumbnail_url)
        video.thumbnail_url = media.save(uploads[THUMBNAIL_FIELD])
        added.append(video.thumbnail_url)

    try:
        updated = await crud_video.update_video(db_session, video)
    except SQLAlchemyError:
        await db_session.rollback()
        for reference in added:
            media.remove(reference)
        raise
    for reference in replaced:
        media.remove(reference)
    return updated


async def delete_video_by_id(
    video_id: str, user: User, db_session: AsyncSession, media: MediaStore
) -> str:
    """
    Deletes a video owned by ``user``. Returns the deleted id so callers can
    drop it from any cached listing.
    """
    video_to_delete = await get_video_by_id(video_id, db_session)
    _ensure_owner(video_to_delete, user)

    references = [video_to_delete.video_url, video_to_delete.thumbnail_url]
    await crud_video.delete_video(db_session, video_to_delete)
    for reference in references:
        media.remove(reference)

    logger.info("User %s deleted video %s", user.id, video_id)
    return video_id


async def increment_view(video_id: str, db_session: AsyncSession) -> Video:
    video = await get_video_by_id(video_id, db_session)
    return await crud_video.increment_views(db_session, video)


async def like_video(payload: LikeRequest, user: User, db_session: AsyncSession) -> Video:
    """Add the user to the like set. Liking twice leaves a single membership."""
    _ensure_acting_user(payload, user)
    video = await get_video_by_id(payload.video_id, db_session)
    if payload.user_id not in video.likes:
        video.likes.append(payload.user_id)
        video = await crud_video.update_video(db_session, video)
    return video


async def remove_like_video(
    payload: LikeRequest, user: User, db_session: AsyncSession
) -> Video:
    """Remove the user from the like set. Removing an absent like is a no-op."""
    _ensure_acting_user(payload, user)
    video = await get_video_by_id(payload.video_id, db_session)
    if payload.user_id in video.likes:
        video.likes.remove(payload.user_id)
        video = await crud_video.update_video(db_session, video)
    return video
