import logging

from fastapi import HTTPException
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.models import User
from ..db.crud import crud_channel, crud_video
from ..db.models.channel import Channel
from ..schemas.channel import ChannelCreate, ChannelDetail, ChannelOut
from ..schemas.video import VideoOut
from ..uploads import MediaStore, StoredUpload

logger = logging.getLogger(__name__)

AVATAR_FIELD = "avatar"
BANNER_FIELD = "banner"


def _ensure_owner(channel: Channel, user: User) -> None:
    if channel.owner_id != str(user.id):
        raise HTTPException(status_code=403, detail="You can only modify your own channel")


async def get_channel_by_id(channel_id: str, db_session: AsyncSession) -> Channel:
    channel = await crud_channel.get_channels(db_session, id=channel_id, first=True)
    if not channel:
        raise HTTPException(status_code=404, detail="Channel not found")
    return channel


async def get_channel_detail(channel_id: str, db_session: AsyncSession) -> ChannelDetail:
    """The channel together with its published videos, newest first."""
    channel = await get_channel_by_id(channel_id, db_session)
    videos = await crud_video.get_videos(db_session, channel_id=channel.id)
    return ChannelDetail(
        **ChannelOut.model_validate(channel).model_dump(),
        videos=[VideoOut.model_validate(video) for video in videos],
    )


async def user_has_channel(user_id: str, db_session: AsyncSession) -> bool:
    channel = await crud_channel.get_channels(db_session, owner_id=user_id, first=True)
    return channel is not None


async def create_channel(
    channel_data: ChannelCreate, user: User, db_session: AsyncSession
) -> Channel:
    """
    Opens the publishing channel for ``user``. A user can own at most one channel.
    Videos the user already published are not moved into it.
    """
    owner_id = str(user.id)
    if await user_has_channel(owner_id, db_session):
        raise HTTPException(status_code=409, detail="User already has a channel")

    new_channel = Channel(
        owner_id=owner_id,
        name=channel_data.name,
        description=channel_data.description,
        subscribers=[],
    )
    try:
        created = await crud_channel.create_channel(db_session, new_channel)
    except IntegrityError:
        await db_session.rollback()
        raise HTTPException(status_code=409, detail="User already has a channel")

    logger.info("User %s created channel %s", owner_id, created.id)
    return created


async def update_channel(
    *,
    channel_id: str,
    user: User,
    name: str | None,
    description: str | None,
    uploads: dict[str, StoredUpload],
    db_session: AsyncSession,
    media: MediaStore,
) -> Channel:
    channel = await get_channel_by_id(channel_id, db_session)
    _ensure_owner(channel, user)

    if name is not None:
        name = name.strip()
        if not name:
            raise HTTPException(status_code=400, detail="Channel name cannot be empty")
        channel.name = name
    if description is not None:
        channel.description = description

    replaced = []
    added = []
    if AVATAR_FIELD in uploads:
        replaced.append(channel.avatar_url)
        channel.avatar_url = media.save(uploads[AVATAR_FIELD])
        added.append(channel.avatar_url)
    if BANNER_FIELD in uploads:
        replaced.append(channel.banner_url)
        channel.banner_url = media.save(uploads[BANNER_FIELD])
        added.append(channel.banner_url)

    try:
        updated = await crud_channel.update_channel(db_session, channel)
    except SQLAlchemyError:
        await db_session.rollback()
        for reference in added:
            media.remove(reference)
        raise
    for reference in replaced:
        media.remove(reference)
    return updated


async def delete_channel_by_id(
    channel_id: str, user: User, db_session: AsyncSession, media: MediaStore
) -> None:
    """
    Deletes a channel owned by ``user``. All videos published through it are deleted too.
    """
    channel = await get_channel_by_id(channel_id, db_session)
    _ensure_owner(channel, user)

    references = [channel.avatar_url, channel.banner_url]
    for video in await crud_video.get_videos(db_session, channel_id=channel.id):
        references.extend([video.video_url, video.thumbnail_url])

    await crud_channel.delete_channel(db_session, channel)
    for reference in references:
        media.remove(reference)
    logger.info("User %s deleted channel %s", user.id, channel_id)


async def subscribe(channel_id: str, user: User, db_session: AsyncSession) -> Channel:
    """Add the user to the subscriber set; subscribing twice is a no-op."""
    channel = await get_channel_by_id(channel_id, db_session)
    subscriber_id = str(user.id)
    if channel.owner_id == subscriber_id:
        raise HTTPException(
            status_code=400, detail="You cannot subscribe to your own channel"
        )
    if subscriber_id not in channel.subscribers:
        channel.subscribers.append(subscriber_id)
        channel = await crud_channel.update_channel(db_session, channel)
    return channel


async def unsubscribe(channel_id: str, user: User, db_session: AsyncSession) -> Channel:
    """Remove the user from the subscriber set; unsubscribing when absent is a no-op."""
    channel = await get_channel_by_id(channel_id, db_session)
    subscriber_id = str(user.id)
    if subscriber_id in channel.subscribers:
        channel.subscribers.remove(subscriber_id)
        channel = await crud_channel.update_channel(db_session, channel)
    return channel
