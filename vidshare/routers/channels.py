from fastapi import APIRouter, Form, status

from ..dependencies import ChannelUploadsDep, CurrentUserDep, DBSessionDep, MediaStoreDep
from ..schemas.base import Envelope
from ..schemas.channel import ChannelCreate, ChannelDetail, ChannelOut
from ..services import channel_service

router = APIRouter(prefix="/channel", tags=["Channels"])


@router.post(
    "/create", response_model=Envelope[ChannelOut], status_code=status.HTTP_201_CREATED
)
async def create_channel(
    payload: ChannelCreate, user: CurrentUserDep, db_session: DBSessionDep
):
    channel = await channel_service.create_channel(payload, user, db_session)
    return Envelope(data=channel, message="Channel created successfully!")


@router.get("/data/{channel_id}", response_model=Envelope[ChannelDetail])
async def get_channel(channel_id: str, db_session: DBSessionDep):
    """
    Channel page: the channel, its subscriber count and its videos.
    """
    detail = await channel_service.get_channel_detail(channel_id, db_session)
    return Envelope(data=detail)


@router.put("/update/{channel_id}", response_model=Envelope[ChannelOut])
async def update_channel(
    channel_id: str,
    user: CurrentUserDep,
    uploads: ChannelUploadsDep,
    media: MediaStoreDep,
    db_session: DBSessionDep,
    name: str | None = Form(None),
    description: str | None = Form(None),
):
    """
    Update a channel. ``avatar`` and ``banner`` uploads replace the stored images.
    """
    channel = await channel_service.update_channel(
        channel_id=channel_id,
        user=user,
        name=name,
        description=description,
        uploads=uploads,
        db_session=db_session,
        media=media,
    )
    return Envelope(data=channel, message="Channel updated successfully!")


@router.delete("/delete/{channel_id}", response_model=Envelope[None])
async def delete_channel(
    channel_id: str, user: CurrentUserDep, db_session: DBSessionDep, media: MediaStoreDep
):
    await channel_service.delete_channel_by_id(channel_id, user, db_session, media)
    return Envelope(message="Channel deleted successfully")


@router.post("/subscribe/{channel_id}", response_model=Envelope[ChannelOut])
async def subscribe(channel_id: str, user: CurrentUserDep, db_session: DBSessionDep):
    channel = await channel_service.subscribe(channel_id, user, db_session)
    return Envelope(data=channel, message="Subscribed successfully")


@router.post("/unsubscribe/{channel_id}", response_model=Envelope[ChannelOut])
async def unsubscribe(channel_id: str, user: CurrentUserDep, db_session: DBSessionDep):
    channel = await channel_service.unsubscribe(channel_id, user, db_session)
    return Envelope(data=channel, message="Unsubscribed successfully")
