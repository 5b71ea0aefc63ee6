from fastapi import APIRouter, Form, Query, status

from ..dependencies import CurrentUserDep, DBSessionDep, MediaStoreDep, VideoUploadsDep
from ..schemas.base import Envelope
from ..schemas.video import (
    DeletedVideo,
    LikeEnvelope,
    LikeRequest,
    VideoOut,
    parse_tag_names,
)
from ..services import video_service

router = APIRouter(prefix="/videos", tags=["Videos"])


@router.get("/allVideo", response_model=Envelope[list[VideoOut]])
async def list_videos(
    db_session: DBSessionDep,
    q: str | None = Query(None, description="Case-insensitive title search"),
    tag: str | None = Query(None, description="Only videos carrying this tag name"),
    limit: int | None = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """
    List every published video, newest first.
    """
    videos = await video_service.get_all_videos(
        db_session=db_session, q=q, tag=tag, limit=limit, offset=offset
    )
    return Envelope(data=videos)


@router.get("/allUserVideo/{owner_id}", response_model=Envelope[list[VideoOut]])
async def list_user_videos(owner_id: str, db_session: DBSessionDep):
    videos = await video_service.get_videos_for_owner(owner_id, db_session)
    return Envelope(data=videos)


@router.get("/videoData/{video_id}", response_model=Envelope[VideoOut])
async def get_video(video_id: str, db_session: DBSessionDep):
    video = await video_service.get_video_by_id(video_id, db_session)
    return Envelope(data=video)


@router.post(
    "/publish", response_model=Envelope[VideoOut], status_code=status.HTTP_201_CREATED
)
async def publish_video(
    user: CurrentUserDep,
    uploads: VideoUploadsDep,
    media: MediaStoreDep,
    db_session: DBSessionDep,
    title: str | None = Form(None),
    description: str | None = Form(None),
    tags: str | None = Form(None, description="Comma separated tag names"),
):
    """
    Publish a video. Expects a ``videoFile`` upload and an optional ``thumbnail``.
    """
    video = await video_service.publish_video(
        user=user,
        title=title,
        description=description,
        tag_names=parse_tag_names(tags),
        uploads=uploads,
        db_session=db_session,
        media=media,
    )
    return Envelope(data=video, message="Video published successfully")


@router.put("/update/{video_id}", response_model=Envelope[VideoOut])
async def update_video(
    video_id: str,
    user: CurrentUserDep,
    uploads: VideoUploadsDep,
    media: MediaStoreDep,
    db_session: DBSessionDep,
    title: str | None = Form(None),
    description: str | None = Form(None),
    tags: str | None = Form(None, description="Comma separated tag names"),
):
    video = await video_service.update_video(
        video_id=video_id,
        user=user,
        title=title,
        description=description,
        tag_names=parse_tag_names(tags),
        uploads=uploads,
        db_session=db_session,
        media=media,
    )
    return Envelope(data=video, message="Video updated successfully")


@router.delete("/delete/{video_id}", response_model=Envelope[DeletedVideo])
async def delete_video(
    video_id: str, user: CurrentUserDep, db_session: DBSessionDep, media: MediaStoreDep
):
    deleted_id = await video_service.delete_video_by_id(video_id, user, db_session, media)
    return Envelope(data=DeletedVideo(id=deleted_id), message="Video deleted successfully")


@router.put("/incrementView/{video_id}", response_model=Envelope[VideoOut])
async def increment_view(video_id: str, db_session: DBSessionDep):
    video = await video_service.increment_view(video_id, db_session)
    return Envelope(data=video)


@router.post("/like", response_model=LikeEnvelope)
async def like_video(payload: LikeRequest, user: CurrentUserDep, db_session: DBSessionDep):
    video = await video_service.like_video(payload, user, db_session)
    return LikeEnvelope(data=video, user_id=payload.user_id, message="Video liked")


@router.post("/removelike", response_model=LikeEnvelope)
async def remove_like(payload: LikeRequest, user: CurrentUserDep, db_session: DBSessionDep):
    video = await video_service.remove_like_video(payload, user, db_session)
    return LikeEnvelope(data=video, user_id=payload.user_id, message="Like removed")
