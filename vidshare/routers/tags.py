from fastapi import APIRouter, Query, status

from ..dependencies import CurrentUserDep, DBSessionDep
from ..schemas.base import Envelope
from ..schemas.tag import TagCreate, TagOut
from ..schemas.video import VideoOut
from ..services import tag_service

router = APIRouter(prefix="/tags", tags=["Tags"])


@router.get("/", response_model=Envelope[list[TagOut]])
async def list_tags(db_session: DBSessionDep):
    """
    List all tags, ordered by name.
    """
    return Envelope(data=await tag_service.get_all_tags(db_session))


@router.post("/", response_model=Envelope[TagOut], status_code=status.HTTP_201_CREATED)
async def create_tag(payload: TagCreate, db_session: DBSessionDep, user: CurrentUserDep):
    """
    Create a new tag.
    Tag names are automatically normalized to lowercase.
    """
    tag = await tag_service.create_new_tag(payload, db_session)
    return Envelope(data=tag, message="Tag created")


@router.get("/{tag_id}", response_model=Envelope[TagOut])
async def get_tag_by_id(tag_id: str, db_session: DBSessionDep):
    return Envelope(data=await tag_service.get_tag_by_id(tag_id, db_session))


@router.delete("/{tag_id}", response_model=Envelope[None])
async def delete_tag(tag_id: str, db_session: DBSessionDep, user: CurrentUserDep):
    """
    Delete a tag by its ID.
    This will also remove the tag from all associated videos.
    """
    await tag_service.delete_tag_by_id(tag_id, db_session)
    return Envelope(message="Tag deleted")


@router.get("/{tag_id}/videos", response_model=Envelope[list[VideoOut]])
async def get_videos_for_tag(
    tag_id: str,
    db_session: DBSessionDep,
    limit: int | None = Query(None, ge=1, le=200),
    offset: int = Query(0, ge=0),
):
    """
    Get all videos associated with a tag.
    """
    videos = await tag_service.get_videos_for_tag(
        tag_id, db_session, limit=limit, offset=offset
    )
    return Envelope(data=videos)
