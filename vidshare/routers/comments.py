from fastapi import APIRouter, status

from ..dependencies import CurrentUserDep, DBSessionDep
from ..schemas.base import Envelope
from ..schemas.comment import CommentCreate, CommentOut, CommentUpdate
from ..services import comment_service

router = APIRouter(prefix="/comments", tags=["Comments"])


@router.post("/add", response_model=Envelope[CommentOut], status_code=status.HTTP_201_CREATED)
async def add_comment(payload: CommentCreate, user: CurrentUserDep, db_session: DBSessionDep):
    comment = await comment_service.add_comment(payload, user, db_session)
    return Envelope(data=comment, message="Comment added")


@router.get("/video/{video_id}", response_model=Envelope[list[CommentOut]])
async def list_comments(video_id: str, db_session: DBSessionDep):
    comments = await comment_service.get_comments_for_video(video_id, db_session)
    return Envelope(data=comments)


@router.put("/update/{comment_id}", response_model=Envelope[CommentOut])
async def update_comment(
    comment_id: str, payload: CommentUpdate, user: CurrentUserDep, db_session: DBSessionDep
):
    comment = await comment_service.update_comment(comment_id, payload, user, db_session)
    return Envelope(data=comment, message="Comment updated")


@router.delete("/delete/{comment_id}", response_model=Envelope[None])
async def delete_comment(comment_id: str, user: CurrentUserDep, db_session: DBSessionDep):
    await comment_service.delete_comment(comment_id, user, db_session)
    return Envelope(message="Comment deleted")
