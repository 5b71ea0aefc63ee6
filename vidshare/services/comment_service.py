from fastapi import HTTPException
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.models import User
from ..db.crud import crud_comment
from ..db.models.comment import Comment
from ..schemas.comment import CommentCreate, CommentUpdate
from .video_service import get_video_by_id


def _ensure_author(comment: Comment, user: User) -> None:
    if comment.owner_id != str(user.id):
        raise HTTPException(status_code=403, detail="You can only modify your own comments")


async def get_comment_by_id(comment_id: str, db_session: AsyncSession) -> Comment:
    comment = await crud_comment.get_comments(db_session, id=comment_id, first=True)
    if not comment:
        raise HTTPException(status_code=404, detail="Comment not found")
    return comment


async def add_comment(payload: CommentCreate, user: User, db_session: AsyncSession) -> Comment:
    video = await get_video_by_id(payload.video_id, db_session)
    comment = Comment(video_id=video.id, owner_id=str(user.id), text=payload.text)
    return await crud_comment.create_comment(db_session, comment)


async def get_comments_for_video(video_id: str, db_session: AsyncSession) -> list[Comment]:
    """Comments on a video, oldest first. Unknown videos are a 404."""
    await get_video_by_id(video_id, db_session)
    return await crud_comment.get_comments(db_session, video_id=video_id)


async def update_comment(
    comment_id: str, payload: CommentUpdate, user: User, db_session: AsyncSession
) -> Comment:
    comment = await get_comment_by_id(comment_id, db_session)
    _ensure_author(comment, user)
    comment.text = payload.text
    return await crud_comment.update_comment(db_session, comment)


async def delete_comment(comment_id: str, user: User, db_session: AsyncSession) -> str:
    comment = await get_comment_by_id(comment_id, db_session)
    _ensure_author(comment, user)
    await crud_comment.delete_comment(db_session, comment)
    return comment_id
