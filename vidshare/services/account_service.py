"""
Account lifecycle on top of fastapi-users.

Signup and login hand back a server-side access token in the response body.
Logout and account deletion destroy tokens, so a discarded token stops
working immediately.
"""

import logging

from fastapi import HTTPException, Request
from fastapi.security import OAuth2PasswordRequestForm
from fastapi_users import exceptions
from fastapi_users.authentication.strategy.db import DatabaseStrategy
from pydantic import ValidationError
from sqlalchemy import delete
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from ..auth.manager import UserManager
from ..auth.models import AccessToken, User
from ..auth.schemas import UserCreate, UserRead, UserUpdate
from ..db.crud import crud_channel, crud_comment, crud_video
from ..schemas.account import LoginRequest, SessionOut
from ..uploads import MediaStore, StoredUpload
from .channel_service import user_has_channel

logger = logging.getLogger(__name__)

AVATAR_FIELD = "avatar"


def _first_error(exc: ValidationError) -> str:
    error = exc.errors()[0]
    field = ".".join(str(part) for part in error.get("loc", ()))
    return f"{field}: {error.get('msg')}" if field else str(error.get("msg"))


def _ensure_self(user_id: str, user: User) -> None:
    if user_id != str(user.id):
        raise HTTPException(status_code=403, detail="You can only manage your own account")


async def _open_session(
    user: User, strategy: DatabaseStrategy, db_session: AsyncSession
) -> SessionOut:
    token = await strategy.write_token(user)
    return SessionOut(
        user=UserRead.model_validate(user),
        access_token=token,
        has_channel=await user_has_channel(str(user.id), db_session),
    )


async def signup(
    *,
    email: str,
    password: str,
    username: str | None,
    uploads: dict[str, StoredUpload],
    user_manager: UserManager,
    strategy: DatabaseStrategy,
    db_session: AsyncSession,
    media: MediaStore,
    request: Request | None = None,
) -> SessionOut:
    try:
        user_create = UserCreate(email=email, password=password, username=username)
    except ValidationError as exc:
        raise HTTPException(status_code=400, detail=_first_error(exc))

    try:
        user = await user_manager.create(user_create, safe=True, request=request)
    except exceptions.UserAlreadyExists:
        raise HTTPException(status_code=409, detail="User with this email already exists")
    except exceptions.InvalidPasswordException as exc:
        raise HTTPException(status_code=400, detail=exc.reason)

    if AVATAR_FIELD in uploads:
        avatar_url = media.save(uploads[AVATAR_FIELD])
        user = await user_manager.user_db.update(user, {"avatar_url": avatar_url})

    return await _open_session(user, strategy, db_session)


async def login(
    payload: LoginRequest,
    user_manager: UserManager,
    strategy: DatabaseStrategy,
    db_session: AsyncSession,
) -> SessionOut:
    credentials = OAuth2PasswordRequestForm(
        username=payload.email, password=payload.password
    )
    user = await user_manager.authenticate(credentials)
    if user is None or not user.is_active:
        raise HTTPException(status_code=401, detail="Invalid email or password")

    logger.info("User %s logged in", user.id)
    return await _open_session(user, strategy, db_session)


async def logout(user: User, token: str, strategy: DatabaseStrategy) -> None:
    await strategy.destroy_token(token, user)
    logger.info("User %s logged out", user.id)


async def get_user_by_id(user_id: str, user_manager: UserManager) -> User:
    try:
        parsed_id = user_manager.parse_id(user_id)
        return await user_manager.get(parsed_id)
    except (exceptions.InvalidID, exceptions.UserNotExists):
        raise HTTPException(status_code=404, detail="User not found")


async def update_account(
    *,
    user_id: str,
    user: User,
    username: str | None,
    email: str | None,
    password: str | None,
    uploads: dict[str, StoredUpload],
    user_manager: UserManager,
    media: MediaStore,
    request: Request | None = None,
) -> User:
    """
    Update the caller's own profile. Only the fields that were sent change.
    Returns the stored record so clients can replace their copy wholesale.
    """
    _ensure_self(user_id, user)

    changes = {"username": username, "email": email, "password": password}
    old_avatar = None
    if AVATAR_FIELD in uploads:
        old_avatar = user.avatar_url
        changes["avatar_url"] = media.save(uploads[AVATAR_FIELD])

    try:
        user_update = UserUpdate(**{k: v for k, v in changes.items() if v is not None})
    except ValidationError as exc:
        media.remove(changes.get("avatar_url"))
        raise HTTPException(status_code=400, detail=_first_error(exc))

    try:
        updated = await user_manager.update(user_update, user, safe=True, request=request)
    except exceptions.UserAlreadyExists:
        media.remove(changes.get("avatar_url"))
        raise HTTPException(status_code=409, detail="User with this email already exists")
    except exceptions.InvalidPasswordException as exc:
        media.remove(changes.get("avatar_url"))
        raise HTTPException(status_code=400, detail=exc.reason)
    except SQLAlchemyError:
        media.remove(changes.get("avatar_url"))
        raise

    if old_avatar is not None:
        media.remove(old_avatar)
    return updated


async def delete_account(
    *,
    user_id: str,
    user: User,
    user_manager: UserManager,
    db_session: AsyncSession,
    media: MediaStore,
    request: Request | None = None,
) -> None:
    """
    Delete the caller's account along with every session token, their channel,
    their videos and their comments.
    """
    _ensure_self(user_id, user)
    owner_id = str(user.id)

    references = [user.avatar_url]
    for video in await crud_video.get_videos(db_session, owner_id=owner_id):
        references.extend([video.video_url, video.thumbnail_url])

    await crud_comment.delete_comments_for_owner(db_session, owner_id)
    await crud_video.delete_videos_for_owner(db_session, owner_id)
    channel = await crud_channel.get_channels(db_session, owner_id=owner_id, first=True)
    if channel is not None:
        references.extend([channel.avatar_url, channel.banner_url])
        await db_session.delete(channel)
    await db_session.execute(delete(AccessToken).where(AccessToken.user_id == user.id))
    await db_session.commit()

    await user_manager.delete(user, request=request)
    for reference in references:
        media.remove(reference)
