from typing import Annotated

from fastapi import Depends
from fastapi_users.authentication.strategy.db import DatabaseStrategy
from sqlalchemy.ext.asyncio import AsyncSession

from .db.session import get_db_session
from .auth.backend import get_database_strategy
from .auth.deps import current_active_user, current_active_user_token
from .auth.manager import UserManager, get_user_manager
from .auth.models import User
from .services import account_service, channel_service, video_service
from .uploads import MediaStoreDep, uploads_for


DBSessionDep = Annotated[AsyncSession, Depends(get_db_session)]

CurrentUserDep = Annotated[User, Depends(current_active_user)]

CurrentUserTokenDep = Annotated[tuple[User, str], Depends(current_active_user_token)]

UserManagerDep = Annotated[UserManager, Depends(get_user_manager)]

TokenStrategyDep = Annotated[DatabaseStrategy, Depends(get_database_strategy)]

VideoUploadsDep = uploads_for(video_service.VIDEO_FILE_FIELD, video_service.THUMBNAIL_FIELD)

AvatarUploadsDep = uploads_for(account_service.AVATAR_FIELD)

ChannelUploadsDep = uploads_for(channel_service.AVATAR_FIELD, channel_service.BANNER_FIELD)

__all__ = [
    "DBSessionDep",
    "CurrentUserDep",
    "CurrentUserTokenDep",
    "UserManagerDep",
    "TokenStrategyDep",
    "VideoUploadsDep",
    "AvatarUploadsDep",
    "ChannelUploadsDep",
    "MediaStoreDep",
]
