"""
Authentication backends.

Tokens are stored server-side (``access_tokens`` table) so logging out or
deleting an account really invalidates them. The same token is accepted as a
bearer header or as the ``accessToken`` cookie.
"""

from fastapi import Depends
from fastapi_users.authentication import (
    AuthenticationBackend,
    BearerTransport,
    CookieTransport,
)
from fastapi_users.authentication.strategy.db import DatabaseStrategy
from fastapi_users_db_sqlalchemy.access_token import SQLAlchemyAccessTokenDatabase

from vidshare.auth.models import AccessToken
from vidshare.core.config import settings
from vidshare.db.session import get_db_session

ACCESS_TOKEN_COOKIE = "accessToken"

bearer_transport = BearerTransport(tokenUrl=f"{settings.API_PREFIX.lstrip('/')}/account/login")

cookie_transport = CookieTransport(
    cookie_name=ACCESS_TOKEN_COOKIE,
    cookie_max_age=settings.ACCESS_TOKEN_LIFETIME_SECONDS,
    cookie_secure=settings.COOKIE_SECURE,
)


async def get_access_token_db(session=Depends(get_db_session)):
    yield SQLAlchemyAccessTokenDatabase(session, AccessToken)


def get_database_strategy(
    access_token_db: SQLAlchemyAccessTokenDatabase = Depends(get_access_token_db),
) -> DatabaseStrategy:
    return DatabaseStrategy(
        access_token_db, lifetime_seconds=settings.ACCESS_TOKEN_LIFETIME_SECONDS
    )


bearer_backend = AuthenticationBackend(
    name="bearer",
    transport=bearer_transport,
    get_strategy=get_database_strategy,
)

cookie_backend = AuthenticationBackend(
    name="cookie",
    transport=cookie_transport,
    get_strategy=get_database_strategy,
)

auth_backends = [bearer_backend, cookie_backend]
