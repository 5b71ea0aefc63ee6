from fastapi import APIRouter, Form, Request, Response, status

from ..auth.backend import ACCESS_TOKEN_COOKIE
from ..auth.schemas import UserRead
from ..core.config import settings
from ..dependencies import (
    AvatarUploadsDep,
    CurrentUserDep,
    CurrentUserTokenDep,
    DBSessionDep,
    MediaStoreDep,
    TokenStrategyDep,
    UserManagerDep,
)
from ..schemas.account import LoginRequest, SessionOut
from ..schemas.base import Envelope
from ..services import account_service

router = APIRouter(prefix="/account", tags=["Account"])


def _set_session_cookie(response: Response, token: str) -> None:
    response.set_cookie(
        ACCESS_TOKEN_COOKIE,
        token,
        max_age=settings.ACCESS_TOKEN_LIFETIME_SECONDS,
        httponly=True,
        secure=settings.COOKIE_SECURE,
        samesite="lax",
    )


@router.post(
    "/signup", response_model=Envelope[SessionOut], status_code=status.HTTP_201_CREATED
)
async def signup(
    request: Request,
    response: Response,
    uploads: AvatarUploadsDep,
    media: MediaStoreDep,
    user_manager: UserManagerDep,
    strategy: TokenStrategyDep,
    db_session: DBSessionDep,
    email: str = Form(...),
    password: str = Form(...),
    username: str | None = Form(None),
):
    """
    Create an account. An optional ``avatar`` file becomes the profile picture.
    The new session token is returned in the body and set as a cookie.
    """
    session = await account_service.signup(
        email=email,
        password=password,
        username=username,
        uploads=uploads,
        user_manager=user_manager,
        strategy=strategy,
        db_session=db_session,
        media=media,
        request=request,
    )
    _set_session_cookie(response, session.access_token)
    return Envelope(data=session, message="Account created successfully")


@router.post("/login", response_model=Envelope[SessionOut])
async def login(
    payload: LoginRequest,
    response: Response,
    user_manager: UserManagerDep,
    strategy: TokenStrategyDep,
    db_session: DBSessionDep,
):
    session = await account_service.login(payload, user_manager, strategy, db_session)
    _set_session_cookie(response, session.access_token)
    return Envelope(data=session, message="Logged in successfully")


@router.post("/logout", response_model=Envelope[None])
async def logout(
    response: Response, user_token: CurrentUserTokenDep, strategy: TokenStrategyDep
):
    user, token = user_token
    await account_service.logout(user, token, strategy)
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return Envelope(message="Logged out successfully")


@router.get("/userData/{user_id}", response_model=Envelope[UserRead])
async def get_user_data(user_id: str, user_manager: UserManagerDep):
    user = await account_service.get_user_by_id(user_id, user_manager)
    return Envelope(data=UserRead.model_validate(user))


@router.put("/update/{user_id}", response_model=Envelope[UserRead])
async def update_account(
    user_id: str,
    request: Request,
    user: CurrentUserDep,
    uploads: AvatarUploadsDep,
    media: MediaStoreDep,
    user_manager: UserManagerDep,
    username: str | None = Form(None),
    email: str | None = Form(None),
    password: str | None = Form(None),
):
    updated = await account_service.update_account(
        user_id=user_id,
        user=user,
        username=username,
        email=email,
        password=password,
        uploads=uploads,
        user_manager=user_manager,
        media=media,
        request=request,
    )
    return Envelope(data=UserRead.model_validate(updated), message="Account updated successfully")


@router.delete("/delete/{user_id}", response_model=Envelope[None])
async def delete_account(
    user_id: str,
    request: Request,
    response: Response,
    user: CurrentUserDep,
    user_manager: UserManagerDep,
    db_session: DBSessionDep,
    media: MediaStoreDep,
):
    await account_service.delete_account(
        user_id=user_id,
        user=user,
        user_manager=user_manager,
        db_session=db_session,
        media=media,
        request=request,
    )
    response.delete_cookie(ACCESS_TOKEN_COOKIE)
    return Envelope(message="Account deleted successfully")
