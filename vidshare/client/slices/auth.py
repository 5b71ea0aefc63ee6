"""
Auth slice: the signed-in user, their session token and whether they own a
channel.
"""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ..actions import Action, Command, Fulfilled, Pending, Rejected
from ..gateway import ApiGateway, FileTuple, Ok, Result
from ..models import Session, User
from ..thunks import run_thunk

if TYPE_CHECKING:
    from ..store import Store

SLICE = "auth"


class AuthState(BaseModel):
    model_config = ConfigDict(frozen=True)

    user: User | None = None
    access_token: str | None = None
    status: bool = False
    has_channel: bool = False
    loading: bool = False
    error: str | None = None


def _signed_out(state: AuthState) -> AuthState:
    return state.model_copy(
        update={"user": None, "access_token": None, "status": False, "has_channel": False}
    )


def _signed_in(state: AuthState, session: Session) -> AuthState:
    return state.model_copy(
        update={
            "user": session.user,
            "access_token": session.access_token,
            "has_channel": session.has_channel,
            "status": True,
        }
    )


_FULFILLED = {
    "register": _signed_in,
    "login": _signed_in,
    "logout": lambda state, _: _signed_out(state),
    "get_user_data": lambda state, user: state.model_copy(update={"user": user}),
    "update_account": lambda state, user: state.model_copy(update={"user": user}),
    "delete_account": lambda state, _: _signed_out(state),
}


def reducer(state: AuthState, action: Action) -> AuthState:
    if isinstance(action, Pending):
        return state.model_copy(update={"loading": True, "error": None})
    if isinstance(action, Rejected):
        changes = {"loading": False, "error": action.error}
        if action.op == "login":
            changes["status"] = False
        return state.model_copy(update=changes)
    if isinstance(action, Fulfilled):
        state = state.model_copy(update={"loading": False})
        handler = _FULFILLED.get(action.op)
        return handler(state, action.payload) if handler else state
    if isinstance(action, Command) and action.op == "clear_error":
        return state.model_copy(update={"error": None})
    return state


def clear_error() -> Command:
    return Command(SLICE, "clear_error")


# --- thunks ---


def _session(result: Ok) -> Session:
    return Session.model_validate(result.data)


def _user(result: Ok) -> User:
    return User.model_validate(result.data)


async def register(
    store: "Store",
    api: ApiGateway,
    email: str,
    password: str,
    username: str | None = None,
    avatar: FileTuple | None = None,
) -> Result:
    result = await run_thunk(
        store,
        SLICE,
        "register",
        lambda: api.signup(email, password, username, avatar),
        fallback="Registration failed",
        payload=_session,
    )
    if isinstance(result, Ok):
        api.tokens.set(store.state.auth.access_token)
    return result


async def login(store: "Store", api: ApiGateway, email: str, password: str) -> Result:
    result = await run_thunk(
        store,
        SLICE,
        "login",
        lambda: api.login(email, password),
        fallback="Login failed",
        payload=_session,
    )
    if isinstance(result, Ok):
        api.tokens.set(store.state.auth.access_token)
    return result


async def logout(store: "Store", api: ApiGateway) -> Result:
    result = await run_thunk(
        store, SLICE, "logout", api.logout, fallback="Logout failed", payload=lambda _: None
    )
    if isinstance(result, Ok):
        api.tokens.clear()
    return result


async def get_user_data(store: "Store", api: ApiGateway, user_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "get_user_data",
        lambda: api.get_user(user_id),
        fallback="Failed to fetch user data",
        payload=_user,
    )


async def update_account(
    store: "Store",
    api: ApiGateway,
    user_id: str,
    *,
    username: str | None = None,
    email: str | None = None,
    password: str | None = None,
    avatar: FileTuple | None = None,
) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "update_account",
        lambda: api.update_account(
            user_id, username=username, email=email, password=password, avatar=avatar
        ),
        fallback="Failed to update account",
        payload=_user,
    )


async def delete_account(store: "Store", api: ApiGateway, user_id: str) -> Result:
    result = await run_thunk(
        store,
        SLICE,
        "delete_account",
        lambda: api.delete_account(user_id),
        fallback="Failed to delete account",
        payload=lambda ok: ok.message,
    )
    if isinstance(result, Ok):
        api.tokens.clear()
    return result
