from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ..actions import Action, Command, Fulfilled, Pending, Rejected
from ..gateway import ApiGateway, FileTuple, Ok, Result
from ..models import Channel
from ..thunks import run_thunk

if TYPE_CHECKING:
    from ..store import Store

SLICE = "channel"

CREATED_MESSAGE = "Channel created successfully!"
UPDATED_MESSAGE = "Channel updated successfully!"

# Operations whose pending phase also clears the last success message
_ANNOUNCED_OPS = {"create_channel", "update_channel", "delete_channel"}


class ChannelState(BaseModel):
    model_config = ConfigDict(frozen=True)

    channel: Channel | None = None
    success_message: str | None = None
    loading: bool = False
    error: str | None = None


def _with_subscribers(state: ChannelState, updated: Channel) -> ChannelState:
    """Subscription changes only touch the subscriber set of the channel on display."""
    if state.channel is None or state.channel.id != updated.id:
        return state
    channel = state.channel.model_copy(
        update={
            "subscribers": updated.subscribers,
            "subscriber_count": updated.subscriber_count,
        }
    )
    return state.model_copy(update={"channel": channel})


_FULFILLED = {
    "create_channel": lambda state, channel: state.model_copy(
        update={"channel": channel, "success_message": CREATED_MESSAGE}
    ),
    "get_channel": lambda state, channel: state.model_copy(update={"channel": channel}),
    "update_channel": lambda state, channel: state.model_copy(
        update={"channel": channel, "success_message": UPDATED_MESSAGE}
    ),
    "delete_channel": lambda state, _: state.model_copy(update={"channel": None}),
    "subscribe_channel": _with_subscribers,
    "unsubscribe_channel": _with_subscribers,
}


def reducer(state: ChannelState, action: Action) -> ChannelState:
    if isinstance(action, Pending):
        changes = {"loading": True, "error": None}
        if action.op in _ANNOUNCED_OPS:
            changes["success_message"] = None
        return state.model_copy(update=changes)
    if isinstance(action, Rejected):
        return state.model_copy(update={"loading": False, "error": action.error})
    if isinstance(action, Fulfilled):
        state = state.model_copy(update={"loading": False})
        handler = _FULFILLED.get(action.op)
        return handler(state, action.payload) if handler else state
    if isinstance(action, Command):
        if action.op == "clear_error":
            return state.model_copy(update={"error": None})
        if action.op == "clear_success_message":
            return state.model_copy(update={"success_message": None})
    return state


def clear_error() -> Command:
    return Command(SLICE, "clear_error")


def clear_success_message() -> Command:
    return Command(SLICE, "clear_success_message")


# --- thunks ---


def _channel(result: Ok) -> Channel:
    return Channel.model_validate(result.data)


async def create_channel(
    store: "Store", api: ApiGateway, name: str, description: str | None = None
) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "create_channel",
        lambda: api.create_channel(name, description),
        fallback="Failed to create channel",
        payload=_channel,
    )


async def get_channel(store: "Store", api: ApiGateway, channel_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "get_channel",
        lambda: api.get_channel(channel_id),
        fallback="Failed to fetch channel data",
        payload=_channel,
    )


async def update_channel(
    store: "Store",
    api: ApiGateway,
    channel_id: str,
    *,
    name: str | None = None,
    description: str | None = None,
    avatar: FileTuple | None = None,
    banner: FileTuple | None = None,
) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "update_channel",
        lambda: api.update_channel(
            channel_id, name=name, description=description, avatar=avatar, banner=banner
        ),
        fallback="Failed to update channel",
        payload=_channel,
    )


async def delete_channel(store: "Store", api: ApiGateway, channel_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "delete_channel",
        lambda: api.delete_channel(channel_id),
        fallback="Failed to delete channel",
        payload=lambda ok: ok.message,
    )


async def subscribe_channel(store: "Store", api: ApiGateway, channel_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "subscribe_channel",
        lambda: api.subscribe(channel_id),
        fallback="Failed to subscribe channel",
        payload=_channel,
    )


async def unsubscribe_channel(store: "Store", api: ApiGateway, channel_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "unsubscribe_channel",
        lambda: api.unsubscribe(channel_id),
        fallback="Failed to unsubscribe channel",
        payload=_channel,
    )
