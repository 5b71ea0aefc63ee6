import logging
from typing import Callable

from pydantic import BaseModel, ConfigDict

from .actions import Action
from .slices import auth, channel, video
from .slices.auth import AuthState
from .slices.channel import ChannelState
from .slices.video import VideoState

logger = logging.getLogger(__name__)

Listener = Callable[["AppState"], None]

REDUCERS = {
    auth.SLICE: auth.reducer,
    channel.SLICE: channel.reducer,
    video.SLICE: video.reducer,
}


class AppState(BaseModel):
    model_config = ConfigDict(frozen=True)

    auth: AuthState = AuthState()
    channel: ChannelState = ChannelState()
    video: VideoState = VideoState()


class Store:
    """
    Holds the application state. ``dispatch`` routes an action to its slice
    reducer, swaps in the new state and notifies subscribers.
    """

    def __init__(self, state: AppState | None = None):
        self._state = state or AppState()
        self._listeners: list[Listener] = []

    @property
    def state(self) -> AppState:
        return self._state

    def dispatch(self, action: Action) -> AppState:
        reducer = REDUCERS.get(action.slice)
        if reducer is None:
            raise ValueError(f"Unknown slice '{action.slice}'")
        current = getattr(self._state, action.slice)
        updated = reducer(current, action)
        if updated is not current:
            self._state = self._state.model_copy(update={action.slice: updated})
        logger.debug("%s %s/%s", type(action).__name__, action.slice, action.op)
        for listener in list(self._listeners):
            listener(self._state)
        return self._state

    def subscribe(self, listener: Listener) -> Callable[[], None]:
        """Register ``listener``; the returned callable removes it again."""
        self._listeners.append(listener)

        def unsubscribe() -> None:
            if listener in self._listeners:
                self._listeners.remove(listener)

        return unsubscribe
