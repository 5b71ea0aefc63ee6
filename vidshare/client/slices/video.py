"""
Video slice: the full listing, the signed-in user's uploads and the video
currently open.

Likes only ever change ``video.likes``. The listing keeps whatever likes it
was fetched with until the next ``fetch_all_videos``.
"""

from typing import TYPE_CHECKING

from pydantic import BaseModel, ConfigDict

from ..actions import Action, Command, Fulfilled, Pending, Rejected
from ..gateway import ApiGateway, FileTuple, Ok, Result
from ..models import LikeResult, Video
from ..thunks import reject_locally, run_thunk

if TYPE_CHECKING:
    from ..store import Store

SLICE = "video"

PUBLISH_PRECHECK_MESSAGE = "Title and video file are required"


class VideoState(BaseModel):
    model_config = ConfigDict(frozen=True)

    videos: tuple[Video, ...] = ()
    user_videos: tuple[Video, ...] = ()
    video: Video | None = None
    status: bool = False
    loading: bool = False
    error: str | None = None


def _deleted(state: VideoState, video_id: str) -> VideoState:
    changes = {
        "videos": tuple(v for v in state.videos if v.id != video_id),
        "user_videos": tuple(v for v in state.user_videos if v.id != video_id),
    }
    if state.video is not None and state.video.id == video_id:
        changes["video"] = None
    return state.model_copy(update=changes)


def _view_counted(state: VideoState, updated: Video) -> VideoState:
    videos = tuple(updated if v.id == updated.id else v for v in state.videos)
    return state.model_copy(update={"videos": videos})


def _open_video_for(state: VideoState, result: LikeResult) -> Video | None:
    if state.video is None:
        return None
    if result.video is not None and result.video.id != state.video.id:
        return None
    return state.video


def _liked(state: VideoState, result: LikeResult) -> VideoState:
    video = _open_video_for(state, result)
    if video is None or result.user_id in video.likes:
        return state
    video = video.model_copy(update={"likes": video.likes + (result.user_id,)})
    return state.model_copy(update={"video": video})


def _unliked(state: VideoState, result: LikeResult) -> VideoState:
    video = _open_video_for(state, result)
    if video is None or result.user_id not in video.likes:
        return state
    likes = tuple(user_id for user_id in video.likes if user_id != result.user_id)
    return state.model_copy(update={"video": video.model_copy(update={"likes": likes})})


_FULFILLED = {
    "fetch_all_videos": lambda state, videos: state.model_copy(update={"videos": videos}),
    "fetch_all_user_videos": lambda state, videos: state.model_copy(
        update={"user_videos": videos}
    ),
    "fetch_video_by_id": lambda state, video: state.model_copy(update={"video": video}),
    "publish_video": lambda state, video: state.model_copy(
        update={"videos": state.videos + (video,)}
    ),
    "delete_video": _deleted,
    "increment_view": _view_counted,
    "like_video": _liked,
    "remove_like_video": _unliked,
    "update_video": lambda state, video: state.model_copy(update={"video": video}),
}


def reducer(state: VideoState, action: Action) -> VideoState:
    if isinstance(action, Pending):
        return state.model_copy(update={"loading": True, "error": None})
    if isinstance(action, Rejected):
        return state.model_copy(update={"loading": False, "error": action.error})
    if isinstance(action, Fulfilled):
        state = state.model_copy(update={"loading": False})
        handler = _FULFILLED.get(action.op)
        return handler(state, action.payload) if handler else state
    if isinstance(action, Command) and action.op == "reset_user_videos":
        return state.model_copy(update={"user_videos": ()})
    return state


def reset_user_videos() -> Command:
    return Command(SLICE, "reset_user_videos")


# --- thunks ---


def _video(result: Ok) -> Video:
    return Video.model_validate(result.data)


def _video_list(result: Ok) -> tuple[Video, ...]:
    return tuple(Video.model_validate(item) for item in result.data or [])


def _like_result(result: Ok) -> LikeResult:
    return LikeResult.model_validate(result.body)


async def fetch_all_videos(
    store: "Store", api: ApiGateway, q: str | None = None, tag: str | None = None
) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "fetch_all_videos",
        lambda: api.list_videos(q=q, tag=tag),
        fallback="Failed to fetch videos",
        payload=_video_list,
    )


async def fetch_all_user_videos(store: "Store", api: ApiGateway, owner_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "fetch_all_user_videos",
        lambda: api.list_user_videos(owner_id),
        fallback="Failed to fetch user videos",
        payload=_video_list,
    )


async def fetch_video_by_id(store: "Store", api: ApiGateway, video_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "fetch_video_by_id",
        lambda: api.get_video(video_id),
        fallback="Failed to fetch video",
        payload=_video,
    )


async def publish_video(
    store: "Store",
    api: ApiGateway,
    title: str | None,
    video_file: FileTuple | None,
    *,
    description: str | None = None,
    tags: list[str] | None = None,
    thumbnail: FileTuple | None = None,
) -> Result:
    """Publish a video. A blank title or a missing file fails without a request."""
    if not (title or "").strip() or video_file is None:
        return reject_locally(store, SLICE, "publish_video", PUBLISH_PRECHECK_MESSAGE)
    return await run_thunk(
        store,
        SLICE,
        "publish_video",
        lambda: api.publish_video(
            title, video_file, description=description, tags=tags, thumbnail=thumbnail
        ),
        fallback="Failed to publish video",
        payload=_video,
    )


async def delete_video(store: "Store", api: ApiGateway, video_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "delete_video",
        lambda: api.delete_video(video_id),
        fallback="Failed to delete video",
        payload=lambda _: video_id,
    )


async def increment_view(store: "Store", api: ApiGateway, video_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "increment_view",
        lambda: api.increment_view(video_id),
        fallback="Failed to update views",
        payload=_video,
    )


async def like_video(store: "Store", api: ApiGateway, video_id: str, user_id: str) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "like_video",
        lambda: api.like_video(video_id, user_id),
        fallback="Failed to like video",
        payload=_like_result,
    )


async def remove_like_video(
    store: "Store", api: ApiGateway, video_id: str, user_id: str
) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "remove_like_video",
        lambda: api.remove_like(video_id, user_id),
        fallback="Failed to remove like",
        payload=_like_result,
    )


async def update_video(
    store: "Store",
    api: ApiGateway,
    video_id: str,
    *,
    title: str | None = None,
    description: str | None = None,
    tags: list[str] | None = None,
    thumbnail: FileTuple | None = None,
    video_file: FileTuple | None = None,
) -> Result:
    return await run_thunk(
        store,
        SLICE,
        "update_video",
        lambda: api.update_video(
            video_id,
            title=title,
            description=description,
            tags=tags,
            thumbnail=thumbnail,
            video_file=video_file,
        ),
        fallback="Failed to update video",
        payload=_video,
    )
