"""
Slice reducers and the store, driven by plain actions.
"""

import pytest

from vidshare.client.actions import Command, Fulfilled, Pending, Rejected
from vidshare.client.models import Channel, LikeResult, Session, User, Video
from vidshare.client.slices import auth, channel, video
from vidshare.client.store import Store


def make_video(video_id="v1", **fields) -> Video:
    values = {
        "id": video_id,
        "owner_id": "u1",
        "title": f"Video {video_id}",
        "video_url": f"/media/{video_id}.mp4",
    }
    values.update(fields)
    return Video(**values)


def make_channel(channel_id="c1", **fields) -> Channel:
    values = {"id": channel_id, "owner_id": "u1", "name": "Studio"}
    values.update(fields)
    return Channel(**values)


def make_session(token="tok", has_channel=False) -> Session:
    return Session(
        user=User(id="u1", email="u1@example.com"),
        access_token=token,
        has_channel=has_channel,
    )


class TestStore:
    def test_dispatch_replaces_only_target_slice(self):
        store = Store()
        before = store.state

        store.dispatch(Pending(video.SLICE, "fetch_all_videos"))

        assert store.state.video.loading is True
        assert store.state.auth is before.auth
        assert store.state.channel is before.channel

    def test_unknown_slice_raises(self):
        with pytest.raises(ValueError):
            Store().dispatch(Pending("playlist", "fetch"))

    def test_subscribers_are_notified_until_unsubscribed(self):
        store = Store()
        seen = []
        unsubscribe = store.subscribe(lambda state: seen.append(state.video.loading))

        store.dispatch(Pending(video.SLICE, "fetch_all_videos"))
        unsubscribe()
        store.dispatch(Fulfilled(video.SLICE, "fetch_all_videos", ()))

        assert seen == [True]


class TestLoadingSemantics:
    @pytest.mark.parametrize(
        "slice_module, state_cls",
        [
            (auth, auth.AuthState),
            (channel, channel.ChannelState),
            (video, video.VideoState),
        ],
    )
    def test_pending_then_rejected(self, slice_module, state_cls):
        state = state_cls(error="old failure")

        state = slice_module.reducer(state, Pending(slice_module.SLICE, "any_op"))
        assert state.loading is True
        assert state.error is None

        state = slice_module.reducer(state, Rejected(slice_module.SLICE, "any_op", "boom"))
        assert state.loading is False
        assert state.error == "boom"

    def test_fulfilled_clears_loading(self):
        state = video.reducer(
            video.VideoState(loading=True),
            Fulfilled(video.SLICE, "fetch_all_videos", (make_video(),)),
        )

        assert state.loading is False
        assert [v.id for v in state.videos] == ["v1"]


class TestAuthSlice:
    def test_login_sets_session(self):
        state = auth.reducer(
            auth.AuthState(), Fulfilled(auth.SLICE, "login", make_session(has_channel=True))
        )

        assert state.status is True
        assert state.access_token == "tok"
        assert state.has_channel is True
        assert state.user.id == "u1"

    def test_register_signs_in(self):
        state = auth.reducer(auth.AuthState(), Fulfilled(auth.SLICE, "register", make_session()))

        assert state.status is True

    def test_rejected_login_signs_out_status(self):
        state = auth.AuthState(status=True)

        state = auth.reducer(state, Rejected(auth.SLICE, "login", "Invalid email or password"))

        assert state.status is False
        assert state.error == "Invalid email or password"

    def test_rejected_other_op_keeps_status(self):
        state = auth.reducer(
            auth.AuthState(status=True), Rejected(auth.SLICE, "update_account", "nope")
        )

        assert state.status is True

    @pytest.mark.parametrize("op", ["logout", "delete_account"])
    def test_sign_out_ops(self, op):
        signed_in = auth.reducer(auth.AuthState(), Fulfilled(auth.SLICE, "login", make_session()))

        state = auth.reducer(signed_in, Fulfilled(auth.SLICE, op, None))

        assert state.user is None
        assert state.access_token is None
        assert state.status is False

    def test_clear_error(self):
        state = auth.reducer(auth.AuthState(error="x"), auth.clear_error())

        assert state.error is None


class TestChannelSlice:
    def test_create_sets_success_message(self):
        state = channel.reducer(
            channel.ChannelState(), Fulfilled(channel.SLICE, "create_channel", make_channel())
        )

        assert state.channel.id == "c1"
        assert state.success_message == channel.CREATED_MESSAGE

    def test_update_pending_clears_success_message(self):
        state = channel.ChannelState(success_message=channel.CREATED_MESSAGE)

        state = channel.reducer(state, Pending(channel.SLICE, "update_channel"))

        assert state.success_message is None

    def test_fetch_pending_keeps_success_message(self):
        state = channel.ChannelState(success_message=channel.CREATED_MESSAGE)

        state = channel.reducer(state, Pending(channel.SLICE, "get_channel"))

        assert state.success_message == channel.CREATED_MESSAGE

    def test_delete_clears_channel(self):
        state = channel.ChannelState(channel=make_channel())

        state = channel.reducer(state, Fulfilled(channel.SLICE, "delete_channel", "Deleted"))

        assert state.channel is None

    def test_subscribe_updates_only_subscriber_fields(self):
        shown = make_channel(videos=(make_video(),), description="kept")
        response = make_channel(subscribers=("u2",), subscriber_count=1, description="server")

        state = channel.reducer(
            channel.ChannelState(channel=shown),
            Fulfilled(channel.SLICE, "subscribe_channel", response),
        )

        assert state.channel.subscribers == ("u2",)
        assert state.channel.subscriber_count == 1
        assert state.channel.description == "kept"
        assert len(state.channel.videos) == 1

    def test_subscribe_for_other_channel_is_ignored(self):
        shown = make_channel()

        state = channel.reducer(
            channel.ChannelState(channel=shown),
            Fulfilled(channel.SLICE, "subscribe_channel", make_channel("c2", subscribers=("u2",))),
        )

        assert state.channel == shown

    def test_clear_commands(self):
        state = channel.ChannelState(error="x", success_message="y")

        state = channel.reducer(state, channel.clear_error())
        state = channel.reducer(state, channel.clear_success_message())

        assert state.error is None
        assert state.success_message is None


class TestVideoSlice:
    def test_publish_appends(self):
        state = video.VideoState(videos=(make_video("v1"),))

        state = video.reducer(state, Fulfilled(video.SLICE, "publish_video", make_video("v2")))

        assert [v.id for v in state.videos] == ["v1", "v2"]

    def test_delete_removes_everywhere(self):
        gone = make_video("v1")
        kept = make_video("v2")
        state = video.VideoState(videos=(gone, kept), user_videos=(gone,), video=gone)

        state = video.reducer(state, Fulfilled(video.SLICE, "delete_video", "v1"))

        assert [v.id for v in state.videos] == ["v2"]
        assert state.user_videos == ()
        assert state.video is None

    def test_increment_view_replaces_list_entry(self):
        state = video.VideoState(videos=(make_video("v1"), make_video("v2")))

        state = video.reducer(
            state, Fulfilled(video.SLICE, "increment_view", make_video("v2", views=1))
        )

        assert [(v.id, v.views) for v in state.videos] == [("v1", 0), ("v2", 1)]

    def test_like_adds_once(self):
        state = video.VideoState(video=make_video())
        like = LikeResult(user_id="u9", video=make_video(likes=("u9",)))

        state = video.reducer(state, Fulfilled(video.SLICE, "like_video", like))
        state = video.reducer(state, Fulfilled(video.SLICE, "like_video", like))

        assert state.video.likes == ("u9",)

    def test_like_leaves_listing_alone(self):
        listed = make_video()
        state = video.VideoState(videos=(listed,), video=listed)

        state = video.reducer(
            state, Fulfilled(video.SLICE, "like_video", LikeResult(user_id="u9", video=listed))
        )

        assert state.videos[0].likes == ()
        assert state.video.likes == ("u9",)

    def test_unlike_of_absent_user_is_noop(self):
        state = video.VideoState(video=make_video(likes=("u1",)))

        state = video.reducer(
            state, Fulfilled(video.SLICE, "remove_like_video", LikeResult(user_id="u9"))
        )

        assert state.video.likes == ("u1",)

    def test_like_for_other_video_is_ignored(self):
        state = video.VideoState(video=make_video("v1"))

        state = video.reducer(
            state,
            Fulfilled(video.SLICE, "like_video", LikeResult(user_id="u9", video=make_video("v2"))),
        )

        assert state.video.likes == ()

    def test_reset_user_videos(self):
        state = video.VideoState(user_videos=(make_video(),))

        state = video.reducer(state, video.reset_user_videos())

        assert state.user_videos == ()
