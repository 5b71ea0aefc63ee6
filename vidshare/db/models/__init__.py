from .channel import Channel
from .video import Video
from .comment import Comment
from .tag import Tag
from vidshare.auth.models import AccessToken, User

__all__ = [
    "User",
    "AccessToken",
    "Channel",
    "Video",
    "Comment",
    "Tag",
]
