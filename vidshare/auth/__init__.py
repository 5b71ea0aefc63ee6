from .backend import auth_backends, bearer_backend, cookie_backend
from .deps import (
    current_active_user,
    current_active_user_token,
    current_user,
    fastapi_users,
)

__all__ = [
    "auth_backends",
    "bearer_backend",
    "cookie_backend",
    "current_user",
    "current_active_user",
    "current_active_user_token",
    "fastapi_users",
]
