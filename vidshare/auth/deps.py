import uuid

from fastapi_users import FastAPIUsers

from vidshare.auth.backend import auth_backends
from vidshare.auth.manager import get_user_manager
from vidshare.auth.models import User

fastapi_users = FastAPIUsers[User, uuid.UUID](get_user_manager, auth_backends)

current_user = fastapi_users.current_user()
current_active_user = fastapi_users.current_user(active=True)
current_active_user_token = fastapi_users.authenticator.current_user_token(active=True)
