from pydantic import BaseModel, ConfigDict, EmailStr, Field

from vidshare.auth.schemas import UserRead


class LoginRequest(BaseModel):
    email: EmailStr
    password: str = Field(..., min_length=1)


class SessionOut(BaseModel):
    """Returned by signup and login; the token also lands in the ``accessToken`` cookie."""

    model_config = ConfigDict(populate_by_name=True)

    user: UserRead
    access_token: str = Field(..., alias="accessToken")
    has_channel: bool = Field(..., alias="hasChannel")
