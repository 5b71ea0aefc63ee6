"""
HTTP gateway to the VidShare API.

Every call returns ``Ok`` or ``Err``; nothing raises for HTTP or transport
failures. Requests carry no timeout and are never retried.
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any

import httpx

from .tokens import TokenStore

logger = logging.getLogger(__name__)

# (filename, content, content type), as accepted by httpx ``files=``
FileTuple = tuple[str, bytes, str]


class ErrorKind(str, Enum):
    VALIDATION = "validation"
    NOT_FOUND = "not_found"
    CONFLICT = "conflict"
    AUTHORIZATION = "authorization"
    UPSTREAM = "upstream"


@dataclass(frozen=True)
class Ok:
    data: Any = None
    message: str | None = None
    body: dict = field(default_factory=dict)


@dataclass(frozen=True)
class Err:
    kind: ErrorKind
    message: str | None = None
    status: int | None = None


Result = Ok | Err


def classify_status(status_code: int) -> ErrorKind:
    if status_code in (400, 413, 422):
        return ErrorKind.VALIDATION
    if status_code in (401, 403):
        return ErrorKind.AUTHORIZATION
    if status_code == 404:
        return ErrorKind.NOT_FOUND
    if status_code == 409:
        return ErrorKind.CONFLICT
    return ErrorKind.UPSTREAM


def _form_fields(**values: str | None) -> dict[str, str]:
    return {name: value for name, value in values.items() if value is not None}


class ApiGateway:
    """
    Thin async wrapper around the REST API.

    Use as an async context manager, or call ``aclose()`` when done. Pass
    ``transport`` to talk to an in-process app (``httpx.ASGITransport``) or a
    mock (``httpx.MockTransport``).
    """

    def __init__(
        self,
        base_url: str,
        *,
        tokens: TokenStore | None = None,
        transport: httpx.AsyncBaseTransport | None = None,
        api_prefix: str = "/api/v1",
    ):
        self.tokens = tokens or TokenStore()
        self.api_prefix = api_prefix.rstrip("/")
        self._client = httpx.AsyncClient(
            base_url=base_url, transport=transport, timeout=None
        )

    async def __aenter__(self) -> "ApiGateway":
        return self

    async def __aexit__(self, *exc_info) -> None:
        await self.aclose()

    async def aclose(self) -> None:
        await self._client.aclose()

    def _headers(self) -> dict[str, str]:
        token = self.tokens.get()
        return {"Authorization": f"Bearer {token}"} if token else {}

    async def request(self, method: str, path: str, **kwargs: Any) -> Result:
        url = f"{self.api_prefix}{path}"
        try:
            response = await self._client.request(
                method, url, headers=self._headers(), **kwargs
            )
        except httpx.HTTPError as exc:
            logger.warning("%s %s failed: %s", method, url, exc)
            return Err(ErrorKind.UPSTREAM, str(exc) or None, None)

        try:
            body = response.json()
        except ValueError:
            body = {}
        if not isinstance(body, dict):
            body = {"data": body}

        if response.is_success:
            return Ok(data=body.get("data"), message=body.get("message"), body=body)
        message = body.get("message") or body.get("error")
        return Err(classify_status(response.status_code), message, response.status_code)

    # --- account ---

    async def signup(
        self,
        email: str,
        password: str,
        username: str | None = None,
        avatar: FileTuple | None = None,
    ) -> Result:
        files = {"avatar": avatar} if avatar else None
        return await self.request(
            "POST",
            "/account/signup",
            data=_form_fields(email=email, password=password, username=username),
            files=files,
        )

    async def login(self, email: str, password: str) -> Result:
        return await self.request(
            "POST", "/account/login", json={"email": email, "password": password}
        )

    async def logout(self) -> Result:
        return await self.request("POST", "/account/logout")

    async def get_user(self, user_id: str) -> Result:
        return await self.request("GET", f"/account/userData/{user_id}")

    async def update_account(
        self,
        user_id: str,
        *,
        username: str | None = None,
        email: str | None = None,
        password: str | None = None,
        avatar: FileTuple | None = None,
    ) -> Result:
        return await self.request(
            "PUT",
            f"/account/update/{user_id}",
            data=_form_fields(username=username, email=email, password=password),
            files={"avatar": avatar} if avatar else None,
        )

    async def delete_account(self, user_id: str) -> Result:
        return await self.request("DELETE", f"/account/delete/{user_id}")

    # --- videos ---

    async def list_videos(self, q: str | None = None, tag: str | None = None) -> Result:
        return await self.request("GET", "/videos/allVideo", params=_form_fields(q=q, tag=tag))

    async def list_user_videos(self, owner_id: str) -> Result:
        return await self.request("GET", f"/videos/allUserVideo/{owner_id}")

    async def get_video(self, video_id: str) -> Result:
        return await self.request("GET", f"/videos/videoData/{video_id}")

    async def publish_video(
        self,
        title: str,
        video_file: FileTuple,
        *,
        description: str | None = None,
        tags: list[str] | None = None,
        thumbnail: FileTuple | None = None,
    ) -> Result:
        files = {"videoFile": video_file}
        if thumbnail:
            files["thumbnail"] = thumbnail
        return await self.request(
            "POST",
            "/videos/publish",
            data=_form_fields(
                title=title,
                description=description,
                tags=",".join(tags) if tags is not None else None,
            ),
            files=files,
        )

    async def update_video(
        self,
        video_id: str,
        *,
        title: str | None = None,
        description: str | None = None,
        tags: list[str] | None = None,
        thumbnail: FileTuple | None = None,
        video_file: FileTuple | None = None,
    ) -> Result:
        files = {}
        if thumbnail:
            files["thumbnail"] = thumbnail
        if video_file:
            files["videoFile"] = video_file
        return await self.request(
            "PUT",
            f"/videos/update/{video_id}",
            data=_form_fields(
                title=title,
                description=description,
                tags=",".join(tags) if tags is not None else None,
            ),
            files=files or None,
        )

    async def delete_video(self, video_id: str) -> Result:
        return await self.request("DELETE", f"/videos/delete/{video_id}")

    async def increment_view(self, video_id: str) -> Result:
        return await self.request("PUT", f"/videos/incrementView/{video_id}")

    async def like_video(self, video_id: str, user_id: str) -> Result:
        return await self.request(
            "POST", "/videos/like", json={"videoId": video_id, "userId": user_id}
        )

    async def remove_like(self, video_id: str, user_id: str) -> Result:
        return await self.request(
            "POST", "/videos/removelike", json={"videoId": video_id, "userId": user_id}
        )

    # --- channels ---

    async def create_channel(self, name: str, description: str | None = None) -> Result:
        return await self.request(
            "POST", "/channel/create", json={"name": name, "description": description}
        )

    async def get_channel(self, channel_id: str) -> Result:
        return await self.request("GET", f"/channel/data/{channel_id}")

    async def update_channel(
        self,
        channel_id: str,
        *,
        name: str | None = None,
        description: str | None = None,
        avatar: FileTuple | None = None,
        banner: FileTuple | None = None,
    ) -> Result:
        files = {}
        if avatar:
            files["avatar"] = avatar
        if banner:
            files["banner"] = banner
        return await self.request(
            "PUT",
            f"/channel/update/{channel_id}",
            data=_form_fields(name=name, description=description),
            files=files or None,
        )

    async def delete_channel(self, channel_id: str) -> Result:
        return await self.request("DELETE", f"/channel/delete/{channel_id}")

    async def subscribe(self, channel_id: str) -> Result:
        return await self.request("POST", f"/channel/subscribe/{channel_id}")

    async def unsubscribe(self, channel_id: str) -> Result:
        return await self.request("POST", f"/channel/unsubscribe/{channel_id}")

    # --- comments and tags ---

    async def add_comment(self, video_id: str, text: str) -> Result:
        return await self.request(
            "POST", "/comments/add", json={"videoId": video_id, "text": text}
        )

    async def list_comments(self, video_id: str) -> Result:
        return await self.request("GET", f"/comments/video/{video_id}")

    async def update_comment(self, comment_id: str, text: str) -> Result:
        return await self.request("PUT", f"/comments/update/{comment_id}", json={"text": text})

    async def delete_comment(self, comment_id: str) -> Result:
        return await self.request("DELETE", f"/comments/delete/{comment_id}")

    async def list_tags(self) -> Result:
        return await self.request("GET", "/tags/")
