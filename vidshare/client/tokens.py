"""Where the client keeps its session token between requests."""

import logging
from pathlib import Path

logger = logging.getLogger(__name__)


class TokenStore:
    """In-memory token holder."""

    def __init__(self, token: str | None = None):
        self._token = token

    def get(self) -> str | None:
        return self._token

    def set(self, token: str) -> None:
        self._token = token

    def clear(self) -> None:
        self._token = None


class FileTokenStore(TokenStore):
    """
    Token holder that survives restarts by writing the token to a file,
    much like a browser keeps it in local storage.
    """

    def __init__(self, path: Path):
        self.path = Path(path)
        token = None
        if self.path.exists():
            token = self.path.read_text(encoding="utf-8").strip() or None
        super().__init__(token)

    def set(self, token: str) -> None:
        super().set(token)
        self.path.parent.mkdir(parents=True, exist_ok=True)
        self.path.write_text(token, encoding="utf-8")

    def clear(self) -> None:
        super().clear()
        self.path.unlink(missing_ok=True)
        logger.debug("Cleared stored token at %s", self.path)
