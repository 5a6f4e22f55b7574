"""Per-request session handle on top of the Redis store."""

import uuid
from typing import Annotated

from fastapi import Depends, Request
from starlette.responses import Response

from app.config import Settings, get_settings
from app.logger import session_logger
from app.redis_client import RedisClient, get_redis

TOKEN_KEY = "token"


class SessionHandle:
    """
    Key-value view of one browser session.

    Keys are namespaced as ``session:{sid}:{key}`` in the backing store. A new
    session id is minted when the request carried no cookie; ``attach`` then
    writes the cookie onto the outgoing response.
    """

    def __init__(
        self,
        store: RedisClient,
        session_id: str | None = None,
        ttl: int | None = None,
        cookie_name: str = "playlist_session",
        secure: bool = False,
    ):
        self.store = store
        self.is_new = not session_id
        self.session_id = session_id or uuid.uuid4().hex
        self.ttl = ttl
        self.cookie_name = cookie_name
        self.secure = secure

    def _key(self, key: str) -> str:
        return f"session:{self.session_id}:{key}"

    def get(self, key: str) -> str | None:
        return self.store.get(self._key(key))

    def set(self, key: str, value: str) -> None:
        if not self.store.set(self._key(key), value, expire=self.ttl):
            session_logger.warning(f"Failed to persist session key '{key}'")

    def delete(self, key: str) -> None:
        self.store.delete(self._key(key))

    def attach(self, response: Response) -> Response:
        """Set the session cookie on a response if this session is new."""
        if self.is_new:
            response.set_cookie(
                self.cookie_name,
                self.session_id,
                max_age=self.ttl,
                httponly=True,
                secure=self.secure,
                samesite="lax",
            )
        return response


def get_session(
    request: Request,
    settings: Annotated[Settings, Depends(get_settings)],
    store: Annotated[RedisClient, Depends(get_redis)],
) -> SessionHandle:
    """Dependency resolving the session handle for the current request."""
    return SessionHandle(
        store,
        request.cookies.get(settings.session_cookie_name),
        ttl=settings.session_ttl_seconds,
        cookie_name=settings.session_cookie_name,
        secure=settings.is_production,
    )
