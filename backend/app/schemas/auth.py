from pydantic import BaseModel


class StoredToken(BaseModel):
    """OAuth token blob kept in the session under the ``token`` key."""

    access_token: str | None = None
    refresh_token: str | None = None
    expiry: str | None = None  # ISO-8601, UTC


class LoginStatus(BaseModel):
    """Whether the session holds a usable OAuth token."""

    loggedIn: bool
