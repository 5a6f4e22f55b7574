"""OAuth token guard run before every authenticated YouTube call."""

import json
from datetime import datetime, timezone

from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request
from google.oauth2.credentials import Credentials
from pydantic import ValidationError

from app.config import Settings
from app.logger import auth_logger
from app.schemas.auth import StoredToken
from app.session import TOKEN_KEY, SessionHandle


def _parse_expiry(value: str | None) -> datetime | None:
    """Parse a stored expiry into the naive UTC datetime google-auth expects."""
    if not value:
        return None
    expiry = datetime.fromisoformat(value.replace("Z", "+00:00"))
    if expiry.tzinfo is not None:
        expiry = expiry.astimezone(timezone.utc).replace(tzinfo=None)
    return expiry


def serialize_credentials(creds: Credentials) -> str:
    """Encode credentials as the session token blob."""
    token = StoredToken(
        access_token=creds.token,
        refresh_token=creds.refresh_token,
        expiry=creds.expiry.isoformat() if creds.expiry else None,
    )
    return token.model_dump_json()


class TokenGuard:
    """
    Validates the session's OAuth token, refreshing it once when expired.

    After a successful ``ensure_valid`` call, ``credentials`` holds the live
    credentials for building the YouTube client.
    """

    def __init__(self, settings: Settings):
        self.settings = settings
        self.credentials: Credentials | None = None

    def _load_token(self, session: SessionHandle) -> StoredToken | None:
        raw = session.get(TOKEN_KEY)
        if not raw:
            auth_logger.warning("Session token does not exist.")
            return None

        try:
            token = StoredToken.model_validate(json.loads(raw))
        except (ValueError, ValidationError) as e:
            auth_logger.warning(f"Session token is malformed: {e}")
            return None

        if not token.access_token:
            auth_logger.warning("Access token does not exist in session token.")
            return None

        return token

    def _build_credentials(self, token: StoredToken) -> Credentials:
        client_id, client_secret, token_uri = self.settings.client_credentials()
        return Credentials(
            token=token.access_token,
            refresh_token=token.refresh_token,
            token_uri=token_uri,
            client_id=client_id,
            client_secret=client_secret,
            scopes=self.settings.youtube_scopes,
            expiry=_parse_expiry(token.expiry),
        )

    def ensure_valid(self, session: SessionHandle) -> bool:
        """
        Check the stored token and refresh it if it has expired.

        Args:
            session: Session handle holding the token blob

        Returns:
            True if the session now holds a usable access token
        """
        self.credentials = None

        token = self._load_token(session)
        if token is None:
            return False

        try:
            creds = self._build_credentials(token)
        except ValueError as e:
            auth_logger.warning(f"Session token has an invalid expiry: {e}")
            return False

        auth_logger.debug("Access token exists in session.")

        if creds.expired:
            auth_logger.debug("Access token expired.")
            if not creds.refresh_token:
                auth_logger.debug("No refresh token available, re-authentication needed.")
                return False

            try:
                creds.refresh(Request())
            except GoogleAuthError as e:
                auth_logger.error(f"Token refresh failed: {e}")
                return False

            session.set(TOKEN_KEY, serialize_credentials(creds))
            auth_logger.debug("New access token obtained.")

        self.credentials = creds
        return True
