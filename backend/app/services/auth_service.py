"""YouTube OAuth consent flow and session token storage."""

from google_auth_oauthlib.flow import Flow
from google.oauth2.credentials import Credentials

from app.config import Settings
from app.logger import auth_logger
from app.services.token_guard import serialize_credentials
from app.session import TOKEN_KEY, SessionHandle

STATE_KEY = "oauth_state"
CODE_VERIFIER_KEY = "oauth_code_verifier"


class AuthService:
    """Service for the Google OAuth consent flow."""

    def __init__(self, settings: Settings):
        self.settings = settings

    def get_youtube_oauth_flow(
        self, state: str | None = None, code_verifier: str | None = None
    ) -> Flow:
        """
        Create a Google OAuth Flow for YouTube authentication.

        Returns:
            Configured OAuth Flow object
        """
        return Flow.from_client_config(
            self.settings.client_config(),
            scopes=self.settings.youtube_scopes,
            redirect_uri=self.settings.oauth_redirect_uri,
            state=state,
            code_verifier=code_verifier,
        )

    def get_youtube_authorization_url(self, session: SessionHandle) -> str:
        """
        Generate the consent URL and remember the flow state in the session.

        Returns:
            Authorization URL string
        """
        flow = self.get_youtube_oauth_flow()
        authorization_url, state = flow.authorization_url(
            access_type="offline",
            include_granted_scopes="true",
            prompt="consent",  # Force consent to get refresh token
        )

        session.set(STATE_KEY, state)
        if flow.code_verifier:
            session.set(CODE_VERIFIER_KEY, flow.code_verifier)

        auth_logger.info("Generated YouTube authorization URL")
        return authorization_url

    def state_matches(self, session: SessionHandle, state: str | None) -> bool:
        """Check the callback's state against the one issued by ``/login``."""
        expected = session.get(STATE_KEY)
        if not state or not expected or state != expected:
            auth_logger.warning("OAuth callback state does not match the session")
            return False
        return True

    def exchange_youtube_code_for_tokens(self, session: SessionHandle, code: str) -> Credentials:
        """
        Exchange the authorization code and store the token in the session.

        Args:
            session: Session the consent flow was started from
            code: Authorization code from OAuth callback

        Returns:
            Google OAuth credentials
        """
        flow = self.get_youtube_oauth_flow(
            state=session.get(STATE_KEY),
            code_verifier=session.get(CODE_VERIFIER_KEY),
        )
        flow.fetch_token(code=code)
        credentials = flow.credentials

        session.set(TOKEN_KEY, serialize_credentials(credentials))
        session.delete(STATE_KEY)
        session.delete(CODE_VERIFIER_KEY)

        auth_logger.info("OAuth token stored in session")
        return credentials

    def logout(self, session: SessionHandle) -> None:
        """Forget the session's OAuth token."""
        session.delete(TOKEN_KEY)
        auth_logger.info("Session token cleared")
