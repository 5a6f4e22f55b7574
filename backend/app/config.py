import json
from pathlib import Path
from typing import Any, Dict

from pydantic_settings import BaseSettings, SettingsConfigDict

GOOGLE_AUTH_URI = "https://accounts.google.com/o/oauth2/auth"
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", case_sensitive=False, extra="ignore"
    )

    # Environment
    environment: str = "local"  # local, production

    # Application
    app_name: str = "YouTube Playlist Proxy"
    debug: bool = False

    # Google / YouTube API
    google_developer_key: str
    youtube_client_id: str = ""
    youtube_client_secret: str = ""
    client_secret_file: str | None = None  # Takes precedence over id/secret
    youtube_scopes: list[str] = [
        "https://www.googleapis.com/auth/youtube",
        "https://www.googleapis.com/auth/youtube.force-ssl",
        "https://www.googleapis.com/auth/userinfo.email",
        "https://www.googleapis.com/auth/userinfo.profile",
    ]

    # Public hosts used to build redirect and share URLs
    public_host: str = "localhost:8000"
    youtube_redirect_uri: str | None = None
    server_name: str = "localhost"
    youtube_host: str = "www.youtube.com"
    logout_path: str = "/logout"

    # Provider calls
    page_size: int = 20
    default_keyword: str = "Lo-Fi"

    # Session store
    redis_url: str = "redis://localhost:6379/0"
    session_cookie_name: str = "playlist_session"
    session_ttl_seconds: int = 86400

    # CORS - Support multiple origins (comma-separated string or list)
    cors_origins: list[str] = ["http://localhost:3000"]

    @property
    def is_production(self) -> bool:
        """Check if running in production environment."""
        return self.environment == "production"

    @property
    def oauth_redirect_uri(self) -> str:
        """OAuth callback URL registered with Google."""
        return self.youtube_redirect_uri or f"https://{self.public_host}/Index/oauth"

    def client_config(self) -> Dict[str, Any]:
        """
        Build the OAuth client config in Google's client_secret.json shape.

        Reads ``client_secret_file`` when set, otherwise assembles a "web" client
        from the id/secret settings.
        """
        if self.client_secret_file:
            return json.loads(Path(self.client_secret_file).read_text(encoding="utf-8"))

        return {
            "web": {
                "client_id": self.youtube_client_id,
                "client_secret": self.youtube_client_secret,
                "auth_uri": GOOGLE_AUTH_URI,
                "token_uri": GOOGLE_TOKEN_URI,
            }
        }

    def client_credentials(self) -> tuple[str, str, str]:
        """Return (client_id, client_secret, token_uri) for refreshing tokens."""
        config = self.client_config()
        client = config.get("web") or config.get("installed") or {}
        return (
            client.get("client_id", ""),
            client.get("client_secret", ""),
            client.get("token_uri", GOOGLE_TOKEN_URI),
        )


settings = Settings()


def get_settings() -> Settings:
    """Dependency for getting application settings."""
    return settings
