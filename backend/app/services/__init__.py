from app.services.auth_service import AuthService
from app.services.token_guard import TokenGuard
from app.services.youtube_service import YouTubeService

__all__ = ["AuthService", "TokenGuard", "YouTubeService"]
