"""YouTube API gateway: guarded operations backing the HTTP endpoints."""

from typing import Any, Callable, Dict
from urllib.parse import parse_qs, quote_plus, urlparse

from google.oauth2.credentials import Credentials
from googleapiclient.discovery import build

from app.config import Settings
from app.errors import (
    AuthFailed,
    OperationResult,
    ProviderError,
    ValidationFailed,
)
from app.logger import api_logger
from app.schemas.auth import LoginStatus
from app.schemas.playlist import AddToPlaylistRequest, CreatePlaylistRequest, ShareUrlResponse
from app.schemas.video import VideoPage
from app.services import normalizer
from app.services.token_guard import TokenGuard
from app.session import TOKEN_KEY, SessionHandle

NEW_PLAYLIST_DESCRIPTION = "A new playlist created from API"


def build_youtube_client(settings: Settings, credentials: Credentials | None = None):
    """
    Build a YouTube Data API v3 client.

    Uses the user's OAuth credentials when given, otherwise the developer key
    for anonymous read-only calls.
    """
    if credentials is not None:
        return build("youtube", "v3", credentials=credentials, cache_discovery=False)
    return build(
        "youtube", "v3", developerKey=settings.google_developer_key, cache_discovery=False
    )


def playlist_id_from_url(url: str | None) -> str | None:
    """Extract the ``list`` query parameter from a YouTube playlist URL."""
    if not url:
        return None
    values = parse_qs(urlparse(url).query).get("list")
    return values[0] if values else None


def fetch_public_playlist_videos(
    settings: Settings,
    playlist_id: str,
    page_token: str | None = None,
    client_factory: Callable[..., Any] = build_youtube_client,
) -> Dict[str, Any]:
    """
    Fetch one page of a public playlist with the developer key.

    Provider failures are logged and yield an empty page.
    """
    params: Dict[str, Any] = {
        "part": "id,snippet",
        "playlistId": playlist_id,
        "maxResults": settings.page_size,
    }
    if page_token:
        params["pageToken"] = page_token

    try:
        youtube = client_factory(settings)
        response = youtube.playlistItems().list(**params).execute()
        return normalizer.normalize_public_playlist_items(response).model_dump()
    except Exception as e:
        api_logger.error(f"YouTube API error: {e}")
        return VideoPage().model_dump()


class YouTubeService:
    """Service for the session user's calls to YouTube Data API v3."""

    def __init__(
        self,
        settings: Settings,
        session: SessionHandle,
        guard: TokenGuard | None = None,
        client_factory: Callable[..., Any] = build_youtube_client,
    ):
        self.settings = settings
        self.session = session
        self.guard = guard or TokenGuard(settings)
        self.client_factory = client_factory

    def _authenticated_client(self):
        """Run the token guard and build a client, or None on guard failure."""
        if not self.guard.ensure_valid(self.session):
            return None
        return self.client_factory(self.settings, self.guard.credentials)

    def _provider_failure(self, error: Exception) -> OperationResult:
        api_logger.error(f"YouTube API error: {error}")
        return OperationResult.failure(ProviderError(str(error)))

    def check_login(self) -> OperationResult:
        """Report whether the session holds a usable token."""
        logged_in = self.guard.ensure_valid(self.session)
        api_logger.info(f"check_login called, loggedIn: {logged_in}")
        return OperationResult.success(LoginStatus(loggedIn=logged_in).model_dump())

    def search_videos(
        self, keyword: str | None = None, page_token: str | None = None
    ) -> OperationResult:
        """
        Search YouTube videos by keyword.

        Sessions without a token search anonymously with the developer key.
        A session whose token fails the guard is redirected to log out.
        """
        if keyword is None:
            keyword = self.settings.default_keyword
        api_logger.info(f"search_videos called with keyword: {keyword}")

        if self.session.get(TOKEN_KEY):
            youtube = self._authenticated_client()
            if youtube is None:
                return OperationResult.failure(AuthFailed())
        else:
            youtube = None

        try:
            if youtube is None:
                youtube = self.client_factory(self.settings)

            params: Dict[str, Any] = {
                "part": "id,snippet",
                "q": keyword,
                "maxResults": self.settings.page_size,
            }
            if page_token:
                params["pageToken"] = page_token

            response = youtube.search().list(**params).execute()
            page = normalizer.normalize_search_results(response)
        except Exception as e:
            return self._provider_failure(e)

        return OperationResult.success(page.model_dump())

    def list_playlists(self) -> OperationResult:
        """List the authenticated user's playlists."""
        api_logger.info("list_playlists called")

        youtube = self._authenticated_client()
        if youtube is None:
            return OperationResult.failure(AuthFailed())

        try:
            response = (
                youtube.playlists()
                .list(part="id,snippet,status", mine=True, maxResults=self.settings.page_size)
                .execute()
            )
            playlists = [p.model_dump() for p in normalizer.normalize_playlists(response)]
        except Exception as e:
            return self._provider_failure(e)

        api_logger.info(f"Playlists fetched: {len(playlists)}")
        return OperationResult.success(playlists)

    def list_playlist_items(self, playlist_id: str | None) -> OperationResult:
        """List available videos in a playlist with HTML-escaped fields."""
        api_logger.info(f"list_playlist_items called with playlistId: {playlist_id}")

        if not playlist_id:
            return OperationResult.failure(ValidationFailed())

        youtube = self._authenticated_client()
        if youtube is None:
            return OperationResult.failure(AuthFailed())

        try:
            response = (
                youtube.playlistItems()
                .list(
                    part="id,snippet",
                    playlistId=playlist_id,
                    maxResults=self.settings.page_size,
                )
                .execute()
            )
            videos = [v.model_dump() for v in normalizer.normalize_playlist_items(response)]
        except Exception as e:
            return self._provider_failure(e)

        api_logger.info(f"Playlist videos fetched: {len(videos)}")
        return OperationResult.success(videos)

    def generate_share_url(
        self, playlist_id: str | None, privacy_status: str = "public"
    ) -> OperationResult:
        """
        Build the share URL for a playlist.

        ``privacy_status`` is accepted for the client's convenience and does not
        affect the URL.
        """
        api_logger.info(f"generate_share_url called with playlistId: {playlist_id}")

        if not playlist_id:
            return OperationResult.success(ShareUrlResponse().model_dump())

        long_url = f"https://{self.settings.youtube_host}/playlist?list={playlist_id}"
        api_logger.debug(f"Long URL: {long_url}")
        share_url = f"https://{self.settings.server_name}/Index?feed_url={quote_plus(long_url)}"
        return OperationResult.success(ShareUrlResponse(share_url=share_url).model_dump())

    def _insert_playlist_item(self, youtube, playlist_id: str, video_id: str) -> None:
        body = {
            "snippet": {
                "playlistId": playlist_id,
                "resourceId": {"kind": "youtube#video", "videoId": video_id},
            }
        }
        youtube.playlistItems().insert(part="snippet", body=body).execute()

    def create_playlist_and_add(self, request: CreatePlaylistRequest | None) -> OperationResult:
        """
        Create a playlist and add one video to it.

        If the item insert fails the new playlist is left in place.
        """
        api_logger.info("create_playlist_and_add called")

        if (
            request is None
            or not request.video_id
            or not request.playlist_title
            or not request.privacy_status
        ):
            return OperationResult.failure(ValidationFailed())

        youtube = self._authenticated_client()
        if youtube is None:
            return OperationResult.failure(AuthFailed())

        try:
            body = {
                "snippet": {
                    "title": request.playlist_title,
                    "description": NEW_PLAYLIST_DESCRIPTION,
                },
                "status": {"privacyStatus": request.privacy_status},
            }
            playlist = youtube.playlists().insert(part="snippet,status", body=body).execute()
            playlist_id = playlist["id"]
            api_logger.info(f"Created playlist: {request.playlist_title} (ID: {playlist_id})")

            self._insert_playlist_item(youtube, playlist_id, request.video_id)
        except Exception as e:
            return self._provider_failure(e)

        api_logger.info(f"Added video {request.video_id} to new playlist {playlist_id}")
        return OperationResult.success({"success": "Video added to new playlist successfully."})

    def add_to_existing_playlist(self, request: AddToPlaylistRequest | None) -> OperationResult:
        """Add one video to an existing playlist."""
        api_logger.info("add_to_existing_playlist called")

        if request is None or not request.video_id or not request.playlist_id:
            return OperationResult.failure(ValidationFailed())

        youtube = self._authenticated_client()
        if youtube is None:
            return OperationResult.failure(AuthFailed())

        try:
            self._insert_playlist_item(youtube, request.playlist_id, request.video_id)
        except Exception as e:
            return self._provider_failure(e)

        api_logger.info(f"Added video {request.video_id} to playlist {request.playlist_id}")
        return OperationResult.success(
            {"success": "Video added to existing playlist successfully."}
        )
