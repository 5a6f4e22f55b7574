"""Videos router for YouTube search and the public playlist feed."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.config import Settings, get_settings
from app.dependencies import get_youtube_service
from app.errors import OperationResult, ValidationFailed
from app.responses import render
from app.services.youtube_service import (
    YouTubeService,
    fetch_public_playlist_videos,
    playlist_id_from_url,
)
from app.session import SessionHandle, get_session

router = APIRouter()


@router.get("/videos")
def search_videos(
    service: Annotated[YouTubeService, Depends(get_youtube_service)],
    keyword: str | None = Query(None, description="Search keyword"),
    page_token: str | None = Query(None, alias="pageToken"),
) -> Response:
    """
    Search YouTube videos.

    Returns a page of videos plus the provider's next/previous page tokens.
    """
    result = service.search_videos(keyword, page_token)
    return render(result, service.session, service.settings)


@router.get("/playlist-feed")
def playlist_feed(
    settings: Annotated[Settings, Depends(get_settings)],
    session: Annotated[SessionHandle, Depends(get_session)],
    feed_url: str | None = Query(None, description="YouTube playlist URL"),
    page_token: str | None = Query(None, alias="pageToken"),
) -> Response:
    """Public videos of the playlist referenced by a share link's feed URL."""
    playlist_id = playlist_id_from_url(feed_url)
    if not playlist_id:
        return render(OperationResult.failure(ValidationFailed()), session, settings)

    page = fetch_public_playlist_videos(settings, playlist_id, page_token)
    return render(OperationResult.success(page), session, settings)
