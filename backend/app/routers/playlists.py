"""Playlists router for the session user's YouTube playlists."""

from typing import Annotated

from fastapi import APIRouter, Depends, Query
from fastapi.responses import Response

from app.dependencies import get_youtube_service
from app.responses import render
from app.schemas.playlist import AddToPlaylistRequest, CreatePlaylistRequest
from app.services.youtube_service import YouTubeService

router = APIRouter()

Service = Annotated[YouTubeService, Depends(get_youtube_service)]


@router.get("/playlists")
def get_playlists(service: Service) -> Response:
    """Get the authenticated user's playlists."""
    return render(service.list_playlists(), service.session, service.settings)


@router.post("/playlists")
def create_playlist(
    service: Service,
    payload: CreatePlaylistRequest | None = None,
) -> Response:
    """
    Create a YouTube playlist and add one video to it.

    Body: ``video_id``, ``playlist_title``, ``privacyStatus``.
    """
    result = service.create_playlist_and_add(payload)
    return render(result, service.session, service.settings)


@router.post("/playlists/items")
def add_to_playlist(
    service: Service,
    payload: AddToPlaylistRequest | None = None,
) -> Response:
    """Add a video to an existing playlist. Body: ``video_id``, ``playlistId``."""
    result = service.add_to_existing_playlist(payload)
    return render(result, service.session, service.settings)


@router.get("/playlist-videos")
def get_playlist_videos(
    service: Service,
    playlist_id: str | None = Query(None, alias="playlistId"),
) -> Response:
    """Get the available videos of one playlist."""
    result = service.list_playlist_items(playlist_id)
    return render(result, service.session, service.settings)


@router.get("/share-url")
def share_url(
    service: Service,
    playlist_id: str | None = Query(None, alias="playlistId"),
    privacy_status: str = Query("public", alias="privacyStatus"),
) -> Response:
    """Build a shareable feed link for a playlist."""
    result = service.generate_share_url(playlist_id, privacy_status)
    return render(result, service.session, service.settings)
