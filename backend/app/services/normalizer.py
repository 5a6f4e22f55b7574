"""Map YouTube Data API responses onto the flat records the web client uses."""

import html
from typing import Any, Dict, List

from app.schemas.playlist import PlaylistSummary
from app.schemas.video import VideoPage, VideoSummary

DELETED_VIDEO = "Deleted video"


def _medium_thumbnail(snippet: Dict[str, Any]) -> str | None:
    return snippet.get("thumbnails", {}).get("medium", {}).get("url")


def normalize_search_results(response: Dict[str, Any]) -> VideoPage:
    """Search results, unfiltered and unescaped, with cursors passed through."""
    videos = []
    for item in response.get("items", []):
        snippet = item.get("snippet", {})
        videos.append(
            VideoSummary(
                title=snippet.get("title"),
                videoId=item.get("id", {}).get("videoId"),
                thumbnail=_medium_thumbnail(snippet),
            )
        )

    return VideoPage(
        videos=videos,
        nextPageToken=response.get("nextPageToken"),
        prevPageToken=response.get("prevPageToken"),
    )


def normalize_playlists(response: Dict[str, Any]) -> List[PlaylistSummary]:
    """The user's playlists. Provider cursors are dropped."""
    return [
        PlaylistSummary(
            title=item.get("snippet", {}).get("title"),
            playlistId=item["id"],
            privacyStatus=item.get("status", {}).get("privacyStatus"),
        )
        for item in response.get("items", [])
    ]


def _playlist_item_video(item: Dict[str, Any]) -> VideoSummary:
    snippet = item.get("snippet", {})
    return VideoSummary(
        title=snippet.get("title"),
        videoId=snippet.get("resourceId", {}).get("videoId"),
        thumbnail=_medium_thumbnail(snippet),
    )


def is_available(video: VideoSummary) -> bool:
    """False for removed videos and entries missing any field."""
    fields = (video.title, video.videoId, video.thumbnail)
    return all(fields) and DELETED_VIDEO not in fields


def normalize_playlist_items(response: Dict[str, Any]) -> List[VideoSummary]:
    """
    Playlist items with unavailable entries removed.

    Every text field is HTML-escaped because the web client inserts these values
    straight into markup. Search and playlist listings are returned raw.
    """
    videos = []
    for item in response.get("items", []):
        video = _playlist_item_video(item)
        if not is_available(video):
            continue
        videos.append(
            VideoSummary(
                title=html.escape(video.title, quote=True),
                videoId=html.escape(video.videoId, quote=True),
                thumbnail=html.escape(video.thumbnail, quote=True),
            )
        )
    return videos


def normalize_public_playlist_items(response: Dict[str, Any]) -> VideoPage:
    """Playlist items for the public feed: raw fields, cursors passed through."""
    return VideoPage(
        videos=[_playlist_item_video(item) for item in response.get("items", [])],
        nextPageToken=response.get("nextPageToken"),
        prevPageToken=response.get("prevPageToken"),
    )
