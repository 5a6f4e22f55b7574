from app.schemas.auth import LoginStatus, StoredToken
from app.schemas.video import VideoPage, VideoSummary
from app.schemas.playlist import (
    AddToPlaylistRequest,
    CreatePlaylistRequest,
    PlaylistSummary,
    ShareUrlResponse,
)

__all__ = [
    "LoginStatus",
    "StoredToken",
    "VideoPage",
    "VideoSummary",
    "AddToPlaylistRequest",
    "CreatePlaylistRequest",
    "PlaylistSummary",
    "ShareUrlResponse",
]
