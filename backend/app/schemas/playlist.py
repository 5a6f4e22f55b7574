from pydantic import BaseModel, ConfigDict, Field


class PlaylistSummary(BaseModel):
    """Flat playlist record returned to the web client."""

    title: str | None = None
    playlistId: str
    privacyStatus: str | None = None  # "public", "unlisted", "private"


class CreatePlaylistRequest(BaseModel):
    """Request body for creating a playlist seeded with one video."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    video_id: str | None = None
    playlist_title: str | None = None
    privacy_status: str | None = Field(None, alias="privacyStatus")


class AddToPlaylistRequest(BaseModel):
    """Request body for adding a video to an existing playlist."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")

    video_id: str | None = None
    playlist_id: str | None = Field(None, alias="playlistId")


class ShareUrlResponse(BaseModel):
    """Share URL wrapping the playlist's YouTube link."""

    share_url: str = ""
