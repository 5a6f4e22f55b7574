from pydantic import BaseModel


class VideoSummary(BaseModel):
    """Flat video record returned to the web client."""

    title: str | None = None
    videoId: str | None = None
    thumbnail: str | None = None


class VideoPage(BaseModel):
    """A page of videos with the provider's cursors passed through."""

    videos: list[VideoSummary] = []
    nextPageToken: str | None = None
    prevPageToken: str | None = None
