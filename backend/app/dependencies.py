"""Shared FastAPI dependencies."""

from typing import Annotated

from fastapi import Depends

from app.config import Settings, get_settings
from app.services.auth_service import AuthService
from app.services.youtube_service import YouTubeService
from app.session import SessionHandle, get_session


def get_youtube_service(
    settings: Annotated[Settings, Depends(get_settings)],
    session: Annotated[SessionHandle, Depends(get_session)],
) -> YouTubeService:
    """Dependency building the per-request YouTube gateway."""
    return YouTubeService(settings, session)


def get_auth_service(
    settings: Annotated[Settings, Depends(get_settings)],
) -> AuthService:
    """Dependency for the OAuth consent flow service."""
    return AuthService(settings)
