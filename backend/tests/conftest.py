"""
Shared fixtures for the playlist proxy tests.
In-memory session store and a mocked YouTube API resource.
"""

import json
import os
from datetime import datetime, timedelta, timezone
from typing import Annotated
from unittest.mock import MagicMock

import pytest

# Set test environment before importing the app
os.environ.setdefault("GOOGLE_DEVELOPER_KEY", "test_developer_key")
os.environ.setdefault("YOUTUBE_CLIENT_ID", "test_client_id")
os.environ.setdefault("YOUTUBE_CLIENT_SECRET", "test_client_secret")

from fastapi import Depends
from fastapi.testclient import TestClient

from app.config import Settings
from app.dependencies import get_youtube_service
from app.main import app
from app.redis_client import get_redis
from app.services.youtube_service import YouTubeService
from app.session import TOKEN_KEY, SessionHandle, get_session

SESSION_ID = "test-session"
COOKIE_NAME = "playlist_session"


class MemoryStore:
    """Dict-backed stand-in for RedisClient."""

    def __init__(self):
        self.data = {}
        self.writes = []

    def get(self, key):
        return self.data.get(key)

    def set(self, key, value, expire=None):
        self.data[key] = value
        self.writes.append((key, value, expire))
        return True

    def delete(self, key):
        return self.data.pop(key, None) is not None

    def ping(self):
        return True

    def close(self):
        pass


def make_token(expires_in=timedelta(hours=1), refresh_token="refresh-123", access_token="access-123"):
    """Build a stored token blob expiring relative to now."""
    token = {"access_token": access_token, "refresh_token": refresh_token}
    if expires_in is not None:
        token["expiry"] = (datetime.now(timezone.utc) + expires_in).isoformat()
    return json.dumps(token)


@pytest.fixture
def settings():
    return Settings(
        google_developer_key="test_developer_key",
        youtube_client_id="test_client_id",
        youtube_client_secret="test_client_secret",
        server_name="share.example.com",
        public_host="app.example.com",
    )


@pytest.fixture
def store():
    return MemoryStore()


@pytest.fixture
def session(store):
    return SessionHandle(store, SESSION_ID, ttl=3600)


@pytest.fixture
def logged_in(session):
    """Session holding a valid, unexpired token."""
    session.set(TOKEN_KEY, make_token())
    return session


@pytest.fixture
def youtube():
    """Mocked googleapiclient YouTube resource."""
    return MagicMock(name="youtube")


@pytest.fixture
def client_factory(youtube):
    return MagicMock(name="client_factory", return_value=youtube)


@pytest.fixture
def service(settings, session, client_factory):
    return YouTubeService(settings, session, client_factory=client_factory)


@pytest.fixture
def client(settings, store, client_factory):
    """TestClient with the session store and YouTube client swapped out."""

    def youtube_service_override(
        session: Annotated[SessionHandle, Depends(get_session)],
    ) -> YouTubeService:
        return YouTubeService(settings, session, client_factory=client_factory)

    app.dependency_overrides[get_redis] = lambda: store
    app.dependency_overrides[get_youtube_service] = youtube_service_override

    test_client = TestClient(app)
    test_client.cookies.set(COOKIE_NAME, SESSION_ID)
    yield test_client

    app.dependency_overrides.clear()


@pytest.fixture
def authorized(store):
    """Store a valid token for the TestClient's session."""
    SessionHandle(store, SESSION_ID).set(TOKEN_KEY, make_token())
    return store
