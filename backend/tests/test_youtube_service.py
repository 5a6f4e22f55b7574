"""
Tests for the YouTube gateway operations
Provider calls go to a mocked googleapiclient resource
"""

import json
from datetime import datetime, timedelta, timezone
from unittest.mock import MagicMock, patch

from google.oauth2.credentials import Credentials
from googleapiclient.errors import HttpError

from app.errors import AuthFailed, ProviderError, ValidationFailed
from app.schemas.playlist import AddToPlaylistRequest, CreatePlaylistRequest
from app.services.youtube_service import (
    NEW_PLAYLIST_DESCRIPTION,
    fetch_public_playlist_videos,
    playlist_id_from_url,
)
from app.session import TOKEN_KEY
from conftest import make_token


def http_error(status=403, reason="quotaExceeded"):
    resp = MagicMock(status=status, reason=reason)
    return HttpError(resp, json.dumps({"error": {"message": reason}}).encode())


SEARCH_RESPONSE = {
    "items": [
        {
            "id": {"videoId": "jazz1"},
            "snippet": {"title": "Jazz one", "thumbnails": {"medium": {"url": "https://t/1.jpg"}}},
        },
        {"id": {"videoId": "jazz2"}, "snippet": {"title": "Jazz two", "thumbnails": {}}},
    ],
    "nextPageToken": "NEXT",
}


class TestSearchVideos:
    """search_videos"""

    def test_anonymous_search_uses_developer_key_client(self, service, youtube, client_factory, settings):
        youtube.search.return_value.list.return_value.execute.return_value = SEARCH_RESPONSE

        result = service.search_videos("jazz")

        assert result.ok
        client_factory.assert_called_once_with(settings)
        youtube.search.return_value.list.assert_called_once_with(
            part="id,snippet", q="jazz", maxResults=20
        )
        assert result.payload == {
            "videos": [
                {"title": "Jazz one", "videoId": "jazz1", "thumbnail": "https://t/1.jpg"},
                {"title": "Jazz two", "videoId": "jazz2", "thumbnail": None},
            ],
            "nextPageToken": "NEXT",
            "prevPageToken": None,
        }

    def test_default_keyword_and_page_token(self, service, youtube):
        youtube.search.return_value.list.return_value.execute.return_value = {"items": []}

        service.search_videos(None, "PAGE2")

        youtube.search.return_value.list.assert_called_once_with(
            part="id,snippet", q="Lo-Fi", maxResults=20, pageToken="PAGE2"
        )

    def test_empty_keyword_is_sent_as_is(self, service, youtube):
        youtube.search.return_value.list.return_value.execute.return_value = {"items": []}

        service.search_videos("")

        youtube.search.return_value.list.assert_called_once_with(
            part="id,snippet", q="", maxResults=20
        )

    def test_logged_in_search_uses_user_credentials(self, service, logged_in, youtube, client_factory, settings):
        youtube.search.return_value.list.return_value.execute.return_value = {"items": []}

        assert service.search_videos("jazz").ok

        args = client_factory.call_args.args
        assert args[0] is settings
        assert args[1].token == "access-123"

    def test_bad_session_token_redirects(self, service, session, client_factory):
        session.set(TOKEN_KEY, json.dumps({"refresh_token": "r"}))

        result = service.search_videos("jazz")

        assert isinstance(result.error, AuthFailed)
        client_factory.assert_not_called()

    def test_provider_error_surfaces_message(self, service, youtube):
        youtube.search.return_value.list.return_value.execute.side_effect = http_error()

        result = service.search_videos("jazz")

        assert isinstance(result.error, ProviderError)
        assert "quotaExceeded" in result.error.message


class TestGuardedOperations:
    """Operations that require a logged-in session"""

    def test_no_token_redirects_without_provider_call(self, service, client_factory):
        results = [
            service.list_playlists(),
            service.list_playlist_items("PL1"),
            service.create_playlist_and_add(
                CreatePlaylistRequest(video_id="v", playlist_title="t", privacy_status="public")
            ),
            service.add_to_existing_playlist(AddToPlaylistRequest(video_id="v", playlist_id="PL1")),
        ]

        assert all(isinstance(r.error, AuthFailed) for r in results)
        client_factory.assert_not_called()

    def test_expired_token_refreshed_before_provider_call(self, service, session, store, youtube, client_factory):
        session.set(TOKEN_KEY, make_token(expires_in=timedelta(hours=-1)))
        youtube.playlists.return_value.list.return_value.execute.return_value = {"items": []}
        seen_tokens = []

        def fake_refresh(creds, request):
            creds.token = "access-new"
            creds.expiry = datetime.now(timezone.utc).replace(tzinfo=None) + timedelta(hours=1)

        def record_stored_token(*args):
            seen_tokens.append(json.loads(session.get(TOKEN_KEY))["access_token"])
            return youtube

        client_factory.side_effect = record_stored_token

        with patch.object(Credentials, "refresh", autospec=True, side_effect=fake_refresh) as refresh:
            assert service.list_playlists().ok

        assert refresh.call_count == 1
        assert seen_tokens == ["access-new"]


class TestListPlaylists:
    """list_playlists"""

    RESPONSE = {
        "items": [
            {"id": "PL1", "snippet": {"title": "Chill"}, "status": {"privacyStatus": "unlisted"}},
        ],
        "nextPageToken": "IGNORED",
    }

    def test_lists_mine(self, service, logged_in, youtube):
        youtube.playlists.return_value.list.return_value.execute.return_value = self.RESPONSE

        result = service.list_playlists()

        youtube.playlists.return_value.list.assert_called_once_with(
            part="id,snippet,status", mine=True, maxResults=20
        )
        assert result.payload == [{"title": "Chill", "playlistId": "PL1", "privacyStatus": "unlisted"}]

    def test_repeated_calls_are_identical(self, service, logged_in, youtube):
        youtube.playlists.return_value.list.return_value.execute.return_value = self.RESPONSE

        assert service.list_playlists().payload == service.list_playlists().payload

    def test_provider_error(self, service, logged_in, youtube):
        youtube.playlists.return_value.list.return_value.execute.side_effect = http_error(401, "authError")

        result = service.list_playlists()

        assert isinstance(result.error, ProviderError)


class TestListPlaylistItems:
    """list_playlist_items"""

    def test_missing_playlist_id(self, service, logged_in, client_factory):
        result = service.list_playlist_items(None)

        assert isinstance(result.error, ValidationFailed)
        client_factory.assert_not_called()

    def test_filters_and_escapes(self, service, logged_in, youtube):
        youtube.playlistItems.return_value.list.return_value.execute.return_value = {
            "items": [
                {
                    "snippet": {
                        "title": "<b>Live</b>",
                        "resourceId": {"videoId": "v1"},
                        "thumbnails": {"medium": {"url": "https://t/1.jpg"}},
                    }
                },
                {
                    "snippet": {
                        "title": "Deleted video",
                        "resourceId": {"videoId": "v2"},
                        "thumbnails": {"medium": {"url": "https://t/2.jpg"}},
                    }
                },
            ]
        }

        result = service.list_playlist_items("PL1")

        youtube.playlistItems.return_value.list.assert_called_once_with(
            part="id,snippet", playlistId="PL1", maxResults=20
        )
        assert result.payload == [
            {"title": "&lt;b&gt;Live&lt;/b&gt;", "videoId": "v1", "thumbnail": "https://t/1.jpg"}
        ]


class TestShareUrl:
    """generate_share_url"""

    def test_builds_wrapped_url(self, service):
        result = service.generate_share_url("PL123", "private")

        assert result.payload == {
            "share_url": "https://share.example.com/Index?feed_url="
            "https%3A%2F%2Fwww.youtube.com%2Fplaylist%3Flist%3DPL123"
        }

    def test_missing_playlist_id_gives_empty_url(self, service):
        result = service.generate_share_url(None)

        assert result.ok
        assert result.payload == {"share_url": ""}


class TestCreatePlaylistAndAdd:
    """create_playlist_and_add"""

    def test_missing_fields_fail_before_guard(self, service, client_factory):
        with patch.object(service.guard, "ensure_valid") as ensure_valid:
            result = service.create_playlist_and_add(
                CreatePlaylistRequest(video_id="v1", playlist_title="", privacy_status="public")
            )

        assert isinstance(result.error, ValidationFailed)
        ensure_valid.assert_not_called()
        client_factory.assert_not_called()

    def test_creates_playlist_then_inserts_video(self, service, logged_in, youtube):
        youtube.playlists.return_value.insert.return_value.execute.return_value = {"id": "PLNEW"}

        result = service.create_playlist_and_add(
            CreatePlaylistRequest(video_id="v1", playlist_title="Road trip", privacy_status="unlisted")
        )

        assert result.payload == {"success": "Video added to new playlist successfully."}
        youtube.playlists.return_value.insert.assert_called_once_with(
            part="snippet,status",
            body={
                "snippet": {"title": "Road trip", "description": NEW_PLAYLIST_DESCRIPTION},
                "status": {"privacyStatus": "unlisted"},
            },
        )
        youtube.playlistItems.return_value.insert.assert_called_once_with(
            part="snippet",
            body={
                "snippet": {
                    "playlistId": "PLNEW",
                    "resourceId": {"kind": "youtube#video", "videoId": "v1"},
                }
            },
        )

    def test_item_failure_leaves_orphaned_playlist(self, service, logged_in, youtube):
        youtube.playlists.return_value.insert.return_value.execute.return_value = {"id": "PLNEW"}
        youtube.playlistItems.return_value.insert.return_value.execute.side_effect = http_error(404, "videoNotFound")

        result = service.create_playlist_and_add(
            CreatePlaylistRequest(video_id="gone", playlist_title="Road trip", privacy_status="public")
        )

        assert isinstance(result.error, ProviderError)
        assert "PLNEW" not in result.error.message
        youtube.playlists.return_value.insert.return_value.execute.assert_called_once()
        youtube.playlists.return_value.delete.assert_not_called()


class TestAddToExistingPlaylist:
    """add_to_existing_playlist"""

    def test_missing_playlist_id(self, service, logged_in, client_factory):
        result = service.add_to_existing_playlist(AddToPlaylistRequest(video_id="v1"))

        assert isinstance(result.error, ValidationFailed)
        client_factory.assert_not_called()

    def test_inserts_single_item(self, service, logged_in, youtube):
        result = service.add_to_existing_playlist(
            AddToPlaylistRequest(video_id="v1", playlist_id="PL1")
        )

        assert result.payload == {"success": "Video added to existing playlist successfully."}
        youtube.playlistItems.return_value.insert.return_value.execute.assert_called_once()


class TestPublicFeed:
    """playlist_id_from_url and fetch_public_playlist_videos"""

    def test_playlist_id_from_url(self):
        assert playlist_id_from_url("https://www.youtube.com/playlist?list=PL42&x=1") == "PL42"
        assert playlist_id_from_url("https://www.youtube.com/watch?v=abc") is None
        assert playlist_id_from_url(None) is None

    def test_fetch_honours_page_token(self, settings, youtube, client_factory):
        youtube.playlistItems.return_value.list.return_value.execute.return_value = {
            "items": [
                {"snippet": {"title": "A", "resourceId": {"videoId": "v1"}, "thumbnails": {}}}
            ],
            "prevPageToken": "PREV",
        }

        page = fetch_public_playlist_videos(settings, "PL42", "P2", client_factory=client_factory)

        youtube.playlistItems.return_value.list.assert_called_once_with(
            part="id,snippet", playlistId="PL42", maxResults=20, pageToken="P2"
        )
        assert page == {
            "videos": [{"title": "A", "videoId": "v1", "thumbnail": None}],
            "nextPageToken": None,
            "prevPageToken": "PREV",
        }

    def test_fetch_error_returns_empty_page(self, settings, youtube, client_factory):
        youtube.playlistItems.return_value.list.return_value.execute.side_effect = http_error()

        page = fetch_public_playlist_videos(settings, "PL42", client_factory=client_factory)

        assert page == {"videos": [], "nextPageToken": None, "prevPageToken": None}
