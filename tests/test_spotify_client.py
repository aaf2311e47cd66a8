"""Test the spotipy wrapper"""

from unittest.mock import Mock, patch

import pytest
import requests
import spotipy
from spotipy.oauth2 import SpotifyOauthError

from spot_auditor.core.exceptions import SpotifyError
from spot_auditor.spotify.client import SpotifyClient


def _spotify_error(status):
    return spotipy.SpotifyException(status, -1, f"http status: {status}")


class TestSingleton:
    """Test SpotifyClient initialization"""

    def test_not_initialized(self):
        assert not SpotifyClient.is_initialized()
        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient()
        assert exc_info.value.is_auth_error

    @patch("spot_auditor.spotify.client.SpotifyOAuth")
    @patch("spot_auditor.spotify.client.spotipy.Spotify")
    def test_init_once(self, mock_spotify_cls, mock_oauth, tmp_path):
        mock_spotify_cls.return_value.current_user.return_value = {'id': 'me'}

        client = SpotifyClient.init('id', 'secret', 'http://127.0.0.1:8888/callback', tmp_path / 'cache')

        assert SpotifyClient.is_initialized()
        assert SpotifyClient() is client
        scope = mock_oauth.call_args.kwargs['scope']
        assert 'user-library-modify' in scope.split()

        with pytest.raises(SpotifyError):
            SpotifyClient.init('id', 'secret', 'http://127.0.0.1:8888/callback', tmp_path / 'cache')

    @patch("spot_auditor.spotify.client.SpotifyOAuth")
    @patch("spot_auditor.spotify.client.spotipy.Spotify")
    def test_init_auth_failure(self, mock_spotify_cls, mock_oauth, tmp_path):
        mock_spotify_cls.return_value.current_user.side_effect = _spotify_error(401)

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient.init('id', 'bad', 'http://127.0.0.1:8888/callback', tmp_path / 'cache')

        assert exc_info.value.is_auth_error
        assert not SpotifyClient.is_initialized()


class TestErrorTranslation:
    """Test spotipy failures become SpotifyError"""

    def test_rate_limit(self, mock_spotipy):
        mock_spotipy.track.side_effect = _spotify_error(429)

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient.from_spotipy(mock_spotipy).track('abc')

        assert exc_info.value.is_rate_limit
        assert exc_info.value.details['http_status'] == 429

    def test_auth_expired(self, mock_spotipy):
        mock_spotipy.current_user_saved_tracks.side_effect = _spotify_error(401)

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient.from_spotipy(mock_spotipy).current_user_saved_tracks()

        assert exc_info.value.is_auth_error

    def test_not_found(self, mock_spotipy):
        mock_spotipy.playlist_items.side_effect = _spotify_error(404)

        with pytest.raises(SpotifyError, match="Not found while trying to fetch playlist items") as exc_info:
            SpotifyClient.from_spotipy(mock_spotipy).playlist_items('pl')

        assert exc_info.value.details['playlist_id'] == 'pl'

    def test_server_error(self, mock_spotipy):
        mock_spotipy.current_user_saved_tracks_add.side_effect = _spotify_error(502)

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient.from_spotipy(mock_spotipy).saved_tracks_add(['a'])

        assert not exc_info.value.is_auth_error
        assert not exc_info.value.is_rate_limit
        assert str(exc_info.value).startswith("Failed to add tracks to Liked Songs")

    def test_token_refresh_failure(self, mock_spotipy):
        mock_spotipy.current_user_saved_tracks_add.side_effect = SpotifyOauthError(
            "invalid_grant: Refresh token revoked"
        )

        with pytest.raises(SpotifyError) as exc_info:
            SpotifyClient.from_spotipy(mock_spotipy).saved_tracks_add(['a'])

        assert exc_info.value.is_auth_error
        assert isinstance(exc_info.value.__cause__, SpotifyOauthError)

    def test_network_error(self, mock_spotipy):
        mock_spotipy.current_user_playlists.side_effect = requests.exceptions.ConnectionError("down")

        with pytest.raises(SpotifyError, match="Network error"):
            SpotifyClient.from_spotipy(mock_spotipy).current_user_playlists()


class TestPagination:
    """Test lazy page walking"""

    def test_saved_tracks_pages(self, mock_spotipy, make_pages):
        items = [{'track': {'id': f't{i}'}} for i in range(120)]
        mock_spotipy.current_user_saved_tracks.side_effect = make_pages(items, 50)

        client = SpotifyClient.from_spotipy(mock_spotipy)
        result = list(client.iter_saved_track_items(market='from_token'))

        assert result == items
        offsets = [c.kwargs['offset'] for c in mock_spotipy.current_user_saved_tracks.call_args_list]
        assert offsets == [0, 50, 100]
        assert all(c.kwargs['market'] == 'from_token'
                   for c in mock_spotipy.current_user_saved_tracks.call_args_list)

    def test_pages_fetched_lazily(self, mock_spotipy, make_pages):
        items = [{'track': {'id': f't{i}'}} for i in range(150)]
        mock_spotipy.playlist_items.side_effect = make_pages(items, 100)

        iterator = SpotifyClient.from_spotipy(mock_spotipy).iter_playlist_items('pl')
        next(iterator)

        assert mock_spotipy.playlist_items.call_count == 1

    def test_playlist_items_include_episodes(self, mock_spotipy):
        mock_spotipy.playlist_items.return_value = {'items': [], 'next': None}

        list(SpotifyClient.from_spotipy(mock_spotipy).iter_playlist_items('pl'))

        kwargs = mock_spotipy.playlist_items.call_args.kwargs
        assert set(kwargs['additional_types']) == {'track', 'episode'}

    def test_empty_page_stops(self, mock_spotipy):
        mock_spotipy.current_user_playlists.return_value = {'items': [], 'next': 'more'}

        assert list(SpotifyClient.from_spotipy(mock_spotipy).iter_user_playlists()) == []
        assert mock_spotipy.current_user_playlists.call_count == 1


class TestLibraryMutations:
    """Test saved track counting and mutation"""

    def test_saved_tracks_total(self, mock_spotipy):
        mock_spotipy.current_user_saved_tracks.return_value = {'items': [{}], 'total': 1234}

        assert SpotifyClient.from_spotipy(mock_spotipy).saved_tracks_total() == 1234
        assert mock_spotipy.current_user_saved_tracks.call_args.kwargs['limit'] == 1

    def test_add_and_delete(self, mock_spotipy):
        client = SpotifyClient.from_spotipy(mock_spotipy)

        client.saved_tracks_add(['a', 'b'])
        client.saved_tracks_delete(['c'])

        mock_spotipy.current_user_saved_tracks_add.assert_called_once_with(tracks=['a', 'b'])
        mock_spotipy.current_user_saved_tracks_delete.assert_called_once_with(tracks=['c'])

    def test_batch_over_limit(self, mock_spotipy):
        client = SpotifyClient.from_spotipy(mock_spotipy)

        with pytest.raises(ValueError):
            client.saved_tracks_add([f'id{i}' for i in range(51)])
        mock_spotipy.current_user_saved_tracks_add.assert_not_called()

    def test_track_not_found(self, mock_spotipy):
        mock_spotipy.track.return_value = None

        with pytest.raises(SpotifyError, match="Track not found"):
            SpotifyClient.from_spotipy(mock_spotipy).track('abc')
