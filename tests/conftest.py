"""Test configuration and fixtures"""

import pytest
from pathlib import Path
from unittest.mock import Mock

from spot_auditor.core.config import Config, LoggingConfig, SpotifyConfig
from spot_auditor.spotify.client import SpotifyClient
from spot_auditor.spotify.models import PlaylistEntry, Track


def _track_data(
    track_id="4cOdK2wGLETKBW3PvgPWqT",
    name="Test Song",
    artists=("Test Artist",),
    album="Test Album",
    is_playable=None,
    markets=None,
    isrc=None,
    is_local=False,
    **extra
):
    data = {
        'id': track_id,
        'type': 'track',
        'name': name,
        'artists': [{'id': f'artist_{i}', 'name': a} for i, a in enumerate(artists)],
        'album': {
            'id': 'album_123',
            'name': album,
            'release_date': '2023-01-01',
        },
        'duration_ms': 210000,  # 3:30
        'popularity': 75,
        'disc_number': 1,
        'track_number': 3,
        'is_local': is_local,
        'external_urls': {'spotify': f'https://open.spotify.com/track/{track_id}'} if track_id else {},
        'external_ids': {'isrc': isrc} if isrc else {},
    }
    if is_playable is not None:
        data['is_playable'] = is_playable
    if markets is not None:
        data['available_markets'] = list(markets)
    data.update(extra)
    return data


@pytest.fixture(autouse=True)
def reset_spotify_singleton():
    """Make every test start without an initialized SpotifyClient"""
    SpotifyClient.reset()
    yield
    SpotifyClient.reset()


@pytest.fixture
def make_track_data():
    """Factory for raw Spotify API track objects"""
    return _track_data


@pytest.fixture
def make_track():
    """Factory for Track models built from raw API data"""
    def factory(**kwargs):
        return Track.from_spotify_api(_track_data(**kwargs))
    return factory


@pytest.fixture
def make_entry():
    """Factory for playlist entries; track=None gives a non-track entry"""
    def factory(**kwargs):
        if kwargs.pop('episode', False):
            return PlaylistEntry(track=None)
        return PlaylistEntry(track=Track.from_spotify_api(_track_data(**kwargs)))
    return factory


@pytest.fixture
def sample_track_data():
    """Sample saved-track item for testing"""
    return {
        'added_at': '2023-05-01T10:00:00Z',
        'track': _track_data(
            is_playable=False,
            isrc='GBUM71029604',
            artists=('Test Artist', 'Featured Artist'),
        ),
    }


@pytest.fixture
def mock_client():
    """SpotifyClient stand-in with the real method signatures"""
    return Mock(spec=SpotifyClient)


@pytest.fixture
def mock_spotipy():
    """Raw spotipy.Spotify stand-in"""
    return Mock()


@pytest.fixture
def test_config(tmp_path):
    """Fully populated configuration"""
    return Config(
        spotify=SpotifyConfig(
            client_id='test_client_id',
            client_secret='test_client_secret',
            redirect_uri='http://127.0.0.1:8888/callback',
            cache_path=tmp_path / '.spotify_token_cache.json',
            market='from_token',
            open_browser=False,
        ),
        logging=LoggingConfig(directory=None, level='INFO'),
    )


def paged(items, page_size):
    """Split items into fake Spotify paging responses"""
    pages = []
    for start in range(0, max(len(items), 1), page_size):
        chunk = items[start:start + page_size]
        has_next = start + page_size < len(items)
        pages.append({
            'items': chunk,
            'total': len(items),
            'next': 'https://api.spotify.com/next' if has_next else None,
        })
    return pages


@pytest.fixture
def make_pages():
    """Factory for fake Spotify paging responses"""
    return paged
