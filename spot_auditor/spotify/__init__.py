"""
Spotify module for spot-auditor.

This module handles all Spotify API interactions:
    - client: Singleton spotipy wrapper with lazy pagination
    - fetcher: Converts API pages into model objects
    - models: Track, PlaylistEntry, PlaylistSummary, TrackInspection

Usage:
    from spot_auditor.spotify import SpotifyClient, LibraryFetcher

    SpotifyClient.init(client_id, client_secret, redirect_uri, cache_path)
    fetcher = LibraryFetcher(SpotifyClient())
"""

from spot_auditor.spotify.client import SpotifyClient
from spot_auditor.spotify.fetcher import LibraryFetcher
from spot_auditor.spotify.models import (
    PlaylistEntry,
    PlaylistSummary,
    Track,
    TrackInspection,
)

__all__ = [
    "SpotifyClient",
    "LibraryFetcher",
    "Track",
    "PlaylistEntry",
    "PlaylistSummary",
    "TrackInspection",
]
