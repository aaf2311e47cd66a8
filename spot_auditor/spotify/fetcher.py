"""
Library fetcher for spot-auditor.

This module turns raw Spotify API pages into model objects. It is the
boundary where "an item that may or may not be a track" becomes either a
Track or a tagged non-track PlaylistEntry, so the audit code never has to
inspect raw dictionaries.

All enumeration methods are generators: pages are fetched lazily and an
API failure propagates as SpotifyError from the iteration that hit it.

Usage:
    fetcher = LibraryFetcher(SpotifyClient(), market="from_token")

    for track in fetcher.iter_saved_tracks():
        ...
    for entry in fetcher.iter_playlist_entries(playlist_id):
        if entry.is_track:
            ...
"""

from typing import Iterator

from spot_auditor.core.logger import get_logger
from spot_auditor.spotify.client import SpotifyClient
from spot_auditor.spotify.models import PlaylistEntry, PlaylistSummary, Track

logger = get_logger(__name__)


class LibraryFetcher:
    """
    Reads the user's library from Spotify as model objects.

    Attributes:
        client: The SpotifyClient used for every request.
        market: Market passed to enumerations that need playability
                (see SpotifyConfig.market). None disables the filter.
    """

    def __init__(self, client: SpotifyClient, market: str | None = "from_token") -> None:
        self.client = client
        self.market = market

    def iter_saved_tracks(self, with_market: bool = True) -> Iterator[Track]:
        """
        Yield every track in Liked Songs.

        Args:
            with_market: Pass the configured market so Spotify reports
                         is_playable. Set to False to get available_markets
                         instead (Spotify never returns both).
        """
        market = self.market if with_market else None
        for item in self.client.iter_saved_track_items(market=market):
            track_data = item.get("track")
            if not track_data:
                logger.debug("Skipping saved item without track data")
                continue
            yield Track.from_spotify_api(track_data)

    def iter_playlist_entries(self, playlist_id: str) -> Iterator[PlaylistEntry]:
        """Yield every item of a playlist, tracks and non-tracks alike."""
        for item in self.client.iter_playlist_items(playlist_id, market=self.market):
            yield PlaylistEntry.from_spotify_api(item)

    def iter_playlist_tracks(self, playlist_id: str) -> Iterator[Track]:
        """Yield only the track items of a playlist."""
        for entry in self.iter_playlist_entries(playlist_id):
            if not entry.is_track:
                logger.debug(f"Skipping non-track item in playlist {playlist_id}")
                continue
            yield entry.track

    def iter_playlists(self) -> Iterator[PlaylistSummary]:
        """Yield a summary of every playlist the user owns or follows."""
        for playlist_data in self.client.iter_user_playlists():
            if not playlist_data:
                continue
            yield PlaylistSummary.from_spotify_api(playlist_data)

    def fetch_track(self, track_id: str) -> Track:
        """
        Fetch one track with full metadata.

        No market is sent, so available_markets is populated.
        """
        return Track.from_spotify_api(self.client.track(track_id))

    def liked_songs_count(self) -> int:
        """Current number of tracks in Liked Songs."""
        return self.client.saved_tracks_total()
