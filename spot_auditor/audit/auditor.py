"""
Auditor facade.

Bundles every library operation behind one object holding the client
and fetcher, which is what the CLI talks to.

Usage:
    auditor = Auditor(SpotifyClient(), market=config.spotify.market)
    summary = auditor.scan_liked_songs()
"""

from typing import Iterable, Iterator, Callable

from spot_auditor.audit.dedup import deduplicate_liked_songs
from spot_auditor.audit.reports import AuditSummary, DedupReport, SyncReport
from spot_auditor.audit.scanner import scan_tracks
from spot_auditor.audit.sync import sync_playlist_to_liked
from spot_auditor.core.logger import get_logger
from spot_auditor.spotify.client import SpotifyClient
from spot_auditor.spotify.fetcher import LibraryFetcher
from spot_auditor.spotify.models import PlaylistSummary, Track, TrackInspection
from spot_auditor.utils import parse_playlist_id, parse_track_id

logger = get_logger(__name__)


def _passthrough(items: Iterable[Track]) -> Iterator[Track]:
    yield from items


class Auditor:
    """
    Entry point for scanning, listing, inspecting, syncing and deduplicating.

    Attributes:
        client: SpotifyClient used for every request.
        fetcher: LibraryFetcher built on the client.
        track_wrapper: Wraps track sources before scanning; the CLI
                       passes a progress bar here.
    """

    def __init__(
        self,
        client: SpotifyClient,
        market: str | None = "from_token",
        track_wrapper: Callable[[Iterable[Track]], Iterator[Track]] = _passthrough
    ) -> None:
        self.client = client
        self.fetcher = LibraryFetcher(client, market=market)
        self.track_wrapper = track_wrapper

    def scan_liked_songs(self) -> AuditSummary:
        """Scan Liked Songs for unplayable tracks."""
        logger.info("Scanning Liked Songs")
        return scan_tracks(
            self.track_wrapper(self.fetcher.iter_saved_tracks()),
            market_lookup=self.fetcher.fetch_track
        )

    def scan_playlist(self, playlist_id: str) -> AuditSummary:
        """
        Scan one playlist for unplayable tracks.

        Non-track items (episodes, removed placeholders) are skipped and
        not counted.

        Raises:
            InvalidIdentifierError: If playlist_id does not parse.
            SpotifyError: If enumeration or a market lookup fails.
        """
        playlist_id = parse_playlist_id(playlist_id)
        logger.info(f"Scanning playlist {playlist_id}")
        return scan_tracks(
            self.track_wrapper(self.fetcher.iter_playlist_tracks(playlist_id)),
            market_lookup=self.fetcher.fetch_track
        )

    def inspect_track(self, track_id: str) -> TrackInspection:
        """
        Retrieve full forensic metadata for one track.

        Raises:
            InvalidIdentifierError: If track_id does not parse.
            SpotifyError: If the lookup fails.
        """
        track_id = parse_track_id(track_id)
        return TrackInspection.from_track(self.fetcher.fetch_track(track_id))

    def list_playlists(self) -> list[PlaylistSummary]:
        """List every playlist the user owns or follows."""
        return list(self.fetcher.iter_playlists())

    def sync_playlist_to_liked(self, playlist_id: str) -> SyncReport:
        """Save every track of a playlist to Liked Songs."""
        return sync_playlist_to_liked(self.fetcher, self.client, playlist_id)

    def deduplicate_liked_songs(self, dry_run: bool = False) -> DedupReport:
        """Remove redundant ISRC duplicates from Liked Songs."""
        return deduplicate_liked_songs(self.fetcher, self.client, dry_run=dry_run)
