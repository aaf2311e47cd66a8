"""
Sync orchestrator: copies a playlist's tracks into Liked Songs.
"""

from spot_auditor.audit.batch import BatchOperation, apply_in_batches
from spot_auditor.audit.reports import SyncReport
from spot_auditor.core.logger import get_logger
from spot_auditor.spotify.client import SpotifyClient
from spot_auditor.spotify.fetcher import LibraryFetcher
from spot_auditor.utils import parse_playlist_id

logger = get_logger(__name__)


def sync_playlist_to_liked(
    fetcher: LibraryFetcher,
    client: SpotifyClient,
    playlist_id: str
) -> SyncReport:
    """
    Save every track of a playlist to Liked Songs.

    Args:
        fetcher: Source of playlist entries and the Liked Songs count.
        client: Client used for the save requests.
        playlist_id: Playlist ID, URI or URL as supplied by the user.

    Returns:
        SyncReport with before/after counts and one log per batch.
        Failed batches are recorded in the report, not raised.

    Raises:
        InvalidIdentifierError: If playlist_id does not parse. Raised
                                before any request is made.
        SpotifyError: If counting or enumeration fails.

    Behavior:
        1. Validate the playlist ID
        2. Count Liked Songs
        3. Enumerate the playlist; every item counts toward the playlist
           total, only tracks with an ID are collected (local files and
           episodes are skipped)
        4. With nothing collected, stop without any save request
        5. Save collected IDs in batches of 50
        6. Count Liked Songs again and estimate how many were added
    """
    playlist_id = parse_playlist_id(playlist_id)

    report = SyncReport(initial_liked_count=fetcher.liked_songs_count())

    track_ids: list[str] = []
    for entry in fetcher.iter_playlist_entries(playlist_id):
        report.total_tracks_in_playlist += 1
        if entry.is_track and entry.track.spotify_id is not None:
            track_ids.append(entry.track.spotify_id)

    report.tracks_processed = len(track_ids)
    logger.info(
        f"Playlist {playlist_id}: {report.total_tracks_in_playlist} items, "
        f"{report.tracks_processed} syncable tracks"
    )

    if not track_ids:
        report.final_liked_count = report.initial_liked_count
        return report

    report.batch_logs = apply_in_batches(client, track_ids, BatchOperation.ADD_TO_LIKED)

    failed = report.failed_batches
    if failed:
        logger.warning(f"{len(failed)} of {len(report.batch_logs)} batches failed")

    report.final_liked_count = fetcher.liked_songs_count()
    report.estimated_added = max(0, report.final_liked_count - report.initial_liked_count)

    return report
