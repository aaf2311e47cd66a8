"""
Audit engine: walks a track source and collects problematic tracks.
"""

from dataclasses import replace
from typing import Callable, Iterable

from spot_auditor.audit.classifier import classify_track
from spot_auditor.audit.reports import AuditSummary
from spot_auditor.core.logger import get_logger
from spot_auditor.spotify.models import Track

logger = get_logger(__name__)


def scan_tracks(
    tracks: Iterable[Track],
    market_lookup: Callable[[str], Track] | None = None
) -> AuditSummary:
    """
    Classify every track of a source and summarize the result.

    Args:
        tracks: Lazy track source, e.g. LibraryFetcher.iter_saved_tracks().
                It is consumed exactly once.
        market_lookup: Fetches a track by ID with its available_markets.
                       Called for each flagged track that arrived without
                       market data, which is the case whenever the source
                       was enumerated with a market filter.

    Returns:
        AuditSummary with one count per track and problems in source order.

    Raises:
        SpotifyError: If the source or a market lookup fails. No partial
                      summary is returned.
    """
    summary = AuditSummary()

    for track in tracks:
        summary.total_tracks_scanned += 1
        problem = classify_track(track)
        if problem is None:
            continue

        if market_lookup is not None and not track.available_markets and track.spotify_id:
            full = market_lookup(track.spotify_id)
            problem = replace(problem, available_markets_count=full.market_count)

        logger.debug(f"Problematic track: {problem}")
        summary.add_problem(problem)

    logger.info(
        f"Scanned {summary.total_tracks_scanned} tracks, "
        f"{summary.problem_count} problematic"
    )
    return summary
