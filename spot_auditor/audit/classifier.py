"""
Track classifier: decides whether a track is problematic.
"""

from spot_auditor.audit.reports import ProblematicTrack
from spot_auditor.spotify.models import Track


UNPLAYABLE_REASON = "Track marked as unplayable by Spotify"

# Placeholder ID for tracks without one (local files)
UNKNOWN_TRACK_ID = "unknown"


def classify_track(track: Track) -> ProblematicTrack | None:
    """
    Return a problem report for an unplayable track, or None.

    Only an explicit is_playable=False flags a track. Spotify omits the
    flag when the request had no market, and a missing flag is treated
    as playable.
    """
    if track.is_playable is not False:
        return None
    return create_problem_report(track, UNPLAYABLE_REASON)


def create_problem_report(track: Track, reason: str) -> ProblematicTrack:
    return ProblematicTrack(
        id=track.spotify_id or UNKNOWN_TRACK_ID,
        name=track.name,
        artists=track.artist_names,
        album=track.album,
        reason=reason,
        external_url=track.spotify_url,
        available_markets_count=track.market_count,
    )
