"""
Duplicate resolution for Liked Songs.

Spotify often carries the same recording under several track IDs
(re-releases, compilations, relinked catalog entries). When an old copy
is pulled from the catalog, Liked Songs keeps a dead entry next to a
live one. Tracks sharing an ISRC are the same recording, so this module
keeps one copy per ISRC and removes the rest.

Keep/remove policy:
    1. Group tracks by ISRC; tracks without one are never touched.
    2. In each group of two or more, the track available in the most
       markets is kept (ties go to the one seen first).
    3. If even that track has no markets, the whole group is left alone.
    4. Every other copy is removed, including copies that are still
       available somewhere: one canonical copy survives.
"""

from collections import OrderedDict
from typing import Iterable

from spot_auditor.audit.batch import BatchOperation, apply_in_batches
from spot_auditor.audit.reports import DedupReport
from spot_auditor.core.logger import get_logger
from spot_auditor.spotify.client import SpotifyClient
from spot_auditor.spotify.fetcher import LibraryFetcher
from spot_auditor.spotify.models import Track

logger = get_logger(__name__)


def group_by_isrc(tracks: Iterable[Track]) -> "OrderedDict[str, list[Track]]":
    """
    Group tracks by ISRC, keeping first-seen order for groups and members.

    Tracks without an ISRC are dropped.
    """
    groups: OrderedDict[str, list[Track]] = OrderedDict()
    for track in tracks:
        isrc = track.isrc
        if isrc is None:
            continue
        groups.setdefault(isrc, []).append(track)
    return groups


def resolve_duplicates(tracks: Iterable[Track]) -> tuple[list[str], list[str]]:
    """
    Choose which duplicate tracks to remove.

    Args:
        tracks: Every track of the collection being deduplicated.

    Returns:
        (track_ids_to_remove, descriptions). Both lists are aligned;
        each description reads "<name> (Markets: <n>)". IDs appear at
        most once, in group-then-member order.
    """
    return _resolve_groups(group_by_isrc(tracks))


def _resolve_groups(groups: "OrderedDict[str, list[Track]]") -> tuple[list[str], list[str]]:
    to_remove: list[str] = []
    descriptions: list[str] = []
    seen: set[str] = set()

    for isrc, members in groups.items():
        if len(members) < 2:
            continue

        logger.debug(f"Checking ISRC {isrc} with {len(members)} duplicates")

        # sorted() is stable, so equal counts keep encounter order
        ranked = sorted(members, key=lambda t: t.market_count, reverse=True)
        keeper = ranked[0]

        if keeper.market_count == 0:
            logger.debug(f"  -> Skipping ISRC {isrc}: no copy is available anywhere")
            continue

        for duplicate in ranked[1:]:
            dup_id = duplicate.spotify_id
            if dup_id is None or dup_id == keeper.spotify_id or dup_id in seen:
                continue

            logger.debug(
                f"  -> Marking for removal: {duplicate.name} ({duplicate.market_count} markets) "
                f"vs keeper ({keeper.market_count} markets)"
            )
            seen.add(dup_id)
            to_remove.append(dup_id)
            descriptions.append(f"{duplicate.name} (Markets: {duplicate.market_count})")

    return to_remove, descriptions


def deduplicate_liked_songs(
    fetcher: LibraryFetcher,
    client: SpotifyClient,
    dry_run: bool = False
) -> DedupReport:
    """
    Remove redundant ISRC duplicates from Liked Songs.

    Liked Songs is enumerated without a market filter so every track
    carries its available_markets.

    Args:
        fetcher: Source of saved tracks.
        client: Client used for the remove requests.
        dry_run: Only report what would be removed.

    Returns:
        DedupReport describing the removals.

    Raises:
        SpotifyError: If enumeration fails (before anything is removed)
                      or a remove batch fails (earlier batches stay applied).
    """
    tracks = list(fetcher.iter_saved_tracks(with_market=False))
    groups = group_by_isrc(tracks)
    to_remove, descriptions = _resolve_groups(groups)

    report = DedupReport(
        total_tracks_scanned=len(tracks),
        duplicate_groups=sum(1 for members in groups.values() if len(members) > 1),
        removed_track_ids=to_remove,
        removed_descriptions=descriptions,
        dry_run=dry_run,
    )

    if not to_remove:
        logger.info("No removable duplicates found")
        return report

    if dry_run:
        logger.info(f"Dry run: {len(to_remove)} duplicate tracks would be removed")
        return report

    logger.info(f"Removing {len(to_remove)} duplicate/dead tracks...")
    report.batch_logs = apply_in_batches(
        client,
        to_remove,
        BatchOperation.REMOVE_FROM_LIKED,
        stop_on_error=True
    )
    return report
