"""
Text and JSON rendering of audit results.

Every render_* function returns the full text block as a string; the
CLI decides where it goes. JSON reports are the to_dict() form of the
report records, pretty-printed.
"""

import json
from pathlib import Path
from typing import Any

from spot_auditor.audit.reports import AuditSummary, DedupReport, SyncReport
from spot_auditor.spotify.models import PlaylistSummary, TrackInspection


RULE = "-" * 51

NAME_WIDTH = 28
OWNER_WIDTH = 18
MARKETS_LISTED_MAX = 10
MARKETS_PREVIEW = 5

LEGEND = (
    "Legend:\n"
    "  [REMOVED GLOBALLY]: Track has been removed from Spotify entirely (0 markets).\n"
    "  [GEO-LOCKED]:       Track is available in other countries but restricted in yours."
)


def _truncate(text: str, width: int) -> str:
    if len(text) > width:
        return f"{text[:width]}.."
    return text


def render_audit_report(summary: AuditSummary, target: str) -> str:
    """
    Render the AUDIT REPORT block.

    Args:
        summary: Result of a scan.
        target: Human label for what was scanned ("Liked Songs" or "Playlist").
    """
    lines = [
        "",
        RULE,
        "AUDIT REPORT",
        RULE,
        f"Target:               {target}",
        f"Total Tracks Scanned: {summary.total_tracks_scanned}",
        f"Problematic Tracks:   {summary.problem_count}",
        RULE,
        "",
    ]

    if summary.problematic_tracks:
        lines.append("Found the following issues:")
        for i, track in enumerate(summary.problematic_tracks, 1):
            lines.append(f"{i}. {track}")
        lines.append("")
        lines.append(LEGEND)
    else:
        lines.append("No unplayable tracks found. Clean!")

    return "\n".join(lines)


def render_sync_report(report: SyncReport) -> str:
    """Render the SYNC COMPLETE block, including any failed batches."""
    lines = [
        "",
        RULE,
        "SYNC COMPLETE",
        RULE,
        f"Initial Liked Songs:       {report.initial_liked_count}",
        f"Tracks in Source Playlist: {report.total_tracks_in_playlist}",
        f"Tracks Processed:          {report.tracks_processed}",
        f"Final Liked Songs:         {report.final_liked_count}",
        RULE,
        f"Estimated New Tracks Added: {report.estimated_added}",
        RULE,
    ]

    failed = report.failed_batches
    if failed:
        lines.append("")
        lines.append(f"[WARNING] {len(failed)} batch(es) failed:")
        for log in failed:
            lines.append(f"   Batch {log.batch_index} ({log.tracks_count} tracks): {log.status}")

    return "\n".join(lines)


def render_playlist_table(playlists: list[PlaylistSummary]) -> str:
    """
    Render playlists as an aligned table.

    Names longer than 28 characters and owners longer than 18 are cut
    and suffixed with "..".
    """
    row = "{:<25} | {:<30} | {:<20} | {:<6} | {:<5}"
    lines = [
        "",
        row.format("ID", "Name", "Owner", "Tracks", "Collab"),
        "-+-".join("-" * width for width in (25, 30, 20, 6, 5)),
    ]

    for playlist in playlists:
        lines.append(row.format(
            playlist.id.replace("spotify:playlist:", ""),
            _truncate(playlist.name, NAME_WIDTH),
            _truncate(playlist.owner_name, OWNER_WIDTH),
            playlist.total_tracks,
            "Yes" if playlist.is_collaborative else "No",
        ))

    lines.append("")
    lines.append("Tip: Copy an ID and run 'spot-audit sync <ID>'")
    return "\n".join(lines)


def _format_markets(markets: tuple[str, ...]) -> str:
    if not markets:
        return "   [REMOVED GLOBALLY] (0 markets)"
    if len(markets) > MARKETS_LISTED_MAX:
        preview = ", ".join(markets[:MARKETS_PREVIEW])
        return f"   Available in {len(markets)} markets (including: {preview}, ...)"
    return f"   {', '.join(markets)}"


def _format_playable(is_playable: bool | None) -> str:
    if is_playable is None:
        return "Unknown"
    return "Yes" if is_playable else "No"


def render_track_inspection(info: TrackInspection) -> str:
    """Render the TRACK FORENSICS block."""
    minutes, seconds = divmod(info.duration_ms // 1000, 60)

    lines = [
        "",
        "TRACK FORENSICS",
        RULE,
        f"Name:          {info.name}",
        f"Artists:       {', '.join(info.artists)}",
        f"Album:         {info.album}",
        f"Release Date:  {info.release_date}",
        f"Duration:      {minutes}:{seconds:02d}",
        f"Position:      Disc {info.disc_number}, Track {info.track_number}",
        f"Popularity:    {info.popularity} / 100",
        f"Is Playable:   {_format_playable(info.is_playable)}",
        f"Local File:    {'Yes' if info.is_local else 'No'}",
        RULE,
        f"MARKETS ({len(info.available_markets)})",
        _format_markets(info.available_markets),
        RULE,
        "EXTERNAL IDS",
    ]
    lines.extend(f"   {key}: {value}" for key, value in info.external_ids.items())
    lines.append(RULE)
    lines.append("LINKS")
    lines.extend(f"   {key}: {value}" for key, value in info.external_urls.items())

    return "\n".join(lines)


def render_dedup_report(report: DedupReport) -> str:
    """Render the outcome of a deduplication run."""
    lines = [""]

    if not report.removed_track_ids:
        lines.append("[OK] No safe duplicates found. Your library is clean.")
        return "\n".join(lines)

    count = len(report.removed_track_ids)
    if report.dry_run:
        lines.append(f"[DRY RUN] Would remove {count} dead duplicate tracks:")
    else:
        lines.append(f"[CLEANUP] Removed {count} dead duplicate tracks:")
    lines.extend(f"   - {description}" for description in report.removed_descriptions)
    lines.append("")
    lines.append(
        f"Scanned {report.total_tracks_scanned} tracks, "
        f"{report.duplicate_groups} ISRC group(s) with duplicates."
    )
    lines.append("(Note: the most widely available version of each track was kept.)")

    return "\n".join(lines)


def write_json_report(path: Path, data: dict[str, Any]) -> None:
    """
    Write a report dict as pretty-printed JSON.

    Raises:
        OSError: If the file cannot be written.
    """
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        json.dump(data, f, indent=2, ensure_ascii=False)
        f.write("\n")
