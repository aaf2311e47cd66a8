"""
Report records produced by the audit engine.

Every record converts to and from a plain dictionary with stable field
names, which is what the JSON export writes. Tuples become lists in the
dictionary form and are restored by from_dict().

Records:
    ProblematicTrack - One unplayable track found by a scan
    AuditSummary - Result of a scan
    SyncBatchLog - Outcome of one mutation batch
    SyncReport - Result of a playlist-to-Liked-Songs sync
    DedupReport - Result of a Liked Songs deduplication
"""

from dataclasses import dataclass, field
from typing import Any


BATCH_SUCCESS = "Success"


@dataclass(frozen=True)
class ProblematicTrack:
    """
    A track that is found to be problematic (grey/unplayable).

    Attributes:
        id: Spotify track ID, or "unknown" for tracks without one.
        name: Track title.
        artists: All artist names joined with ", ".
        album: Album name.
        reason: Technical reason, e.g. "Track marked as unplayable by Spotify".
        external_url: Spotify link, empty if missing.
        available_markets_count: Number of markets carrying the track.
                                 0 means the track was removed globally.
    """

    id: str
    name: str
    artists: str
    album: str
    reason: str
    external_url: str
    available_markets_count: int

    @property
    def status(self) -> str:
        """[REMOVED GLOBALLY] for 0 markets, [GEO-LOCKED] otherwise."""
        if self.available_markets_count == 0:
            return "[REMOVED GLOBALLY]"
        return f"[GEO-LOCKED] (Available in {self.available_markets_count} markets)"

    def __str__(self) -> str:
        return (
            f"[{self.id}] {self.name} - {self.artists} (Album: {self.album}) "
            f"-> {self.reason} | {self.status}"
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "artists": self.artists,
            "album": self.album,
            "reason": self.reason,
            "external_url": self.external_url,
            "available_markets_count": self.available_markets_count,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "ProblematicTrack":
        return cls(**data)


@dataclass
class AuditSummary:
    """
    Summary of a library scan.

    Created empty when a scan starts and filled while the source is
    enumerated. Problems keep the order in which tracks were seen.
    """

    total_tracks_scanned: int = 0
    problematic_tracks: list[ProblematicTrack] = field(default_factory=list)

    def add_problem(self, track: ProblematicTrack) -> None:
        self.problematic_tracks.append(track)

    @property
    def problem_count(self) -> int:
        return len(self.problematic_tracks)

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_tracks_scanned": self.total_tracks_scanned,
            "problematic_tracks": [p.to_dict() for p in self.problematic_tracks],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "AuditSummary":
        return cls(
            total_tracks_scanned=data.get("total_tracks_scanned", 0),
            problematic_tracks=[
                ProblematicTrack.from_dict(p) for p in data.get("problematic_tracks", [])
            ],
        )


@dataclass(frozen=True)
class SyncBatchLog:
    """
    Detailed log for one mutation batch.

    Attributes:
        batch_index: 0-based position of the batch; equals issuance order.
        tracks_count: Number of track IDs in the batch.
        track_ids: The IDs themselves, in submission order.
        status: "Success" or "Error: <message>".
    """

    batch_index: int
    tracks_count: int
    track_ids: tuple[str, ...]
    status: str

    @property
    def succeeded(self) -> bool:
        return self.status == BATCH_SUCCESS

    def to_dict(self) -> dict[str, Any]:
        return {
            "batch_index": self.batch_index,
            "tracks_count": self.tracks_count,
            "track_ids": list(self.track_ids),
            "status": self.status,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncBatchLog":
        return cls(
            batch_index=data["batch_index"],
            tracks_count=data["tracks_count"],
            track_ids=tuple(data.get("track_ids", [])),
            status=data["status"],
        )


@dataclass
class SyncReport:
    """
    Report for the sync operation.

    Attributes:
        initial_liked_count: Liked Songs total before the sync.
        final_liked_count: Liked Songs total after the sync.
        total_tracks_in_playlist: Every item seen in the source playlist,
                                  including episodes and local files.
        tracks_processed: Items that were tracks with a Spotify ID.
        estimated_added: max(0, final - initial). Tracks already liked
                         are not counted twice by Spotify, so this can
                         undercount but is never negative.
        batch_logs: One entry per add batch, in issuance order.
    """

    initial_liked_count: int = 0
    final_liked_count: int = 0
    total_tracks_in_playlist: int = 0
    tracks_processed: int = 0
    estimated_added: int = 0
    batch_logs: list[SyncBatchLog] = field(default_factory=list)

    @property
    def failed_batches(self) -> list[SyncBatchLog]:
        return [log for log in self.batch_logs if not log.succeeded]

    def to_dict(self) -> dict[str, Any]:
        return {
            "initial_liked_count": self.initial_liked_count,
            "final_liked_count": self.final_liked_count,
            "total_tracks_in_playlist": self.total_tracks_in_playlist,
            "tracks_processed": self.tracks_processed,
            "estimated_added": self.estimated_added,
            "batch_logs": [log.to_dict() for log in self.batch_logs],
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "SyncReport":
        return cls(
            initial_liked_count=data.get("initial_liked_count", 0),
            final_liked_count=data.get("final_liked_count", 0),
            total_tracks_in_playlist=data.get("total_tracks_in_playlist", 0),
            tracks_processed=data.get("tracks_processed", 0),
            estimated_added=data.get("estimated_added", 0),
            batch_logs=[SyncBatchLog.from_dict(b) for b in data.get("batch_logs", [])],
        )


@dataclass
class DedupReport:
    """
    Report for a Liked Songs deduplication.

    Attributes:
        total_tracks_scanned: Tracks enumerated from Liked Songs.
        duplicate_groups: ISRC groups with more than one member.
        removed_track_ids: IDs proposed for removal (removed unless dry_run).
        removed_descriptions: "<name> (Markets: <n>)" per removed ID.
        batch_logs: One entry per remove batch; empty on a dry run.
        dry_run: True if nothing was actually removed.
    """

    total_tracks_scanned: int = 0
    duplicate_groups: int = 0
    removed_track_ids: list[str] = field(default_factory=list)
    removed_descriptions: list[str] = field(default_factory=list)
    batch_logs: list[SyncBatchLog] = field(default_factory=list)
    dry_run: bool = False

    def to_dict(self) -> dict[str, Any]:
        return {
            "total_tracks_scanned": self.total_tracks_scanned,
            "duplicate_groups": self.duplicate_groups,
            "removed_track_ids": list(self.removed_track_ids),
            "removed_descriptions": list(self.removed_descriptions),
            "batch_logs": [log.to_dict() for log in self.batch_logs],
            "dry_run": self.dry_run,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "DedupReport":
        return cls(
            total_tracks_scanned=data.get("total_tracks_scanned", 0),
            duplicate_groups=data.get("duplicate_groups", 0),
            removed_track_ids=list(data.get("removed_track_ids", [])),
            removed_descriptions=list(data.get("removed_descriptions", [])),
            batch_logs=[SyncBatchLog.from_dict(b) for b in data.get("batch_logs", [])],
            dry_run=data.get("dry_run", False),
        )
