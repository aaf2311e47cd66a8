"""
Audit module for spot-auditor.

This module contains the library audit and curation logic:
    - classifier: Flags unplayable tracks
    - scanner: Scans a track source into an AuditSummary
    - batch: Applies Liked Songs mutations in batches of 50
    - dedup: Resolves ISRC duplicates in Liked Songs
    - sync: Copies a playlist into Liked Songs
    - auditor: Facade bundling all operations
    - reports: Report records and their dict conversion

Usage:
    from spot_auditor.audit import Auditor

    auditor = Auditor(SpotifyClient())
    summary = auditor.scan_liked_songs()
"""

from spot_auditor.audit.auditor import Auditor
from spot_auditor.audit.batch import MAX_BATCH_SIZE, BatchOperation, apply_in_batches
from spot_auditor.audit.classifier import UNPLAYABLE_REASON, classify_track
from spot_auditor.audit.dedup import deduplicate_liked_songs, group_by_isrc, resolve_duplicates
from spot_auditor.audit.reports import (
    AuditSummary,
    DedupReport,
    ProblematicTrack,
    SyncBatchLog,
    SyncReport,
)
from spot_auditor.audit.scanner import scan_tracks
from spot_auditor.audit.sync import sync_playlist_to_liked

__all__ = [
    "Auditor",
    # Engine
    "classify_track",
    "UNPLAYABLE_REASON",
    "scan_tracks",
    "apply_in_batches",
    "BatchOperation",
    "MAX_BATCH_SIZE",
    "group_by_isrc",
    "resolve_duplicates",
    "deduplicate_liked_songs",
    "sync_playlist_to_liked",
    # Reports
    "AuditSummary",
    "ProblematicTrack",
    "SyncBatchLog",
    "SyncReport",
    "DedupReport",
]
