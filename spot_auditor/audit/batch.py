"""
Batch mutator for Liked Songs.

Spotify accepts at most 50 track IDs per save/remove request. This module
splits an ordered ID list into contiguous chunks and issues one request
per chunk, strictly one after another, recording the outcome of each.

Failure isolation:
    A failed chunk is logged (and written to batch_failures.log) but does
    not stop the following chunks, unless stop_on_error is set. Nothing
    is retried.
"""

from enum import Enum
from typing import Sequence

from spot_auditor.audit.reports import BATCH_SUCCESS, SyncBatchLog
from spot_auditor.core.exceptions import SpotifyError
from spot_auditor.core.logger import get_logger, log_batch_failure
from spot_auditor.spotify.client import MAX_SAVED_TRACKS_PER_REQUEST, SpotifyClient
from spot_auditor.utils import chunked

logger = get_logger(__name__)


MAX_BATCH_SIZE = MAX_SAVED_TRACKS_PER_REQUEST


class BatchOperation(Enum):
    """Mutations the batch mutator can apply to Liked Songs."""

    ADD_TO_LIKED = "add_to_liked"
    REMOVE_FROM_LIKED = "remove_from_liked"


def apply_in_batches(
    client: SpotifyClient,
    track_ids: Sequence[str],
    operation: BatchOperation,
    chunk_size: int = MAX_BATCH_SIZE,
    stop_on_error: bool = False
) -> list[SyncBatchLog]:
    """
    Apply a Liked Songs mutation to track IDs in sequential batches.

    Args:
        client: Client used for the save/remove requests.
        track_ids: IDs in the order they should be submitted.
        operation: Whether to add to or remove from Liked Songs.
        chunk_size: Maximum IDs per request (1..50).
        stop_on_error: Re-raise the first batch failure after logging it
                       instead of continuing with the next batch.

    Returns:
        One SyncBatchLog per batch, in issuance order. Concatenating
        their track_ids reproduces track_ids exactly.

    Raises:
        ValueError: If chunk_size is outside 1..50.
        SpotifyError: Only when stop_on_error is set and a batch fails.
    """
    if not 1 <= chunk_size <= MAX_BATCH_SIZE:
        raise ValueError(
            f"chunk_size must be between 1 and {MAX_BATCH_SIZE}, got {chunk_size}"
        )

    if operation is BatchOperation.ADD_TO_LIKED:
        mutate = client.saved_tracks_add
    else:
        mutate = client.saved_tracks_delete

    logs: list[SyncBatchLog] = []

    for index, chunk in enumerate(chunked(track_ids, chunk_size)):
        try:
            mutate(chunk)
        except SpotifyError as e:
            log = SyncBatchLog(
                batch_index=index,
                tracks_count=len(chunk),
                track_ids=tuple(chunk),
                status=f"Error: {e}",
            )
            logs.append(log)
            log_batch_failure(logger, index, operation.value, log.status, chunk)
            if stop_on_error:
                raise
            continue

        logger.debug(f"Batch {index} ({operation.value}): {len(chunk)} tracks OK")
        logs.append(SyncBatchLog(
            batch_index=index,
            tracks_count=len(chunk),
            track_ids=tuple(chunk),
            status=BATCH_SUCCESS,
        ))

    return logs
