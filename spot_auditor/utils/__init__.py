"""
Utility functions for spot-auditor.

This module provides common utility functions used across the application:
    - Spotify ID extraction and validation from IDs, URIs and URLs
    - Chunking helper for batch operations

Usage:
    from spot_auditor.utils import parse_playlist_id, parse_track_id, chunked
"""

import re
from typing import Iterator, Sequence, TypeVar

from spot_auditor.core.exceptions import InvalidIdentifierError


T = TypeVar("T")

# Spotify IDs are base62 strings (22 characters for tracks and playlists)
_BASE62_RE = re.compile(r"^[0-9A-Za-z]+$")


def parse_spotify_id(url_or_id: str, kind: str) -> str:
    """
    Extract and validate a Spotify ID of the given kind.

    Handles various Spotify formats:
        - https://open.spotify.com/<kind>/ID
        - https://open.spotify.com/<kind>/ID?si=xxx
        - https://open.spotify.com/intl-it/<kind>/ID
        - spotify:<kind>:ID
        - Just the ID

    Args:
        url_or_id: Spotify URL, URI or bare ID, as typed by the user.
        kind: Expected resource kind ("playlist", "track", ...).

    Returns:
        The bare base62 Spotify ID.

    Raises:
        InvalidIdentifierError: If the value is empty, names a different
            resource kind, or the ID contains non-alphanumeric characters.

    Examples:
        parse_spotify_id("https://open.spotify.com/track/abc123?si=xyz", "track")
        # Returns: "abc123"

        parse_spotify_id("spotify:playlist:abc123", "playlist")
        # Returns: "abc123"
    """
    value = (url_or_id or "").strip()
    candidate = value

    if value.startswith("spotify:"):
        # spotify:<kind>:<id>
        parts = value.split(":")
        if len(parts) != 3 or parts[1] != kind:
            raise _invalid(url_or_id, kind)
        candidate = parts[2]
    elif "spotify.com" in value:
        path = value.split("?")[0].split("#")[0].rstrip("/")
        segments = path.split("/")
        if len(segments) < 2 or segments[-2] != kind:
            raise _invalid(url_or_id, kind)
        candidate = segments[-1]

    if not candidate or not _BASE62_RE.match(candidate):
        raise _invalid(url_or_id, kind)

    return candidate


def parse_playlist_id(url_or_id: str) -> str:
    """Validate a playlist ID, URI or URL and return the bare ID."""
    return parse_spotify_id(url_or_id, "playlist")


def parse_track_id(url_or_id: str) -> str:
    """Validate a track ID, URI or URL and return the bare ID."""
    return parse_spotify_id(url_or_id, "track")


def _invalid(url_or_id: str, kind: str) -> InvalidIdentifierError:
    return InvalidIdentifierError(
        f"Invalid {kind.capitalize()} ID: {url_or_id}",
        identifier=url_or_id,
        kind=kind
    )


def chunked(items: Sequence[T], size: int) -> Iterator[list[T]]:
    """
    Split a sequence into contiguous chunks of at most `size` items.

    Order is preserved and the last chunk may be shorter.

    Raises:
        ValueError: If size is smaller than 1.

    Examples:
        list(chunked([1, 2, 3, 4, 5], 2))  # [[1, 2], [3, 4], [5]]
    """
    if size < 1:
        raise ValueError(f"Chunk size must be at least 1, got {size}")
    for start in range(0, len(items), size):
        yield list(items[start:start + size])
