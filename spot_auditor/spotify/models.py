"""
Data models for Spotify entities.

This module defines immutable dataclasses representing Spotify objects
as seen by the auditor: tracks, playlist entries, playlist summaries and
the forensic projection of a single track.

Design Decisions:
    - All dataclasses are frozen (immutable) to prevent accidental modification
    - Track and TrackInspection hold dict fields, so they compare by value
      but are not hashable; key collections by spotify_id instead
    - Fields match Spotify API response structure where possible
    - The track ID is optional: local files uploaded by the user have none
    - Playability is tri-state: True, False, or None when Spotify did not say

Usage:
    from spot_auditor.spotify.models import Track, PlaylistEntry

    track = Track.from_spotify_api(item["track"])
    entry = PlaylistEntry.from_spotify_api(playlist_item)
"""

from dataclasses import dataclass, field
from typing import Any


@dataclass(frozen=True, eq=True, unsafe_hash=False)
class Track:
    """
    Immutable representation of a Spotify track.

    Not hashable: external_ids and external_urls are dicts.

    Attributes:
        spotify_id: Spotify track ID, or None for local files.
                    Example: "4cOdK2wGLETKBW3PvgPWqT"
        name: Track title as it appears on Spotify.
        artists: Names of all credited artists, in API order.
        album: Album name.
        is_playable: True/False when the request carried a market,
                     None when Spotify did not report playability.
        available_markets: ISO country codes where the track is licensed.
                           Empty means the track was removed globally.
        external_ids: External identifier schemes, e.g. {"isrc": "GBUM71029604"}.
        external_urls: External links, e.g. {"spotify": "https://open.spotify.com/track/..."}.
        popularity: Spotify popularity score (0-100).
        release_date: Album release date as given by Spotify ("1975-11-21" or "1975").
        duration_ms: Track duration in milliseconds.
        disc_number: Disc number for multi-disc albums.
        track_number: Position of track within its disc.
        is_local: Whether the track is a local file added by the user.
    """

    spotify_id: str | None
    name: str
    artists: tuple[str, ...]
    album: str
    is_playable: bool | None = None
    available_markets: tuple[str, ...] = ()
    external_ids: dict[str, str] = field(default_factory=dict)
    external_urls: dict[str, str] = field(default_factory=dict)
    popularity: int = 0
    release_date: str = ""
    duration_ms: int = 0
    disc_number: int = 1
    track_number: int = 1
    is_local: bool = False

    @classmethod
    def from_spotify_api(cls, track_data: dict[str, Any]) -> "Track":
        """
        Create a Track instance from a Spotify API track object.

        Args:
            track_data: The track object from Spotify API. This is the
                        response from spotify.track(track_id) or the
                        'track' field of a saved-track or playlist item.

        Returns:
            Track: A new Track instance.

        Note:
            Spotify only includes 'is_playable' when the request carried a
            market, and only includes 'available_markets' when it did not.
            Missing values become None and () respectively.
        """
        album_info = track_data.get("album") or {}

        return cls(
            spotify_id=track_data.get("id") or None,
            name=track_data.get("name") or "",
            artists=tuple(
                a.get("name", "") for a in track_data.get("artists") or []
            ),
            album=album_info.get("name") or "",
            is_playable=track_data.get("is_playable"),
            available_markets=tuple(track_data.get("available_markets") or ()),
            external_ids=dict(track_data.get("external_ids") or {}),
            external_urls=dict(track_data.get("external_urls") or {}),
            popularity=track_data.get("popularity") or 0,
            release_date=album_info.get("release_date") or "",
            duration_ms=track_data.get("duration_ms") or 0,
            disc_number=track_data.get("disc_number", 1),
            track_number=track_data.get("track_number", 1),
            is_local=bool(track_data.get("is_local", False)),
        )

    @property
    def isrc(self) -> str | None:
        """International Standard Recording Code, if Spotify has one."""
        return self.external_ids.get("isrc") or None

    @property
    def market_count(self) -> int:
        """Number of markets where the track is available."""
        return len(self.available_markets)

    @property
    def spotify_url(self) -> str:
        """Primary Spotify link, or an empty string."""
        return self.external_urls.get("spotify", "")

    @property
    def artist_names(self) -> str:
        """All artist names joined with ', '."""
        return ", ".join(self.artists)


@dataclass(frozen=True)
class PlaylistEntry:
    """
    One item of a playlist, tagged by whether it is a track.

    Playlists can contain podcast episodes and placeholders for items
    Spotify removed. Those entries carry track=None so callers can count
    them without ever seeing a half-formed Track.

    Attributes:
        track: The Track, or None if the item is not a track.
    """

    track: Track | None

    @classmethod
    def from_spotify_api(cls, item: dict[str, Any]) -> "PlaylistEntry":
        """
        Create an entry from a playlist_items response item.

        Episodes report type "episode"; removed items have track=None.
        """
        track_data = item.get("track")
        if not track_data or track_data.get("type", "track") != "track":
            return cls(track=None)
        return cls(track=Track.from_spotify_api(track_data))

    @property
    def is_track(self) -> bool:
        return self.track is not None


@dataclass(frozen=True)
class PlaylistSummary:
    """
    Summary of a playlist for listing purposes.

    Attributes:
        id: Spotify playlist ID.
        name: Playlist name.
        total_tracks: Number of items in the playlist.
        is_public: Whether the playlist is public (False when unknown).
        is_collaborative: Whether the playlist is collaborative.
        owner_name: Owner display name, or the owner's user ID when
                    there is no display name.
    """

    id: str
    name: str
    total_tracks: int
    is_public: bool
    is_collaborative: bool
    owner_name: str

    @classmethod
    def from_spotify_api(cls, playlist_data: dict[str, Any]) -> "PlaylistSummary":
        """Create a summary from a current_user_playlists item."""
        owner = playlist_data.get("owner") or {}
        owner_name = owner.get("display_name") or owner.get("id") or "Unknown"
        tracks_info = playlist_data.get("tracks") or {}

        return cls(
            id=playlist_data.get("id", ""),
            name=playlist_data.get("name") or "",
            total_tracks=tracks_info.get("total", 0),
            is_public=bool(playlist_data.get("public")),
            is_collaborative=bool(playlist_data.get("collaborative", False)),
            owner_name=owner_name,
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "total_tracks": self.total_tracks,
            "is_public": self.is_public,
            "is_collaborative": self.is_collaborative,
            "owner_name": self.owner_name,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "PlaylistSummary":
        return cls(**data)


@dataclass(frozen=True, eq=True, unsafe_hash=False)
class TrackInspection:
    """
    Detailed forensic information about a single track.

    Same information as Track, fully materialized for display and JSON
    export. Missing IDs become an empty string. Not hashable, like Track.
    """

    id: str
    name: str
    artists: tuple[str, ...]
    album: str
    release_date: str
    duration_ms: int
    popularity: int
    is_playable: bool | None
    available_markets: tuple[str, ...]
    external_ids: dict[str, str]
    external_urls: dict[str, str]
    disc_number: int
    track_number: int
    is_local: bool

    @classmethod
    def from_track(cls, track: Track) -> "TrackInspection":
        return cls(
            id=track.spotify_id or "",
            name=track.name,
            artists=track.artists,
            album=track.album,
            release_date=track.release_date,
            duration_ms=track.duration_ms,
            popularity=track.popularity,
            is_playable=track.is_playable,
            available_markets=track.available_markets,
            external_ids=dict(track.external_ids),
            external_urls=dict(track.external_urls),
            disc_number=track.disc_number,
            track_number=track.track_number,
            is_local=track.is_local,
        )

    def to_dict(self) -> dict[str, Any]:
        """
        Convert to a JSON-serializable dictionary.

        Tuple fields (artists, available_markets) become lists.
        """
        return {
            "id": self.id,
            "name": self.name,
            "artists": list(self.artists),
            "album": self.album,
            "release_date": self.release_date,
            "duration_ms": self.duration_ms,
            "popularity": self.popularity,
            "is_playable": self.is_playable,
            "available_markets": list(self.available_markets),
            "external_ids": dict(self.external_ids),
            "external_urls": dict(self.external_urls),
            "disc_number": self.disc_number,
            "track_number": self.track_number,
            "is_local": self.is_local,
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> "TrackInspection":
        """Inverse of to_dict(); lists are converted back to tuples."""
        return cls(
            id=data["id"],
            name=data["name"],
            artists=tuple(data.get("artists", [])),
            album=data["album"],
            release_date=data.get("release_date", ""),
            duration_ms=data.get("duration_ms", 0),
            popularity=data.get("popularity", 0),
            is_playable=data.get("is_playable"),
            available_markets=tuple(data.get("available_markets", [])),
            external_ids=dict(data.get("external_ids", {})),
            external_urls=dict(data.get("external_urls", {})),
            disc_number=data.get("disc_number", 1),
            track_number=data.get("track_number", 1),
            is_local=data.get("is_local", False),
        )
