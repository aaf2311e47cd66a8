"""
Spotify API client singleton for spot-auditor.

This module provides a singleton wrapper around the spotipy library,
ensuring that only one Spotify client instance exists throughout
the application lifetime.

Singleton Pattern:
    SpotifyClient uses the singleton pattern - it must be initialized
    once with init(), and subsequent calls to SpotifyClient() return
    the same instance. Attempting to call init() twice raises an error.

Authentication:
    Every auditor operation touches the user's library, so only the
    OAuth authorization code flow is supported. spotipy caches the
    token in a file and refreshes it when it expires.

Pagination:
    Page-level methods (current_user_saved_tracks, playlist_items, ...)
    return one raw API page. The iter_* methods walk all pages lazily,
    fetching the next page only when the caller has consumed the last.

Usage:
    from spot_auditor.spotify.client import SpotifyClient

    SpotifyClient.init(
        client_id="your_client_id",
        client_secret="your_client_secret",
        redirect_uri="http://127.0.0.1:8888/callback",
        cache_path=Path(".spotify_token_cache.json")
    )

    client = SpotifyClient()
    for item in client.iter_saved_track_items():
        print(item["track"]["name"])
"""

from pathlib import Path
from typing import Any, Callable, Iterator

import requests
import spotipy
from spotipy.cache_handler import CacheFileHandler
from spotipy.oauth2 import SpotifyOAuth, SpotifyOauthError

from spot_auditor.core.exceptions import SpotifyError
from spot_auditor.core.logger import get_logger

logger = get_logger(__name__)


# Scopes needed to read the library and mutate Liked Songs
SCOPES = (
    "user-library-read",
    "user-library-modify",
    "playlist-read-private",
    "playlist-read-collaborative",
)

# Spotify API page and batch limits
SAVED_TRACKS_PAGE_SIZE = 50
PLAYLIST_ITEMS_PAGE_SIZE = 100
PLAYLISTS_PAGE_SIZE = 50
MAX_SAVED_TRACKS_PER_REQUEST = 50


class SpotifyClientMeta(type):
    """
    Metaclass implementing the singleton pattern for SpotifyClient.

    This metaclass ensures:
    1. SpotifyClient cannot be instantiated before init() is called
    2. init() can only be called once
    3. After init(), SpotifyClient() always returns the same instance

    Attributes:
        _instance: The singleton SpotifyClient instance, or None.
        _initialized: Flag indicating whether init() has been called.
    """

    _instance: "SpotifyClient | None" = None
    _initialized: bool = False

    def __call__(cls) -> "SpotifyClient":
        """
        Get the SpotifyClient singleton instance.

        Raises:
            SpotifyError: If init() has not been called yet.
        """
        if cls._instance is None:
            raise SpotifyError(
                "SpotifyClient not initialized. Call SpotifyClient.init() first.",
                is_auth_error=True
            )
        return cls._instance

    def init(
        cls,
        client_id: str,
        client_secret: str,
        redirect_uri: str,
        cache_path: Path,
        open_browser: bool = True
    ) -> "SpotifyClient":
        """
        Initialize the SpotifyClient singleton.

        This method must be called exactly once at application startup,
        before any other SpotifyClient operations.

        Args:
            client_id: Spotify application client ID from Developer Dashboard.
            client_secret: Spotify application client secret.
            redirect_uri: Redirect URI registered for the application.
            cache_path: File used by spotipy to cache the OAuth token.
            open_browser: Whether to open the authorization URL automatically.

        Returns:
            The initialized SpotifyClient singleton instance.

        Raises:
            SpotifyError: If init() has already been called (singleton violation).
            SpotifyError: If authentication fails (invalid credentials, network error).

        Behavior:
            1. Check that init() hasn't been called before
            2. Create SpotifyOAuth with a file cache handler
            3. Create spotipy.Spotify instance
            4. Test the connection with current_user() (prompts for
               authorization if there is no cached token)
            5. Store instance as singleton
        """
        if cls._initialized:
            raise SpotifyError(
                "SpotifyClient.init() has already been called. "
                "Use SpotifyClient() to get the existing instance.",
                is_auth_error=True
            )

        try:
            auth_manager = SpotifyOAuth(
                client_id=client_id,
                client_secret=client_secret,
                redirect_uri=redirect_uri,
                scope=" ".join(SCOPES),
                cache_handler=CacheFileHandler(cache_path=str(cache_path)),
                open_browser=open_browser
            )
            spotify_instance = spotipy.Spotify(auth_manager=auth_manager)

            user = spotify_instance.current_user()
            logger.debug(f"Authenticated as {user.get('display_name') or user.get('id')}")

            instance = super().__call__(spotify_instance)
            cls._instance = instance
            cls._initialized = True

            return instance

        except spotipy.SpotifyException as e:
            raise SpotifyError(
                f"Spotify authentication failed: {e}",
                details={"original_error": str(e)},
                is_auth_error=True
            ) from e
        except (SpotifyOauthError, requests.exceptions.RequestException) as e:
            raise SpotifyError(
                f"Failed to initialize Spotify client: {e}",
                details={"original_error": str(e)},
                is_auth_error=True
            ) from e

    def is_initialized(cls) -> bool:
        """Check if the SpotifyClient has been initialized."""
        return cls._initialized

    def reset(cls) -> None:
        """
        Reset the singleton state (for testing only).

        Warning:
            Do not use this in production code. It exists only to
            enable proper test isolation.
        """
        cls._instance = None
        cls._initialized = False


class SpotifyClient(metaclass=SpotifyClientMeta):
    """
    Singleton Spotify API client.

    Wraps spotipy.Spotify and translates every library failure into
    SpotifyError. The auditor treats it as a stateless handle.

    Initialization:
        Must be initialized with SpotifyClient.init() before use.
        Tests may construct one directly with SpotifyClient.from_spotipy().

    Attributes:
        _spotify: The underlying spotipy.Spotify instance.

    Rate Limiting:
        spotipy retries 429 responses itself. If retries are exhausted
        the error surfaces as SpotifyError with is_rate_limit=True.
    """

    def __init__(self, spotify_instance: spotipy.Spotify) -> None:
        """
        Note:
            Called by the metaclass init() method.
            Do not call directly - use SpotifyClient.init() instead.
        """
        self._spotify = spotify_instance

    @classmethod
    def from_spotipy(cls, spotify_instance: spotipy.Spotify) -> "SpotifyClient":
        """Wrap an existing spotipy instance without touching the singleton."""
        client = cls.__new__(cls)
        client.__init__(spotify_instance)
        return client

    # =========================================================================
    # Error translation
    # =========================================================================

    def _call(self, action: str, details: dict[str, Any], func: Callable[..., Any], *args, **kwargs) -> Any:
        """
        Invoke a spotipy method, translating failures into SpotifyError.

        Args:
            action: Short description used in error messages ("fetch track").
            details: Context attached to the raised error.
            func: The spotipy bound method.

        Raises:
            SpotifyError: With is_rate_limit for 429, is_auth_error for 401
                          and for a failed token refresh.
        """
        try:
            result = func(*args, **kwargs)
        except spotipy.SpotifyException as e:
            error_details = {**details, "http_status": e.http_status, "original_error": str(e)}
            if e.http_status == 429:
                raise SpotifyError(
                    f"Rate limited while trying to {action}",
                    details=error_details,
                    is_rate_limit=True
                ) from e
            if e.http_status == 401:
                raise SpotifyError(
                    f"Authentication expired or invalid while trying to {action}",
                    details=error_details,
                    is_auth_error=True
                ) from e
            if e.http_status == 404:
                raise SpotifyError(
                    f"Not found while trying to {action}",
                    details=error_details
                ) from e
            raise SpotifyError(
                f"Failed to {action}: {e}",
                details=error_details
            ) from e
        except SpotifyOauthError as e:
            # Raised by spotipy when refreshing the cached token fails
            raise SpotifyError(
                f"Authentication expired or invalid while trying to {action}: {e}",
                details={**details, "original_error": str(e)},
                is_auth_error=True
            ) from e
        except requests.exceptions.RequestException as e:
            raise SpotifyError(
                f"Network error while trying to {action}: {e}",
                details={**details, "original_error": str(e)}
            ) from e

        return result

    def _paginate(self, fetch_page: Callable[[int], dict[str, Any]], page_size: int) -> Iterator[dict[str, Any]]:
        """
        Yield items from consecutive pages until Spotify reports no next page.

        Only one page is held at a time.
        """
        offset = 0
        while True:
            response = fetch_page(offset)
            items = response.get("items") or []
            yield from items

            if response.get("next") is None or not items:
                break
            offset += page_size

    # =========================================================================
    # Track Operations
    # =========================================================================

    def track(self, track_id: str, market: str | None = None) -> dict[str, Any]:
        """
        Get full track metadata from Spotify.

        Args:
            track_id: Bare Spotify track ID.
            market: Optional market. Without one, Spotify includes
                    available_markets; with one, it includes is_playable.

        Raises:
            SpotifyError: If the track is not found or the request fails.
        """
        result = self._call(
            "fetch track", {"track_id": track_id},
            self._spotify.track, track_id, market=market
        )
        if result is None:
            raise SpotifyError(
                f"Track not found: {track_id}",
                details={"track_id": track_id}
            )
        return result

    # =========================================================================
    # Playlist Operations
    # =========================================================================

    def playlist_items(
        self,
        playlist_id: str,
        limit: int = PLAYLIST_ITEMS_PAGE_SIZE,
        offset: int = 0,
        market: str | None = None
    ) -> dict[str, Any]:
        """
        Get one page of a playlist's items.

        Returns:
            Dictionary with 'items', 'total' and 'next'. Items include
            episodes; callers decide what to do with them.
        """
        result = self._call(
            "fetch playlist items", {"playlist_id": playlist_id, "offset": offset},
            self._spotify.playlist_items,
            playlist_id,
            limit=min(limit, PLAYLIST_ITEMS_PAGE_SIZE),
            offset=offset,
            market=market,
            additional_types=("track", "episode")
        )
        if result is None:
            raise SpotifyError(
                f"Failed to fetch playlist items: {playlist_id}",
                details={"playlist_id": playlist_id}
            )
        return result

    def iter_playlist_items(self, playlist_id: str, market: str | None = None) -> Iterator[dict[str, Any]]:
        """Lazily yield every item of a playlist, page by page."""
        return self._paginate(
            lambda offset: self.playlist_items(
                playlist_id, limit=PLAYLIST_ITEMS_PAGE_SIZE, offset=offset, market=market
            ),
            PLAYLIST_ITEMS_PAGE_SIZE
        )

    def current_user_playlists(self, limit: int = PLAYLISTS_PAGE_SIZE, offset: int = 0) -> dict[str, Any]:
        """Get one page of the playlists the user owns or follows."""
        result = self._call(
            "fetch playlists", {"offset": offset},
            self._spotify.current_user_playlists,
            limit=min(limit, PLAYLISTS_PAGE_SIZE),
            offset=offset
        )
        if result is None:
            raise SpotifyError("Failed to fetch playlists", details={"offset": offset})
        return result

    def iter_user_playlists(self) -> Iterator[dict[str, Any]]:
        """Lazily yield every playlist the user owns or follows."""
        return self._paginate(
            lambda offset: self.current_user_playlists(limit=PLAYLISTS_PAGE_SIZE, offset=offset),
            PLAYLISTS_PAGE_SIZE
        )

    # =========================================================================
    # User Library Operations
    # =========================================================================

    def current_user_saved_tracks(
        self,
        limit: int = SAVED_TRACKS_PAGE_SIZE,
        offset: int = 0,
        market: str | None = None
    ) -> dict[str, Any]:
        """
        Get one page of the user's Liked Songs (saved tracks).

        Returns:
            Dictionary with 'items' (each with 'added_at' and 'track'),
            'total' and 'next'.
        """
        result = self._call(
            "fetch saved tracks", {"offset": offset, "limit": limit},
            self._spotify.current_user_saved_tracks,
            limit=min(limit, SAVED_TRACKS_PAGE_SIZE),
            offset=offset,
            market=market
        )
        if result is None:
            raise SpotifyError(
                "Failed to fetch saved tracks",
                details={"offset": offset, "limit": limit}
            )
        return result

    def iter_saved_track_items(self, market: str | None = None) -> Iterator[dict[str, Any]]:
        """Lazily yield every Liked Songs item, page by page."""
        return self._paginate(
            lambda offset: self.current_user_saved_tracks(
                limit=SAVED_TRACKS_PAGE_SIZE, offset=offset, market=market
            ),
            SAVED_TRACKS_PAGE_SIZE
        )

    def saved_tracks_total(self) -> int:
        """Number of tracks in Liked Songs, using a single one-item request."""
        response = self.current_user_saved_tracks(limit=1, offset=0)
        return int(response.get("total", 0))

    def saved_tracks_add(self, track_ids: list[str]) -> None:
        """
        Add up to 50 tracks to Liked Songs in one request.

        The request is atomic from our side: it either raises or all IDs
        were accepted.

        Raises:
            ValueError: If more than 50 IDs are passed.
            SpotifyError: If the request fails.
        """
        self._check_batch(track_ids)
        self._call(
            "add tracks to Liked Songs", {"batch_size": len(track_ids)},
            self._spotify.current_user_saved_tracks_add, tracks=track_ids
        )

    def saved_tracks_delete(self, track_ids: list[str]) -> None:
        """
        Remove up to 50 tracks from Liked Songs in one request.

        Raises:
            ValueError: If more than 50 IDs are passed.
            SpotifyError: If the request fails.
        """
        self._check_batch(track_ids)
        self._call(
            "remove tracks from Liked Songs", {"batch_size": len(track_ids)},
            self._spotify.current_user_saved_tracks_delete, tracks=track_ids
        )

    @staticmethod
    def _check_batch(track_ids: list[str]) -> None:
        if len(track_ids) > MAX_SAVED_TRACKS_PER_REQUEST:
            raise ValueError(
                f"At most {MAX_SAVED_TRACKS_PER_REQUEST} tracks per request, got {len(track_ids)}"
            )
