"""
Exception classes for spot-auditor.

This module defines all custom exceptions used throughout the application.
Each exception is designed to provide clear, actionable error messages
and to distinguish between different failure modes.

Exception Hierarchy:
    AuditorError (base)
        ConfigError - Configuration file or credential issues
        SpotifyError - Any failure surfaced by the Spotify Web API
        InvalidIdentifierError - Caller-supplied ID does not parse
"""


class AuditorError(Exception):
    """
    Base exception for all spot-auditor errors.

    All custom exceptions in this project inherit from this class,
    allowing callers to catch all spot-auditor errors with a single
    except clause if desired.

    Attributes:
        message: Human-readable error description.
        details: Optional dictionary with additional context (e.g., track info, URLs).

    Example:
        try:
            summary = auditor.scan_liked_songs()
        except AuditorError as e:
            logger.error(f"Operation failed: {e.message}")
            if e.details:
                logger.debug(f"Details: {e.details}")
    """

    def __init__(self, message: str, details: dict | None = None) -> None:
        """
        Initialize the base exception.

        Args:
            message: Human-readable error description that will be shown to the user.
            details: Optional dictionary containing additional context about the error.
                     Common keys include:
                     - 'track_id': Spotify track ID involved in the error
                     - 'playlist_id': Spotify playlist ID involved in the error
                     - 'original_error': The underlying exception if wrapping another error
        """
        super().__init__(message)
        self.message = message
        self.details = details or {}

    def __str__(self) -> str:
        """Return the error message for display."""
        return self.message


class ConfigError(AuditorError):
    """
    Raised when there's an issue with the configuration.

    This is a CRITICAL error that should stop program execution.

    Common causes:
        - config.yaml has invalid YAML syntax
        - Spotify credentials missing from both config.yaml and the environment
        - Invalid field values (e.g., unknown log level)

    Example:
        raise ConfigError(
            "Missing Spotify client_id",
            details={'field': 'spotify.client_id', 'env_var': 'SPOTIPY_CLIENT_ID'}
        )
    """
    pass


class SpotifyError(AuditorError):
    """
    Raised when there's an issue with the Spotify API.

    Every failure of the catalog service ends up here: expired tokens,
    rate limiting, network faults, missing playlists. Enumeration code
    lets it propagate unchanged so that a scan or sync aborts as a whole;
    only the batch mutator catches it, per batch.

    Attributes:
        is_auth_error: True if this is an authentication error (CRITICAL).
        is_rate_limit: True if this is a rate limit error.

    Example:
        raise SpotifyError(
            "Failed to fetch playlist items: playlist is private",
            details={'playlist_id': playlist_id, 'http_status': 403}
        )
    """

    def __init__(
        self,
        message: str,
        details: dict | None = None,
        is_auth_error: bool = False,
        is_rate_limit: bool = False
    ) -> None:
        """
        Initialize Spotify error with additional flags.

        Args:
            message: Human-readable error description.
            details: Optional dictionary with additional context.
            is_auth_error: Set to True if this is an authentication failure.
                          Authentication errors are CRITICAL and should stop execution.
            is_rate_limit: Set to True if this is a rate limit error.
        """
        super().__init__(message, details)
        self.is_auth_error = is_auth_error
        self.is_rate_limit = is_rate_limit


class InvalidIdentifierError(AuditorError):
    """
    Raised when a caller-supplied Spotify ID, URI or URL cannot be parsed.

    Raised before any network call is made, so no quota is spent on
    input that could never succeed.

    Attributes:
        identifier: The raw value the caller supplied.
        kind: The expected resource kind ("playlist" or "track").

    Example:
        raise InvalidIdentifierError(
            "Invalid Playlist ID: not-a-valid-id!",
            identifier="not-a-valid-id!",
            kind="playlist"
        )
    """

    def __init__(self, message: str, identifier: str, kind: str) -> None:
        super().__init__(message, details={"identifier": identifier, "kind": kind})
        self.identifier = identifier
        self.kind = kind
