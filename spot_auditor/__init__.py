"""
spot-auditor: Audit and curate a Spotify library.

This package finds tracks in Liked Songs or a playlist that Spotify
marks as unplayable, explains why (removed from the catalog entirely or
locked to other countries), and offers two curation tools: copying a
playlist into Liked Songs and removing dead ISRC duplicates from Liked
Songs.

Modules:
    core/       - Configuration, logging, exceptions
    spotify/    - Spotify API client, fetcher and track models
    audit/      - Classifier, scanner, batch mutator, dedup, sync, Auditor
    utils/      - Spotify ID parsing and list chunking
    report.py   - Text and JSON rendering of results
    cli.py      - Command-line interface

Usage:
    Command Line:
        spot-audit scan
        spot-audit scan --playlist "https://open.spotify.com/playlist/..."
        spot-audit sync <playlist-id>
        spot-audit list
        spot-audit inspect <track-id>
        spot-audit dedup --dry-run

    Python API:
        from spot_auditor.core import load_config, setup_logging
        from spot_auditor.spotify import SpotifyClient
        from spot_auditor.audit import Auditor

        config = load_config()
        setup_logging(config.logging.directory)

        SpotifyClient.init(
            client_id=config.spotify.client_id,
            client_secret=config.spotify.client_secret,
            redirect_uri=config.spotify.redirect_uri,
            cache_path=config.spotify.cache_path
        )

        auditor = Auditor(SpotifyClient(), market=config.spotify.market)
        summary = auditor.scan_liked_songs()

Configuration:
    Credentials come from environment variables (a .env file is read)
    or from an optional config.yaml in the current directory:

        spotify:
          client_id: "your_client_id"
          client_secret: "your_client_secret"
          redirect_uri: "http://127.0.0.1:8888/callback"
          market: "from_token"

        logging:
          directory: null
          level: "INFO"

Dependencies:
    - spotipy: Spotify API client
    - requests: HTTP errors raised under spotipy
    - click: CLI framework
    - rich-click: CLI colors
    - tqdm: Progress bars
    - pyyaml: Configuration file parsing
    - python-dotenv: .env loading
"""

__version__ = "0.1.0"
__author__ = "spot-auditor"
__license__ = "MIT"

# Convenience imports for common usage
from spot_auditor.core import (
    AuditorError,
    Config,
    ConfigError,
    InvalidIdentifierError,
    SpotifyError,
    get_logger,
    load_config,
    setup_logging,
)
from spot_auditor.spotify import SpotifyClient, Track
from spot_auditor.audit import Auditor, AuditSummary, DedupReport, SyncReport

__all__ = [
    # Version
    "__version__",
    # Core
    "Config",
    "load_config",
    "setup_logging",
    "get_logger",
    # Exceptions
    "AuditorError",
    "ConfigError",
    "SpotifyError",
    "InvalidIdentifierError",
    # Spotify
    "SpotifyClient",
    "Track",
    # Audit
    "Auditor",
    "AuditSummary",
    "SyncReport",
    "DedupReport",
]
