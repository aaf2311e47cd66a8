"""
Configuration management for spot-auditor.

This module handles loading, validating, and providing access to the
application configuration. Values come from three layers, later layers
winning over earlier ones:

    1. Built-in defaults
    2. config.yaml in the current working directory (optional)
    3. Environment variables (a .env file is loaded first, if present)

Credentials are usually kept out of config.yaml and supplied through the
environment using spotipy's own variable names.

Example config.yaml:
    spotify:
      client_id: "your_client_id_here"
      client_secret: "your_client_secret_here"
      redirect_uri: "http://127.0.0.1:8888/callback"
      cache_path: "~/.cache/spot-auditor/token.json"
      market: "from_token"
      open_browser: true

    logging:
      directory: "~/.local/state/spot-auditor"
      level: "INFO"

Environment Variables:
    SPOTIPY_CLIENT_ID, SPOTIPY_CLIENT_SECRET, SPOTIPY_REDIRECT_URI,
    SPOT_AUDITOR_CACHE_PATH, SPOT_AUDITOR_MARKET, SPOT_AUDITOR_LOG_DIR
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Any

import yaml
from dotenv import load_dotenv

from spot_auditor.core.exceptions import ConfigError


# Default configuration file name (looked up in current working directory)
CONFIG_FILENAME = "config.yaml"

DEFAULT_REDIRECT_URI = "http://127.0.0.1:8888/callback"
DEFAULT_CACHE_PATH = ".spotify_token_cache.json"
DEFAULT_MARKET = "from_token"
DEFAULT_LOG_LEVEL = "INFO"

VALID_LOG_LEVELS = ("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL")

ENV_CLIENT_ID = "SPOTIPY_CLIENT_ID"
ENV_CLIENT_SECRET = "SPOTIPY_CLIENT_SECRET"
ENV_REDIRECT_URI = "SPOTIPY_REDIRECT_URI"
ENV_CACHE_PATH = "SPOT_AUDITOR_CACHE_PATH"
ENV_MARKET = "SPOT_AUDITOR_MARKET"
ENV_LOG_DIR = "SPOT_AUDITOR_LOG_DIR"


@dataclass(frozen=True)
class SpotifyConfig:
    """
    Spotify API credentials and OAuth configuration.

    These credentials are obtained from the Spotify Developer Dashboard:
    https://developer.spotify.com/dashboard

    Attributes:
        client_id: The Spotify application client ID.
        client_secret: The Spotify application client secret.
        redirect_uri: OAuth redirect URI registered for the application.
        cache_path: File where spotipy caches the OAuth token.
        market: Market used when asking Spotify for playability.
                "from_token" means the user's own country. None disables
                the market filter (Spotify then omits is_playable).
        open_browser: Whether the OAuth flow opens a browser automatically.
    """
    client_id: str
    client_secret: str
    redirect_uri: str
    cache_path: Path
    market: str | None
    open_browser: bool


@dataclass(frozen=True)
class LoggingConfig:
    """
    Logging configuration.

    Attributes:
        directory: Directory for log files. None disables file logging.
        level: Console log level name.
    """
    directory: Path | None
    level: str


@dataclass(frozen=True)
class Config:
    """
    Complete application configuration.

    Attributes:
        spotify: Spotify API credentials and OAuth settings.
        logging: Logging settings.
    """
    spotify: SpotifyConfig
    logging: LoggingConfig


def load_config(config_path: Path | None = None) -> Config:
    """
    Load and validate configuration.

    Args:
        config_path: Optional explicit path to config file.
                     If None, looks for config.yaml in current working directory.
                     An explicit path must exist; the implicit one is optional.

    Returns:
        Config: A frozen dataclass containing all configuration values.

    Raises:
        ConfigError: If an explicit config file is missing, the YAML is
                     invalid, sections have the wrong shape, credentials
                     are missing, or a field has an invalid value.

    Behavior:
        1. Load .env into the process environment (existing vars win)
        2. Read config.yaml if present
        3. Validate structure
        4. Merge environment overrides
        5. Create and return frozen Config object
    """
    load_dotenv()

    explicit = config_path is not None
    if config_path is None:
        config_path = Path.cwd() / CONFIG_FILENAME

    raw_config: dict[str, Any] = {}
    if config_path.exists():
        raw_config = _read_yaml(config_path)
    elif explicit:
        raise ConfigError(
            f"Configuration file not found: {config_path}",
            details={"file_path": str(config_path)}
        )

    _validate_config(raw_config)

    return Config(
        spotify=_parse_spotify_config(raw_config.get("spotify") or {}),
        logging=_parse_logging_config(raw_config.get("logging") or {})
    )


def _read_yaml(config_path: Path) -> dict[str, Any]:
    try:
        with open(config_path, "r", encoding="utf-8") as f:
            content = f.read()
    except IOError as e:
        raise ConfigError(
            f"Failed to read configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    try:
        raw_config = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise ConfigError(
            f"Invalid YAML syntax in configuration file: {e}",
            details={"file_path": str(config_path), "original_error": str(e)}
        ) from e

    # An empty file parses to None
    if raw_config is None:
        return {}

    if not isinstance(raw_config, dict):
        raise ConfigError(
            "Configuration file must contain a YAML dictionary",
            details={"file_path": str(config_path)}
        )

    return raw_config


def _validate_config(raw_config: dict[str, Any]) -> None:
    """
    Validate that the optional sections, when present, are dictionaries.

    Raises:
        ConfigError: If a section has the wrong type.
    """
    for section in ("spotify", "logging"):
        value = raw_config.get(section)
        if value is not None and not isinstance(value, dict):
            raise ConfigError(
                f"Section '{section}' must be a dictionary",
                details={"section": section}
            )


def _parse_spotify_config(spotify_section: dict[str, Any]) -> SpotifyConfig:
    """
    Parse the Spotify section, applying environment overrides.

    Raises:
        ConfigError: If client_id or client_secret is missing or empty.
    """
    client_id = os.getenv(ENV_CLIENT_ID) or spotify_section.get("client_id", "")
    client_secret = os.getenv(ENV_CLIENT_SECRET) or spotify_section.get("client_secret", "")

    if not isinstance(client_id, str) or not client_id.strip():
        raise ConfigError(
            f"Missing Spotify client_id (set 'spotify.client_id' or {ENV_CLIENT_ID})",
            details={"field": "spotify.client_id", "env_var": ENV_CLIENT_ID}
        )

    if not isinstance(client_secret, str) or not client_secret.strip():
        raise ConfigError(
            f"Missing Spotify client_secret (set 'spotify.client_secret' or {ENV_CLIENT_SECRET})",
            details={"field": "spotify.client_secret", "env_var": ENV_CLIENT_SECRET}
        )

    redirect_uri = (
        os.getenv(ENV_REDIRECT_URI)
        or spotify_section.get("redirect_uri")
        or DEFAULT_REDIRECT_URI
    )
    if not isinstance(redirect_uri, str):
        raise ConfigError(
            "'spotify.redirect_uri' must be a string",
            details={"field": "spotify.redirect_uri"}
        )

    cache_raw = (
        os.getenv(ENV_CACHE_PATH)
        or spotify_section.get("cache_path")
        or DEFAULT_CACHE_PATH
    )
    if not isinstance(cache_raw, str):
        raise ConfigError(
            "'spotify.cache_path' must be a string path",
            details={"field": "spotify.cache_path"}
        )

    # An explicit null in YAML disables the market filter
    if os.getenv(ENV_MARKET):
        market = os.getenv(ENV_MARKET)
    elif "market" in spotify_section:
        market = spotify_section["market"]
    else:
        market = DEFAULT_MARKET
    if market is not None and not isinstance(market, str):
        raise ConfigError(
            "'spotify.market' must be a country code, 'from_token' or null",
            details={"field": "spotify.market", "value": market}
        )

    open_browser = spotify_section.get("open_browser", True)
    if not isinstance(open_browser, bool):
        raise ConfigError(
            "'spotify.open_browser' must be true or false",
            details={"field": "spotify.open_browser", "value": open_browser}
        )

    return SpotifyConfig(
        client_id=client_id.strip(),
        client_secret=client_secret.strip(),
        redirect_uri=redirect_uri.strip(),
        cache_path=Path(cache_raw.strip()).expanduser(),
        market=market,
        open_browser=open_browser
    )


def _parse_logging_config(logging_section: dict[str, Any]) -> LoggingConfig:
    """
    Parse the logging section, applying environment overrides.

    Raises:
        ConfigError: If the directory is not a string or the level is unknown.
    """
    directory_raw = os.getenv(ENV_LOG_DIR) or logging_section.get("directory")
    directory = None
    if directory_raw is not None:
        if not isinstance(directory_raw, str) or not directory_raw.strip():
            raise ConfigError(
                "'logging.directory' must be a non-empty string",
                details={"field": "logging.directory"}
            )
        directory = Path(directory_raw.strip()).expanduser().resolve()

    level = logging_section.get("level", DEFAULT_LOG_LEVEL)
    if not isinstance(level, str) or level.upper() not in VALID_LOG_LEVELS:
        raise ConfigError(
            f"'logging.level' must be one of {', '.join(VALID_LOG_LEVELS)}",
            details={"field": "logging.level", "value": level}
        )

    return LoggingConfig(directory=directory, level=level.upper())
