"""
Core module for spot-auditor.

This module provides the foundational components used throughout the application:
    - exceptions: Custom exception classes for error handling
    - config: Configuration loading and validation
    - logger: Logging system with console and file outputs

Usage:
    from spot_auditor.core import (
        Config, load_config,
        setup_logging, get_logger,
        AuditorError, ConfigError, SpotifyError
    )
"""

from spot_auditor.core.config import (
    Config,
    LoggingConfig,
    SpotifyConfig,
    load_config,
)
from spot_auditor.core.exceptions import (
    AuditorError,
    ConfigError,
    InvalidIdentifierError,
    SpotifyError,
)
from spot_auditor.core.logger import (
    get_logger,
    log_batch_failure,
    progress_iter,
    setup_logging,
    shutdown_logging,
)

__all__ = [
    # Config
    "Config",
    "SpotifyConfig",
    "LoggingConfig",
    "load_config",
    # Exceptions
    "AuditorError",
    "ConfigError",
    "SpotifyError",
    "InvalidIdentifierError",
    # Logger
    "setup_logging",
    "get_logger",
    "log_batch_failure",
    "progress_iter",
    "shutdown_logging",
]
