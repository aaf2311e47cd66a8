"""
Logging configuration for spot-auditor.

This module sets up the logging system with multiple outputs:
    - Console: Colored, tqdm-compatible output on stderr
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - batch_failures.log: Mutation batches that Spotify rejected, with
      the track IDs they contained so they can be retried by hand

File logging is optional; it is enabled when a log directory is given.

Usage:
    from spot_auditor.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Starting scan")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import Iterable, Iterator, TextIO, TypeVar

from tqdm import tqdm


T = TypeVar("T")

# Log file names (created in <log_dir>/logs)
LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"
BATCH_FAILURES_FILENAME = "batch_failures"

# Log format for file output (detailed with timestamp)
FILE_LOG_FORMAT = "%(asctime)s | %(levelname)-8s | %(name)s | %(message)s"
FILE_DATE_FORMAT = "%Y-%m-%d %H:%M:%S"


class Colors:
    """ANSI color codes for terminal output."""
    RESET = "\033[0m"
    RED = "\033[31m"
    GREEN = "\033[32m"
    YELLOW = "\033[33m"
    BLUE = "\033[34m"
    CYAN = "\033[36m"
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that prefixes each message with a colored level name.

    Colors:
        - DEBUG: Blue
        - INFO: Green
        - WARNING: Yellow
        - ERROR: Red
        - CRITICAL: Bold Red
    """

    LEVEL_COLORS = {
        logging.DEBUG: Colors.BLUE,
        logging.INFO: Colors.GREEN,
        logging.WARNING: Colors.YELLOW,
        logging.ERROR: Colors.RED,
        logging.CRITICAL: Colors.BOLD + Colors.RED,
    }

    def format(self, record: logging.LogRecord) -> str:
        color = self.LEVEL_COLORS.get(record.levelno, Colors.WHITE)
        colored_levelname = f"{color}{record.levelname}{Colors.RESET}"
        return f"{colored_levelname}: {record.getMessage()}"


class TqdmLoggingHandler(logging.Handler):
    """
    Logging handler that writes to console without breaking tqdm progress bars.

    tqdm progress bars write to stderr and use carriage returns to update in-place.
    This handler uses tqdm.write() which prints above any active bar.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream or sys.stderr)
        except Exception:
            self.handleError(record)


class BatchFailureHandler(logging.Handler):
    """
    Handler that captures failed mutation batches for the batch report file.

    This handler listens for log records that carry batch failure
    information and writes them to batch_failures.log in a simple,
    human-readable format:

        Batch 3 (add_to_liked): Error: http status: 502
        4cOdK2wGLETKBW3PvgPWqT
        3n3Ppam7vgaVa1iaRUc9Lp

    The handler looks for specific extra fields in log records:
        - 'batch_failed_index': Index of the batch in its operation
        - 'batch_failed_operation': Operation name
        - 'batch_failed_status': The recorded status string
        - 'batch_failed_track_ids': Track IDs contained in the batch

    Only records containing these fields are written to the report.

    Usage:
        log_batch_failure(logger, 3, "add_to_liked", "Error: ...", track_ids)
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """Open the report file for writing (overwrites existing content)."""
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "batch_failed_index"):
            return

        if self.report_file is None:
            return

        try:
            index = getattr(record, "batch_failed_index")
            operation = getattr(record, "batch_failed_operation", "unknown")
            status = getattr(record, "batch_failed_status", "")
            track_ids = getattr(record, "batch_failed_track_ids", ())

            self.report_file.write(f"Batch {index} ({operation}): {status}\n")
            for track_id in track_ids:
                self.report_file.write(f"{track_id}\n")
            self.report_file.write("\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """Close the report file handle. Safe to call multiple times."""
        if self.report_file is not None:
            try:
                self.report_file.close()
            except OSError:
                pass
            self.report_file = None
        super().close()


class ErrorOnlyFilter(logging.Filter):
    """Filter that only allows ERROR and CRITICAL level records."""

    def filter(self, record: logging.LogRecord) -> bool:
        return record.levelno >= logging.ERROR


def setup_logging(log_dir: Path | None = None, level: str = "INFO") -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before any other operations.

    Args:
        log_dir: Directory where log files will be created, in a 'logs'
                 subdirectory. None disables file logging.
        level: Console log level name ("DEBUG", "INFO", ...).

    Behavior:
        1. Configure root logger level to DEBUG
        2. Add colored TqdmLoggingHandler for the console at `level`
        3. If log_dir is given:
           - Create log_dir/logs if it doesn't exist
           - log_full_{timestamp}.log with every record
           - log_errors_{timestamp}.log with ERROR and above
           - batch_failures_{timestamp}.log via BatchFailureHandler
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    # Remove any existing handlers
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(getattr(logging, level.upper(), logging.INFO))
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    # spotipy and urllib3 are chatty at DEBUG
    logging.getLogger("spotipy").setLevel(logging.WARNING)
    logging.getLogger("urllib3").setLevel(logging.WARNING)

    if log_dir is None:
        return

    logs_dir = log_dir / "logs"
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_log_path = logs_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log"
    full_handler = logging.FileHandler(full_log_path, mode="w", encoding="utf-8")
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_log_path = logs_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log"
    error_handler = logging.FileHandler(error_log_path, mode="w", encoding="utf-8")
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    batch_failures_path = logs_dir / f"{BATCH_FAILURES_FILENAME}_{timestamp}.log"
    batch_handler = BatchFailureHandler(batch_failures_path)
    batch_handler.open()
    root_logger.addHandler(batch_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Returns:
        logging.Logger: A logger instance configured by setup_logging().

    Note:
        Loggers obtained before setup_logging() is called will have no
        handlers and will not produce output.
    """
    return logging.getLogger(name)


def log_batch_failure(
    logger: logging.Logger,
    batch_index: int,
    operation: str,
    status: str,
    track_ids: Iterable[str]
) -> None:
    """
    Log a mutation batch that Spotify rejected.

    Logs an ERROR level message and attaches extra fields that
    BatchFailureHandler will use to write to batch_failures.log.

    Args:
        logger: The logger to use for the message.
        batch_index: 0-based index of the batch within its operation.
        operation: Operation name, e.g. "add_to_liked".
        status: Status string recorded in the batch log.
        track_ids: IDs that were in the batch.
    """
    track_ids = tuple(track_ids)
    logger.error(
        f"Batch {batch_index} ({operation}, {len(track_ids)} tracks) failed: {status}",
        extra={
            "batch_failed_index": batch_index,
            "batch_failed_operation": operation,
            "batch_failed_status": status,
            "batch_failed_track_ids": track_ids,
        }
    )


def progress_iter(iterable: Iterable[T], description: str, unit: str = "track") -> Iterator[T]:
    """
    Wrap an iterable in a tqdm progress bar on stderr.

    The bar is disabled automatically when stderr is not a terminal,
    so piping output or running under tests prints nothing extra.

    Args:
        iterable: The items to iterate lazily.
        description: Label shown left of the bar.
        unit: Unit name shown in the rate.
    """
    yield from tqdm(
        iterable,
        desc=description,
        unit=unit,
        file=sys.stderr,
        leave=False,
        disable=None
    )


def shutdown_logging() -> None:
    """
    Properly shut down the logging system.

    Flushes and closes every handler on the root logger and removes them.
    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except OSError:
            pass
        root_logger.removeHandler(handler)
