"""
Logging configuration for spot-ripper.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible, colored formatting
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - skipped_items.log: Work items skipped because their metadata
      could not be fetched, with their Spotify URLs

Everything printed to screen is also saved to file, then filtered into
specialized files.

Log File Locations:
    All log files are created in the configured log directory
    (default: {output directory}/logs), one set per run.

Usage:
    from spot_ripper.core.logger import setup_logging, get_logger

    setup_logging(log_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Getting track 4uLU6hMCjMI75M1A2tKUQC...")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


# Log file name prefixes (timestamp appended per run)
LOG_FULL_FILENAME = "log_full"
LOG_ERRORS_FILENAME = "log_errors"
SKIPPED_ITEMS_FILENAME = "skipped_items"

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
    Formatter that adds colors to console output.

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
    Logging handler that writes to console without breaking progress bars.

    Uses tqdm.write() so that messages appear above any active bar
    instead of being torn apart by carriage-return redraws.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO | None = None) -> None:
        super().__init__()
        self.stream = stream if stream is not None else sys.stderr

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class SkippedItemHandler(logging.Handler):
    """
    Handler that captures skipped work items for the skipped-items report.

    Writes entries in a simple, human-readable format:

        track 4uLU6hMCjMI75M1A2tKUQC
        https://open.spotify.com/track/4uLU6hMCjMI75M1A2tKUQC
        Metadata fetch failed: ...

    The handler only reacts to records carrying the extra fields set by
    log_item_skipped():
        - 'skipped_item_kind': "track" or "episode"
        - 'skipped_item_id': base62 id of the item
        - 'skipped_item_reason': why the item was skipped

    Attributes:
        report_path: Path to the skipped_items.log file.
        report_file: Open file handle (None until open() is called).
    """

    def __init__(self, report_path: Path) -> None:
        super().__init__()
        self.report_path = report_path
        self.report_file: TextIO | None = None

    def open(self) -> None:
        """
        Open the report file for writing.

        Called by setup_logging() after handler is created.
        File is opened in write mode (overwrites existing content).
        """
        self.report_file = open(self.report_path, "w", encoding="utf-8")

    def emit(self, record: logging.LogRecord) -> None:
        if not hasattr(record, "skipped_item_id"):
            return

        if self.report_file is None:
            return

        try:
            kind = getattr(record, "skipped_item_kind", "item")
            item_id = getattr(record, "skipped_item_id", "")
            reason = getattr(record, "skipped_item_reason", "")

            self.report_file.write(f"{kind} {item_id}\n")
            self.report_file.write(f"https://open.spotify.com/{kind}/{item_id}\n")
            self.report_file.write(f"{reason}\n\n")
            self.report_file.flush()
        except Exception:
            self.handleError(record)

    def close(self) -> None:
        """
        Close the report file handle.

        Safe to call multiple times.
        """
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


def setup_logging(log_dir: Path | None, console_level: int = logging.INFO) -> None:
    """
    Configure the logging system for the application.

    This function should be called ONCE at application startup, after
    the configuration is loaded but before connecting to the catalog.

    Args:
        log_dir: Directory where log files will be created. If None, only
                 the console handler is installed.
        console_level: Minimum level shown on the console.

    Behavior:
        1. Configure root logger level to DEBUG, dropping old handlers
        2. Console handler (TqdmLoggingHandler), colored, at console_level
        3. If log_dir is given, create it and add:
           - log_full_{timestamp}.log (DEBUG, full format)
           - log_errors_{timestamp}.log (ERROR+ via ErrorOnlyFilter)
           - skipped_items_{timestamp}.log (SkippedItemHandler)

    Thread Safety:
        Not thread-safe. Call once from the main thread before the
        stream reader worker is started.
    """
    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(console_level)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    if log_dir is None:
        return

    log_dir.mkdir(parents=True, exist_ok=True)
    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    full_handler = logging.FileHandler(
        log_dir / f"{LOG_FULL_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        log_dir / f"{LOG_ERRORS_FILENAME}_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    skipped_handler = SkippedItemHandler(log_dir / f"{SKIPPED_ITEMS_FILENAME}_{timestamp}.log")
    skipped_handler.open()
    root_logger.addHandler(skipped_handler)


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.

    Note:
        Loggers obtained before setup_logging() is called have no handlers
        of their own; records propagate to whatever the root logger has.
    """
    return logging.getLogger(name)


def log_item_skipped(
    logger: logging.Logger,
    kind: str,
    item_id: str,
    reason: str
) -> None:
    """
    Log a work item that was skipped because its metadata was unreachable.

    Logs an ERROR level message and attaches the extra fields that
    SkippedItemHandler writes to skipped_items.log.

    Args:
        logger: The logger to use for the message.
        kind: "track" or "episode".
        item_id: base62 id of the item.
        reason: Description of why the item was skipped.
    """
    logger.error(
        f"Skipping {kind} {item_id}: {reason}",
        extra={
            "skipped_item_kind": kind,
            "skipped_item_id": item_id,
            "skipped_item_reason": reason,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and remove every handler on the root logger.

    Typically called in a finally block at application exit.
    """
    root_logger = logging.getLogger()

    for handler in root_logger.handlers[:]:
        try:
            handler.flush()
            handler.close()
        except (OSError, ValueError):
            pass
        root_logger.removeHandler(handler)
