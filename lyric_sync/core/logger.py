"""
Logging configuration for lyric-sync.

This module sets up the logging system with multiple outputs:
    - Console: Real-time messages with tqdm-compatible formatting
    - log_full.log: Complete log of all events (DEBUG and above)
    - log_errors.log: Only ERROR and CRITICAL level messages
    - duplicates.log: Uploads that were resolved to an already stored file

Everything printed to screen is also saved to file, then filtered into
specialized files.

Log File Locations:
    All log files are created in <storage directory>/logs, one set per run
    with a timestamp in the filename.

Usage:
    from lyric_sync.core.logger import setup_logging, get_logger

    setup_logging(storage_dir)  # Call once at startup
    logger = get_logger(__name__)  # Get logger for each module

    logger.info("Scanning upload store")
"""

import logging
import sys
from datetime import datetime
from pathlib import Path
from typing import TextIO

from tqdm import tqdm


LOGS_DIRNAME = "logs"

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
    WHITE = "\033[37m"
    BOLD = "\033[1m"


class ColoredConsoleFormatter(logging.Formatter):
    """
    Formatter that colors the level name on console output.

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

    Standard logging to stderr interferes with bars that redraw in place
    using carriage returns. tqdm.write() prints above any active bar.

    Attributes:
        stream: The output stream (defaults to sys.stderr).
    """

    def __init__(self, stream: TextIO = sys.stderr) -> None:
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            msg = self.format(record)
            tqdm.write(msg, file=self.stream)
        except Exception:
            self.handleError(record)


class DuplicateUploadHandler(logging.Handler):
    """
    Handler that records deduplicated uploads in a human-readable report.

    Listens for log records carrying duplicate upload information and
    writes one block per record to duplicates.log:

        lyrics: my_song.lrc
        reused: 1718035200000-song.lrc
        sha256: 3a7bd3e2360a3d29eea436fcfb7e44c735d117c42d1c1835420b6b9942dd4f1b

    The handler looks for these extra fields on a record:
        - 'duplicate_kind': "audio" or "lyrics"
        - 'duplicate_original_name': Name the file was uploaded under
        - 'duplicate_stored_name': Stored file that is reused instead
        - 'duplicate_digest': Content hash shared by both

    Records without 'duplicate_stored_name' are ignored.

    Usage:
        log_duplicate_upload(logger, "lyrics", "my_song.lrc", record.stored_name, digest)
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
        if not hasattr(record, "duplicate_stored_name"):
            return

        if self.report_file is None:
            return

        try:
            kind = getattr(record, "duplicate_kind", "file")
            original_name = getattr(record, "duplicate_original_name", "Unknown")
            stored_name = getattr(record, "duplicate_stored_name")
            digest = getattr(record, "duplicate_digest", "")

            self.report_file.write(f"{kind}: {original_name}\n")
            self.report_file.write(f"reused: {stored_name}\n")
            self.report_file.write(f"sha256: {digest}\n\n")
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


def setup_logging(output_dir: Path, verbose: bool = False) -> Path:
    """
    Configure the logging system for the application.

    Call ONCE at startup, after the configuration is loaded.

    Args:
        output_dir: Storage directory. Logs go to a 'logs' subdirectory.
        verbose: Show DEBUG messages on the console too.

    Returns:
        The logs directory that was used.

    Behavior:
        1. Create output_dir/logs if it doesn't exist
        2. Configure root logger level to DEBUG, dropping old handlers
        3. Console handler (TqdmLoggingHandler), INFO or DEBUG, colored
        4. Full log file handler, DEBUG, detailed format
        5. Error log file handler, ERROR+ via ErrorOnlyFilter
        6. Duplicate upload report handler
    """
    logs_dir = output_dir / LOGS_DIRNAME
    logs_dir.mkdir(parents=True, exist_ok=True)

    timestamp = datetime.now().strftime("%Y-%m-%d_%H-%M-%S")

    root_logger = logging.getLogger()
    root_logger.setLevel(logging.DEBUG)

    for handler in root_logger.handlers[:]:
        handler.close()
    root_logger.handlers.clear()

    console_handler = TqdmLoggingHandler()
    console_handler.setLevel(logging.DEBUG if verbose else logging.INFO)
    console_handler.setFormatter(ColoredConsoleFormatter())
    root_logger.addHandler(console_handler)

    full_handler = logging.FileHandler(
        logs_dir / f"log_full_{timestamp}.log", mode="w", encoding="utf-8"
    )
    full_handler.setLevel(logging.DEBUG)
    full_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    root_logger.addHandler(full_handler)

    error_handler = logging.FileHandler(
        logs_dir / f"log_errors_{timestamp}.log", mode="w", encoding="utf-8"
    )
    error_handler.setLevel(logging.DEBUG)  # Filter handles the level restriction
    error_handler.setFormatter(logging.Formatter(FILE_LOG_FORMAT, FILE_DATE_FORMAT))
    error_handler.addFilter(ErrorOnlyFilter())
    root_logger.addHandler(error_handler)

    duplicates_handler = DuplicateUploadHandler(logs_dir / f"duplicates_{timestamp}.log")
    duplicates_handler.open()
    root_logger.addHandler(duplicates_handler)

    return logs_dir


def get_logger(name: str) -> logging.Logger:
    """
    Get a logger instance for a module.

    Args:
        name: The logger name, typically __name__ of the calling module.
              This creates a hierarchy like 'lyric_sync.core.registry'.
    """
    return logging.getLogger(name)


def log_duplicate_upload(
    logger: logging.Logger,
    kind: str,
    original_name: str,
    stored_name: str,
    digest: str,
) -> None:
    """
    Log an upload that resolved to an already stored file.

    Emits an INFO record with the extra fields DuplicateUploadHandler
    picks up for the duplicates report.

    Args:
        logger: Logger to emit on.
        kind: "audio" or "lyrics".
        original_name: Name the file was uploaded under.
        stored_name: Stored file reused instead of the upload.
        digest: Shared content hash.
    """
    logger.info(
        f"Duplicate {kind} detected: {original_name} -> {stored_name}",
        extra={
            "duplicate_kind": kind,
            "duplicate_original_name": original_name,
            "duplicate_stored_name": stored_name,
            "duplicate_digest": digest,
        }
    )


def shutdown_logging() -> None:
    """
    Flush, close and detach every handler on the root logger.

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
