"""
Logging configuration for gnuplot-pipe.

Two destinations:
  - File: always DEBUG level, one file per run, full detail. Every line sent
    to the engine is traced here (log_command), which is the only record of
    what the engine was asked to do since the pipe never answers.
  - Console: DEBUG if --verbose, WARNING+ otherwise.
  - Format: "timestamp | level | name | session_id | message"
  - Config console_format options:
    - "simple": (default) bare messages for DEBUG/INFO, [LEVEL] prefix for WARNING+
    - "full"  : same structured format as the file handler
    - "clean" : no console output at all (file logging still active)

Log files are stored in ~/.gnuplot-pipe/logs/ (see config.get_data_dir()).
"""

import logging
import sys
import traceback
from datetime import datetime
from pathlib import Path
from typing import Optional

from config import get_data_dir


LOGGER_NAME = "gnuplot-pipe"

# Log directory
LOG_DIR = get_data_dir() / "logs"

# Module-level state (shared across re-inits)
_session_filter: Optional["_SessionFilter"] = None
_current_log_file: Optional[Path] = None


class _SessionFilter(logging.Filter):
    """Injects the active plot session id into every log record."""

    def __init__(self) -> None:
        super().__init__()
        self.session_id = ""

    def filter(self, record: logging.LogRecord) -> bool:
        record.session_id = self.session_id or "-"
        return True


class _ConsoleFormatter(logging.Formatter):
    """Console formatter: shows [LEVEL] prefix only for WARNING and above."""

    def format(self, record: logging.LogRecord) -> str:
        if record.levelno >= logging.WARNING:
            return f"  [{record.levelname}] {record.getMessage()}"
        return f"  {record.getMessage()}"


def setup_logging(verbose: bool = False) -> logging.Logger:
    """Configure logging for the bridge.

    Args:
        verbose: If True, show DEBUG level on console; otherwise WARNING+ only

    Returns:
        Configured logger instance
    """
    global _session_filter, _current_log_file
    LOG_DIR.mkdir(parents=True, exist_ok=True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.setLevel(logging.DEBUG)  # Capture everything, filter at handler level

    # Clear existing handlers (in case of re-init)
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()

    # Session filter: reuse existing instance to preserve session_id across re-inits
    if _session_filter is None:
        _session_filter = _SessionFilter()
    logger.addFilter(_session_filter)

    # File handler - one log file per run
    run_timestamp = datetime.now().strftime('%Y%m%d_%H%M%S')
    log_file = LOG_DIR / f"gnuplot_{run_timestamp}.log"
    _current_log_file = log_file
    file_handler = logging.FileHandler(log_file, encoding="utf-8")
    file_handler.setLevel(logging.DEBUG)
    file_format = logging.Formatter(
        "%(asctime)s | %(levelname)-8s | %(name)s | %(session_id)s | %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S"
    )
    file_handler.setFormatter(file_format)
    logger.addHandler(file_handler)

    import config as _config
    console_format = _config.get("console_format", "simple")

    if console_format != "clean":
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setLevel(logging.DEBUG if verbose else logging.WARNING)
        if console_format == "full":
            console_handler.setFormatter(file_format)  # identical to file handler
        else:
            console_handler.setFormatter(_ConsoleFormatter())
        logger.addHandler(console_handler)

    logger.debug(f"Log file: {log_file}")

    return logger


def get_logger() -> logging.Logger:
    """Get the bridge logger instance.

    Returns:
        The gnuplot-pipe logger (creates with defaults if not configured)
    """
    logger = logging.getLogger(LOGGER_NAME)
    if not logger.handlers:
        return setup_logging(verbose=False)
    return logger


def set_session_id(session_id: str) -> None:
    """Set the session ID that will be included in all subsequent log lines.

    Args:
        session_id: The plot session identifier ('' clears it)
    """
    global _session_filter
    if _session_filter is None:
        # Logger not set up yet: create filter so it's ready when logging starts
        _session_filter = _SessionFilter()
    _session_filter.session_id = session_id


def log_command(command_text: str) -> None:
    """Trace one command line written to the engine."""
    get_logger().debug(f"gnuplot> {command_text}")


def log_error(
    message: str,
    exc: Optional[Exception] = None,
    context: Optional[dict] = None,
) -> None:
    """Log an error with full details including stack trace.

    Args:
        message: Error description
        exc: Optional exception to include stack trace from
        context: Optional dict of additional context (operation, args, etc.)
    """
    logger = get_logger()

    lines = [message]

    if context:
        lines.append("Context:")
        for key, value in context.items():
            lines.append(f"  {key}: {value}")

    if exc:
        lines.append(f"Exception type: {type(exc).__name__}")
        lines.append(f"Exception message: {exc}")
        lines.append("Stack trace:")
        lines.append(traceback.format_exc())

    logger.error("\n".join(lines))


def get_current_log_path() -> Path:
    """Return the path to the current run's log file."""
    if _current_log_file is not None:
        return _current_log_file
    logs = sorted(LOG_DIR.glob("gnuplot_*.log"))
    if logs:
        return logs[-1]
    return LOG_DIR / f"gnuplot_{datetime.now().strftime('%Y%m%d_%H%M%S')}.log"


def get_recent_errors(days: int = 7, limit: int = 50) -> list[dict]:
    """Retrieve recent warnings and errors from log files.

    Args:
        days: How many days back to search
        limit: Maximum number of entries to return

    Returns:
        List of entries with timestamp, level, session_id, message and details
    """
    errors = []
    cutoff = datetime.now().timestamp() - days * 86400
    log_files = sorted(LOG_DIR.glob("gnuplot_*.log"), reverse=True)

    for log_file in log_files:
        if log_file.stat().st_mtime < cutoff:
            break

        try:
            with open(log_file, "r", encoding="utf-8") as f:
                current_error = None
                for line in f:
                    if "| ERROR" in line or "| WARNING" in line:
                        if current_error:
                            errors.append(current_error)
                        # Format: timestamp | level | name | session_id | message
                        parts = line.split(" | ", 4)
                        if len(parts) >= 5:
                            current_error = {
                                "timestamp": parts[0].strip(),
                                "level": parts[1].strip(),
                                "session_id": parts[3].strip(),
                                "message": parts[4].strip(),
                                "details": [],
                            }
                        else:
                            current_error = None
                    elif current_error and line.startswith("  "):
                        current_error["details"].append(line.rstrip())

                if current_error:
                    errors.append(current_error)
        except OSError:
            continue

        if len(errors) >= limit:
            break

    return errors[:limit]


def print_recent_errors(days: int = 7, limit: int = 10) -> None:
    """Print recent errors to console for review."""
    errors = get_recent_errors(days=days, limit=limit)

    if not errors:
        print(f"No errors found in the last {days} days.")
        return

    print(f"Recent errors (last {days} days, showing up to {limit}):")
    print("-" * 60)

    for i, error in enumerate(errors, 1):
        print(f"\n{i}. [{error['timestamp']}] {error['level']}")
        print(f"   {error['message']}")
        for detail in error["details"][:5]:
            print(f"   {detail}")
        if len(error["details"]) > 5:
            print(f"   ... and {len(error['details']) - 5} more lines")

    print("-" * 60)
    print(f"Full logs available at: {LOG_DIR}")
