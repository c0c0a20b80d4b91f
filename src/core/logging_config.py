"""
Logging Configuration Module.

Sets up logging for the geofence editor: a size-capped rotating log file
under the log directory plus an optional stderr stream. Standard output is
left alone because the editor prints the finished polygon there.

The log directory defaults to ./logs and can be moved with the
GEOFENCE_LOG_DIR environment variable.
"""

import logging
import os
import sys
from datetime import datetime
from logging.handlers import RotatingFileHandler
from typing import List, Mapping, Optional

LOG_DIR = "logs"
LOG_DIR_ENV = "GEOFENCE_LOG_DIR"
LOG_FILENAME = "geofence.log"
MAX_BYTES = 2 * 1024 * 1024  # 2 MB
BACKUP_COUNT = 3
LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Libraries whose DEBUG output drowns the editor's own messages
QUIET_LOGGERS = ("PIL", "pyproj")

# Handlers added by setup_logging, replaced on the next call
_installed_handlers: List[logging.Handler] = []


class SafeRotatingFileHandler(RotatingFileHandler):
    """
    Rotating file handler that survives a locked log file.

    Windows refuses to rename a file another process still has open, which
    happens when two editor windows share the log directory. The rollover
    is skipped and writing continues in the current file.
    """

    def doRollover(self) -> None:
        try:
            super().doRollover()
        except PermissionError:
            if sys.platform != "win32":
                raise


def resolve_log_dir(environ: Optional[Mapping[str, str]] = None) -> str:
    """
    Returns the directory log files are written to.

    Args:
        environ: Environment mapping, defaults to os.environ.
    """
    env = os.environ if environ is None else environ
    return env.get(LOG_DIR_ENV, "").strip() or LOG_DIR


def setup_logging(
    debug_mode: bool = False,
    log_to_console: bool = True,
    log_dir: Optional[str] = None,
) -> Optional[str]:
    """
    Configures the root logger for an editor session.

    Calling it again replaces the handlers from the previous call.

    Args:
        debug_mode (bool): Log at DEBUG instead of INFO.
        log_to_console (bool): Also log to stderr.
        log_dir (Optional[str]): Directory for the log file; resolved from
            the environment when None.

    Returns:
        Optional[str]: Path of the log file, or None if file logging could
        not be set up.
    """
    level = logging.DEBUG if debug_mode else logging.INFO
    formatter = logging.Formatter(LOG_FORMAT, datefmt=DATE_FORMAT)

    root_logger = logging.getLogger()
    while _installed_handlers:
        handler = _installed_handlers.pop()
        root_logger.removeHandler(handler)
        handler.close()
    root_logger.setLevel(level)

    directory = log_dir or resolve_log_dir()
    log_path: Optional[str] = os.path.join(directory, LOG_FILENAME)
    try:
        os.makedirs(directory, exist_ok=True)
        file_handler = SafeRotatingFileHandler(
            log_path,
            maxBytes=MAX_BYTES,
            backupCount=BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError as e:
        print(f"Could not open log file in {directory}: {e}", file=sys.stderr)
        log_path = None
    else:
        file_handler.setFormatter(formatter)
        file_handler.setLevel(level)
        root_logger.addHandler(file_handler)
        _installed_handlers.append(file_handler)

    if log_to_console:
        # stdout carries the GeoJSON output
        console_handler = logging.StreamHandler(sys.stderr)
        console_handler.setFormatter(formatter)
        console_handler.setLevel(level)
        root_logger.addHandler(console_handler)
        _installed_handlers.append(console_handler)

    for name in QUIET_LOGGERS:
        logging.getLogger(name).setLevel(logging.INFO)

    logging.info(f"Geofence Editor Session Started at {datetime.now().isoformat()}")
    logging.debug(f"Logging to {log_path or 'console only'}")
    return log_path


def get_logger(name: str) -> logging.Logger:
    """Returns the logger for a module name."""
    return logging.getLogger(name)


def shutdown_logging() -> None:
    """Flushes and closes all handlers so the log file is released."""
    logging.shutdown()
