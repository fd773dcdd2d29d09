"""Logging setup for krishi-mitra.

Records always go to stderr so command output on stdout can be piped or
parsed. A log file is written only when one is asked for.
"""

import logging
import logging.handlers
import os
import sys
from pathlib import Path

LOG_FORMAT = "%(asctime)s %(levelname)-8s %(name)s: %(message)s"

# Client libraries that are noisy below WARNING
THIRD_PARTY_LOGGERS = ("pymongo", "httpx", "httpcore", "hpack", "comtypes")


def setup_logging(level: str = "INFO", log_file: str | Path | None = None) -> logging.Logger:
    """Replace the root logger's handlers.

    Args:
        level: Level name; unknown names mean INFO
        log_file: Optional UTF-8 log file, rotated at 1 MB with two backups

    Returns:
        The root logger
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    root = logging.getLogger()
    root.setLevel(numeric_level)
    root.handlers.clear()

    console = logging.StreamHandler(sys.stderr)
    console.setFormatter(logging.Formatter(LOG_FORMAT, datefmt="%H:%M:%S"))
    root.addHandler(console)

    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        file_handler = logging.handlers.RotatingFileHandler(
            path, maxBytes=1_000_000, backupCount=2, encoding="utf-8"
        )
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        root.addHandler(file_handler)

    for name in THIRD_PARTY_LOGGERS:
        logging.getLogger(name).setLevel(max(numeric_level, logging.WARNING))

    return root


def get_logger(name: str) -> logging.Logger:
    return logging.getLogger(name)


def configure_from_env(verbose: bool = False) -> logging.Logger:
    """Configure logging for a command run.

    ``verbose`` forces DEBUG; otherwise ``LOG_LEVEL`` applies (WARNING when
    unset). ``LOG_FILE`` turns on the log file.
    """
    level = "DEBUG" if verbose else os.getenv("LOG_LEVEL", "WARNING")
    return setup_logging(level, log_file=os.getenv("LOG_FILE"))
