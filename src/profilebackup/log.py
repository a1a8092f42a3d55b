import logging
import sys
from datetime import datetime
from pathlib import Path

from profilebackup.errors import LogFileError
from profilebackup.globals import Globals

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

# Short level names as they appear in the session log.
LEVEL_NAMES = {
    logging.WARNING: "WARN",
    logging.CRITICAL: "ERROR",
}

LEVEL_COLORS = {
    logging.DEBUG: "\033[0;36m",
    logging.INFO: "\033[0;32m",
    logging.WARNING: "\033[0;33m",
    logging.ERROR: "\033[0;31m",
    logging.CRITICAL: "\033[0;31m",
}
RESET = "\033[0m"


class PlainFormatter(logging.Formatter):
    """Formats a record as ``<timestamp> [LEVEL] message``."""

    def __init__(self):
        super().__init__(fmt=LOG_FORMAT, datefmt=DATE_FORMAT)

    def format(self, record: logging.LogRecord) -> str:
        original = record.levelname
        record.levelname = LEVEL_NAMES.get(record.levelno, original)
        try:
            return super().format(record)
        finally:
            record.levelname = original


class ColorizingFormatter(PlainFormatter):
    """Wraps the plain line into the ANSI colour of its level."""

    def format(self, record: logging.LogRecord) -> str:
        base = super().format(record)
        return f"{LEVEL_COLORS.get(record.levelno, RESET)}{base}{RESET}"


logger = logging.getLogger("profilebackup")
logger.setLevel(logging.DEBUG)

if not logger.handlers:
    handler = logging.StreamHandler(sys.stderr)
    handler.setLevel(logging.DEBUG)
    handler.setFormatter(ColorizingFormatter())
    logger.addHandler(handler)


def session_log_path(directory: Path, program_name: str = Globals.PROGRAM_NAME, started: datetime = None) -> Path:
    """
    Build the path of the log file for one invocation.

    The file lives in `directory` and is named after the program and the
    moment the run started, so every invocation gets its own file.
    """
    started = started or datetime.now()
    return Path(directory) / f"{program_name}_{started.strftime(Globals.LOG_TIMESTAMP_FORMAT)}.log"


def attach_log_file(path: Path) -> logging.FileHandler:
    """
    Create (or append to) the session log file and mirror all records into it.

    Returns:
        logging.FileHandler: The attached handler, to be passed to `detach_log_file`.

    Raises:
        LogFileError: If the file cannot be created.
    """
    try:
        file_handler = logging.FileHandler(str(path), mode="a", encoding="utf-8")
    except OSError as e:
        raise LogFileError(f"Failed to create log file: {path} ({e})")

    file_handler.setLevel(logging.DEBUG)
    file_handler.setFormatter(PlainFormatter())
    logger.addHandler(file_handler)
    return file_handler


def detach_log_file(file_handler: logging.FileHandler):
    logger.removeHandler(file_handler)
    file_handler.flush()
    file_handler.close()
