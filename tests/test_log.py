import logging
import re
from datetime import datetime

import pytest

from profilebackup.errors import LogFileError
from profilebackup.log import ColorizingFormatter, PlainFormatter, attach_log_file, detach_log_file, logger, session_log_path

LINE = re.compile(r"^\d{4}-\d{2}-\d{2} \d{2}:\d{2}:\d{2} \[(INFO|WARN|ERROR|DEBUG)\] .+$")


def make_record(level, message="hello"):
    return logging.LogRecord("profilebackup", level, __file__, 1, message, None, None)


def test_session_log_path(tmp_path):
    started = datetime(2025, 7, 13, 9, 5, 1)
    path = session_log_path(tmp_path, "user-profile-backup", started)
    assert path == tmp_path / "user-profile-backup_2025-07-13_09-05-01.log"


@pytest.mark.parametrize("level, name", [
    (logging.DEBUG, "DEBUG"),
    (logging.INFO, "INFO"),
    (logging.WARNING, "WARN"),
    (logging.ERROR, "ERROR"),
])
def test_plain_formatter_levels(level, name):
    record = make_record(level)
    line = PlainFormatter().format(record)
    assert LINE.match(line)
    assert f"[{name}] hello" in line
    # The record itself keeps its standard level name
    assert record.levelname == logging.getLevelName(level)


def test_colorizing_formatter():
    line = ColorizingFormatter().format(make_record(logging.ERROR))
    assert line.startswith("\033[0;31m")
    assert line.endswith("\033[0m")
    assert "[ERROR] hello" in line


def test_file_receives_all_levels_without_color(tmp_path):
    path = tmp_path / "session.log"
    handler = attach_log_file(path)
    try:
        logger.debug("debug line")
        logger.info("info line")
        logger.warning("warn line")
        logger.error("error line")
    finally:
        detach_log_file(handler)

    lines = path.read_text().splitlines()
    assert len(lines) == 4
    assert all(LINE.match(line) for line in lines)
    assert "\033" not in path.read_text()
    assert handler not in logger.handlers


def test_log_file_cannot_be_created(tmp_path):
    with pytest.raises(LogFileError, match="Failed to create log file"):
        attach_log_file(tmp_path / "missing-dir" / "session.log")
