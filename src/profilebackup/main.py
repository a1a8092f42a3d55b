#!/usr/bin/env python3

"""
main.py

Mirrors the user's home directory into a backup directory with rsync. New and
changed files are copied, files removed from (or excluded in) the source are
deleted from the backup.

The configuration file `user-profile-backup.yaml` and the per-run log files
live next to the program.
"""

import sys
from pathlib import Path

from profilebackup.config import default_config_path, parse_config
from profilebackup.errors import ArgumentError, BackupError, ConfigError, LogFileError
from profilebackup.globals import Globals
from profilebackup.locks import RunLock
from profilebackup.log import attach_log_file, detach_log_file, logger, session_log_path
from profilebackup.parser import get_sync_arguments, usage_text
from profilebackup.sync import run


def program_dir() -> Path:
	return Path(sys.argv[0]).resolve().parent


def backup(config, options, log_file: Path):
	"""Runs one backup while holding the run lock next to the configuration file."""
	lock_path = config.config_file.resolve().parent / Globals.LOCK_FILE
	with RunLock(lock_path):
		run(config, options, log_file)


def main(argv=None, base_dir=None) -> int:

	argv = sys.argv[1:] if argv is None else argv
	base_dir = Path(base_dir) if base_dir is not None else program_dir()
	name = Globals.PROGRAM_NAME

	# 1. Parse command-line arguments
	try:
		options = get_sync_arguments(argv, prog=name)
	except ArgumentError as e:
		logger.error(e.message)
		return e.exit_code

	if options.show_help:
		print(usage_text(name))
		return Globals.EXIT_SUCCESS

	# 2. Load configuration (nothing is logged to file before this succeeds)
	config_path = default_config_path(base_dir)
	try:
		config = parse_config(config_path)
	except ConfigError as e:
		print(f"FATAL: {e.message}", file=sys.stderr)
		print(f"Please ensure '{Globals.DEFAULT_CONFIG_FILE}' exists in the same directory as the program.", file=sys.stderr)
		return e.exit_code

	# 3. Open the session log
	log_file = session_log_path(base_dir, name)
	try:
		file_handler = attach_log_file(log_file)
	except LogFileError as e:
		print(f"FATAL: {e.message}", file=sys.stderr)
		return e.exit_code

	# 4. Back up
	try:
		logger.info(f"Script '{name}' started.")
		backup(config, options, log_file)
		logger.info(f"Script '{name}' finished.")
		return Globals.EXIT_SUCCESS
	except BackupError as e:
		logger.error(e.message)
		return e.exit_code
	except KeyboardInterrupt:
		logger.error("Interrupted by user.")
		return Globals.EXIT_INTERRUPTED
	finally:
		detach_log_file(file_handler)


def cli():
	sys.exit(main())


if __name__ == "__main__":
	cli()
