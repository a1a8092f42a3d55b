import enum
import subprocess
from pathlib import Path

from profilebackup.config import BackupConfig
from profilebackup.errors import BackupError, ExecutionFailureError
from profilebackup.log import logger
from profilebackup.parser import RunOptions
from profilebackup.validation import validate

RSYNC_BIN = "rsync"

# Archive copy keeping backups of overwritten files, pruning vanished and excluded entries.
RSYNC_BASE_OPTIONS = ["-a", "-b", "-v", "-h", "--delete", "--delete-excluded", "--recursive"]
RSYNC_PROGRESS_OPTIONS = ["-h", "--progress"]
RSYNC_DRY_RUN_OPTION = "--dry-run"


class BackupState(enum.Enum):
	IDLE = "idle"
	VALIDATING = "validating"
	READY = "ready"
	SYNCING = "syncing"
	FAILED = "failed"
	SUCCEEDED = "succeeded"


def as_dir_contents(path: Path) -> str:
	"""
	Returns `path` with a trailing slash so rsync copies the directory's
	contents rather than the directory itself.
	"""
	raw_path = str(path)
	if not raw_path.endswith("/"):
		raw_path += "/"
	return raw_path


def assemble_rsync_cmd(config: BackupConfig, options: RunOptions) -> list[str]:
	"""
	Assemble the rsync command mirroring the source directory into the backup directory.

	Parameters:
		config (BackupConfig): Source, destination and exclude file.
		options (RunOptions): Verbose and dry-run flags.

	Returns:
		list[str]: A list of rsync command components ready to be executed via subprocess.
	"""
	rsync_command = [RSYNC_BIN] + RSYNC_BASE_OPTIONS
	rsync_command.append(f"--exclude-from={config.exclude_file}")

	# Add progress reporting
	if options.verbose:
		rsync_command.extend(RSYNC_PROGRESS_OPTIONS)

	# Add dry-run flag
	if options.dry_run:
		rsync_command.append(RSYNC_DRY_RUN_OPTION)

	rsync_command += [as_dir_contents(config.source_dir), as_dir_contents(config.backup_dir)]
	return rsync_command


class BackupRun:
	"""
	One mirror run of the source directory into the backup directory.

	The run moves through `BackupState`: IDLE -> VALIDATING -> READY -> SYNCING
	and ends in either SUCCEEDED or FAILED. Failures are raised as `BackupError`
	subclasses after the state has been set to FAILED.

	rsync's own output (stdout and stderr) is appended to `log_file`.
	"""

	def __init__(self, config: BackupConfig, options: RunOptions, log_file: Path):
		self.config = config
		self.options = options
		self.log_file = Path(log_file)
		self.state = BackupState.IDLE

	def _set_state(self, state: BackupState):
		logger.debug(f"Backup state: {self.state.value} -> {state.value}")
		self.state = state

	def run(self):
		self._set_state(BackupState.VALIDATING)
		try:
			validate(self.config)
		except BackupError:
			self._set_state(BackupState.FAILED)
			raise
		self._set_state(BackupState.READY)

		if self.options.dry_run:
			logger.warning("Dry run mode enabled. Simulating backup without making changes.")

		logger.info(f"Starting backup from '{self.config.source_dir}' to '{self.config.backup_dir}'.")

		rsync_cmd = assemble_rsync_cmd(self.config, self.options)
		if self.options.verbose:
			logger.debug("Verbose mode enabled.")
		logger.debug(rsync_cmd)

		self._set_state(BackupState.SYNCING)
		try:
			self._execute(rsync_cmd)
		except BackupError:
			self._set_state(BackupState.FAILED)
			raise

		self._set_state(BackupState.SUCCEEDED)
		if self.options.dry_run:
			logger.info("Dry run simulation finished successfully.")
		else:
			logger.info("Backup completed successfully.")
		return self

	def _execute(self, rsync_cmd: list[str]):
		# Flush our own records first so rsync's output lands after them
		for handler in logger.handlers:
			handler.flush()

		try:
			with open(self.log_file, "a", encoding="utf-8") as log_fh:
				result = subprocess.run(rsync_cmd, stdout=log_fh, stderr=subprocess.STDOUT)
		except OSError as e:
			raise ExecutionFailureError(f"Failed to execute rsync: {e}", returncode=-1)

		if result.returncode != 0:
			raise ExecutionFailureError(
				f"rsync failed with exit code {result.returncode}. See {self.log_file} for details.",
				returncode=result.returncode)


def run(config: BackupConfig, options: RunOptions, log_file: Path) -> BackupRun:
	return BackupRun(config, options, log_file).run()
