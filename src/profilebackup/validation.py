import shutil

from profilebackup.config import BackupConfig
from profilebackup.errors import DependencyMissingError
from profilebackup.globals import Globals
from profilebackup.log import logger


def check_system_dependencies():
    """
    Checks whether all required system binaries are available in the system's PATH.

    Iterates over `Globals.REQUIRED_SYSTEM_BINS` and uses `shutil.which` to
    verify their presence.

    Raises:
        DependencyMissingError: For the first binary that cannot be found.
    """
    for current_bin in Globals.REQUIRED_SYSTEM_BINS:
        if shutil.which(current_bin) is None:
            raise DependencyMissingError(f"Required command '{current_bin}' not found. Please install it.")


def ensure_backup_dir(config: BackupConfig):
    backup_dir = config.backup_dir
    if backup_dir.is_dir():
        return

    if backup_dir.exists():
        raise DependencyMissingError(f"Backup destination is not a directory: {backup_dir}")

    logger.warning(f"Backup destination directory not found. Creating it: {backup_dir}")
    try:
        backup_dir.mkdir(parents=True, exist_ok=True)
    except OSError as e:
        raise DependencyMissingError(f"Failed to create backup destination directory: {backup_dir} ({e})")


def validate(config: BackupConfig):
    """
    Checks everything a backup run depends on, in order: rsync, the source
    directory, the backup directory (created when missing) and the exclude file.

    Raises:
        DependencyMissingError: On the first check that fails.
    """
    logger.debug("Validating script dependencies...")

    check_system_dependencies()

    if not config.source_dir.is_dir():
        raise DependencyMissingError(f"Source directory not found: {config.source_dir}")

    ensure_backup_dir(config)

    if not config.exclude_file.is_file():
        raise DependencyMissingError(f"Exclude file not found: {config.exclude_file}")

    logger.debug("All required dependencies found.")
