from profilebackup.globals import Globals


class BackupError(Exception):
    """
    Base class for every failure that ends a backup run.

    Each error carries the exit code the process should terminate with.
    Only the entry point catches these and turns them into an exit status.
    """

    def __init__(self, message: str, exit_code: int = Globals.EXIT_FAILURE):
        super().__init__(message)
        self.message = message
        self.exit_code = exit_code

    def __str__(self) -> str:
        return self.message


class ConfigError(BackupError):
    """The configuration file is unreadable or malformed."""


class ConfigMissingError(ConfigError):
    """The configuration file does not exist."""


class LogFileError(BackupError):
    """The session log file could not be created."""


class DependencyMissingError(BackupError):
    """A required executable or filesystem path is missing."""


class ArgumentError(BackupError):
    """An unknown option or an unexpected positional argument was given."""


class ConcurrentRunError(BackupError):
    """Another backup run holds the lock."""


class ExecutionFailureError(BackupError):
    """rsync returned a non-zero exit status."""

    def __init__(self, message: str, returncode: int, exit_code: int = Globals.EXIT_FAILURE):
        super().__init__(message, exit_code)
        self.returncode = returncode
