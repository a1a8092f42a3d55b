class Globals:
    PROGRAM_NAME = "user-profile-backup"
    DEFAULT_CONFIG_FILE = "user-profile-backup.yaml"
    LOCK_FILE = ".user-profile-backup.lock"
    REQUIRED_SYSTEM_BINS = ["rsync"]
    CONFIG_KEYS = ("source_dir", "backup_dir", "exclude_file")
    LOG_TIMESTAMP_FORMAT = "%Y-%m-%d_%H-%M-%S"
    EXIT_SUCCESS = 0
    EXIT_FAILURE = 1
    EXIT_INTERRUPTED = 130
