import os
from dataclasses import dataclass
from pathlib import Path

import yaml

from profilebackup.errors import ConfigError, ConfigMissingError
from profilebackup.globals import Globals


@dataclass(frozen=True)
class BackupConfig:
	"""
	Paths a backup run works with.

	Attributes:
		source_dir (Path): Directory whose contents are mirrored (usually the home directory).
		backup_dir (Path): Directory receiving the mirror. Created when missing.
		exclude_file (Path): File with rsync exclude patterns, one per line.
		config_file (Path): The configuration file these values were read from.
	"""
	source_dir: Path
	backup_dir: Path
	exclude_file: Path
	config_file: Path


def default_config_path(base_dir) -> Path:
	return Path(base_dir) / Globals.DEFAULT_CONFIG_FILE


def _resolve_path(value: str, relative_to: Path) -> Path:
	path = Path(os.path.expandvars(value)).expanduser()
	if not path.is_absolute():
		path = relative_to / path
	return path


def parse_config(path_to_config) -> BackupConfig:
	"""
	Parses the YAML configuration file describing what to back up and where.

	The file must be a mapping with exactly the keys `source_dir`, `backup_dir`
	and `exclude_file`. Values may use `~` and environment variables; relative
	paths are taken relative to the directory holding the configuration file.

	Returns:
		BackupConfig: The parsed configuration.

	Raises:
		ConfigMissingError: If the configuration file does not exist.
		ConfigError: If the file is not valid YAML, is not a mapping, misses a
			required key, contains an unknown key or a non-string value.
	"""
	path_to_config = Path(path_to_config)

	try:
		with open(path_to_config, encoding="utf-8") as f:
			document = yaml.safe_load(f)
	except FileNotFoundError:
		raise ConfigMissingError(f"Configuration file not found at: {path_to_config}")
	except yaml.YAMLError as e:
		raise ConfigError(f"Configuration file \"{path_to_config}\" is not valid YAML: {e}")
	except OSError as e:
		raise ConfigError(f"Cannot read configuration file \"{path_to_config}\": {e}")

	if not isinstance(document, dict):
		raise ConfigError(f"Configuration file \"{path_to_config}\" must contain a mapping of settings.")

	unknown = sorted(str(key) for key in document if key not in Globals.CONFIG_KEYS)
	if unknown:
		raise ConfigError(f"Unknown configuration keys in \"{path_to_config}\": {', '.join(unknown)}")

	missing = [key for key in Globals.CONFIG_KEYS if document.get(key) in (None, "")]
	if missing:
		raise ConfigError(f"Missing required configuration values in \"{path_to_config}\": {', '.join(missing)}")

	for key in Globals.CONFIG_KEYS:
		if not isinstance(document[key], str):
			raise ConfigError(f"Configuration value \"{key}\" must be a path string, got {type(document[key]).__name__}.")

	config_dir = path_to_config.resolve().parent

	return BackupConfig(
		source_dir=_resolve_path(document["source_dir"], config_dir),
		backup_dir=_resolve_path(document["backup_dir"], config_dir),
		exclude_file=_resolve_path(document["exclude_file"], config_dir),
		config_file=path_to_config)
