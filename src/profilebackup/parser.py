import argparse
from dataclasses import dataclass

from profilebackup.errors import ArgumentError
from profilebackup.globals import Globals

VERBOSE_TOKENS = ("-v", "--verbose")
DRY_RUN_TOKENS = ("-d", "--dry-run")
HELP_TOKENS = ("-h", "--help")
END_OF_OPTIONS = "--"


@dataclass(frozen=True)
class RunOptions:
	verbose: bool = False
	dry_run: bool = False
	show_help: bool = False


class BackupArgumentParser(argparse.ArgumentParser):
	"""ArgumentParser that raises `ArgumentError` instead of exiting the process."""

	def error(self, message):
		raise ArgumentError(f"Unknown or invalid option: {message}. Use -h for help.")


def build_parser(prog: str = Globals.PROGRAM_NAME) -> BackupArgumentParser:
	parser = BackupArgumentParser(
		prog=prog,
		description="Performs a robust backup of the user's home directory.",
		epilog=(
			"Examples:\n"
			f"  {prog} --verbose\n"
			f"  {prog} -d\n"),
		formatter_class=argparse.RawDescriptionHelpFormatter,
		add_help=False,
		allow_abbrev=False)
	parser.add_argument(*VERBOSE_TOKENS, dest="verbose", action="store_true", help="Enable verbose output from rsync.")
	parser.add_argument(*DRY_RUN_TOKENS, dest="dry_run", action="store_true", help="Simulate backup without making actual changes.")
	parser.add_argument(*HELP_TOKENS, dest="show_help", action="store_true", help="Display this help message and exit.")
	return parser


def usage_text(prog: str = Globals.PROGRAM_NAME) -> str:
	return build_parser(prog).format_help()


def get_sync_arguments(argv: list[str], prog: str = Globals.PROGRAM_NAME) -> RunOptions:
	"""
	Parses command-line arguments for a backup run.

	Tokens are read left to right and must match an option exactly, so
	bundled short flags such as `-vd` are rejected. Reading stops at the
	first `--`; anything after it is ignored. Reaching `-h`/`--help` ends
	parsing immediately, but a bad token before it is still an error.

	Parameters:
		argv (list[str]): Arguments without the program name.
		prog (str): Program name shown in messages.

	Returns:
		RunOptions: The parsed options.

	Raises:
		ArgumentError: For the first unknown option or positional argument.
	"""
	accepted = []
	for token in argv:
		if token == END_OF_OPTIONS:
			break
		if token in HELP_TOKENS:
			return RunOptions(show_help=True)
		if token in VERBOSE_TOKENS or token in DRY_RUN_TOKENS:
			accepted.append(token)
		elif token.startswith("-"):
			raise ArgumentError(f"Unknown or invalid option: '{token}'. Use -h for help.")
		else:
			raise ArgumentError(f"Unexpected argument: '{token}'. This script does not accept positional arguments.")

	args = build_parser(prog).parse_args(accepted)
	return RunOptions(verbose=args.verbose, dry_run=args.dry_run)
