import os
import stat

import pytest

from profilebackup.config import BackupConfig
from profilebackup.globals import Globals


@pytest.fixture
def home_tree(tmp_path):
    """A source tree, an exclude file and a (not yet created) backup directory."""
    source_dir = tmp_path / "home"
    (source_dir / "b").mkdir(parents=True)
    (source_dir / "a.txt").write_text("alpha")
    (source_dir / "b" / "secret.log").write_text("secret")

    exclude_file = tmp_path / "exclude.txt"
    exclude_file.write_text("*.log\n")

    return BackupConfig(
        source_dir=source_dir,
        backup_dir=tmp_path / "backup",
        exclude_file=exclude_file,
        config_file=tmp_path / "program" / Globals.DEFAULT_CONFIG_FILE)


@pytest.fixture
def program_dir(home_tree):
    """Directory of the program, holding its configuration file."""
    directory = home_tree.config_file.parent
    directory.mkdir()
    home_tree.config_file.write_text(
        f"source_dir: {home_tree.source_dir}\n"
        f"backup_dir: {home_tree.backup_dir}\n"
        f"exclude_file: {home_tree.exclude_file}\n")
    return directory


@pytest.fixture
def stub_rsync(tmp_path, monkeypatch):
    """
    Puts a fake rsync first on PATH.

    Call the fixture with the exit code the stub should return and optional
    shell lines to run before exiting. Returns the file recording one line of
    arguments per invocation.
    """
    bin_dir = tmp_path / "bin"
    bin_dir.mkdir()
    calls = tmp_path / "rsync_calls.txt"

    def make(exit_code=0, body=""):
        script = bin_dir / "rsync"
        script.write_text(
            "#!/bin/sh\n"
            f"echo \"$@\" >> \"{calls}\"\n"
            "echo \"stub rsync output\"\n"
            f"{body}\n"
            f"exit {exit_code}\n")
        script.chmod(script.stat().st_mode | stat.S_IXUSR | stat.S_IXGRP | stat.S_IXOTH)
        monkeypatch.setenv("PATH", f"{bin_dir}{os.pathsep}{os.environ.get('PATH', '')}")
        return calls

    return make


@pytest.fixture
def call_count():
    def count(calls):
        if not calls.exists():
            return 0
        return len(calls.read_text().splitlines())

    return count
