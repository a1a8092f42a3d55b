"""Run lock keeping two backups from writing into the same destination at once."""
import fcntl
import os
from pathlib import Path

from profilebackup.errors import ConcurrentRunError
from profilebackup.log import logger


class RunLock:
    """
    Exclusive, non-blocking `flock` on a file next to the configuration.

    Used as a context manager around a backup run. The lock file keeps the
    PID of the holder for whoever inspects it; it is not removed afterwards.
    """

    def __init__(self, lock_path: Path):
        self.lock_path = Path(lock_path)
        self._fh = None

    def acquire(self):
        try:
            fh = open(self.lock_path, "a+")
        except OSError as e:
            raise ConcurrentRunError(f"Cannot open run lock {self.lock_path}: {e}")

        try:
            fcntl.flock(fh.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)
        except BlockingIOError:
            fh.close()
            raise ConcurrentRunError(f"Another backup run is already in progress (lock: {self.lock_path}).")
        except OSError as e:
            fh.close()
            raise ConcurrentRunError(f"Cannot lock {self.lock_path}: {e}")

        fh.truncate(0)
        fh.write(str(os.getpid()))
        fh.flush()
        self._fh = fh
        logger.debug(f"Acquired run lock {self.lock_path}")
        return self

    def release(self):
        if self._fh is None:
            return
        try:
            fcntl.flock(self._fh.fileno(), fcntl.LOCK_UN)
        except OSError as e:
            logger.warning(f"Failed to release run lock {self.lock_path}: {e}")
        finally:
            self._fh.close()
            self._fh = None

    def __enter__(self):
        return self.acquire()

    def __exit__(self, exc_type, exc, tb):
        self.release()
