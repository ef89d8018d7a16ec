"""
Exclusive lock around the JSON data document.

A sibling ``<file>.lock`` is opened and locked non-blocking; acquisition is
retried until ``timeout`` expires.
"""

import time
import logging
from contextlib import contextmanager
from pathlib import Path

from concrete_lab.core.exceptions import FileLockException

logger = logging.getLogger(__name__)

try:
    import msvcrt

    def _acquire(handle):
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)

    def _release(handle):
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)

except ImportError:
    import fcntl

    def _acquire(handle):
        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)

    def _release(handle):
        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


def lock_path_for(target) -> Path:
    path = Path(target)
    if path.suffix == ".lock":
        return path
    return path.with_name(path.name + ".lock")


@contextmanager
def file_lock(target, timeout=10, delay=0.1):
    """
    Hold an exclusive lock for ``target`` while the block runs.

    Raises FileLockException when the lock cannot be taken within ``timeout``
    seconds.
    """
    lock_path = lock_path_for(target)
    lock_path.parent.mkdir(parents=True, exist_ok=True)
    deadline = time.monotonic() + timeout

    handle = None
    while handle is None:
        candidate = open(lock_path, "w")
        try:
            _acquire(candidate)
            handle = candidate
        except OSError:
            candidate.close()
            if time.monotonic() >= deadline:
                raise FileLockException(f"Timeout waiting for lock: {lock_path}")
            time.sleep(delay)

    try:
        yield handle
    finally:
        try:
            _release(handle)
        except OSError as e:
            logger.warning(f"Failed to release lock {lock_path}: {e}")
        handle.close()
