"""Atomic file writes, state directory management, and root discovery."""

from __future__ import annotations

import os
import tempfile
from pathlib import Path

from setsync.core.errors import SetsyncError

STATE_DIR = ".setsync"
SETSYNC_ROOT_ENV = "SETSYNC_ROOT"


class RootError(SetsyncError):
    """Raised when SETSYNC_ROOT env var is set but invalid."""


def _fsync_directory(path: Path) -> None:
    """Fsync a directory to ensure metadata (e.g. renames) is durable.

    Some platforms (notably macOS HFS+) may not support fsync on directory
    file descriptors, so ``OSError`` is silently ignored.
    """
    try:
        fd = os.open(str(path), os.O_RDONLY)
        try:
            os.fsync(fd)
        finally:
            os.close(fd)
    except OSError:
        pass


def atomic_write(path: Path, content: str | bytes) -> None:
    """Write content to path atomically via temp file + fsync + rename.

    The temp file is created in the same directory as the target so that
    os.replace() stays on one filesystem.

    Raises:
        FileNotFoundError: If the parent directory does not exist.
    """
    parent = path.parent
    if not parent.is_dir():
        raise FileNotFoundError(f"Parent directory does not exist: {parent}")

    data = content.encode("utf-8") if isinstance(content, str) else content

    fd, tmp_path = tempfile.mkstemp(dir=parent, prefix=".tmp.")
    closed = False
    try:
        # os.write() can short-write; loop until all bytes are flushed.
        mv = memoryview(data)
        while mv:
            written = os.write(fd, mv)
            mv = mv[written:]
        os.fsync(fd)
        os.close(fd)
        closed = True
        os.replace(tmp_path, path)
        _fsync_directory(parent)
    except BaseException:
        if not closed:
            os.close(fd)
        try:
            os.unlink(tmp_path)
        except OSError:
            pass
        raise


def ensure_state_dirs(root: Path) -> Path:
    """Create the .setsync/ directory structure under root and return it."""
    state_dir = root / STATE_DIR
    (state_dir / "locks").mkdir(parents=True, exist_ok=True)
    return state_dir


def find_root(start: Path | None = None) -> Path | None:
    """Find the directory containing .setsync/.

    Checks SETSYNC_ROOT first.  If set, validates it and returns the path
    or raises (no fallback to walk-up).  Otherwise walks up from *start*
    (defaults to cwd).

    Raises:
        RootError: If SETSYNC_ROOT is set but invalid.
    """
    env_root = os.environ.get(SETSYNC_ROOT_ENV)
    if env_root is not None:
        if not env_root:
            raise RootError("SETSYNC_ROOT is set but empty")
        env_path = Path(env_root)
        if not env_path.is_dir():
            raise RootError(f"SETSYNC_ROOT points to a path that does not exist: {env_root}")
        if not (env_path / STATE_DIR).is_dir():
            raise RootError(
                f"SETSYNC_ROOT points to a directory with no {STATE_DIR}/ inside: {env_root}"
            )
        return env_path

    current = (start or Path.cwd()).resolve()
    while True:
        if (current / STATE_DIR).is_dir():
            return current
        parent = current.parent
        if parent == current:
            return None
        current = parent
