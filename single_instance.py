"""Lock file that keeps a second translator from watching the same clipboard."""

from __future__ import annotations

import contextlib
import sys
import tempfile
from pathlib import Path
from typing import IO, Optional

from presentation import APP_TITLE

LOCK_NAME = APP_TITLE.lower().replace(" ", "-")


class SingleInstanceError(RuntimeError):
    """Raised when the translator is already running for this user."""


def _lock(handle: IO[str]) -> None:
    if sys.platform == "win32":  # pragma: no cover - platform specific
        import msvcrt  # type: ignore

        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_NBLCK, 1)
    else:
        import fcntl  # type: ignore

        fcntl.flock(handle.fileno(), fcntl.LOCK_EX | fcntl.LOCK_NB)


def _unlock(handle: IO[str]) -> None:
    if sys.platform == "win32":  # pragma: no cover - platform specific
        import msvcrt  # type: ignore

        handle.seek(0)
        msvcrt.locking(handle.fileno(), msvcrt.LK_UNLCK, 1)
    else:
        import fcntl  # type: ignore

        fcntl.flock(handle.fileno(), fcntl.LOCK_UN)


class SingleInstanceGuard:
    """Hold an exclusive lock on ``<tmp>/<name>.lock`` while the app runs."""

    def __init__(self, name: str = LOCK_NAME, directory: Optional[Path] = None) -> None:
        self.lock_path = Path(directory or tempfile.gettempdir()) / f"{name}.lock"
        self._handle: Optional[IO[str]] = None

    @property
    def is_held(self) -> bool:
        return self._handle is not None

    def acquire(self) -> None:
        if self._handle is not None:
            return
        handle = open(self.lock_path, "a+")
        try:
            _lock(handle)
        except OSError as exc:
            handle.close()
            raise SingleInstanceError(f"{APP_TITLE} is already running") from exc
        self._handle = handle

    def release(self) -> None:
        handle, self._handle = self._handle, None
        if handle is None:
            return
        with contextlib.suppress(OSError):
            _unlock(handle)
        handle.close()
        with contextlib.suppress(OSError):
            self.lock_path.unlink()

    def __enter__(self) -> "SingleInstanceGuard":
        self.acquire()
        return self

    def __exit__(self, *_exc_info: object) -> None:
        self.release()
