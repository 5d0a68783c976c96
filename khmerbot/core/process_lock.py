"""Single-instance guard backed by lock/pid marker files."""

from __future__ import annotations

import logging
import os
from datetime import datetime, timezone
from pathlib import Path
from types import TracebackType

logger = logging.getLogger(__name__)

LOCK_FILENAME = ".bot.lock"
PID_FILENAME = ".bot.pid"


class AlreadyRunningError(RuntimeError):
    """Raised when another live process holds the instance lock."""

    def __init__(self, pid: int) -> None:
        super().__init__(f"Bot is already running with PID {pid}")
        self.pid = pid


def pid_alive(pid: int) -> bool:
    """Check a process with signal 0; the target is never signalled."""
    if pid <= 0:
        return False
    try:
        os.kill(pid, 0)
    except ProcessLookupError:
        return False
    except PermissionError:
        # Exists but owned by another user.
        return True
    except OSError:
        return False
    return True


class ProcessLock:
    """Guarantees at most one running bot process per lock directory."""

    def __init__(self, lock_dir: str | Path = ".") -> None:
        self.lock_dir = Path(lock_dir)
        self.lock_path = self.lock_dir / LOCK_FILENAME
        self.pid_path = self.lock_dir / PID_FILENAME
        self._held = False

    def owner_pid(self) -> int | None:
        """Return the pid recorded in the marker, or None when missing/corrupt."""
        try:
            raw = self.pid_path.read_text(encoding="utf-8").strip()
        except OSError:
            return None
        try:
            return int(raw)
        except ValueError:
            return None

    def is_locked(self) -> bool:
        """Return True when a live process owns the marker; clean stale markers."""
        if not self.lock_path.exists() and not self.pid_path.exists():
            return False

        pid = self.owner_pid()
        if pid is not None and pid_alive(pid):
            return True

        if pid is None:
            logger.info("Lock marker without a readable PID; treating it as stale")
        else:
            logger.info("Previous bot process (PID: %s) is no longer running", pid)
        self._remove_markers()
        return False

    def acquire(self) -> None:
        """Take the lock or raise AlreadyRunningError."""
        if self.is_locked():
            pid = self.owner_pid() or 0
            logger.error("Bot is already running with PID %s", pid)
            raise AlreadyRunningError(pid)

        self.lock_dir.mkdir(parents=True, exist_ok=True)
        try:
            fd = os.open(self.pid_path, os.O_WRONLY | os.O_CREAT | os.O_EXCL, 0o644)
        except FileExistsError:
            # Another process created the marker between the check and the create.
            pid = self.owner_pid() or 0
            logger.error("Bot is already running with PID %s", pid)
            raise AlreadyRunningError(pid) from None
        with os.fdopen(fd, "w", encoding="utf-8") as handle:
            handle.write(str(os.getpid()))
        self.lock_path.write_text(datetime.now(timezone.utc).isoformat(), encoding="utf-8")
        self._held = True
        logger.info("Created lock file for PID %s", os.getpid())

    def release(self) -> None:
        """Remove the markers unconditionally; safe to call more than once."""
        self._remove_markers()
        if self._held:
            logger.info("Lock files removed")
        self._held = False

    def _remove_markers(self) -> None:
        for path in (self.lock_path, self.pid_path):
            try:
                path.unlink(missing_ok=True)
            except OSError:
                logger.exception("Error removing lock marker %s", path)

    def __enter__(self) -> ProcessLock:
        self.acquire()
        return self

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.release()
