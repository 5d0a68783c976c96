"""Unit tests for the single-instance ProcessLock."""

from __future__ import annotations

import os
import tempfile
import unittest
from pathlib import Path
from unittest.mock import patch

from khmerbot.core.process_lock import AlreadyRunningError, ProcessLock, pid_alive


class ProcessLockTestCase(unittest.TestCase):
    """Covers acquisition, stale markers and release."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.lock_dir = Path(self._tmp.name)
        self.lock = ProcessLock(self.lock_dir)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def _write_markers(self, pid_text: str | None) -> None:
        (self.lock_dir / ".bot.lock").write_text("2024-01-01T00:00:00+00:00", encoding="utf-8")
        if pid_text is not None:
            (self.lock_dir / ".bot.pid").write_text(pid_text, encoding="utf-8")

    def test_acquire_writes_markers(self) -> None:
        self.lock.acquire()

        self.assertTrue((self.lock_dir / ".bot.lock").read_text(encoding="utf-8"))
        self.assertEqual((self.lock_dir / ".bot.pid").read_text(encoding="utf-8"), str(os.getpid()))

    def test_acquire_fails_while_live_process_holds_lock(self) -> None:
        self._write_markers(str(os.getpid()))

        with self.assertRaises(AlreadyRunningError) as raised:
            ProcessLock(self.lock_dir).acquire()

        self.assertEqual(raised.exception.pid, os.getpid())
        self.assertIn("already running", str(raised.exception))
        self.assertTrue((self.lock_dir / ".bot.lock").exists())

    def test_acquire_clears_stale_lock(self) -> None:
        self._write_markers("999999")

        with patch("khmerbot.core.process_lock.os.kill", side_effect=ProcessLookupError) as kill:
            self.lock.acquire()

        kill.assert_called_once_with(999999, 0)
        self.assertEqual((self.lock_dir / ".bot.pid").read_text(encoding="utf-8"), str(os.getpid()))

    def test_marker_created_after_check_loses_the_race(self) -> None:
        self._write_markers("424242")

        with patch.object(ProcessLock, "is_locked", return_value=False):
            with self.assertRaises(AlreadyRunningError) as raised:
                self.lock.acquire()

        self.assertEqual(raised.exception.pid, 424242)
        self.assertEqual((self.lock_dir / ".bot.pid").read_text(encoding="utf-8"), "424242")

    def test_corrupt_pid_is_treated_as_stale(self) -> None:
        self._write_markers("not-a-pid")

        self.lock.acquire()

        self.assertEqual((self.lock_dir / ".bot.pid").read_text(encoding="utf-8"), str(os.getpid()))

    def test_lock_without_pid_file_is_stale(self) -> None:
        self._write_markers(None)

        self.assertFalse(self.lock.is_locked())
        self.assertFalse((self.lock_dir / ".bot.lock").exists())

    def test_release_removes_markers_and_is_idempotent(self) -> None:
        self.lock.acquire()

        self.lock.release()
        self.lock.release()

        self.assertFalse((self.lock_dir / ".bot.lock").exists())
        self.assertFalse((self.lock_dir / ".bot.pid").exists())

    def test_context_manager_releases_on_error(self) -> None:
        with self.assertRaises(ValueError):
            with ProcessLock(self.lock_dir):
                self.assertTrue((self.lock_dir / ".bot.pid").exists())
                raise ValueError("boom")

        self.assertFalse((self.lock_dir / ".bot.pid").exists())

    def test_pid_alive_checks_with_signal_zero(self) -> None:
        self.assertTrue(pid_alive(os.getpid()))
        self.assertFalse(pid_alive(0))
        with patch("khmerbot.core.process_lock.os.kill", side_effect=PermissionError):
            self.assertTrue(pid_alive(1))


if __name__ == "__main__":
    unittest.main()
