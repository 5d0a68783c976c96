"""In-memory user/conversation store mirrored to JSON files on disk."""

from __future__ import annotations

import asyncio
import json
import logging
import os
import tempfile
from datetime import timedelta
from pathlib import Path
from typing import Any

from khmerbot.models.conversation import DEFAULT_TIMEOUT, Conversation
from khmerbot.models.user import User

logger = logging.getLogger(__name__)

USERS_FILENAME = "users.json"
CONVERSATIONS_FILENAME = "conversations.json"


class DataStore:
    """Authoritative in-process store for users and conversations.

    The two maps are the source of truth while the process runs. ``flush``
    replaces ``users.json`` and ``conversations.json`` atomically: each document
    is fully written to a temporary file in the data directory and then moved
    over the target, so readers see either the old or the new content.
    """

    def __init__(
        self,
        data_dir: str | Path,
        *,
        flush_interval_ms: int = 300_000,
        write_through: bool = True,
        conversation_timeout: timedelta = DEFAULT_TIMEOUT,
    ) -> None:
        self.data_dir = Path(data_dir).resolve()
        self.users_path = self.data_dir / USERS_FILENAME
        self.conversations_path = self.data_dir / CONVERSATIONS_FILENAME
        self.flush_interval_ms = flush_interval_ms
        self.write_through = write_through
        self.conversation_timeout = conversation_timeout
        self.users: dict[int, User] = {}
        self.conversations: dict[int, Conversation] = {}
        self._auto_flush_task: asyncio.Task[None] | None = None

    # Lifecycle

    def load(self) -> None:
        """Read both documents; missing or malformed files leave the maps empty."""
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
        except OSError:
            logger.exception("Could not create data directory %s", self.data_dir)
        self._load_users()
        self._load_conversations()

    def _read_section(self, path: Path, section: str) -> dict[str, Any] | None:
        if not path.exists():
            logger.info("%s does not exist; it will be created on the next flush", path)
            return None
        try:
            with path.open(encoding="utf-8") as handle:
                document = json.load(handle)
        except (OSError, ValueError):
            logger.exception("Error loading %s", path)
            return None

        entries = document.get(section) if isinstance(document, dict) else None
        if not isinstance(entries, dict):
            logger.warning("%s exists but has invalid format", path)
            return None
        return entries

    def _load_users(self) -> None:
        entries = self._read_section(self.users_path, "users")
        if entries is None:
            return
        for raw_id, payload in entries.items():
            try:
                user_id = int(raw_id)
                self.users[user_id] = User.from_dict(payload, user_id=user_id)
            except (TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed user record %r", raw_id)
        logger.info("Loaded %d users from %s", len(self.users), self.users_path)

    def _load_conversations(self) -> None:
        entries = self._read_section(self.conversations_path, "conversations")
        if entries is None:
            return
        for raw_id, payload in entries.items():
            try:
                user_id = int(raw_id)
                self.conversations[user_id] = Conversation.from_dict(user_id, payload)
            except (TypeError, ValueError, AttributeError):
                logger.warning("Skipping malformed conversation record %r", raw_id)
        logger.info("Loaded %d conversations from %s", len(self.conversations), self.conversations_path)

    def flush(self) -> bool:
        """Write both maps to disk; I/O failures are logged and reported as False."""
        users_payload = {str(user_id): user.to_dict() for user_id, user in self.users.items()}
        conversations_payload = {
            str(user_id): conversation.to_dict()
            for user_id, conversation in self.conversations.items()
            if not conversation.is_expired(timeout=self.conversation_timeout) or conversation.data
        }
        try:
            self.data_dir.mkdir(parents=True, exist_ok=True)
            self._write_atomic(self.users_path, {"users": users_payload})
            self._write_atomic(self.conversations_path, {"conversations": conversations_payload})
        except (OSError, TypeError, ValueError):
            logger.exception("Error saving data to %s", self.data_dir)
            return False

        logger.debug(
            "Saved %d users and %d conversations to %s",
            len(users_payload),
            len(conversations_payload),
            self.data_dir,
        )
        return True

    def _write_atomic(self, path: Path, document: dict[str, Any]) -> None:
        content = json.dumps(document, indent=4, ensure_ascii=False)
        fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
        try:
            with os.fdopen(fd, "w", encoding="utf-8") as handle:
                handle.write(content)
                handle.flush()
                os.fsync(handle.fileno())
            os.replace(tmp_name, path)
        except BaseException:
            Path(tmp_name).unlink(missing_ok=True)
            raise

    def start_auto_flush(self, interval_ms: int | None = None) -> None:
        """Schedule periodic flushes on the running event loop."""
        if self._auto_flush_task is not None and not self._auto_flush_task.done():
            return
        interval = (interval_ms or self.flush_interval_ms) / 1000
        self._auto_flush_task = asyncio.get_running_loop().create_task(self._auto_flush_loop(interval))
        logger.info("Auto-save started with interval: %sms", interval_ms or self.flush_interval_ms)

    async def _auto_flush_loop(self, interval: float) -> None:
        while True:
            await asyncio.sleep(interval)
            self.flush()

    async def stop_auto_flush(self) -> None:
        task = self._auto_flush_task
        self._auto_flush_task = None
        if task is None:
            return
        task.cancel()
        try:
            await task
        except asyncio.CancelledError:
            pass
        logger.info("Auto-save stopped")

    async def close(self) -> None:
        """Stop the timer, then write a final snapshot."""
        await self.stop_auto_flush()
        self.flush()

    # Users

    def is_new_user(self, user_id: int) -> bool:
        return user_id not in self.users

    def get_user(self, user_id: int) -> User | None:
        return self.users.get(user_id)

    def save_user(self, user: User) -> None:
        self.users[user.id] = user
        if self.write_through:
            self.flush()

    # Conversations

    def get_conversation(self, user_id: int) -> Conversation:
        """Return the user's conversation, creating it lazily and resetting it when expired."""
        conversation = self.conversations.get(user_id)
        if conversation is None:
            conversation = Conversation(user_id=user_id)
            self.conversations[user_id] = conversation
        elif conversation.is_expired(timeout=self.conversation_timeout):
            logger.info("Conversation for user %s expired in state %s; resetting", user_id, conversation.state.value)
            conversation.reset()
        return conversation

    def save_conversation(self, conversation: Conversation) -> None:
        self.conversations[conversation.user_id] = conversation
        if self.write_through:
            self.flush()

    def commit(self, user: User, conversation: Conversation) -> None:
        """Store both entities touched by one event with a single write-through flush."""
        self.users[user.id] = user
        self.conversations[conversation.user_id] = conversation
        if self.write_through:
            self.flush()

    def snapshot(self) -> dict[str, Any]:
        """Debug view of all conversations, including their expiry flag."""
        return {
            str(user_id): {
                **conversation.to_dict(),
                "isExpired": conversation.is_expired(timeout=self.conversation_timeout),
            }
            for user_id, conversation in self.conversations.items()
        }
