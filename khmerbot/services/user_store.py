"""Lookup-or-create for user records with profile refresh."""

from __future__ import annotations

import logging
from typing import Any

from khmerbot.models.user import User
from khmerbot.schemas.inbound import ProfileHints
from khmerbot.services.data_store import DataStore

logger = logging.getLogger(__name__)


class UserStore:
    """Logical user operations on top of the data store."""

    def __init__(self, store: DataStore, default_language: str = "km") -> None:
        self.store = store
        self.default_language = default_language

    def get_or_create(self, user_id: int, hints: ProfileHints | None = None) -> tuple[User, bool]:
        """Return the stored user (profile refreshed from hints) and whether it was just created."""
        hints = hints or ProfileHints()
        user = self.store.get_user(user_id)
        created = user is None
        if user is None:
            user = User(id=user_id, language_code=self.default_language)
            self.store.users[user_id] = user

        self._apply_hints(user, hints)
        if created:
            logger.info("New user registered: %s (%s)", user.full_name() or "Unknown", user_id)
        return user, created

    def _apply_hints(self, user: User, hints: ProfileHints) -> None:
        # Always the freshest upstream values; a dropped field clears the stored one.
        user.first_name = hints.first_name or ""
        user.last_name = hints.last_name or ""
        user.username = hints.username or ""
        user.language_code = hints.language_code or self.default_language

    def record_interaction(
        self,
        user: User,
        interaction_type: str,
        details: dict[str, Any] | None = None,
    ) -> User:
        return user.record_interaction(interaction_type, details)
