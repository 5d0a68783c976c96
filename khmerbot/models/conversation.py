"""Per-user conversation session with scratch data and inactivity expiry."""

from __future__ import annotations

from dataclasses import dataclass, field
from datetime import datetime, timedelta, timezone
from enum import Enum
from typing import Any

DEFAULT_TIMEOUT = timedelta(minutes=30)

# Scratch data keys shared by command and flow handlers.
NAME_KEY = "name"
FEEDBACK_KEY = "feedback"
WORD_ID_KEY = "wordId"
QUIZ_ATTEMPTS_KEY = "quizAttempts"
CATEGORIES_KEY = "categories"
NEWS_CATEGORIES_KEY = "newsCategories"


class ConversationState(str, Enum):
    """Closed set of conversation states."""

    IDLE = "idle"
    AWAITING_NAME = "awaiting_name"
    AWAITING_FEEDBACK = "awaiting_feedback"
    QUIZ = "quiz"
    NEWS_CATEGORY = "news_category"
    AWAITING_CATEGORY = "awaiting_category"

    @classmethod
    def parse(cls, value: Any) -> ConversationState:
        """Map a stored label to a state; unknown labels fall back to idle."""
        try:
            return cls(value)
        except ValueError:
            return cls.IDLE


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


def parse_timestamp(value: Any) -> datetime | None:
    """Parse an ISO-8601 string (``Z`` suffix accepted) into an aware datetime."""
    if not isinstance(value, str) or not value.strip():
        return None
    try:
        parsed = datetime.fromisoformat(value.strip().replace("Z", "+00:00"))
    except ValueError:
        return None
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed


def format_timestamp(value: datetime) -> str:
    return value.astimezone(timezone.utc).isoformat().replace("+00:00", "Z")


@dataclass(slots=True)
class Conversation:
    """Active conversation for one user.

    Every mutation refreshes ``last_updated`` and ``last_activity_time`` together
    with the change itself.
    """

    user_id: int
    state: ConversationState = ConversationState.IDLE
    data: dict[str, Any] = field(default_factory=dict)
    last_updated: datetime = field(default_factory=utcnow)
    last_activity_time: datetime = field(default_factory=utcnow)

    def _touch(self) -> None:
        now = utcnow()
        self.last_updated = now
        self.last_activity_time = now

    def set_state(self, new_state: ConversationState | str) -> Conversation:
        self.state = ConversationState(new_state)
        self._touch()
        return self

    def set_data(self, key: str, value: Any) -> Conversation:
        self.data[key] = value
        self._touch()
        return self

    def get_data(self, key: str, default: Any = None) -> Any:
        return self.data.get(key, default)

    def reset(self) -> Conversation:
        """Return to idle with empty scratch data, keeping the same identity."""
        self.state = ConversationState.IDLE
        self.data = {}
        self._touch()
        return self

    def is_expired(self, now: datetime | None = None, timeout: timedelta = DEFAULT_TIMEOUT) -> bool:
        current = now or utcnow()
        return current - self.last_updated > timeout

    def to_dict(self) -> dict[str, Any]:
        return {
            "userId": self.user_id,
            "state": self.state.value,
            "data": self.data,
            "lastActivityTime": format_timestamp(self.last_activity_time),
        }

    @classmethod
    def from_dict(cls, user_id: int, payload: dict[str, Any]) -> Conversation:
        timestamp = parse_timestamp(payload.get("lastActivityTime")) or utcnow()
        data = payload.get("data")
        return cls(
            user_id=user_id,
            state=ConversationState.parse(payload.get("state")),
            data=dict(data) if isinstance(data, dict) else {},
            last_updated=timestamp,
            last_activity_time=timestamp,
        )
