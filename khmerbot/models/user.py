"""End-user profile and interaction accumulator."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from khmerbot.models.conversation import format_timestamp, utcnow

HISTORY_LIMIT = 50
LEARNING_HISTORY_LIMIT = 50

QUIZ_COUNTERS = ("started", "completed", "correct", "incorrect", "total")

# Keys owned by the dataclass; anything else found in a stored record is kept in ``extra``.
_KNOWN_KEYS = frozenset(
    {
        "id",
        "firstName",
        "lastName",
        "username",
        "languageCode",
        "registrationDate",
        "lastActive",
        "interactions",
        "preferences",
        "learningHistory",
        "statistics",
    }
)


def _now_iso() -> str:
    return format_timestamp(utcnow())


def _default_interactions() -> dict[str, Any]:
    return {
        "commandCount": 0,
        "messageCount": 0,
        "lastCommand": None,
        "lastInteraction": _now_iso(),
        "history": [],
    }


def _is_count(value: Any) -> bool:
    return isinstance(value, int) and not isinstance(value, bool)


def _normalize_interactions(raw: Any) -> dict[str, Any]:
    """Merge a stored interactions block over the defaults, dropping mistyped fields."""
    interactions = _default_interactions()
    if not isinstance(raw, dict):
        return interactions

    merged = {**interactions, **raw}
    for counter in ("commandCount", "messageCount"):
        if not _is_count(merged[counter]):
            merged[counter] = 0
    if not isinstance(merged["lastCommand"], str):
        merged["lastCommand"] = None
    if not isinstance(merged["lastInteraction"], str):
        merged["lastInteraction"] = interactions["lastInteraction"]
    history = merged["history"]
    merged["history"] = [entry for entry in history if isinstance(entry, dict)] if isinstance(history, list) else []
    return merged


@dataclass(slots=True)
class User:
    """Stored user record keyed by the Telegram user id."""

    id: int
    first_name: str = ""
    last_name: str = ""
    username: str = ""
    language_code: str = "km"
    registration_date: str = field(default_factory=_now_iso)
    last_active: str = field(default_factory=_now_iso)
    interactions: dict[str, Any] = field(default_factory=_default_interactions)
    preferences: dict[str, Any] = field(default_factory=dict)
    learning_history: list[dict[str, Any]] = field(default_factory=list)
    statistics: dict[str, Any] = field(default_factory=dict)
    extra: dict[str, Any] = field(default_factory=dict)

    def full_name(self) -> str:
        return self.first_name + (f" {self.last_name}" if self.last_name else "")

    @property
    def history(self) -> list[dict[str, Any]]:
        return self.interactions.setdefault("history", [])

    def update_activity(self) -> User:
        now = _now_iso()
        self.last_active = now
        self.interactions["lastInteraction"] = now
        return self

    def record_interaction(self, interaction_type: str, details: dict[str, Any] | None = None) -> User:
        """Append to the bounded history and bump the matching counter."""
        details = details or {}
        history = self.history
        history.append({"type": interaction_type, "timestamp": _now_iso(), "details": details})
        if len(history) > HISTORY_LIMIT:
            del history[: len(history) - HISTORY_LIMIT]

        if interaction_type == "command":
            self.interactions["commandCount"] = int(self.interactions.get("commandCount", 0)) + 1
            self.interactions["lastCommand"] = details.get("command")
        elif interaction_type == "message":
            self.interactions["messageCount"] = int(self.interactions.get("messageCount", 0)) + 1
        return self.update_activity()

    def record_command(self, command: str, args: list[str] | None = None) -> User:
        return self.record_interaction("command", {"command": command, "args": list(args or [])})

    def record_message(self) -> User:
        return self.record_interaction("message")

    def set_preference(self, key: str, value: Any) -> User:
        self.preferences[key] = value
        return self

    def record_learning(self, entry: dict[str, Any]) -> User:
        self.learning_history.append({**entry, "timestamp": _now_iso()})
        if len(self.learning_history) > LEARNING_HISTORY_LIMIT:
            del self.learning_history[: len(self.learning_history) - LEARNING_HISTORY_LIMIT]
        return self

    def quiz_stats(self) -> dict[str, Any]:
        """Return the mutable quiz counters, creating missing ones at zero."""
        quizzes = self.statistics.get("quizzes")
        if not isinstance(quizzes, dict):
            quizzes = self.statistics["quizzes"] = {}
        for counter in QUIZ_COUNTERS:
            if not _is_count(quizzes.get(counter)):
                quizzes[counter] = 0
        return quizzes

    def to_dict(self) -> dict[str, Any]:
        return {
            **self.extra,
            "id": self.id,
            "firstName": self.first_name,
            "lastName": self.last_name,
            "username": self.username,
            "languageCode": self.language_code,
            "registrationDate": self.registration_date,
            "lastActive": self.last_active,
            "interactions": self.interactions,
            "preferences": self.preferences,
            "learningHistory": self.learning_history,
            "statistics": self.statistics,
        }

    @classmethod
    def from_dict(cls, payload: dict[str, Any], user_id: int | None = None) -> User:
        def _mapping(key: str) -> dict[str, Any]:
            value = payload.get(key)
            return value if isinstance(value, dict) else {}

        def _text(key: str, default: str = "") -> str:
            value = payload.get(key)
            return value if isinstance(value, str) and value else default

        learning_history = payload.get("learningHistory")
        return cls(
            id=int(payload.get("id", user_id if user_id is not None else 0)),
            first_name=_text("firstName"),
            last_name=_text("lastName"),
            username=_text("username"),
            language_code=_text("languageCode", "km"),
            registration_date=_text("registrationDate") or _now_iso(),
            last_active=_text("lastActive") or _now_iso(),
            interactions=_normalize_interactions(payload.get("interactions")),
            preferences=_mapping("preferences"),
            learning_history=[entry for entry in learning_history if isinstance(entry, dict)]
            if isinstance(learning_history, list)
            else [],
            statistics=_mapping("statistics"),
            extra={key: value for key, value in payload.items() if key not in _KNOWN_KEYS},
        )
