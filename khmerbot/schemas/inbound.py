"""Normalized inbound event built from Telegram updates."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, Field


class InvalidEventError(ValueError):
    """Raised when an update cannot be addressed back to a chat."""


class ProfileHints(BaseModel):
    """Identity fields supplied by Telegram on every update."""

    first_name: str | None = None
    last_name: str | None = None
    username: str | None = None
    language_code: str | None = None


class InboundEvent(BaseModel):
    """One unit of work for the message router."""

    chat_id: int
    user_id: int
    hints: ProfileHints = Field(default_factory=ProfileHints)
    text: str = ""
    is_command: bool = False
    command: str | None = None
    args: list[str] = Field(default_factory=list)

    @classmethod
    def from_text(cls, *, chat_id: int, user_id: int, text: str, hints: ProfileHints | None = None) -> InboundEvent:
        """Build an event, splitting ``/command@bot arg ...`` into name and args."""
        stripped = text.strip()
        command: str | None = None
        args: list[str] = []
        if stripped.startswith("/") and len(stripped) > 1:
            head, *args = stripped[1:].split()
            command = head.split("@", 1)[0].lower()
        return cls(
            chat_id=chat_id,
            user_id=user_id,
            hints=hints or ProfileHints(),
            text=stripped,
            is_command=command is not None,
            command=command,
            args=args,
        )

    @classmethod
    def from_telegram_update(cls, update: dict[str, Any]) -> InboundEvent | None:
        """Return an event for text messages; None for updates the bot ignores."""
        message = update.get("message") or update.get("edited_message")
        if not isinstance(message, dict):
            return None

        chat = message.get("chat")
        chat_id = chat.get("id") if isinstance(chat, dict) else None
        if chat_id is None:
            raise InvalidEventError("Update message is missing chat.id")

        sender = message.get("from")
        if not isinstance(sender, dict) or sender.get("id") is None:
            raise InvalidEventError("Update message is missing from.id")

        text = message.get("text")
        if not isinstance(text, str):
            return None

        hints = ProfileHints(
            first_name=sender.get("first_name"),
            last_name=sender.get("last_name"),
            username=sender.get("username"),
            language_code=sender.get("language_code"),
        )
        return cls.from_text(chat_id=int(chat_id), user_id=int(sender["id"]), text=text, hints=hints)
