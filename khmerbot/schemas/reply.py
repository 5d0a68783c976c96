"""Outbound reply produced by handlers."""

from __future__ import annotations

from pydantic import BaseModel

KEYBOARD_ROW_SIZE = 2


class Reply(BaseModel):
    """Text reply with an optional reply keyboard or keyboard removal."""

    text: str
    formatted: bool = False
    keyboard: list[list[str]] | None = None
    remove_keyboard: bool = False

    @classmethod
    def with_keyboard(cls, text: str, options: list[str], *, formatted: bool = False) -> Reply:
        """Lay options out two per row."""
        rows = [options[index : index + KEYBOARD_ROW_SIZE] for index in range(0, len(options), KEYBOARD_ROW_SIZE)]
        return cls(text=text, formatted=formatted, keyboard=rows)

    @classmethod
    def hide_keyboard(cls, text: str) -> Reply:
        return cls(text=text, remove_keyboard=True)
