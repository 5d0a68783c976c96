"""Keyword matching for main-menu buttons typed or tapped in idle state."""

import re
import unicodedata

from khmerbot.services import messages


class MenuMatcher:
    """Maps free text to a main-menu action, or None when nothing matches."""

    def __init__(self) -> None:
        self._menu_keywords: dict[str, tuple[str, ...]] = {
            "learn": (messages.MENU_LEARN, "រៀនភាសា", "learn"),
            "news": (messages.MENU_NEWS, "ព័ត៌មាន", "news"),
            "holiday": (messages.MENU_HOLIDAY, "បុណ្យជាតិ", "holiday", "holidays"),
            "help": (messages.MENU_HELP, "ជំនួយ", "help"),
        }
        self._priority_order = ("learn", "news", "holiday", "help")

    def detect_action(self, message: str) -> str | None:
        """Return the first action whose label equals the normalized message."""
        normalized_message = self._normalize_text(message)
        if not normalized_message:
            return None
        for action in self._priority_order:
            for keyword in self._menu_keywords[action]:
                if self._normalize_text(keyword) == normalized_message:
                    return action
        return None

    def _normalize_text(self, message: str) -> str:
        """Lowercase, drop emoji/symbols and collapse whitespace."""
        lowered = unicodedata.normalize("NFC", message.lower().strip())
        without_symbols = "".join(char for char in lowered if unicodedata.category(char) != "So")
        return re.sub(r"\s+", " ", without_symbols).strip()
