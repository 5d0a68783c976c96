"""Khmer text helpers and Telegram MarkdownV2 escaping."""

import re
from datetime import datetime

KHMER_PATTERN = re.compile(r"[\u1780-\u17FF]")
MARKDOWN_SPECIAL = re.compile(r"([_*\[\]()~`>#+\-=|{}.!\\])")


def contains_khmer(text: str) -> bool:
    """Return True when text has at least one character in the Khmer block."""
    return KHMER_PATTERN.search(text) is not None


def khmer_greeting(now: datetime | None = None) -> str:
    """Time-of-day greeting in Khmer."""
    hour = (now or datetime.now()).hour
    if hour < 12:
        return "សួស្តី អរុណសួស្តី!"
    if hour < 18:
        return "សួស្តី ទិវាសួស្តី!"
    return "សួស្តី រាត្រីសួស្តី!"


def truncate(text: str, max_length: int = 100) -> str:
    if len(text) <= max_length:
        return text
    return text[:max_length] + "..."


def escape_markdown(text: str) -> str:
    """Escape every MarkdownV2 control character."""
    return MARKDOWN_SPECIAL.sub(r"\\\1", text)


def bold(text: str) -> str:
    return f"*{escape_markdown(text)}*"
