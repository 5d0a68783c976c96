"""Interface contract for catalog content providers."""

from abc import ABC, abstractmethod
from datetime import date
from typing import Any


class Catalog(ABC):
    """Defines read-only lookups for vocabulary, news and holidays."""

    @abstractmethod
    def random_word(self) -> dict[str, Any]:
        """Return one vocabulary entry at random."""
        raise NotImplementedError

    @abstractmethod
    def word_by_id(self, word_id: int) -> dict[str, Any] | None:
        """Return one vocabulary entry by identifier when available."""
        raise NotImplementedError

    @abstractmethod
    def word_categories(self) -> list[str]:
        """Return vocabulary category names."""
        raise NotImplementedError

    @abstractmethod
    def words_by_category(self, category: str) -> list[dict[str, Any]]:
        """Return vocabulary entries in a category (empty when unknown)."""
        raise NotImplementedError

    @abstractmethod
    def daily_word(self, day: date) -> dict[str, Any]:
        """Return the same entry for every call on the same day."""
        raise NotImplementedError

    @abstractmethod
    def check_answer(self, answer: str, word_id: int) -> bool:
        """Return whether an answer matches the expected meaning of a word."""
        raise NotImplementedError

    @abstractmethod
    def latest_news(self, limit: int = 3, category: str | None = None) -> list[dict[str, Any]]:
        """Return the most recent news items, optionally filtered by category."""
        raise NotImplementedError

    @abstractmethod
    def news_categories(self) -> list[str]:
        """Return news category names."""
        raise NotImplementedError

    @abstractmethod
    def upcoming_holidays(self) -> list[dict[str, Any]]:
        """Return Khmer national holidays."""
        raise NotImplementedError
