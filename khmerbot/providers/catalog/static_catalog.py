"""Static in-memory catalog of words, news and holidays."""

import random
from datetime import date
from typing import Any

from khmerbot.interfaces.catalog import Catalog


class StaticCatalog(Catalog):
    """Fixed catalog content shipped with the bot."""

    def __init__(self, rng: random.Random | None = None) -> None:
        self._rng = rng or random.Random()
        self._words: list[dict[str, Any]] = [
            {"id": 1, "khmer": "សួស្តី", "latin": "suostei", "english": "hello", "category": "greetings"},
            {"id": 2, "khmer": "អរគុណ", "latin": "arkun", "english": "thank you", "category": "greetings"},
            {"id": 3, "khmer": "លាហើយ", "latin": "lea haey", "english": "goodbye", "category": "greetings"},
            {"id": 4, "khmer": "ទឹក", "latin": "tuk", "english": "water", "category": "food"},
            {"id": 5, "khmer": "បាយ", "latin": "bay", "english": "rice", "category": "food"},
            {"id": 6, "khmer": "ត្រី", "latin": "trei", "english": "fish", "category": "food"},
            {"id": 7, "khmer": "ផ្ទះ", "latin": "phteah", "english": "house", "category": "places"},
            {"id": 8, "khmer": "សាលារៀន", "latin": "sala rien", "english": "school", "category": "places"},
            {"id": 9, "khmer": "ផ្សារ", "latin": "phsar", "english": "market", "category": "places"},
            {"id": 10, "khmer": "មួយ", "latin": "muoy", "english": "one", "category": "numbers"},
            {"id": 11, "khmer": "ពីរ", "latin": "pii", "english": "two", "category": "numbers"},
            {"id": 12, "khmer": "បី", "latin": "bei", "english": "three", "category": "numbers"},
        ]
        self._news: list[dict[str, Any]] = [
            {
                "title": "ពិធីបុណ្យអុំទូកនឹងប្រារព្ធនៅភ្នំពេញ",
                "summary": "Water festival boat races return to the Phnom Penh riverside.",
                "category": "culture",
            },
            {
                "title": "ការនាំចេញអង្ករកើនឡើង",
                "summary": "Rice exports grew compared with the same period last year.",
                "category": "economy",
            },
            {
                "title": "ក្រុមបាល់ទាត់ជាតិឈ្នះការប្រកួតមិត្តភាព",
                "summary": "The national football team won a friendly match at home.",
                "category": "sports",
            },
            {
                "title": "ប្រាសាទអង្គរវត្តទទួលភ្ញៀវទេសចរកាន់តែច្រើន",
                "summary": "Angkor Wat visitor numbers keep climbing this season.",
                "category": "tourism",
            },
        ]
        self._holidays: list[dict[str, Any]] = [
            {
                "name": "បុណ្យចូលឆ្នាំខ្មែរ",
                "name_en": "Khmer New Year",
                "approximate_date": "13-16 April",
                "description": "Traditional new year celebrated with family, pagoda visits and games.",
            },
            {
                "name": "បុណ្យភ្ជុំបិណ្ឌ",
                "name_en": "Pchum Ben",
                "approximate_date": "September/October",
                "description": "Fifteen days honouring ancestors with offerings at pagodas.",
            },
            {
                "name": "បុណ្យអុំទូក",
                "name_en": "Water Festival",
                "approximate_date": "November",
                "description": "Boat races mark the reversal of the Tonle Sap river.",
            },
        ]

    def random_word(self) -> dict[str, Any]:
        return self._rng.choice(self._words)

    def word_by_id(self, word_id: int) -> dict[str, Any] | None:
        for word in self._words:
            if word["id"] == word_id:
                return word
        return None

    def word_categories(self) -> list[str]:
        return sorted({word["category"] for word in self._words})

    def words_by_category(self, category: str) -> list[dict[str, Any]]:
        wanted = category.strip().lower()
        return [word for word in self._words if word["category"] == wanted]

    def daily_word(self, day: date) -> dict[str, Any]:
        return self._words[day.toordinal() % len(self._words)]

    def check_answer(self, answer: str, word_id: int) -> bool:
        word = self.word_by_id(word_id)
        if word is None:
            return False
        normalized = answer.strip().lower()
        return normalized in {word["english"].lower(), word["latin"].lower(), word["khmer"]}

    def latest_news(self, limit: int = 3, category: str | None = None) -> list[dict[str, Any]]:
        items = self._news
        if category:
            wanted = category.strip().lower()
            items = [item for item in items if item["category"] == wanted]
        return items[:limit]

    def news_categories(self) -> list[str]:
        return sorted({item["category"] for item in self._news})

    def upcoming_holidays(self) -> list[dict[str, Any]]:
        return list(self._holidays)
