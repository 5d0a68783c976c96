"""Unit tests for the Telegram messaging provider."""

from __future__ import annotations

import unittest
from typing import Any

from telegram import ReplyKeyboardMarkup, ReplyKeyboardRemove
from telegram.constants import ParseMode

from khmerbot.providers.messaging.telegram_messaging import TelegramMessagingProvider
from khmerbot.schemas.reply import Reply


class StubUpdate:
    def __init__(self, payload: dict[str, Any]) -> None:
        self.payload = payload

    def to_dict(self) -> dict[str, Any]:
        return self.payload


class StubBot:
    """Bot double recording every Bot API call."""

    def __init__(self, updates: list[StubUpdate] | None = None) -> None:
        self.calls: list[tuple[str, dict[str, Any]]] = []
        self.updates = updates or []

    async def send_message(self, **kwargs: Any) -> None:
        self.calls.append(("send_message", kwargs))

    async def get_updates(self, **kwargs: Any) -> tuple[StubUpdate, ...]:
        self.calls.append(("get_updates", kwargs))
        return tuple(self.updates)

    async def set_webhook(self, **kwargs: Any) -> bool:
        self.calls.append(("set_webhook", kwargs))
        return True

    async def delete_webhook(self, **kwargs: Any) -> bool:
        self.calls.append(("delete_webhook", kwargs))
        return True


class TelegramMessagingProviderTestCase(unittest.IsolatedAsyncioTestCase):
    """Covers reply rendering and update fetching."""

    def _provider(self, bot: StubBot) -> TelegramMessagingProvider:
        return TelegramMessagingProvider("123:abc", bot=bot)

    def test_missing_token_is_rejected(self) -> None:
        with self.assertRaises(RuntimeError):
            TelegramMessagingProvider("")

    async def test_formatted_reply_with_keyboard(self) -> None:
        bot = StubBot()

        await self._provider(bot).send_message(5, Reply.with_keyboard("*pick*", ["a", "b", "c"], formatted=True))

        name, kwargs = bot.calls[0]
        self.assertEqual(name, "send_message")
        self.assertEqual(kwargs["chat_id"], 5)
        self.assertEqual(kwargs["parse_mode"], ParseMode.MARKDOWN_V2)
        markup = kwargs["reply_markup"]
        self.assertIsInstance(markup, ReplyKeyboardMarkup)
        self.assertEqual([[button.text for button in row] for row in markup.keyboard], [["a", "b"], ["c"]])
        self.assertTrue(markup.resize_keyboard)

    async def test_plain_reply_can_remove_keyboard(self) -> None:
        bot = StubBot()

        await self._provider(bot).send_message(5, Reply.hide_keyboard("bye"))

        kwargs = bot.calls[0][1]
        self.assertIsNone(kwargs["parse_mode"])
        self.assertIsInstance(kwargs["reply_markup"], ReplyKeyboardRemove)

    async def test_get_updates_returns_dicts(self) -> None:
        bot = StubBot([StubUpdate({"update_id": 3}), StubUpdate({"update_id": 4})])

        updates = await self._provider(bot).get_updates(offset=3, timeout=30, limit=100)

        self.assertEqual(updates, [{"update_id": 3}, {"update_id": 4}])
        self.assertEqual(
            bot.calls[0][1],
            {"offset": 3, "limit": 100, "timeout": 30, "allowed_updates": ["message"]},
        )

    async def test_webhook_registration(self) -> None:
        bot = StubBot()
        provider = self._provider(bot)

        await provider.set_webhook("https://bot.example/webhook/telegram", max_connections=40)
        await provider.delete_webhook()

        self.assertEqual(bot.calls[0][1]["url"], "https://bot.example/webhook/telegram")
        self.assertEqual(bot.calls[0][1]["max_connections"], 40)
        self.assertEqual(bot.calls[1], ("delete_webhook", {"drop_pending_updates": False}))


if __name__ == "__main__":
    unittest.main()
