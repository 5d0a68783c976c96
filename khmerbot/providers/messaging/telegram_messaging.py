"""Telegram messaging provider built on python-telegram-bot's ``Bot`` client."""

from __future__ import annotations

import logging
from typing import Any

from telegram import Bot, ReplyKeyboardMarkup, ReplyKeyboardRemove
from telegram.constants import ParseMode

from khmerbot.interfaces.messaging_provider import MessagingProvider
from khmerbot.schemas.reply import Reply

logger = logging.getLogger(__name__)


class TelegramMessagingProvider(MessagingProvider):
    """Sends replies and fetches updates through the Bot API."""

    def __init__(
        self,
        token: str,
        *,
        api_url: str = "https://api.telegram.org",
        bot: Bot | None = None,
    ) -> None:
        if not token:
            raise RuntimeError("BOT_TOKEN not configured")
        self.bot = bot or Bot(token=token, base_url=f"{api_url.rstrip('/')}/bot")

    async def initialize(self) -> None:
        await self.bot.initialize()

    async def shutdown(self) -> None:
        await self.bot.shutdown()

    async def send_message(self, chat_id: int, reply: Reply) -> None:
        markup: ReplyKeyboardMarkup | ReplyKeyboardRemove | None = None
        if reply.keyboard:
            markup = ReplyKeyboardMarkup(reply.keyboard, resize_keyboard=True, one_time_keyboard=False)
        elif reply.remove_keyboard:
            markup = ReplyKeyboardRemove()
        await self.bot.send_message(
            chat_id=chat_id,
            text=reply.text,
            parse_mode=ParseMode.MARKDOWN_V2 if reply.formatted else None,
            reply_markup=markup,
        )

    async def get_updates(self, *, offset: int | None, timeout: int, limit: int) -> list[dict[str, Any]]:
        """Long-poll once and return the updates as Bot API dictionaries."""
        updates = await self.bot.get_updates(
            offset=offset,
            limit=limit,
            timeout=timeout,
            allowed_updates=["message"],
        )
        return [update.to_dict() for update in updates]

    async def set_webhook(self, url: str, *, max_connections: int) -> None:
        await self.bot.set_webhook(url=url, max_connections=max_connections, allowed_updates=["message"])
        logger.info("Webhook set to: %s", url)

    async def delete_webhook(self) -> None:
        await self.bot.delete_webhook(drop_pending_updates=False)
        logger.info("Webhook removed successfully")
