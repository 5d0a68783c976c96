"""Long-polling loop for the Telegram getUpdates API."""

from __future__ import annotations

import asyncio
import logging
from collections.abc import Awaitable, Callable

from telegram.error import Conflict, TelegramError

from khmerbot.providers.messaging.telegram_messaging import TelegramMessagingProvider
from khmerbot.services.bot_service import BotService

logger = logging.getLogger(__name__)

BASE_BACKOFF_SECONDS = 5.0
MAX_BACKOFF_SECONDS = 60.0


class TransportError(RuntimeError):
    """Raised when polling keeps failing after every retry."""


def backoff_delay(attempt: int) -> float:
    """Exponential delay for the given zero-based attempt, capped at a minute."""
    return min(BASE_BACKOFF_SECONDS * (2**attempt), MAX_BACKOFF_SECONDS)


class PollingRunner:
    """Fetches updates and hands them to the bot service one at a time."""

    def __init__(
        self,
        client: TelegramMessagingProvider,
        bot_service: BotService,
        *,
        timeout: int = 30,
        limit: int = 100,
        max_retries: int = 5,
        interval: float = 0.3,
        sleep: Callable[[float], Awaitable[None]] = asyncio.sleep,
    ) -> None:
        self.client = client
        self.bot_service = bot_service
        self.timeout = timeout
        self.limit = limit
        self.max_retries = max_retries
        self.interval = interval
        self._sleep = sleep
        self._offset: int | None = None
        self._stopping = asyncio.Event()
        self.reconnect_attempts = 0

    def stop(self) -> None:
        self._stopping.set()

    async def run(self) -> None:
        """Poll until stopped; raises TransportError once retries are exhausted."""
        logger.info("Starting bot in polling mode")
        await self.client.delete_webhook()
        while not self._stopping.is_set():
            processed = await self.poll_once()
            if processed == 0 and self.interval:
                await self._sleep(self.interval)
        logger.info("Polling stopped successfully")

    async def poll_once(self) -> int:
        """Fetch and route one batch; returns the number of updates handled."""
        try:
            updates = await self.client.get_updates(offset=self._offset, timeout=self.timeout, limit=self.limit)
        except TelegramError as exc:
            await self._handle_poll_error(exc)
            return 0

        if self.reconnect_attempts:
            logger.info("Connection stable, resetting reconnect attempts")
            self.reconnect_attempts = 0

        for update in updates:
            self._offset = int(update["update_id"]) + 1
            await self.bot_service.handle_update(update)
        return len(updates)

    async def _handle_poll_error(self, exc: TelegramError) -> None:
        if isinstance(exc, Conflict):
            logger.warning(
                "Conflict detected (attempt %d/%d): %s", self.reconnect_attempts + 1, self.max_retries, exc
            )
        else:
            logger.error("Polling error: %s", exc)

        if self.reconnect_attempts >= self.max_retries:
            logger.error("Maximum reconnection attempts reached")
            raise TransportError(f"Polling failed after {self.max_retries} attempts") from exc

        delay = backoff_delay(self.reconnect_attempts)
        self.reconnect_attempts += 1
        logger.info("Will attempt to reconnect in %s seconds...", delay)
        await self._sleep(delay)
