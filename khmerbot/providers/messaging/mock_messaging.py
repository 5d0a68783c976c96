"""Mock messaging provider implementation."""

import logging

from khmerbot.interfaces.messaging_provider import MessagingProvider
from khmerbot.schemas.reply import Reply

logger = logging.getLogger(__name__)


class MockMessagingProvider(MessagingProvider):
    """Log-only sender for local testing; keeps the last reply per chat."""

    def __init__(self) -> None:
        self.sent: dict[int, Reply] = {}

    async def send_message(self, chat_id: int, reply: Reply) -> None:
        self.sent[chat_id] = reply
        logger.info("[MockMessaging] -> chat=%s | message=%s", chat_id, reply.text)
