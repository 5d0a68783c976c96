"""Interface contract for messaging providers."""

from abc import ABC, abstractmethod

from khmerbot.schemas.reply import Reply


class MessagingProvider(ABC):
    """Defines outbound message delivery behavior."""

    @abstractmethod
    async def send_message(self, chat_id: int, reply: Reply) -> None:
        """Send a reply to a target chat."""
        raise NotImplementedError
