"""Bot service entrypoint that delegates routing to MessageRouter."""

from __future__ import annotations

import asyncio
import logging
from typing import Any

from khmerbot.interfaces.catalog import Catalog
from khmerbot.interfaces.messaging_provider import MessagingProvider
from khmerbot.models.conversation import ConversationState
from khmerbot.schemas.inbound import InboundEvent, InvalidEventError, ProfileHints
from khmerbot.schemas.reply import Reply
from khmerbot.services.command_registry import CommandRegistry, build_default_registry
from khmerbot.services.data_store import DataStore
from khmerbot.services.flow_manager import FlowManager
from khmerbot.services.message_router import MessageRouter

logger = logging.getLogger(__name__)


class BotService:
    """Facade shared by the webhook route, the polling runner and the test endpoint.

    Events are routed one at a time; the lock keeps concurrent webhook requests
    from interleaving mutations of the shared store.
    """

    def __init__(
        self,
        store: DataStore,
        catalog: Catalog,
        messaging_provider: MessagingProvider,
        *,
        command_registry: CommandRegistry | None = None,
        flow_manager: FlowManager | None = None,
        default_language: str = "km",
    ) -> None:
        self.store = store
        self.message_router = MessageRouter(
            store=store,
            command_registry=command_registry or build_default_registry(),
            flow_manager=flow_manager or FlowManager(),
            catalog=catalog,
            messaging_provider=messaging_provider,
            default_language=default_language,
        )
        self._lock = asyncio.Lock()

    async def handle_event(self, event: InboundEvent) -> Reply:
        async with self._lock:
            return await self.message_router.route_event(event)

    async def handle_update(self, update: dict[str, Any]) -> Reply | None:
        """Route a raw Telegram update; invalid or non-text updates produce no reply."""
        try:
            event = InboundEvent.from_telegram_update(update)
        except InvalidEventError:
            logger.exception("Could not route update %s", update.get("update_id"))
            return None
        if event is None:
            logger.debug("Ignoring non-text update %s", update.get("update_id"))
            return None
        return await self.handle_event(event)

    async def handle_message(
        self,
        *,
        user_id: int,
        message: str,
        first_name: str | None = None,
    ) -> dict[str, Any]:
        """Adapter for the test endpoint payload format (private chat: chat id == user id)."""
        event = InboundEvent.from_text(
            chat_id=user_id,
            user_id=user_id,
            text=message,
            hints=ProfileHints(first_name=first_name),
        )
        reply = await self.handle_event(event)
        conversation = self.store.conversations.get(user_id)
        state = conversation.state if conversation is not None else ConversationState.IDLE
        return {"user_id": user_id, "response": reply.text, "state": state.value}
