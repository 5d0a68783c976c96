"""Inbound event routing: resolve user and conversation, dispatch, persist, reply."""

from __future__ import annotations

import logging

from khmerbot.interfaces.catalog import Catalog
from khmerbot.interfaces.messaging_provider import MessagingProvider
from khmerbot.models.conversation import Conversation, ConversationState
from khmerbot.models.user import User
from khmerbot.schemas.inbound import InboundEvent
from khmerbot.schemas.reply import Reply
from khmerbot.services import messages
from khmerbot.services.command_registry import CommandRegistry
from khmerbot.services.context import HandlerContext
from khmerbot.services.conversation_manager import ConversationManager
from khmerbot.services.data_store import DataStore
from khmerbot.services.flow_manager import FlowManager
from khmerbot.services.user_store import UserStore
from khmerbot.utils.text import truncate

logger = logging.getLogger(__name__)


class MessageRouter:
    """Runs one inbound event through lookup, dispatch, persistence and reply."""

    def __init__(
        self,
        store: DataStore,
        command_registry: CommandRegistry,
        flow_manager: FlowManager,
        catalog: Catalog,
        messaging_provider: MessagingProvider,
        *,
        default_language: str = "km",
    ) -> None:
        self.store = store
        self.user_store = UserStore(store, default_language=default_language)
        self.conversation_manager = ConversationManager(store)
        self.command_registry = command_registry
        self.flow_manager = flow_manager
        self.catalog = catalog
        self.messaging_provider = messaging_provider
        self._last_response_by_chat: dict[int, Reply] = {}

    async def route_event(self, event: InboundEvent) -> Reply:
        """Process one event to completion and send the resulting reply."""
        user: User | None = None
        conversation: Conversation | None = None
        try:
            user, _ = self.user_store.get_or_create(event.user_id, event.hints)
            conversation = self.conversation_manager.get(event.user_id)

            if event.is_command and event.command:
                self.user_store.record_interaction(user, "command", {"command": event.command, "args": event.args})
            else:
                self.user_store.record_interaction(user, "message")

            ctx = HandlerContext(event=event, user=user, conversation=conversation, catalog=self.catalog)
            reply = await self._dispatch(ctx)
        except Exception:
            logger.exception(
                "Error handling %s from user %s (state=%s)",
                f"command /{event.command}" if event.is_command else "message",
                event.user_id,
                conversation.state.value if conversation is not None else "unknown",
            )
            if conversation is not None:
                conversation.set_state(ConversationState.IDLE)
            reply = Reply(text=messages.GENERAL_ERROR)

        if user is not None and conversation is not None:
            self._persist(user, conversation)
        await self._send(event.chat_id, reply)
        return reply

    async def _dispatch(self, ctx: HandlerContext) -> Reply:
        event = ctx.event
        if event.is_command and event.command:
            logger.info("Received command /%s from %s (%s)", event.command, ctx.user.full_name(), ctx.user.id)
            handler = self.command_registry.get(event.command)
            if handler is None:
                return Reply(text=messages.unknown_command(event.command))
            return await handler(ctx)

        logger.info(
            "Received message from %s (%s) in state %s: %s",
            ctx.user.full_name(),
            ctx.user.id,
            ctx.conversation.state.value,
            truncate(event.text, 50),
        )
        return await self.flow_manager.handle(ctx)

    def _persist(self, user: User, conversation: Conversation) -> None:
        self.store.commit(user, conversation)

    async def _send(self, chat_id: int, reply: Reply) -> None:
        self._last_response_by_chat[chat_id] = reply
        try:
            await self.messaging_provider.send_message(chat_id, reply)
        except Exception:
            logger.exception("Error sending reply to chat %s", chat_id)

    def get_last_response(self, chat_id: int) -> Reply | None:
        """Return last reply produced for a chat (test/debug helper)."""
        return self._last_response_by_chat.get(chat_id)
