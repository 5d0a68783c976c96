"""Per-event state handed to command and flow handlers."""

from __future__ import annotations

from dataclasses import dataclass

from khmerbot.interfaces.catalog import Catalog
from khmerbot.models.conversation import Conversation
from khmerbot.models.user import User
from khmerbot.schemas.inbound import InboundEvent


@dataclass(slots=True)
class HandlerContext:
    """Resolved user, conversation and collaborators for one inbound event."""

    event: InboundEvent
    user: User
    conversation: Conversation
    catalog: Catalog

    @property
    def text(self) -> str:
        return self.event.text
