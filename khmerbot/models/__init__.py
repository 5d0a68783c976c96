"""Domain models package."""

from khmerbot.models.conversation import Conversation, ConversationState
from khmerbot.models.user import User

__all__ = [
    "Conversation",
    "ConversationState",
    "User",
]
