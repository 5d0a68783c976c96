"""Conversation state manager backed by the data store."""

from __future__ import annotations

from khmerbot.models.conversation import Conversation, ConversationState
from khmerbot.services.data_store import DataStore


class ConversationManager:
    """Tracks per-user conversation state through the store's expiry-aware lookup."""

    def __init__(self, store: DataStore) -> None:
        self.store = store

    def get(self, user_id: int) -> Conversation:
        """Return active conversation for a user, creating or resetting it as needed."""
        return self.store.get_conversation(user_id)

    def get_state(self, user_id: int) -> ConversationState:
        """Return current state for user, defaulting to idle."""
        return self.get(user_id).state

    def set_state(self, user_id: int, state: ConversationState) -> Conversation:
        """Set the state for a user conversation."""
        conversation = self.get(user_id)
        conversation.set_state(state)
        self.store.save_conversation(conversation)
        return conversation

    def reset_state(self, user_id: int) -> Conversation:
        """Return the conversation to idle with empty scratch data."""
        conversation = self.get(user_id)
        conversation.reset()
        self.store.save_conversation(conversation)
        return conversation
