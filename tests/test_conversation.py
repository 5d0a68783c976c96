"""Unit tests for the Conversation model."""

from __future__ import annotations

import tempfile
import unittest
from datetime import timedelta

from khmerbot.models.conversation import Conversation, ConversationState, utcnow
from khmerbot.services.conversation_manager import ConversationManager
from khmerbot.services.data_store import DataStore


class ConversationTestCase(unittest.TestCase):
    """Covers mutations, expiry and serialization of a conversation."""

    def test_new_conversation_is_idle_and_empty(self) -> None:
        conversation = Conversation(user_id=42)

        self.assertEqual(conversation.state, ConversationState.IDLE)
        self.assertEqual(conversation.data, {})
        self.assertFalse(conversation.is_expired())

    def test_mutations_refresh_both_timestamps(self) -> None:
        conversation = Conversation(user_id=42)
        stale = utcnow() - timedelta(minutes=10)
        conversation.last_updated = stale
        conversation.last_activity_time = stale

        conversation.set_state(ConversationState.QUIZ)

        self.assertEqual(conversation.state, ConversationState.QUIZ)
        self.assertGreater(conversation.last_updated, stale)
        self.assertEqual(conversation.last_updated, conversation.last_activity_time)

        conversation.last_updated = stale
        conversation.set_data("wordId", 7)

        self.assertEqual(conversation.get_data("wordId"), 7)
        self.assertGreater(conversation.last_updated, stale)
        self.assertEqual(conversation.last_updated, conversation.last_activity_time)

    def test_reset_clears_state_and_data(self) -> None:
        conversation = Conversation(user_id=42)
        conversation.set_state("awaiting_feedback").set_data("name", "Dara")

        conversation.reset()

        self.assertEqual(conversation.state, ConversationState.IDLE)
        self.assertEqual(conversation.data, {})
        self.assertEqual(conversation.user_id, 42)

    def test_is_expired_after_thirty_minutes(self) -> None:
        conversation = Conversation(user_id=42)
        now = utcnow()
        conversation.last_updated = now - timedelta(minutes=30)
        self.assertFalse(conversation.is_expired(now=now))

        conversation.last_updated = now - timedelta(minutes=31)
        self.assertTrue(conversation.is_expired(now=now))
        # Pure predicate: nothing was reset.
        self.assertEqual(conversation.last_updated, now - timedelta(minutes=31))

    def test_get_data_default(self) -> None:
        conversation = Conversation(user_id=1)
        self.assertIsNone(conversation.get_data("missing"))
        self.assertEqual(conversation.get_data("missing", []), [])

    def test_from_dict_defaults(self) -> None:
        before = utcnow()
        conversation = Conversation.from_dict(5, {"state": "no_such_state", "data": "not a dict"})

        self.assertEqual(conversation.state, ConversationState.IDLE)
        self.assertEqual(conversation.data, {})
        self.assertGreaterEqual(conversation.last_activity_time, before)

    def test_to_dict_from_dict_preserves_fields(self) -> None:
        conversation = Conversation(user_id=9)
        conversation.set_state(ConversationState.NEWS_CATEGORY).set_data("newsCategories", ["sports"])

        restored = Conversation.from_dict(9, conversation.to_dict())

        self.assertEqual(restored.state, ConversationState.NEWS_CATEGORY)
        self.assertEqual(restored.data, {"newsCategories": ["sports"]})
        self.assertEqual(restored.last_activity_time, conversation.last_activity_time)
        self.assertEqual(conversation.to_dict()["userId"], 9)
        self.assertTrue(conversation.to_dict()["lastActivityTime"].endswith("Z"))


class ConversationManagerTestCase(unittest.TestCase):
    """Covers state primitives exposed on top of the store."""

    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.store = DataStore(self._tmp.name, write_through=False)
        self.manager = ConversationManager(self.store)

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def test_get_state_defaults_to_idle(self) -> None:
        self.assertEqual(self.manager.get_state(3), ConversationState.IDLE)
        self.assertIn(3, self.store.conversations)

    def test_set_and_reset_state_keep_identity(self) -> None:
        conversation = self.manager.set_state(3, ConversationState.AWAITING_FEEDBACK)
        conversation.set_data("feedback", {"text": "good"})

        reset = self.manager.reset_state(3)

        self.assertIs(reset, conversation)
        self.assertEqual(reset.state, ConversationState.IDLE)
        self.assertEqual(reset.data, {})


if __name__ == "__main__":
    unittest.main()
