"""Unit tests for the User record."""

from __future__ import annotations

import unittest

from khmerbot.models.user import HISTORY_LIMIT, LEARNING_HISTORY_LIMIT, User


class UserTestCase(unittest.TestCase):
    """Covers interaction accounting and record round-trips."""

    def test_new_user_counters_start_at_zero(self) -> None:
        user = User(id=1, first_name="Sok")

        self.assertEqual(user.interactions["commandCount"], 0)
        self.assertEqual(user.interactions["messageCount"], 0)
        self.assertIsNone(user.interactions["lastCommand"])
        self.assertEqual(user.history, [])
        self.assertEqual(user.language_code, "km")

    def test_full_name(self) -> None:
        self.assertEqual(User(id=1, first_name="Sok").full_name(), "Sok")
        self.assertEqual(User(id=1, first_name="Sok", last_name="Dara").full_name(), "Sok Dara")

    def test_record_command_updates_counter_and_last_command(self) -> None:
        user = User(id=1)

        user.record_command("quiz", ["easy"])

        self.assertEqual(user.interactions["commandCount"], 1)
        self.assertEqual(user.interactions["lastCommand"], "quiz")
        self.assertEqual(user.history[-1]["type"], "command")
        self.assertEqual(user.history[-1]["details"], {"command": "quiz", "args": ["easy"]})

    def test_record_message_and_other_types(self) -> None:
        user = User(id=1)

        user.record_message()
        user.record_interaction("feedback", {"length": 3})

        self.assertEqual(user.interactions["messageCount"], 1)
        self.assertEqual(user.interactions["commandCount"], 0)
        self.assertEqual([entry["type"] for entry in user.history], ["message", "feedback"])

    def test_history_keeps_most_recent_entries_in_order(self) -> None:
        user = User(id=1)

        for index in range(HISTORY_LIMIT + 10):
            user.record_interaction("message", {"n": index})

        self.assertEqual(len(user.history), HISTORY_LIMIT)
        self.assertEqual([entry["details"]["n"] for entry in user.history], list(range(10, HISTORY_LIMIT + 10)))
        self.assertEqual(user.interactions["messageCount"], HISTORY_LIMIT + 10)

    def test_learning_history_is_capped(self) -> None:
        user = User(id=1)

        for index in range(LEARNING_HISTORY_LIMIT + 5):
            user.record_learning({"wordId": index})

        self.assertEqual(len(user.learning_history), LEARNING_HISTORY_LIMIT)
        self.assertEqual(user.learning_history[0]["wordId"], 5)

    def test_from_dict_repairs_mistyped_interactions(self) -> None:
        user = User.from_dict(
            {
                "id": 3,
                "lastName": None,
                "interactions": {"history": None, "commandCount": "x", "messageCount": True, "lastCommand": 5},
                "learningHistory": ["junk", {"wordId": 1}],
            }
        )

        self.assertEqual(user.history, [])
        self.assertEqual(user.interactions["commandCount"], 0)
        self.assertEqual(user.interactions["messageCount"], 0)
        self.assertIsNone(user.interactions["lastCommand"])
        self.assertEqual(user.last_name, "")
        self.assertEqual(user.learning_history, [{"wordId": 1}])

        user.record_command("help")

        self.assertEqual(user.interactions["commandCount"], 1)
        self.assertEqual(len(user.history), 1)

    def test_set_preference(self) -> None:
        user = User(id=1)

        user.set_preference("notify", False)

        self.assertEqual(user.to_dict()["preferences"], {"notify": False})

    def test_quiz_stats_defaults(self) -> None:
        user = User(id=1, statistics={"quizzes": {"correct": 2}, "streak": 4})

        stats = user.quiz_stats()

        self.assertEqual(stats, {"correct": 2, "started": 0, "completed": 0, "incorrect": 0, "total": 0})
        self.assertEqual(user.statistics["streak"], 4)

    def test_round_trip_keeps_unknown_keys(self) -> None:
        payload = {
            "id": 77,
            "firstName": "Dara",
            "lastName": "",
            "username": "dara",
            "languageCode": "en",
            "registrationDate": "2024-01-01T00:00:00Z",
            "lastActive": "2024-01-02T00:00:00Z",
            "interactions": {"commandCount": 3, "messageCount": 1, "lastCommand": "help", "custom": True},
            "preferences": {"theme": "dark", "nested": {"a": 1}},
            "statistics": {"quizzes": {"correct": 1}},
            "favouriteColour": "blue",
        }

        user = User.from_dict(payload)
        serialized = user.to_dict()

        self.assertEqual(user.id, 77)
        self.assertEqual(user.language_code, "en")
        self.assertEqual(serialized["favouriteColour"], "blue")
        self.assertEqual(serialized["preferences"], {"theme": "dark", "nested": {"a": 1}})
        self.assertTrue(serialized["interactions"]["custom"])
        self.assertEqual(serialized["interactions"]["history"], [])
        self.assertEqual(serialized["registrationDate"], "2024-01-01T00:00:00Z")

    def test_from_dict_uses_key_when_id_missing(self) -> None:
        user = User.from_dict({"firstName": "Vanna"}, user_id=12)

        self.assertEqual(user.id, 12)
        self.assertEqual(user.interactions["commandCount"], 0)


if __name__ == "__main__":
    unittest.main()
