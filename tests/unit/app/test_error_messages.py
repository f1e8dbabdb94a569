from __future__ import annotations

import unittest

from harvey.errors import UNKNOWN_ERROR_MESSAGE, ChatNotFoundError, HarveyError, user_friendly_message


class UserFriendlyMessageTests(unittest.TestCase):
    def test_known_failures_map_to_short_hints(self) -> None:
        cases = {
            "Invalid API key provided": "Invalid or missing API key",
            "401 Unauthorized": "Invalid or missing API key",
            "429 Too Many Requests": "Rate limited",
            "SQL logic error": "Database error",
            "connect ECONNREFUSED 127.0.0.1:443": "Network error",
            "Connection reset": "Connection error",
            "model gpt-x not found": "AI model error",
            "could not parse settings": "Configuration error",
        }
        for raw, prefix in cases.items():
            with self.subTest(raw=raw):
                self.assertTrue(user_friendly_message(RuntimeError(raw)).startswith(prefix))

    def test_unmatched_messages_pass_through(self) -> None:
        self.assertEqual(user_friendly_message(ValueError("weird")), "weird")
        self.assertEqual(user_friendly_message(KeyError()), "KeyError")

    def test_harvey_errors_are_shown_verbatim(self) -> None:
        self.assertEqual(user_friendly_message(ChatNotFoundError(3)), "Chat not found")
        self.assertEqual(user_friendly_message(HarveyError()), "HarveyError")

    def test_non_exceptions(self) -> None:
        self.assertEqual(user_friendly_message("already friendly"), "already friendly")
        self.assertEqual(user_friendly_message(None), UNKNOWN_ERROR_MESSAGE)
        self.assertEqual(user_friendly_message(42), UNKNOWN_ERROR_MESSAGE)


if __name__ == "__main__":
    unittest.main()
