"""Tests for config persistence and input sanitization.

Malformed or missing config data must fall back to defaults on load.
"""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path
from unittest import mock

from harvey.runtime import config
from harvey.runtime.config import EngineConfig


class ConfigPersistenceTests(unittest.TestCase):
    def test_round_trip_through_default_path(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "nested" / "config.json"
            with mock.patch("harvey.runtime.config.CONFIG_PATH", config_path):
                expected = EngineConfig(theme="ocean", no_color=True, poll_interval_ms=50, log_level="DEBUG")
                self.assertTrue(config.save_config(config.config_to_mapping(expected)))
                self.assertEqual(config.load_engine_config(), expected)

    def test_missing_or_malformed_file_yields_defaults(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            config_path = Path(tmp) / "config.json"
            self.assertEqual(config.load_config(config_path), {})

            config_path.write_text("{not json", encoding="utf-8")
            self.assertEqual(config.load_config(config_path), {})

            config_path.write_text("[1, 2]", encoding="utf-8")
            self.assertEqual(config.load_config(config_path), {})
            self.assertEqual(config.load_engine_config(config_path), EngineConfig())

    def test_save_failure_is_reported_not_raised(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            blocker = Path(tmp) / "file"
            blocker.write_text("x", encoding="utf-8")
            with self.assertLogs("harvey.runtime.config", level="WARNING"):
                self.assertFalse(config.save_config({"theme": "ocean"}, blocker / "config.json"))


class ConfigSanitizationTests(unittest.TestCase):
    def test_invalid_values_are_ignored(self) -> None:
        loaded = config.config_from_mapping(
            {
                "theme": "  OCEAN ",
                "no_color": "yes",
                "poll_interval_ms": True,
                "log_level": "verbose",
            }
        )
        self.assertEqual(loaded, EngineConfig(theme="ocean"))

        self.assertEqual(config.config_from_mapping({"theme": "neon"}).theme, "default")
        self.assertEqual(config.config_from_mapping({"poll_interval_ms": 0}).poll_interval_ms, 30)
        self.assertEqual(config.config_from_mapping({"poll_interval_ms": 12.5}).poll_interval_ms, 30)
        self.assertEqual(config.config_from_mapping({"log_level": " info "}).log_level, "INFO")

    def test_overrides_layer_over_file_values(self) -> None:
        base = EngineConfig(theme="ocean", log_level="ERROR")
        self.assertEqual(config.apply_overrides(base), base)

        merged = config.apply_overrides(base, theme="default", no_color=True, log_level="debug")
        self.assertEqual(merged, EngineConfig(theme="default", no_color=True, log_level="DEBUG"))

        self.assertTrue(config.apply_overrides(EngineConfig(no_color=True), no_color=False).no_color)
        self.assertEqual(config.apply_overrides(base, log_level="loud").log_level, "ERROR")


if __name__ == "__main__":
    unittest.main()
