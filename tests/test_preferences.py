import json
import tempfile
import unittest
from pathlib import Path

from preferences import Preferences, load_preferences, save_target_language


class PreferencesTests(unittest.TestCase):
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.addCleanup(self._tmp.cleanup)
        self.path = Path(self._tmp.name) / "prefs.json"

    def _write(self, data) -> None:
        self.path.write_text(json.dumps(data), encoding="utf-8")

    def test_missing_file_gives_defaults(self) -> None:
        self.assertEqual(load_preferences(self.path), Preferences())

    def test_corrupt_file_gives_defaults(self) -> None:
        self.path.write_text("{not json", encoding="utf-8")
        self.assertEqual(load_preferences(self.path), Preferences())

    def test_valid_values_are_loaded(self) -> None:
        self._write(
            {
                "target_language": "ko",
                "auto_copy": True,
                "poll_interval": 1,
                "max_text_length": 500,
                "history_size": 5,
                "request_timeout": 3.5,
                "connectivity_host": " example.com ",
            }
        )

        preferences = load_preferences(self.path)

        self.assertEqual(preferences.target_language, "ko")
        self.assertTrue(preferences.auto_copy)
        self.assertEqual(preferences.poll_interval, 1.0)
        self.assertEqual(preferences.max_text_length, 500)
        self.assertEqual(preferences.history_size, 5)
        self.assertEqual(preferences.request_timeout, 3.5)
        self.assertEqual(preferences.connectivity_host, "example.com")

    def test_invalid_values_fall_back_individually(self) -> None:
        self._write(
            {
                "target_language": "tlh",
                "auto_copy": "yes",
                "poll_interval": -1,
                "max_text_length": True,
                "history_size": 0,
                "request_timeout": "fast",
            }
        )

        self.assertEqual(load_preferences(self.path), Preferences())

    def test_save_target_language_keeps_other_keys(self) -> None:
        self._write({"history_size": 4})

        save_target_language("de", self.path)

        data = json.loads(self.path.read_text(encoding="utf-8"))
        self.assertEqual(data, {"history_size": 4, "target_language": "de"})


if __name__ == "__main__":  # pragma: no cover - allows direct execution
    unittest.main()
