import unittest
import unittest.mock as mock
from types import SimpleNamespace

from langdetect import LangDetectException

from language_detection import LanguageDetector


def _candidate(lang: str, prob: float) -> SimpleNamespace:
    return SimpleNamespace(lang=lang, prob=prob)


class LanguageDetectorTests(unittest.TestCase):
    def setUp(self) -> None:
        self.detector = LanguageDetector()

    def test_returns_most_probable_language(self) -> None:
        with mock.patch(
            "language_detection.detect_langs",
            return_value=[_candidate("fr", 0.93), _candidate("it", 0.05)],
        ):
            self.assertEqual(self.detector.detect("Bonjour le monde"), "fr")

    def test_blank_text_is_inconclusive(self) -> None:
        with mock.patch("language_detection.detect_langs") as detect_langs:
            self.assertIsNone(self.detector.detect("   \n"))
        detect_langs.assert_not_called()

    def test_detector_error_is_inconclusive(self) -> None:
        error = LangDetectException(0, "No features in text.")
        with mock.patch("language_detection.detect_langs", side_effect=error):
            self.assertIsNone(self.detector.detect("1234"))

    def test_low_confidence_is_inconclusive(self) -> None:
        with mock.patch(
            "language_detection.detect_langs",
            return_value=[_candidate("de", 0.42), _candidate("nl", 0.41)],
        ):
            self.assertIsNone(self.detector.detect("Hand"))

    def test_chinese_region_codes_match_the_provider(self) -> None:
        with mock.patch("language_detection.detect_langs", return_value=[_candidate("zh-cn", 0.99)]):
            self.assertEqual(self.detector.detect("你好世界"), "zh-CN")

    def test_long_text_is_sampled(self) -> None:
        with mock.patch("language_detection.detect_langs", return_value=[_candidate("en", 0.99)]) as detect_langs:
            self.detector.detect("word " * 1000)
        self.assertLessEqual(len(detect_langs.call_args[0][0]), 1000)


if __name__ == "__main__":  # pragma: no cover - allows direct execution
    unittest.main()
