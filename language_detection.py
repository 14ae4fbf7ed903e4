"""Language detection helpers built on top of langdetect."""

from __future__ import annotations

import logging
from typing import Optional

from langdetect import DetectorFactory, LangDetectException, detect_langs

logger = logging.getLogger("cliptranslator.detection")

MIN_PROBABILITY = 0.5
SAMPLE_LENGTH = 1000

# langdetect spells region variants in lower case; the translation endpoint
# expects the region upper-cased.
_CODE_ALIASES = {
    "zh-cn": "zh-CN",
    "zh-tw": "zh-TW",
}


class LanguageDetector:
    """Guess the dominant language of a text span."""

    def __init__(self, min_probability: float = MIN_PROBABILITY, seed: Optional[int] = 0) -> None:
        self.min_probability = min_probability
        if seed is not None:
            DetectorFactory.seed = seed

    def detect(self, text: str) -> Optional[str]:
        """Return the language code of ``text`` or ``None`` when unsure."""

        sample = (text or "").strip()
        if not sample:
            return None

        try:
            candidates = detect_langs(sample[:SAMPLE_LENGTH])
        except LangDetectException as exc:
            logger.debug("Language detection failed: %s", exc)
            return None

        if not candidates:
            return None
        best = candidates[0]
        if best.prob < self.min_probability:
            logger.debug("Discarding low confidence guess %s (%.2f)", best.lang, best.prob)
            return None
        return _CODE_ALIASES.get(best.lang, best.lang)
