"""Configuration and translation history owned by the application."""

from __future__ import annotations

from collections import deque
from dataclasses import dataclass, field
from datetime import datetime
from typing import Deque, Iterator, Tuple

SUPPORTED_LANGUAGES = (
    ("en", "English"),
    ("es", "Spanish"),
    ("ko", "Korean"),
    ("vi", "Vietnamese"),
    ("ja", "Japanese"),
    ("de", "German"),
    ("fr", "French"),
)
SUPPORTED_LANGUAGE_CODES = tuple(code for code, _ in SUPPORTED_LANGUAGES)
DEFAULT_TARGET_LANGUAGE = "en"
HISTORY_SIZE = 3


def is_supported_language(code: str) -> bool:
    return code in SUPPORTED_LANGUAGE_CODES


def language_name(code: str) -> str:
    return dict(SUPPORTED_LANGUAGES).get(code, code.upper())


@dataclass(frozen=True)
class TranslationResult:
    original: str
    translated: str
    source_language: str
    target_language: str
    completed_at: datetime = field(default_factory=datetime.now)


@dataclass
class Configuration:
    """User settings; mutate only through the named methods."""

    target_language: str = DEFAULT_TARGET_LANGUAGE
    auto_copy_enabled: bool = False
    is_paused: bool = False

    def __post_init__(self) -> None:
        if not is_supported_language(self.target_language):
            raise ValueError(f"Unsupported target language: {self.target_language!r}")

    def select_target_language(self, code: str) -> bool:
        """Set the target language. Returns ``True`` if it changed."""

        if not is_supported_language(code):
            raise ValueError(f"Unsupported target language: {code!r}")
        if code == self.target_language:
            return False
        self.target_language = code
        return True

    def learn_language(self, detected_language: str) -> bool:
        """Adopt a detected language as the new target when it is supported."""

        if not is_supported_language(detected_language):
            return False
        return self.select_target_language(detected_language)

    def toggle_auto_copy(self) -> bool:
        self.auto_copy_enabled = not self.auto_copy_enabled
        return self.auto_copy_enabled

    def toggle_pause(self) -> bool:
        self.is_paused = not self.is_paused
        return self.is_paused


class HistoryStore:
    """Most-recent-first record of the last few translations."""

    def __init__(self, max_items: int = HISTORY_SIZE) -> None:
        if max_items < 1:
            raise ValueError("History must hold at least one entry")
        self.max_items = max_items
        self._entries: Deque[TranslationResult] = deque(maxlen=max_items)

    def record(self, result: TranslationResult) -> None:
        self._entries.appendleft(result)

    def get(self, index: int) -> TranslationResult:
        if not 0 <= index < len(self._entries):
            raise IndexError(f"History index out of range: {index}")
        return self._entries[index]

    def entries(self) -> Tuple[TranslationResult, ...]:
        return tuple(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __iter__(self) -> Iterator[TranslationResult]:
        return iter(self.entries())
