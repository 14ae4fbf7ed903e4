"""Clipboard polling and noise filtering."""

from __future__ import annotations

import enum
import logging
import time
from dataclasses import dataclass
from typing import Callable, Iterable, Optional, Tuple

from dispatch import Dispatcher, RepeatingTimer

logger = logging.getLogger("cliptranslator.watcher")

POLL_INTERVAL = 0.4
MAX_TEXT_LENGTH = 4000

# Text that other tools and the OS leave on the clipboard; never worth translating.
NOISE_PATTERNS = (
    "nsurlerrordomain",
    "could not be found",
    "resolved 0 endpoints",
    "fatal error",
)


@dataclass(frozen=True)
class ClipboardSnapshot:
    text: str
    observed_at: float


class WatchOutcome(enum.Enum):
    PAUSED = "paused"
    EMPTY = "empty"
    UNCHANGED = "unchanged"
    TOO_LONG = "too_long"
    NOISE = "noise"
    UNREADABLE = "unreadable"
    DISPATCHED = "dispatched"


def is_noise(text: str, patterns: Iterable[str] = NOISE_PATTERNS) -> bool:
    lowered = text.lower()
    return any(pattern in lowered for pattern in patterns)


class ClipboardWatcher:
    """Poll the clipboard and forward new, translatable text."""

    def __init__(
        self,
        dispatcher: Dispatcher,
        clipboard_module,
        on_text: Callable[[ClipboardSnapshot], None],
        *,
        interval: float = POLL_INTERVAL,
        max_length: int = MAX_TEXT_LENGTH,
        noise_patterns: Iterable[str] = NOISE_PATTERNS,
        time_provider: Callable[[], float] = time.time,
    ) -> None:
        self._clipboard = clipboard_module
        self._on_text = on_text
        self.max_length = max_length
        self._noise_patterns: Tuple[str, ...] = tuple(pattern.lower() for pattern in noise_patterns)
        self._time_provider = time_provider
        self._timer = RepeatingTimer(dispatcher, interval, self.poll)
        self._last_seen_text: Optional[str] = None
        self._paused = False

    @property
    def last_seen_text(self) -> Optional[str]:
        return self._last_seen_text

    @property
    def is_paused(self) -> bool:
        return self._paused

    @property
    def interval(self) -> float:
        return self._timer.interval

    @property
    def is_running(self) -> bool:
        return self._timer.is_running

    def start(self) -> None:
        self._timer.start()

    def stop(self) -> None:
        self._timer.stop()

    def pause(self) -> None:
        self._paused = True

    def resume(self) -> None:
        self._paused = False

    def refresh(self) -> None:
        """Forget the last seen text and restart polling."""

        self._last_seen_text = None
        self._timer.restart()

    def mark_seen(self, text: str) -> None:
        self._last_seen_text = text

    def poll(self) -> WatchOutcome:
        try:
            text = self._clipboard.paste()
        except Exception as exc:
            logger.error("Failed to read clipboard: %s", exc)
            return WatchOutcome.UNREADABLE

        text = text or ""
        outcome = self._classify(text)
        if outcome is WatchOutcome.UNCHANGED:
            return outcome

        self._last_seen_text = text
        if outcome is WatchOutcome.DISPATCHED:
            self._on_text(ClipboardSnapshot(text=text, observed_at=self._time_provider()))
        elif outcome in (WatchOutcome.TOO_LONG, WatchOutcome.NOISE):
            logger.debug("Ignoring clipboard text (%s, %d characters)", outcome.value, len(text))
        return outcome

    def _classify(self, text: str) -> WatchOutcome:
        if text == self._last_seen_text:
            return WatchOutcome.UNCHANGED
        if self._paused:
            return WatchOutcome.PAUSED
        if not text:
            return WatchOutcome.EMPTY
        if len(text) > self.max_length:
            return WatchOutcome.TOO_LONG
        if is_noise(text, self._noise_patterns):
            return WatchOutcome.NOISE
        return WatchOutcome.DISPATCHED
