"""Presentation contract and the pure menu description."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Any, List, Optional, Sequence, Tuple

from translation_state import SUPPORTED_LANGUAGES, Configuration, TranslationResult

logger = logging.getLogger("cliptranslator.presentation")

APP_TITLE = "Clipboard Translator"
HISTORY_WRAP_WIDTH = 80


class PresentationListener:
    """Receives notifications from the application.

    Called on the dispatcher thread. The base implementation only logs.
    """

    def target_language_changed(self, language: str) -> None:
        logger.debug("Target language is now %s", language)

    def state_changed(self, auto_copy_enabled: bool, is_paused: bool) -> None:
        logger.debug("auto_copy=%s paused=%s", auto_copy_enabled, is_paused)

    def history_changed(self, entries: Sequence[TranslationResult]) -> None:
        logger.debug("History holds %d entries", len(entries))

    def translation_ready(
        self,
        original: str,
        translated: str,
        source_language: str,
        target_language: str,
        show_both: bool,
    ) -> None:
        logger.info("%s -> %s: %s", source_language, target_language, translated)

    def info_ready(self, message: str) -> None:
        logger.info("%s", message)

    def close_all(self) -> None:
        pass


@dataclass(frozen=True)
class MenuEntry:
    label: str = ""
    command: Optional[str] = None
    argument: Any = None
    checked: Optional[bool] = None
    radio: bool = False
    children: Tuple["MenuEntry", ...] = ()
    separator: bool = False

    @property
    def enabled(self) -> bool:
        return self.command is not None or bool(self.children)


SEPARATOR = MenuEntry(separator=True)


def wrap_text(text: str, width: int = HISTORY_WRAP_WIDTH) -> List[str]:
    if len(text) <= width:
        return [text]
    return [text[start:start + width] for start in range(0, len(text), width)]


def _history_entry(index: int, entry: TranslationResult) -> MenuEntry:
    children: List[MenuEntry] = [
        MenuEntry("Copy Orig", command="copy_original", argument=index),
        MenuEntry("Copy Trans", command="copy_translation", argument=index),
        SEPARATOR,
        MenuEntry("Original:"),
    ]
    children.extend(MenuEntry(chunk) for chunk in wrap_text(entry.original))
    children.append(SEPARATOR)
    children.append(MenuEntry("Translation:"))
    children.extend(MenuEntry(chunk) for chunk in wrap_text(entry.translated))
    label = f"{entry.source_language.upper()} → {entry.target_language.upper()}"
    return MenuEntry(label, children=tuple(children))


def build_menu_model(
    configuration: Configuration,
    history: Sequence[TranslationResult],
) -> Tuple[MenuEntry, ...]:
    """Describe the tray menu for the given state."""

    languages = tuple(
        MenuEntry(
            name,
            command="select_target_language",
            argument=code,
            checked=code == configuration.target_language,
            radio=True,
        )
        for code, name in SUPPORTED_LANGUAGES
    )

    items: List[MenuEntry] = [
        MenuEntry(APP_TITLE),
        SEPARATOR,
        MenuEntry("Translate Text…", command="prompt_translate_text"),
        SEPARATOR,
        MenuEntry("Target Language", children=languages),
        SEPARATOR,
        MenuEntry(
            "Auto-copy Translation",
            command="toggle_auto_copy",
            checked=configuration.auto_copy_enabled,
        ),
        MenuEntry("Resume" if configuration.is_paused else "Pause", command="toggle_pause"),
        SEPARATOR,
    ]
    if history:
        entries = tuple(_history_entry(index, entry) for index, entry in enumerate(history))
        items.append(MenuEntry("History", children=entries))
        items.append(SEPARATOR)
    items.append(MenuEntry("Refresh", command="refresh"))
    items.append(MenuEntry("Quit", command="quit"))
    return tuple(items)


def _clamp(value: float, lower: float, upper: float) -> float:
    return min(max(lower, value), upper)


def result_display_seconds(translated: str, show_both: bool) -> float:
    if show_both:
        return _clamp(len(translated) / 25.0, 12.0, 30.0)
    return _clamp(len(translated) / 30.0, 10.0, 25.0)


def info_display_seconds(message: str) -> float:
    return _clamp(len(message) / 40.0, 8.0, 20.0)
