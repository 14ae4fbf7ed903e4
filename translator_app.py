"""Tray utility that translates text copied to the clipboard."""

from __future__ import annotations

import argparse
import functools
import logging
from concurrent.futures import Executor, Future, ThreadPoolExecutor
from logging.handlers import RotatingFileHandler
from pathlib import Path
from typing import Callable, Optional, Protocol

try:  # pragma: no cover - executed during module import
    import pyperclip  # type: ignore
except ImportError:  # pragma: no cover - handled in __init__
    pyperclip = None  # type: ignore

from clipboard_watcher import MAX_TEXT_LENGTH, POLL_INTERVAL, ClipboardSnapshot, ClipboardWatcher
from connectivity import ConnectivityProbe, failure_message
from dispatch import Dispatcher
from language_detection import LanguageDetector
from preferences import PREFERENCES_FILE, load_preferences, save_target_language
from presentation import APP_TITLE, PresentationListener
from single_instance import SingleInstanceError, SingleInstanceGuard
from translation_router import route_target_language
from translation_service import (
    AUTO_DETECT,
    GoogleTranslateClient,
    TranslationError,
    TranslationRequest,
)
from translation_state import (
    HISTORY_SIZE,
    SUPPORTED_LANGUAGE_CODES,
    Configuration,
    HistoryStore,
    TranslationResult,
)

LOG_FILE_NAME = "cliptranslator.log"
LOG_MAX_BYTES = 2_097_152
LOG_BACKUP_COUNT = 3

TRANSLATING_MESSAGE = "Translating…"

logger = logging.getLogger("cliptranslator.app")


def configure_logging(log_dir: Path, level: int = logging.INFO) -> logging.Logger:
    root = logging.getLogger("cliptranslator")
    root.setLevel(level)
    if root.handlers:
        return root

    formatter = logging.Formatter("%(asctime)s [%(levelname)s] %(message)s")
    try:
        log_dir.mkdir(parents=True, exist_ok=True)
        handler = RotatingFileHandler(
            log_dir / LOG_FILE_NAME,
            maxBytes=LOG_MAX_BYTES,
            backupCount=LOG_BACKUP_COUNT,
            encoding="utf-8",
        )
    except OSError:
        handler = None
    if handler is not None:
        handler.setFormatter(formatter)
        root.addHandler(handler)
    console = logging.StreamHandler()
    console.setFormatter(formatter)
    root.addHandler(console)
    return root


class TranslatorProtocol(Protocol):  # pragma: no cover - protocol is for type checking only
    def translate(self, text: str, src: str, dest: str) -> str:
        """Translate text and return the translated string."""


class DetectorProtocol(Protocol):  # pragma: no cover - protocol is for type checking only
    def detect(self, text: str) -> Optional[str]:
        """Return the dominant language code of text, or None."""


class ClipboardTranslatorApp:
    """Watches the clipboard and translates whatever new text shows up.

    All public commands must run on the dispatcher thread; callers on other
    threads go through ``dispatcher.call_soon``.
    """

    def __init__(
        self,
        configuration: Optional[Configuration] = None,
        *,
        dispatcher: Optional[Dispatcher] = None,
        translator_factory: Callable[[], TranslatorProtocol] = GoogleTranslateClient,
        detector: Optional[DetectorProtocol] = None,
        connectivity_probe: Optional[ConnectivityProbe] = None,
        clipboard_module=pyperclip,
        executor: Optional[Executor] = None,
        presentation: Optional[PresentationListener] = None,
        history_size: int = HISTORY_SIZE,
        poll_interval: float = POLL_INTERVAL,
        max_text_length: int = MAX_TEXT_LENGTH,
        target_language_saver: Optional[Callable[[str], None]] = None,
    ) -> None:
        if clipboard_module is None:
            raise RuntimeError(
                "The 'pyperclip' package is required. Install it with 'pip install pyperclip'."
            )
        self.configuration = configuration or Configuration()
        self.dispatcher = dispatcher or Dispatcher()
        self.history = HistoryStore(history_size)
        self.presentation = presentation or PresentationListener()
        self._clipboard = clipboard_module
        self._translator_factory = translator_factory
        self._translator: Optional[TranslatorProtocol] = None
        self._detector = detector
        self._probe = connectivity_probe or ConnectivityProbe()
        self._executor = executor or ThreadPoolExecutor(max_workers=4, thread_name_prefix="translate")
        self._target_language_saver = target_language_saver
        self.watcher = ClipboardWatcher(
            self.dispatcher,
            clipboard_module,
            self._on_clipboard_text,
            interval=poll_interval,
            max_length=max_text_length,
        )
        if self.configuration.is_paused:
            self.watcher.pause()

    @property
    def translator(self) -> TranslatorProtocol:
        if self._translator is None:
            self._translator = self._translator_factory()
        return self._translator

    @property
    def detector(self) -> DetectorProtocol:
        if self._detector is None:
            self._detector = LanguageDetector()
        return self._detector

    # Lifecycle --------------------------------------------------------

    def start(self) -> None:
        self.watcher.start()
        self._notify_state()
        self.presentation.history_changed(self.history.entries())
        logger.info(
            "Watching the clipboard every %.2fs (target=%s, auto_copy=%s)",
            self.watcher.interval,
            self.configuration.target_language,
            self.configuration.auto_copy_enabled,
        )

    def run(self, *, presentation: Optional[PresentationListener] = None) -> None:
        """Start watching and block on the dispatcher until :meth:`quit`."""

        if presentation is not None:
            self.presentation = presentation
        self.dispatcher.call_soon(self.start)
        try:
            self.dispatcher.run_forever()
        except KeyboardInterrupt:  # pragma: no cover - manual console interruption
            self.quit()

    # User commands ----------------------------------------------------

    def select_target_language(self, language: str) -> None:
        if not self.configuration.select_target_language(language):
            return
        if self._target_language_saver is not None:
            self._target_language_saver(language)
        self.presentation.target_language_changed(language)

    def toggle_auto_copy(self) -> None:
        enabled = self.configuration.toggle_auto_copy()
        self._notify_state()
        if not enabled:
            return
        self.refresh()
        text = self.read_clipboard()
        if text and len(text) <= self.watcher.max_length:
            self.watcher.mark_seen(text)
            self._start_translation(text, manual=False)

    def toggle_pause(self) -> None:
        if self.configuration.toggle_pause():
            self.watcher.pause()
        else:
            self.watcher.resume()
        self._notify_state()

    def translate_text(self, text: str) -> None:
        text = (text or "").strip()
        if not text:
            return
        self.presentation.info_ready(TRANSLATING_MESSAGE)
        self._start_translation(text, manual=True)

    def copy_original(self, index: int) -> bool:
        return self._copy_history_text(index, original=True)

    def copy_translation(self, index: int) -> bool:
        return self._copy_history_text(index, original=False)

    def refresh(self) -> None:
        self.watcher.refresh()
        self.presentation.close_all()
        self._translator = None
        self._notify_state()

    def quit(self) -> None:
        self.watcher.stop()
        self.presentation.close_all()
        self.dispatcher.stop()
        self._executor.shutdown(wait=False)

    def read_clipboard(self) -> str:
        try:
            return self._clipboard.paste() or ""
        except Exception as exc:
            logger.error("Failed to read clipboard: %s", exc)
            return ""

    # Pipeline ---------------------------------------------------------

    def _on_clipboard_text(self, snapshot: ClipboardSnapshot) -> None:
        self._start_translation(snapshot.text, manual=False)

    def _start_translation(self, text: str, *, manual: bool) -> None:
        target = self.configuration.target_language
        detected = self.detector.detect(text)
        if detected is None:
            if not manual:
                logger.debug("Language of clipboard text is inconclusive; skipping")
                return
            request = TranslationRequest(text, AUTO_DETECT, target)
        else:
            destination = route_target_language(detected, target)
            if destination is None:
                logger.debug("Text is already in %s; nothing to translate", detected)
                if manual:
                    self.presentation.info_ready(f"Text is already in {detected.upper()}.")
                else:
                    self.watcher.mark_seen(text)
                return
            request = TranslationRequest(text, detected, destination)

        translator = self.translator
        self.dispatcher.run_in_executor(
            self._executor,
            functools.partial(
                translator.translate, request.text, request.source_language, request.target_language
            ),
            functools.partial(self._on_translation_done, request, manual),
        )

    def _on_translation_done(self, request: TranslationRequest, manual: bool, future: "Future[str]") -> None:
        try:
            translated = future.result()
        except TranslationError as exc:
            logger.warning(
                "Translation %s->%s failed: %s",
                request.source_language,
                request.target_language,
                exc,
            )
            self.dispatcher.run_in_executor(self._executor, self._probe.is_reachable, self._on_probe_done)
            return

        if self.configuration.auto_copy_enabled:
            self._write_clipboard(translated)
            if not manual and self.configuration.learn_language(request.source_language):
                self.presentation.target_language_changed(self.configuration.target_language)

        result = TranslationResult(
            original=request.text,
            translated=translated,
            source_language=request.source_language,
            target_language=request.target_language,
        )
        self.history.record(result)
        self.presentation.translation_ready(
            result.original,
            result.translated,
            result.source_language,
            result.target_language,
            True,
        )
        self.presentation.history_changed(self.history.entries())

    def _on_probe_done(self, future: "Future[bool]") -> None:
        self.presentation.info_ready(failure_message(future.result()))

    # Helpers ----------------------------------------------------------

    def _copy_history_text(self, index: int, *, original: bool) -> bool:
        try:
            entry = self.history.get(index)
        except IndexError:
            logger.warning("No history entry at index %d", index)
            return False
        self._write_clipboard(entry.original if original else entry.translated)
        return True

    def _write_clipboard(self, text: str) -> None:
        try:
            self._clipboard.copy(text)
        except Exception as exc:
            logger.error("Failed to write clipboard: %s", exc)
            return
        self.watcher.mark_seen(text)

    def _notify_state(self) -> None:
        self.presentation.state_changed(
            self.configuration.auto_copy_enabled, self.configuration.is_paused
        )


def parse_args(argv=None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Translate text as soon as it is copied to the clipboard.")
    parser.add_argument(
        "--target",
        choices=SUPPORTED_LANGUAGE_CODES,
        default=None,
        help="Target language for English text (default: saved preference or en).",
    )
    parser.add_argument(
        "--auto-copy",
        action="store_true",
        default=None,
        help="Copy translations back to the clipboard.",
    )
    parser.add_argument(
        "--preferences",
        type=Path,
        default=PREFERENCES_FILE,
        help="Path of the JSON preferences file.",
    )
    parser.add_argument("--verbose", action="store_true", help="Enable debug logging.")
    return parser.parse_args(argv)


def build_app(args: argparse.Namespace) -> ClipboardTranslatorApp:
    preferences = load_preferences(args.preferences)
    configuration = Configuration(
        target_language=args.target or preferences.target_language,
        auto_copy_enabled=preferences.auto_copy if args.auto_copy is None else args.auto_copy,
    )
    return ClipboardTranslatorApp(
        configuration,
        translator_factory=functools.partial(GoogleTranslateClient, timeout=preferences.request_timeout),
        connectivity_probe=ConnectivityProbe(preferences.connectivity_host),
        history_size=preferences.history_size,
        poll_interval=preferences.poll_interval,
        max_text_length=preferences.max_text_length,
        target_language_saver=functools.partial(save_target_language, path=args.preferences),
    )


def main(argv=None) -> None:  # pragma: no cover - interactive entry point
    args = parse_args(argv)
    configure_logging(args.preferences.parent, logging.DEBUG if args.verbose else logging.INFO)
    try:
        with SingleInstanceGuard():
            from result_windows import ResultWindowManager
            from tray_icon import SystemTrayController

            app = build_app(args)
            windows = ResultWindowManager()
            tray = SystemTrayController(app, windows)
            tray.start()
            try:
                app.run(presentation=tray)
            finally:
                tray.stop()
                windows.stop()
    except SingleInstanceError:
        print(f"{APP_TITLE} is already running.")


if __name__ == "__main__":
    main()
