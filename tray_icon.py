"""System tray icon showing the target language and the toggles."""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Callable, Optional, Sequence

from PIL import Image, ImageDraw, ImageFont

try:  # pragma: no cover - optional dependency for system tray support
    import pystray  # type: ignore
    from pystray import MenuItem  # type: ignore
except Exception:  # pragma: no cover - no tray backend on this system
    pystray = None  # type: ignore
    MenuItem = None  # type: ignore

from presentation import APP_TITLE, MenuEntry, PresentationListener, build_menu_model
from translation_state import Configuration, TranslationResult

if TYPE_CHECKING:  # pragma: no cover
    from result_windows import ResultWindowManager
    from translator_app import ClipboardTranslatorApp

logger = logging.getLogger("cliptranslator.tray")

ICON_SIZE = 64
BACKGROUND = (38, 38, 40, 255)
TEXT_COLOR = (240, 240, 240, 255)
MUTED_COLOR = (140, 140, 145, 255)
AUTO_COPY_COLOR = (52, 199, 89, 255)
PAUSED_COLOR = (255, 149, 0, 255)


def _draw_badge(draw: ImageDraw.ImageDraw, box, label: str, active: bool, color, font) -> None:
    if active:
        draw.rounded_rectangle(box, radius=6, fill=color[:3] + (70,), outline=color, width=2)
        text_color = color
    else:
        draw.rounded_rectangle(box, radius=6, outline=MUTED_COLOR, width=1)
        text_color = MUTED_COLOR
    left, top, right, bottom = box
    text_box = draw.textbbox((0, 0), label, font=font)
    width = text_box[2] - text_box[0]
    height = text_box[3] - text_box[1]
    draw.text(
        ((left + right - width) / 2 - text_box[0], (top + bottom - height) / 2 - text_box[1]),
        label,
        font=font,
        fill=text_color,
    )


def render_status_icon(configuration: Configuration, size: int = ICON_SIZE) -> Image.Image:
    """Draw the target language code above the "A" and "P" badges."""

    image = Image.new("RGBA", (size, size), (0, 0, 0, 0))
    draw = ImageDraw.Draw(image)
    draw.rounded_rectangle((0, 0, size - 1, size - 1), radius=size // 5, fill=BACKGROUND)
    font = ImageFont.load_default()

    code = configuration.target_language.upper()
    text_box = draw.textbbox((0, 0), code, font=font)
    code_width = text_box[2] - text_box[0]
    draw.text(((size - code_width) / 2 - text_box[0], size * 0.12), code, font=font, fill=TEXT_COLOR)

    half = size // 2
    top = int(size * 0.55)
    bottom = size - 6
    _draw_badge(draw, (5, top, half - 3, bottom), "A", configuration.auto_copy_enabled, AUTO_COPY_COLOR, font)
    _draw_badge(draw, (half + 3, top, size - 6, bottom), "P", configuration.is_paused, PAUSED_COLOR, font)
    return image


def describe_state(configuration: Configuration) -> str:
    parts = [f"{APP_TITLE}: {configuration.target_language.upper()}"]
    if configuration.auto_copy_enabled:
        parts.append("auto-copy")
    if configuration.is_paused:
        parts.append("paused")
    return " · ".join(parts)


class SystemTrayController(PresentationListener):
    """Tray icon and menu; forwards result display to the window manager."""

    def __init__(self, app: "ClipboardTranslatorApp", windows: Optional["ResultWindowManager"] = None) -> None:
        self._app = app
        self._windows = windows
        self._icon: Optional["pystray.Icon"] = None

    @staticmethod
    def _is_supported() -> bool:
        return pystray is not None and MenuItem is not None

    def start(self) -> None:
        if not self._is_supported():
            logger.warning("System tray icon is unavailable because pystray could not be loaded.")
            return
        configuration = self._app.configuration
        self._icon = pystray.Icon(
            "cliptranslator",
            render_status_icon(configuration),
            describe_state(configuration),
            menu=self._build_menu(),
        )
        self._icon.run_detached()

    def stop(self) -> None:
        if self._icon is not None:
            self._icon.stop()
            self._icon = None

    # Menu ---------------------------------------------------------------

    def dispatch_command(self, command: str, argument=None) -> None:
        """Run a menu command on the application's dispatcher thread."""

        if command == "prompt_translate_text":
            self._app.dispatcher.call_soon(self._open_prompt)
            return
        handler = getattr(self._app, command)
        if argument is None:
            self._app.dispatcher.call_soon(handler)
        else:
            self._app.dispatcher.call_soon(handler, argument)

    def _open_prompt(self) -> None:
        if self._windows is None:
            return
        initial = self._app.read_clipboard()
        dispatcher = self._app.dispatcher
        self._windows.prompt_text(
            initial,
            self._app.configuration.target_language,
            lambda text: dispatcher.call_soon(self._app.translate_text, text),
        )

    def _build_menu(self):
        assert pystray is not None  # noqa: S101 - guarded by _is_supported
        entries = build_menu_model(self._app.configuration, self._app.history.entries())
        return pystray.Menu(*(self._to_menu_item(entry) for entry in entries))

    def _to_menu_item(self, entry: MenuEntry):
        if entry.separator:
            return pystray.Menu.SEPARATOR
        if entry.children:
            submenu = pystray.Menu(*(self._to_menu_item(child) for child in entry.children))
            return MenuItem(entry.label, submenu)
        checked = None
        if entry.checked is not None:
            state = entry.checked
            checked = lambda _item, state=state: state  # noqa: E731
        if entry.command is None:
            return MenuItem(entry.label, None, enabled=False)
        return MenuItem(
            entry.label,
            self._menu_action(entry.command, entry.argument),
            checked=checked,
            radio=entry.radio,
        )

    def _menu_action(self, command: str, argument) -> Callable[..., None]:
        def action(icon, item) -> None:
            self.dispatch_command(command, argument)

        return action

    def _refresh_icon(self) -> None:
        if self._icon is None:
            return
        configuration = self._app.configuration
        self._icon.icon = render_status_icon(configuration)
        self._icon.title = describe_state(configuration)
        self._icon.menu = self._build_menu()
        self._icon.update_menu()

    # PresentationListener -----------------------------------------------

    def target_language_changed(self, language: str) -> None:
        self._refresh_icon()

    def state_changed(self, auto_copy_enabled: bool, is_paused: bool) -> None:
        self._refresh_icon()

    def history_changed(self, entries: Sequence[TranslationResult]) -> None:
        self._refresh_icon()

    def translation_ready(
        self,
        original: str,
        translated: str,
        source_language: str,
        target_language: str,
        show_both: bool,
    ) -> None:
        if self._windows is None:
            super().translation_ready(original, translated, source_language, target_language, show_both)
            return
        self._windows.show_result(original, translated, source_language, target_language, show_both)

    def info_ready(self, message: str) -> None:
        if self._windows is None:
            super().info_ready(message)
            return
        self._windows.show_info(message)

    def close_all(self) -> None:
        if self._windows is not None:
            self._windows.close_all()
