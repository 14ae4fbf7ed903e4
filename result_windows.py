"""Transient Tk windows for translation results, messages and text input."""

from __future__ import annotations

import logging
import queue
import threading
from typing import Callable, List, Optional, Tuple

try:
    import tkinter as tk
    from tkinter import font as tkfont
    from tkinter import scrolledtext
except ImportError:  # pragma: no cover - tkinter missing from this Python build
    tk = None  # type: ignore
    tkfont = None  # type: ignore
    scrolledtext = None  # type: ignore

from presentation import APP_TITLE, info_display_seconds, result_display_seconds
from translation_state import language_name

logger = logging.getLogger("cliptranslator.windows")

WINDOW_WIDTH = 420
SCREEN_MARGIN = 24
STACK_OFFSET = 36
POLL_MS = 100
STARTUP_TIMEOUT = 5.0

Operation = Tuple[str, tuple]


class ResultWindowManager:
    """Own a Tk thread and the popups shown on it.

    Every public method is thread-safe; work is queued and applied by the Tk
    thread.
    """

    def __init__(self) -> None:
        self._queue: "queue.Queue[Operation]" = queue.Queue()
        self._ready = threading.Event()
        self._thread: Optional[threading.Thread] = None
        self._root: Optional["tk.Tk"] = None
        self._open: List["tk.Toplevel"] = []
        self._fonts: dict = {}
        self._unavailable = False

    def show_result(
        self,
        original: str,
        translated: str,
        source_language: str,
        target_language: str,
        show_both: bool,
    ) -> None:
        self._submit("result", (original, translated, source_language, target_language, show_both))

    def show_info(self, message: str) -> None:
        self._submit("info", (message,))

    def prompt_text(self, initial: str, target_language: str, on_submit: Callable[[str], None]) -> None:
        self._submit("prompt", (initial, target_language, on_submit))

    def close_all(self) -> None:
        self._submit("close_all", ())

    def stop(self) -> None:
        if self._thread is not None and self._thread.is_alive():
            self._queue.put(("quit", ()))
            self._thread.join(timeout=2)
        self._thread = None

    @property
    def open_count(self) -> int:
        return len(self._open)

    def _submit(self, operation: str, args: tuple) -> None:
        if tk is None or self._unavailable:
            logger.warning("Windows are unavailable; dropping %s window", operation)
            return
        if self._thread is None or not self._thread.is_alive():
            self._ready.clear()
            self._root = None
            self._thread = threading.Thread(target=self._run, name="ResultWindows", daemon=True)
            self._thread.start()
            if not self._ready.wait(timeout=STARTUP_TIMEOUT) or self._root is None:
                logger.warning("Window thread did not start; dropping %s window", operation)
                return
        self._queue.put((operation, args))

    # Tk thread ------------------------------------------------------------

    def _run(self) -> None:
        try:
            root = tk.Tk()
            root.withdraw()
            self._fonts = self._create_fonts()
            self._root = root
        except tk.TclError as exc:
            logger.error("Could not start Tk: %s", exc)
            self._unavailable = True
            return
        finally:
            self._ready.set()
        self._apply_updates()
        root.mainloop()
        self._root = None
        self._open.clear()

    def _create_fonts(self) -> dict:
        default_font = tkfont.nametofont("TkDefaultFont")
        preferred_families = ("SF Pro Text", "Segoe UI", "Roboto", "Noto Sans", "Arial")
        available_families = {name.lower(): name for name in tkfont.families()}
        family = default_font.actual("family")
        for candidate in preferred_families:
            if candidate.lower() in available_families:
                family = available_families[candidate.lower()]
                break
        return {
            "title": tkfont.Font(family=family, size=11, weight="bold"),
            "original": tkfont.Font(family=family, size=11),
            "body": tkfont.Font(family=family, size=14),
            "small_body": tkfont.Font(family=family, size=13),
        }

    def _apply_updates(self) -> None:
        assert self._root is not None
        try:
            while True:
                operation, args = self._queue.get_nowait()
                if operation == "quit":
                    self._close_all()
                    self._root.quit()
                    return
                handler = {
                    "result": self._open_result,
                    "info": self._open_info,
                    "prompt": self._open_prompt,
                    "close_all": self._close_all,
                }[operation]
                try:
                    handler(*args)
                except tk.TclError as exc:
                    logger.error("Failed to apply %s window update: %s", operation, exc)
        except queue.Empty:
            pass
        self._root.after(POLL_MS, self._apply_updates)

    def _new_window(self, title: str) -> "tk.Toplevel":
        window = tk.Toplevel(self._root)
        window.title(title)
        window.attributes("-topmost", True)
        window.resizable(False, False)
        window.protocol("WM_DELETE_WINDOW", lambda: self._close(window))
        window.bind("<Escape>", lambda _event: self._close(window))
        self._open.append(window)
        return window

    def _place(self, window: "tk.Toplevel") -> None:
        window.update_idletasks()
        width = window.winfo_reqwidth()
        screen_width = window.winfo_screenwidth()
        x = max(screen_width - width - SCREEN_MARGIN, 0)
        y = SCREEN_MARGIN + STACK_OFFSET * (len(self._open) - 1)
        window.geometry(f"+{x}+{y}")
        window.deiconify()
        window.lift()

    def _schedule_close(self, window: "tk.Toplevel", seconds: float) -> None:
        window.after(int(seconds * 1000), lambda: self._close(window))

    def _close(self, window: "tk.Toplevel") -> None:
        if window in self._open:
            self._open.remove(window)
        try:
            window.destroy()
        except tk.TclError:
            pass

    def _close_all(self) -> None:
        for window in list(self._open):
            self._close(window)

    def _open_result(
        self,
        original: str,
        translated: str,
        source_language: str,
        target_language: str,
        show_both: bool,
    ) -> None:
        title = f"{source_language.upper()} → {target_language.upper()}"
        window = self._new_window(title)
        frame = tk.Frame(window, padx=16, pady=12)
        frame.pack(fill=tk.BOTH, expand=True)

        header = tk.Label(
            frame,
            text=f"{language_name(source_language)} → {language_name(target_language)}",
            font=self._fonts["title"],
            anchor="w",
        )
        header.pack(fill=tk.X, pady=(0, 8))

        if show_both:
            original_label = tk.Label(
                frame,
                text=original,
                font=self._fonts["original"],
                fg="#6e6e73",
                wraplength=WINDOW_WIDTH - 32,
                justify=tk.LEFT,
                anchor="w",
            )
            original_label.pack(fill=tk.X, pady=(0, 8))

        body_font = self._fonts["body"] if len(translated) < 200 else self._fonts["small_body"]
        box = scrolledtext.ScrolledText(frame, wrap=tk.WORD, width=44, height=min(12, 2 + len(translated) // 40))
        box.insert(tk.END, translated)
        box.configure(state=tk.DISABLED, font=body_font, relief=tk.FLAT)
        box.pack(fill=tk.BOTH, expand=True)

        self._place(window)
        self._schedule_close(window, result_display_seconds(translated, show_both))

    def _open_info(self, message: str) -> None:
        window = self._new_window(APP_TITLE)
        label = tk.Label(
            window,
            text=message,
            font=self._fonts["original"],
            wraplength=WINDOW_WIDTH - 32,
            justify=tk.LEFT,
            padx=16,
            pady=12,
        )
        label.pack(fill=tk.BOTH, expand=True)
        self._place(window)
        self._schedule_close(window, info_display_seconds(message))

    def _open_prompt(self, initial: str, target_language: str, on_submit: Callable[[str], None]) -> None:
        window = self._new_window("Translate Text")
        window.resizable(True, True)

        prompt = tk.Label(window, text=f"Enter text to translate to {target_language.upper()}.", padx=12, pady=8)
        prompt.pack(anchor="w")

        box = scrolledtext.ScrolledText(window, wrap=tk.WORD, width=48, height=7)
        box.insert(tk.END, initial)
        box.pack(fill=tk.BOTH, expand=True, padx=12)

        def submit(_event=None) -> str:
            if window not in self._open:
                return "break"
            text = box.get("1.0", tk.END).strip()
            self._close(window)
            if text:
                on_submit(text)
            return "break"

        buttons = tk.Frame(window, pady=8)
        buttons.pack(fill=tk.X, padx=12)
        tk.Button(buttons, text="Cancel", command=lambda: self._close(window)).pack(side=tk.RIGHT)
        tk.Button(buttons, text="Translate", command=submit, default=tk.ACTIVE).pack(side=tk.RIGHT, padx=(0, 8))
        window.bind("<Control-Return>", submit)

        window.update_idletasks()
        x = (window.winfo_screenwidth() - window.winfo_reqwidth()) // 2
        y = (window.winfo_screenheight() - window.winfo_reqheight()) // 3
        window.geometry(f"+{x}+{y}")
        window.lift()
        window.focus_force()
        box.focus_set()
