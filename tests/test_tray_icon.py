import unittest

from dispatch import Dispatcher
from translation_state import Configuration, HistoryStore
from tray_icon import SystemTrayController, describe_state, render_status_icon


class DummyApp:
    def __init__(self) -> None:
        self.dispatcher = Dispatcher()
        self.configuration = Configuration()
        self.history = HistoryStore()
        self.calls = []
        self.clipboard_text = "Hola"

    def toggle_pause(self) -> None:
        self.calls.append(("toggle_pause",))

    def select_target_language(self, code: str) -> None:
        self.calls.append(("select_target_language", code))

    def copy_original(self, index: int) -> None:
        self.calls.append(("copy_original", index))

    def translate_text(self, text: str) -> None:
        self.calls.append(("translate_text", text))

    def read_clipboard(self) -> str:
        return self.clipboard_text


class DummyWindows:
    def __init__(self) -> None:
        self.calls = []

    def show_result(self, *args) -> None:
        self.calls.append(("result",) + args)

    def show_info(self, message: str) -> None:
        self.calls.append(("info", message))

    def prompt_text(self, initial, target_language, on_submit) -> None:
        self.calls.append(("prompt", initial, target_language))
        on_submit("Hola mundo")

    def close_all(self) -> None:
        self.calls.append(("close_all",))


class RenderStatusIconTests(unittest.TestCase):
    def test_icon_size_and_mode(self) -> None:
        image = render_status_icon(Configuration(), size=64)
        self.assertEqual(image.size, (64, 64))
        self.assertEqual(image.mode, "RGBA")

    def test_badges_change_with_state(self) -> None:
        idle = render_status_icon(Configuration())
        active = render_status_icon(Configuration(auto_copy_enabled=True, is_paused=True))
        self.assertNotEqual(idle.tobytes(), active.tobytes())

    def test_describe_state(self) -> None:
        text = describe_state(Configuration(target_language="es", auto_copy_enabled=True))
        self.assertIn("ES", text)
        self.assertIn("auto-copy", text)
        self.assertNotIn("paused", text)


class SystemTrayControllerTests(unittest.TestCase):
    def setUp(self) -> None:
        self.app = DummyApp()
        self.windows = DummyWindows()
        self.controller = SystemTrayController(self.app, self.windows)

    def test_menu_commands_run_on_dispatcher(self) -> None:
        self.controller.dispatch_command("toggle_pause")
        self.controller.dispatch_command("select_target_language", "ko")
        self.controller.dispatch_command("copy_original", 0)
        self.assertEqual(self.app.calls, [])

        self.app.dispatcher.run_pending()

        self.assertEqual(
            self.app.calls,
            [("toggle_pause",), ("select_target_language", "ko"), ("copy_original", 0)],
        )

    def test_prompt_prefills_clipboard_and_submits_on_dispatcher(self) -> None:
        self.controller.dispatch_command("prompt_translate_text")
        self.app.dispatcher.run_pending()

        self.assertEqual(self.windows.calls, [("prompt", "Hola", "en")])
        self.assertEqual(self.app.calls, [("translate_text", "Hola mundo")])

    def test_results_and_messages_go_to_windows(self) -> None:
        self.controller.translation_ready("Hola", "Hello", "es", "en", True)
        self.controller.info_ready("Translating…")
        self.controller.close_all()

        self.assertEqual(
            self.windows.calls,
            [("result", "Hola", "Hello", "es", "en", True), ("info", "Translating…"), ("close_all",)],
        )

    def test_state_changes_without_icon_are_ignored(self) -> None:
        self.controller.state_changed(True, False)
        self.controller.history_changed(())
        self.controller.target_language_changed("fr")


if __name__ == "__main__":  # pragma: no cover - allows direct execution
    unittest.main()
