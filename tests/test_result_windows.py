import threading
import unittest
from unittest import mock

import result_windows
from result_windows import ResultWindowManager


class FakeTclError(Exception):
    pass


def _fake_window(*_args, **_kwargs) -> mock.MagicMock:
    window = mock.MagicMock(name="Toplevel")
    window.winfo_reqwidth.return_value = 320
    window.winfo_reqheight.return_value = 180
    window.winfo_screenwidth.return_value = 1440
    window.winfo_screenheight.return_value = 900
    return window


class ResultWindowManagerTestMixin:
    def setUp(self) -> None:
        super().setUp()
        self.fake_tk = mock.MagicMock(name="tkinter")
        self.fake_tk.TclError = FakeTclError
        self.fake_tk.Toplevel.side_effect = _fake_window
        self.scrolledtext = mock.MagicMock(name="scrolledtext")
        patchers = [
            mock.patch.object(result_windows, "tk", self.fake_tk),
            mock.patch.object(result_windows, "scrolledtext", self.scrolledtext),
        ]
        for patcher in patchers:
            patcher.start()
            self.addCleanup(patcher.stop)

        self.manager = ResultWindowManager()

    def _attach_root(self) -> None:
        self.manager._root = mock.MagicMock(name="Tk")
        self.manager._fonts = {name: mock.sentinel.font for name in ("title", "original", "body", "small_body")}


class WindowTrackingTests(ResultWindowManagerTestMixin, unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self._attach_root()

    def test_close_all_closes_results_and_messages(self) -> None:
        self.manager._open_result("Bonjour", "Hello", "fr", "en", True)
        self.manager._open_info("Translating…")
        windows = list(self.manager._open)
        self.assertEqual(self.manager.open_count, 2)

        self.manager._close_all()

        self.assertEqual(self.manager.open_count, 0)
        for window in windows:
            window.destroy.assert_called_once_with()

    def test_windows_schedule_their_own_close(self) -> None:
        self.manager._open_info("Translating…")
        window = self.manager._open[0]

        delay, callback = window.after.call_args[0]
        self.assertEqual(delay, 8000)
        callback()

        self.assertEqual(self.manager.open_count, 0)
        window.destroy.assert_called_once_with()

    def test_close_tolerates_already_destroyed_window(self) -> None:
        window = self.manager._new_window("Clipboard Translator")
        window.destroy.side_effect = FakeTclError("bad window path name")

        self.manager._close(window)
        self.manager._close(window)

        self.assertEqual(self.manager.open_count, 0)

    def test_close_all_update_from_queue(self) -> None:
        self.manager._open_info("One")
        self.manager._open_info("Two")
        self.manager._queue.put(("close_all", ()))

        self.manager._apply_updates()

        self.assertEqual(self.manager.open_count, 0)
        self.manager._root.after.assert_called_once_with(result_windows.POLL_MS, self.manager._apply_updates)


class PromptWindowTests(ResultWindowManagerTestMixin, unittest.TestCase):
    def setUp(self) -> None:
        super().setUp()
        self._attach_root()
        self.submitted = []
        self.scrolledtext.ScrolledText.return_value.get.return_value = "  Xin chào\n"

    def _button_command(self, text: str):
        for call in self.fake_tk.Button.call_args_list:
            if call.kwargs.get("text") == text:
                return call.kwargs["command"]
        raise AssertionError(f"no {text!r} button")

    def test_prompt_is_closed_with_the_other_windows(self) -> None:
        self.manager._open_prompt("Xin chào", "en", self.submitted.append)
        self.manager._open_info("Translating…")
        self.assertEqual(self.manager.open_count, 2)

        self.manager._close_all()

        self.assertEqual(self.manager.open_count, 0)
        self._button_command("Translate")()
        self.assertEqual(self.submitted, [])

    def test_submit_closes_prompt_and_passes_text(self) -> None:
        self.manager._open_prompt("Xin chào", "en", self.submitted.append)
        prompt = self.manager._open[0]

        self._button_command("Translate")()

        self.assertEqual(self.submitted, ["Xin chào"])
        self.assertEqual(self.manager.open_count, 0)
        prompt.destroy.assert_called_once_with()

    def test_cancel_closes_prompt_without_submitting(self) -> None:
        self.manager._open_prompt("Xin chào", "en", self.submitted.append)

        self._button_command("Cancel")()

        self.assertEqual(self.submitted, [])
        self.assertEqual(self.manager.open_count, 0)


class TkStartupTests(ResultWindowManagerTestMixin, unittest.TestCase):
    def test_failed_tk_start_does_not_block_callers(self) -> None:
        self.fake_tk.Tk.side_effect = FakeTclError("no display name and no $DISPLAY environment variable")

        with self.assertLogs("cliptranslator.windows", level="WARNING") as logs:
            caller = threading.Thread(target=self.manager.show_info, args=("Translating…",), daemon=True)
            caller.start()
            caller.join(timeout=3)

        self.assertFalse(caller.is_alive())
        self.assertTrue(any("no display" in line for line in logs.output))
        self.assertTrue(self.manager._queue.empty())

    def test_windows_are_dropped_after_tk_failed(self) -> None:
        self.fake_tk.Tk.side_effect = FakeTclError("no display")

        with self.assertLogs("cliptranslator.windows", level="WARNING"):
            self.manager.show_info("Translating…")
            self.manager.close_all()

        self.assertEqual(self.fake_tk.Tk.call_count, 1)
        self.assertTrue(self.manager._queue.empty())


if __name__ == "__main__":  # pragma: no cover - allows direct execution
    unittest.main()
