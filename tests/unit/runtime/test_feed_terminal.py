"""Terminal controller escape sequences and raw-mode lifecycle."""

from __future__ import annotations

import termios
import unittest
from unittest import mock

from lazyfeed.runtime.terminal import TerminalController


class TerminalControllerTests(unittest.TestCase):
    def _controller(self, saved_state=None) -> TerminalController:
        with mock.patch("lazyfeed.runtime.terminal.termios.tcgetattr", return_value=saved_state or [1, 2, 3]):
            return TerminalController(stdin_fd=0, stdout_fd=1)

    def test_alternate_screen_sequences(self) -> None:
        controller = self._controller()

        with mock.patch("lazyfeed.runtime.terminal.os.write") as write_mock:
            controller.enter_alternate_screen()
            self.assertTrue(controller.alternate_screen_active)
            controller.leave_alternate_screen()

        self.assertEqual(write_mock.call_args_list[0].args, (1, b"\x1b[?1049h"))
        self.assertEqual(write_mock.call_args_list[1].args, (1, b"\x1b[0m\x1b[?1049l"))
        self.assertFalse(controller.alternate_screen_active)

    def test_enable_raw_mode_uses_setraw(self) -> None:
        controller = self._controller()

        with mock.patch("lazyfeed.runtime.terminal.tty.setraw") as setraw_mock:
            controller.enable_raw_mode()

        setraw_mock.assert_called_once_with(0, termios.TCSADRAIN)

    def test_reset_restores_saved_tty_state(self) -> None:
        saved_state = [4, 5, 6]
        controller = self._controller(saved_state)

        with mock.patch("lazyfeed.runtime.terminal.os.write") as write_mock, mock.patch(
            "lazyfeed.runtime.terminal.termios.tcsetattr"
        ) as setattr_mock:
            controller.reset()

        write_mock.assert_called_once_with(1, b"\x1b[0m\x1b[?1049l\x1b[?25h")
        setattr_mock.assert_called_once_with(0, termios.TCSAFLUSH, saved_state)

    def test_session_resets_after_exception(self) -> None:
        controller = self._controller()

        with mock.patch.object(controller, "enable_raw_mode") as enable_mock, mock.patch.object(
            controller, "reset"
        ) as reset_mock:
            with self.assertRaises(RuntimeError):
                with controller.session():
                    raise RuntimeError("boom")

        enable_mock.assert_called_once_with()
        reset_mock.assert_called_once_with()

    def test_write_retries_partial_writes(self) -> None:
        controller = self._controller()
        chunks: list[bytes] = []

        def short_write(fd: int, data: bytes) -> int:
            chunks.append(data)
            return min(3, len(data))

        with mock.patch("lazyfeed.runtime.terminal.os.write", side_effect=short_write):
            controller.write("abcdefg")

        self.assertEqual(chunks, [b"abcdefg", b"defg", b"g"])

    def test_size_falls_back_to_default(self) -> None:
        controller = self._controller()

        with mock.patch(
            "lazyfeed.runtime.terminal.shutil.get_terminal_size",
            return_value=mock.Mock(columns=132, lines=43),
        ) as size_mock:
            self.assertEqual(controller.size(), (132, 43))

        size_mock.assert_called_once_with((80, 24))


if __name__ == "__main__":
    unittest.main()
