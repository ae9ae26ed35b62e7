"""Terminal control helpers for the feed session.

Owns raw-mode lifecycle, alternate-screen switching, size queries, and
unbuffered writes to the output descriptor.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

ENTER_ALTERNATE_SCREEN = b"\x1b[?1049h"
LEAVE_ALTERNATE_SCREEN = b"\x1b[?1049l"
SHOW_CURSOR = b"\x1b[?25h"
RESET_ATTRIBUTES = b"\x1b[0m"


class TerminalController:
    """Manage terminal mode transitions for one stdin/stdout pair."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)
        self._alternate_screen_active = False

    def enable_raw_mode(self) -> None:
        """Deliver keystrokes one at a time without echo or line buffering."""
        tty.setraw(self.stdin_fd, termios.TCSADRAIN)

    def restore_tty(self) -> None:
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def enter_alternate_screen(self) -> None:
        os.write(self.stdout_fd, ENTER_ALTERNATE_SCREEN)
        self._alternate_screen_active = True

    def leave_alternate_screen(self) -> None:
        os.write(self.stdout_fd, RESET_ATTRIBUTES + LEAVE_ALTERNATE_SCREEN)
        self._alternate_screen_active = False

    @property
    def alternate_screen_active(self) -> bool:
        return self._alternate_screen_active

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)``, falling back to 80x24."""
        term = shutil.get_terminal_size((80, 24))
        return term.columns, term.lines

    def write(self, text: str) -> None:
        """Write ``text`` fully, as one batch, to the output descriptor."""
        data = text.encode("utf-8", errors="replace")
        while data:
            written = os.write(self.stdout_fd, data)
            data = data[written:]

    def reset(self) -> None:
        """Leave the alternate screen, show the cursor, and restore the tty."""
        os.write(self.stdout_fd, RESET_ATTRIBUTES + LEAVE_ALTERNATE_SCREEN + SHOW_CURSOR)
        self._alternate_screen_active = False
        self.restore_tty()

    @contextlib.contextmanager
    def session(self):
        """Context manager that enables raw input and always resets on exit."""
        try:
            self.enable_raw_mode()
            yield self
        finally:
            self.reset()


__all__ = ["TerminalController"]
