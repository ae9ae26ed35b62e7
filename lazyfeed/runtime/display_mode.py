"""Plain-log vs. full-screen display mode switching.

Log lines are printed on the primary screen; renders happen on the alternate
screen. Raw input stays enabled in both modes: turning it off when leaving
the alternate screen would also stop single-key delivery to the event loop.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import Protocol

logger = logging.getLogger(__name__)


class DisplayMode(Enum):
    LOG = "log"
    INTERACTIVE = "interactive"


class DisplaySurface(Protocol):
    def enter_alternate_screen(self) -> None: ...

    def leave_alternate_screen(self) -> None: ...

    def enable_raw_mode(self) -> None: ...

    def write(self, text: str) -> None: ...


class DisplayModeController:
    """Two-state machine driving terminal surface setup and teardown."""

    def __init__(self, surface: DisplaySurface) -> None:
        self._surface = surface
        self.mode = DisplayMode.LOG

    def set_mode(self, mode: DisplayMode) -> bool:
        """Switch to ``mode``; return ``True`` when a transition happened."""
        previous = self.mode
        if mode == previous:
            return False
        if mode == DisplayMode.INTERACTIVE:
            self._surface.enter_alternate_screen()
            self._surface.enable_raw_mode()
        else:
            self._surface.leave_alternate_screen()
            # Raw mode is kept on purpose; see module docstring.
            self._surface.enable_raw_mode()
        self.mode = mode
        logger.debug("display mode %s -> %s", previous.value, mode.value)
        return True

    @property
    def interactive(self) -> bool:
        return self.mode == DisplayMode.INTERACTIVE

    def log_message(self, message: str) -> None:
        """Print one line on the primary screen, leaving interactive mode first."""
        self.set_mode(DisplayMode.LOG)
        # Raw mode does not translate newlines into carriage returns.
        self._surface.write(message.replace("\n", "\r\n") + "\r\n")


__all__ = ["DisplayMode", "DisplayModeController", "DisplaySurface"]
