"""Event records and the internal event channel.

Terminal events come from the key reader and the resize signal; internal
events come from background work. The channel pairs a FIFO queue with a
self-pipe so the event loop can ``select`` on it next to the terminal fd.
"""

from __future__ import annotations

import os
from dataclasses import dataclass
from queue import Empty, Queue
from typing import Union


@dataclass(frozen=True)
class KeyEvent:
    """One decoded key token from the terminal reader."""

    key: str


@dataclass(frozen=True)
class ResizeEvent:
    columns: int
    rows: int


@dataclass(frozen=True)
class FeedUpdated:
    """A page was merged into the feed store."""


@dataclass(frozen=True)
class LogError:
    """A recoverable failure that should be shown as one log line."""

    message: str


TerminalEvent = Union[KeyEvent, ResizeEvent]
InternalEvent = Union[FeedUpdated, LogError]
Event = Union[KeyEvent, ResizeEvent, FeedUpdated, LogError]


class InternalEventChannel:
    """Unbounded multi-producer FIFO with a selectable wake-up descriptor.

    Every ``send`` queues the event before writing a wake-up byte, so a reader
    that drains the pipe and then checks the queue cannot miss an event.
    """

    def __init__(self) -> None:
        self._queue: Queue[InternalEvent] = Queue()
        self._wake_read_fd, self._wake_write_fd = os.pipe()
        os.set_blocking(self._wake_read_fd, False)
        os.set_blocking(self._wake_write_fd, False)

    def fileno(self) -> int:
        return self._wake_read_fd

    def send(self, event: InternalEvent) -> None:
        self._queue.put(event)
        try:
            os.write(self._wake_write_fd, b"\x00")
        except BlockingIOError:
            # Pipe already full of pending wake-ups; the reader will wake anyway.
            pass

    def has_pending(self) -> bool:
        return not self._queue.empty()

    def drain_wakeups(self) -> None:
        while True:
            try:
                chunk = os.read(self._wake_read_fd, 4096)
            except BlockingIOError:
                return
            if not chunk:
                return

    def receive_nowait(self) -> InternalEvent | None:
        """Return the oldest queued event, or ``None`` when the queue is empty."""
        try:
            return self._queue.get_nowait()
        except Empty:
            return None

    def close(self) -> None:
        for fd in (self._wake_read_fd, self._wake_write_fd):
            try:
                os.close(fd)
            except OSError:
                pass


__all__ = [
    "Event",
    "FeedUpdated",
    "InternalEvent",
    "InternalEventChannel",
    "KeyEvent",
    "LogError",
    "ResizeEvent",
    "TerminalEvent",
]
