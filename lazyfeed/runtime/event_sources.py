"""Select-based merge of terminal input, resize signals, and internal events.

``next_event`` blocks in ``select`` until a source is ready and returns
exactly one event. When several sources are ready at once they are serviced
in rotating order, so neither side can starve the other.
"""

from __future__ import annotations

import contextlib
import os
import select
import signal
from collections.abc import Callable

from ..events import Event, InternalEventChannel, KeyEvent, ResizeEvent
from ..input.reader import KeyReader

_TERMINAL = "terminal"
_RESIZE = "resize"
_INTERNAL = "internal"


class EventSources:
    def __init__(
        self,
        reader: KeyReader,
        channel: InternalEventChannel,
        get_size: Callable[[], tuple[int, int]],
    ) -> None:
        self._reader = reader
        self._channel = channel
        self._get_size = get_size
        self._resize_read_fd, self._resize_write_fd = os.pipe()
        os.set_blocking(self._resize_read_fd, False)
        os.set_blocking(self._resize_write_fd, False)
        self._turn = 0

    def notify_resize(self, *_args: object) -> None:
        """Record a pending resize; safe to call from a signal handler."""
        try:
            os.write(self._resize_write_fd, b"\x00")
        except BlockingIOError:
            pass

    @contextlib.contextmanager
    def resize_notifications(self):
        """Route ``SIGWINCH`` into the resize pipe for the duration of the block."""
        previous = signal.signal(signal.SIGWINCH, self.notify_resize)
        try:
            yield self
        finally:
            signal.signal(signal.SIGWINCH, previous)

    def _drain_resize_pipe(self) -> None:
        while True:
            try:
                chunk = os.read(self._resize_read_fd, 4096)
            except BlockingIOError:
                return
            if not chunk:
                return

    def _ready_sources(self) -> list[str]:
        already_pending = self._channel.has_pending() or self._reader.has_pending
        timeout = 0.0 if already_pending else None
        readable, _, _ = select.select(
            [self._reader.fileno(), self._resize_read_fd, self._channel.fileno()],
            [],
            [],
            timeout,
        )
        if self._channel.fileno() in readable:
            self._channel.drain_wakeups()

        sources: list[str] = []
        if self._reader.has_pending or self._reader.fileno() in readable:
            sources.append(_TERMINAL)
        if self._resize_read_fd in readable:
            sources.append(_RESIZE)
        if self._channel.has_pending():
            sources.append(_INTERNAL)
        return sources

    def next_event(self) -> Event:
        """Block until one event is available and return it."""
        while True:
            sources = self._ready_sources()
            if not sources:
                continue
            source = sources[self._turn % len(sources)]
            self._turn += 1

            if source == _TERMINAL:
                key = self._reader.read_key()
                if key == "":
                    raise EOFError("terminal input closed")
                return KeyEvent(key)
            if source == _RESIZE:
                self._drain_resize_pipe()
                columns, rows = self._get_size()
                return ResizeEvent(columns=columns, rows=rows)
            event = self._channel.receive_nowait()
            if event is not None:
                return event

    def close(self) -> None:
        for fd in (self._resize_read_fd, self._resize_write_fd):
            try:
                os.close(fd)
            except OSError:
                pass


__all__ = ["EventSources"]
