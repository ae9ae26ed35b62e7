"""Low-level terminal input decoding.

Reads raw bytes from stdin and translates them into normalized key tokens.
Handles ESC-sequence timing, arrow/paging sequences, and shift modifiers.
"""

from __future__ import annotations

import os
import select

ESC_SEQUENCE_TIMEOUT_MS = 25

_CONTROL_KEYS: dict[bytes, str] = {
    b"\x03": "CTRL_C",
    b"\x04": "CTRL_D",
    b"\x0c": "CTRL_L",
    b"\x15": "CTRL_U",
    b"\t": "TAB",
    b"\x08": "BACKSPACE",
    b"\x7f": "BACKSPACE",
    b"\r": "ENTER",
    b"\n": "ENTER",
}

_CSI_FINAL_KEYS: dict[bytes, str] = {
    b"A": "UP",
    b"B": "DOWN",
    b"C": "RIGHT",
    b"D": "LEFT",
    b"H": "HOME",
    b"F": "END",
}

_CSI_TILDE_KEYS: dict[bytes, str] = {
    b"1": "HOME",
    b"4": "END",
    b"5": "PAGE_UP",
    b"6": "PAGE_DOWN",
}


class KeyReader:
    """Decode key tokens from one file descriptor.

    Bytes read ahead while resolving a lone ESC are kept and returned by the
    next ``read_key`` call, so ``has_pending`` must be checked before waiting
    on the descriptor.
    """

    def __init__(self, fd: int) -> None:
        self.fd = fd
        self._pending: list[bytes] = []

    def fileno(self) -> int:
        return self.fd

    @property
    def has_pending(self) -> bool:
        return bool(self._pending)

    def _read_ready_byte(self, timeout_ms: int) -> bytes | None:
        ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return None
        ch = os.read(self.fd, 1)
        if not ch:
            return None
        return ch

    def _read_utf8_tail(self, first: bytes) -> str:
        lead = first[0]
        if lead >= 0xF0:
            extra = 3
        elif lead >= 0xE0:
            extra = 2
        elif lead >= 0xC0:
            extra = 1
        else:
            extra = 0
        data = first
        for _ in range(extra):
            nxt = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if nxt is None:
                break
            data += nxt
        return data.decode("utf-8", errors="replace")

    def read_key(self, timeout_ms: int | None = None) -> str:
        """Return the next key token, or ``""`` on timeout or end of input."""
        if self._pending:
            ch = self._pending.pop(0)
        else:
            if timeout_ms is not None:
                ready, _, _ = select.select([self.fd], [], [], max(0.0, timeout_ms / 1000.0))
                if not ready:
                    return ""
            ch = os.read(self.fd, 1)
            if not ch:
                return ""

        control = _CONTROL_KEYS.get(ch)
        if control is not None:
            return control
        if ch != b"\x1b":
            return self._read_utf8_tail(ch)

        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        if seq not in {b"[", b"O"}:
            self._pending.append(seq)
            return "ESC"
        seq = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
        if seq is None:
            return "ESC"
        final = _CSI_FINAL_KEYS.get(seq)
        if final is not None:
            return final
        if seq in _CSI_TILDE_KEYS:
            terminator = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
            if terminator == b"~":
                return _CSI_TILDE_KEYS[seq]
            if seq == b"1" and terminator == b";":
                modifier = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
                direction = self._read_ready_byte(ESC_SEQUENCE_TIMEOUT_MS)
                if modifier == b"2" and direction == b"C":
                    return "SHIFT_RIGHT"
                if modifier == b"2" and direction == b"D":
                    return "SHIFT_LEFT"
        return "ESC"


__all__ = ["ESC_SEQUENCE_TIMEOUT_MS", "KeyReader"]
