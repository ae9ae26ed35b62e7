"""Display-width measurement and ANSI helpers for pane rendering.

Feed text is plain (escape sequences are stripped on the way in), so these
helpers only deal with tabs, combining marks, and wide characters.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")
CONTROL_CHARS_RE = re.compile(r"[\x00-\x08\x0b-\x1f\x7f]")
TAB_STOP = 8

RESET = "\033[0m"
REVERSE = "\033[7m"
STATUS_SGR = "\033[30;47m"
SEPARATOR_SGR = "\033[2m"
DIM_SGR = "\033[2;38;5;250m"


def move_to(col: int, row: int) -> str:
    """Return the cursor-position sequence for zero-based ``col``/``row``."""
    return f"\033[{row + 1};{col + 1}H"


def sanitize(text: str) -> str:
    """Strip escape and control sequences that would corrupt the screen."""
    return CONTROL_CHARS_RE.sub("", ANSI_ESCAPE_RE.sub("", text))


def char_display_width(ch: str, col: int) -> int:
    """Return terminal column width for one character at visual column ``col``.

    Tabs expand to the next 8-column stop, combining marks consume no columns,
    and East Asian wide/fullwidth characters consume two.
    """
    if ch == "\t":
        return TAB_STOP - (col % TAB_STOP)
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def text_display_width(text: str) -> int:
    col = 0
    for ch in text:
        col += char_display_width(ch, col)
    return col


def fit_to_width(text: str, width: int) -> str:
    """Clip ``text`` to ``width`` columns and pad the rest with spaces.

    Tabs become spaces so the padded result occupies exactly ``width`` cells.
    """
    if width <= 0:
        return ""
    out: list[str] = []
    col = 0
    for ch in text:
        w = char_display_width(ch, col)
        if col + w > width:
            break
        out.append(" " * w if ch == "\t" else ch)
        col += w
    if col < width:
        out.append(" " * (width - col))
    return "".join(out)


__all__ = [
    "ANSI_ESCAPE_RE",
    "DIM_SGR",
    "RESET",
    "REVERSE",
    "SEPARATOR_SGR",
    "STATUS_SGR",
    "char_display_width",
    "fit_to_width",
    "move_to",
    "sanitize",
    "text_display_width",
]
