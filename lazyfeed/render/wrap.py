"""Word wrapping for the detail pane.

Each source line is wrapped on its own, so blank lines survive as paragraph
breaks. Within a paragraph, break points minimise raggedness: the sum of
squared trailing gaps over every line except the last, plus a fixed cost per
line. Words are never split; a word wider than the target gets its own line.
"""

from __future__ import annotations

from .ansi import text_display_width

LINE_PENALTY = 1000
OVERFLOW_PENALTY = 50 * 50
SHORT_LAST_LINE_FRACTION = 4
SHORT_LAST_LINE_PENALTY = 25


def _paragraph_breaks(widths: list[int], width: int) -> list[int]:
    """Return word indices at which each line ends (exclusive)."""
    count = len(widths)
    minima = [0] + [0] * count
    best_start = [0] * (count + 1)
    for end in range(1, count + 1):
        best_cost: int | None = None
        line_width = -1
        for start in range(end - 1, -1, -1):
            line_width += widths[start] + 1
            if line_width > width and start + 1 < end:
                # Only a lone word may overflow; wider candidates only grow.
                break
            cost = minima[start] + LINE_PENALTY
            if line_width > width:
                cost += (line_width - width) * OVERFLOW_PENALTY
            elif end < count:
                gap = width - line_width
                cost += gap * gap
            elif start + 1 == end and line_width < width // SHORT_LAST_LINE_FRACTION:
                cost += SHORT_LAST_LINE_PENALTY
            if best_cost is None or cost < best_cost:
                best_cost = cost
                best_start[end] = start
        minima[end] = best_cost if best_cost is not None else 0

    breaks: list[int] = []
    end = count
    while end > 0:
        breaks.append(end)
        end = best_start[end]
    breaks.reverse()
    return breaks


def wrap_paragraph(line: str, width: int) -> list[str]:
    words = line.split()
    if not words:
        return [""]
    widths = [text_display_width(word) for word in words]
    out: list[str] = []
    start = 0
    for end in _paragraph_breaks(widths, max(1, width)):
        out.append(" ".join(words[start:end]))
        start = end
    return out


def wrap_text(text: str, width: int) -> list[str]:
    """Wrap ``text`` to ``width`` columns, keeping one output line per blank line."""
    out: list[str] = []
    for line in text.splitlines() or [""]:
        out.extend(wrap_paragraph(line, width))
    return out


__all__ = ["wrap_paragraph", "wrap_text"]
