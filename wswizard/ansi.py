"""ANSI-aware text measurement for row rendering.

Escape sequences never count toward width; East Asian wide characters take
two columns and combining marks none.
"""

from __future__ import annotations

import re
import unicodedata

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def char_display_width(ch: str) -> int:
    if unicodedata.combining(ch):
        return 0
    if unicodedata.east_asian_width(ch) in {"W", "F"}:
        return 2
    return 1


def display_width(text: str) -> int:
    """Return terminal column width of ``text`` ignoring escape sequences."""
    return sum(char_display_width(ch) for ch in ANSI_ESCAPE_RE.sub("", text))


def clip_ansi_line(text: str, max_cols: int) -> str:
    """Trim a styled line to at most ``max_cols`` display columns.

    Escape sequences are preserved verbatim.
    """
    if max_cols <= 0 or not text:
        return ""

    out: list[str] = []
    col = 0
    i = 0
    n = len(text)
    while i < n:
        if text[i] == "\x1b":
            match = ANSI_ESCAPE_RE.match(text, i)
            if match:
                out.append(match.group(0))
                i = match.end()
                continue
        width = char_display_width(text[i])
        if col + width > max_cols:
            break
        out.append(text[i])
        col += width
        i += 1
    return "".join(out)


def fit_ansi_line(text: str, max_cols: int) -> str:
    """Clip ``text`` to ``max_cols`` and pad it with spaces to exactly that width."""
    clipped = clip_ansi_line(text, max_cols)
    return clipped + " " * max(0, max_cols - display_width(clipped))


__all__ = [
    "ANSI_ESCAPE_RE",
    "char_display_width",
    "display_width",
    "clip_ansi_line",
    "fit_ansi_line",
]
