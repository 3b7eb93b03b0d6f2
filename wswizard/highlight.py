"""Workspace-file loading, sanitization, and syntax highlighting.

Used by ``wswizard show`` and the detail row of the interactive surfaces.
Terminal control bytes are neutralized before anything reaches the screen.
"""

from __future__ import annotations

import re
from pathlib import Path

from pygments import highlight as pygments_highlight
from pygments.formatters import TerminalFormatter
from pygments.lexers import JsonLexer
from pygments.styles import get_style_by_name
from pygments.util import ClassNotFound

DEFAULT_STYLE = "monokai"

_CONTROL_RE = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\x7f-\x9f]")
_FORMATTERS: dict[str, TerminalFormatter] = {}
_VALID_STYLES: set[str] = set()
_INVALID_STYLES: set[str] = set()


def read_text(path: Path) -> str:
    for encoding in ("utf-8", "utf-8-sig", "latin-1"):
        try:
            return path.read_text(encoding=encoding)
        except UnicodeDecodeError:
            continue
    return path.read_bytes().decode("utf-8", errors="replace")


def sanitize_terminal_text(source: str) -> str:
    """Escape terminal control bytes to avoid side effects (bell, cursor moves, etc.)."""
    if _CONTROL_RE.search(source) is None:
        return source

    out: list[str] = []
    for ch in source:
        code = ord(ch)
        if ch in {"\n", "\r", "\t"}:
            out.append(ch)
            continue
        # C0 controls + DEL + C1 controls.
        if code < 32 or code == 127 or 0x80 <= code <= 0x9F:
            out.append(f"\\x{code:02x}")
            continue
        out.append(ch)
    return "".join(out)


def normalize_style(style: str) -> str:
    """Return ``style`` if pygments knows it, else the default style."""
    if style in _VALID_STYLES:
        return style
    if style in _INVALID_STYLES:
        return DEFAULT_STYLE
    try:
        get_style_by_name(style)
    except ClassNotFound:
        _INVALID_STYLES.add(style)
        return DEFAULT_STYLE
    _VALID_STYLES.add(style)
    return style


def _formatter_for_style(style: str) -> TerminalFormatter:
    formatter = _FORMATTERS.get(style)
    if formatter is None:
        formatter = TerminalFormatter(style=style)
        _FORMATTERS[style] = formatter
    return formatter


def colorize_workspace(source: str, style: str = DEFAULT_STYLE, no_color: bool = False) -> str:
    """Sanitize workspace JSON and, unless ``no_color``, highlight it for a terminal."""
    safe = sanitize_terminal_text(source)
    if no_color:
        return safe
    rendered = pygments_highlight(safe, JsonLexer(), _formatter_for_style(normalize_style(style)))
    # pygments always appends a newline; keep the caller's trailing layout.
    if not safe.endswith("\n") and rendered.endswith("\n"):
        rendered = rendered[:-1]
    return rendered


__all__ = [
    "DEFAULT_STYLE",
    "read_text",
    "sanitize_terminal_text",
    "normalize_style",
    "colorize_workspace",
]
