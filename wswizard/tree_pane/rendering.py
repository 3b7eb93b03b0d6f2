"""Tree-surface rendering helpers."""

from __future__ import annotations

from ..ansi import fit_ansi_line
from ..ui_theme import DEFAULT_THEME, UITheme
from .model import TreeRow

EXPANDED_MARKER = "▾ "
COLLAPSED_MARKER = "▸ "
LEAF_MARKER = "  "
INDENT = "  "


def selected_with_ansi(text: str) -> str:
    """Apply selection styling without discarding existing ANSI colors."""
    if not text:
        return text
    # Keep reverse video active even when the text contains internal resets.
    return "\033[7m" + text.replace("\033[0m", "\033[0;7m") + "\033[0m"


def format_tree_row(row: TreeRow, theme: UITheme = DEFAULT_THEME) -> str:
    """Format one tree row (indent, marker, styled display name)."""
    indent = INDENT * row.depth
    if row.node.is_folder:
        marker = EXPANDED_MARKER if row.expanded else COLLAPSED_MARKER
        name = f"{theme.folder}{row.node.name}/{theme.reset}" if theme.folder else f"{row.node.name}/"
    else:
        marker = LEAF_MARKER
        name = f"{theme.workspace}{row.node.name}{theme.reset}" if theme.workspace else row.node.name
    styled_marker = f"{theme.marker}{marker}{theme.reset}" if theme.marker else marker
    return f"{indent}{styled_marker}{name}"


def visible_tree_start(selected_idx: int, start: int, visible_rows: int, total_rows: int) -> int:
    """Return a scroll offset that keeps ``selected_idx`` on screen."""
    visible_rows = max(1, visible_rows)
    if selected_idx < start:
        start = selected_idx
    elif selected_idx >= start + visible_rows:
        start = selected_idx - visible_rows + 1
    return max(0, min(start, max(0, total_rows - visible_rows)))


def render_tree_rows(
    rows: list[TreeRow],
    selected_idx: int,
    start: int,
    width: int,
    height: int,
    theme: UITheme = DEFAULT_THEME,
) -> list[str]:
    """Render exactly ``height`` rows of ``width`` columns starting at ``start``."""
    out: list[str] = []
    for offset in range(max(0, height)):
        idx = start + offset
        if idx >= len(rows):
            out.append(" " * max(0, width))
            continue
        line = fit_ansi_line(format_tree_row(rows[idx], theme), width)
        out.append(selected_with_ansi(line) if idx == selected_idx else line)
    return out


__all__ = [
    "EXPANDED_MARKER",
    "COLLAPSED_MARKER",
    "selected_with_ansi",
    "format_tree_row",
    "visible_tree_start",
    "render_tree_rows",
]
