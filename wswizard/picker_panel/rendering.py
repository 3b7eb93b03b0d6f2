"""Picker-surface rendering."""

from __future__ import annotations

from pathlib import Path

from ..ansi import display_width, fit_ansi_line
from ..tree_pane.rendering import selected_with_ansi, visible_tree_start
from ..ui_theme import DEFAULT_THEME, UITheme
from .controller import PickerItem, PickerSession

BUSY_FRAMES = "|/-\\"
BACK_HINT = "<- Back"


def picker_title(session: PickerSession) -> str:
    navigation = session.engine.navigation
    if navigation is None:
        return "Workspaces"
    position = navigation.current_directory
    if position == navigation.root:
        return f"Workspaces: {navigation.root.name or navigation.root}"
    try:
        relative = position.relative_to(navigation.root)
    except ValueError:
        relative = Path(position.name)
    return f"Workspaces: {navigation.root.name}/{relative.as_posix()}"


def format_picker_item(item: PickerItem, width: int, theme: UITheme = DEFAULT_THEME) -> str:
    """Label on the left, kind description right-aligned."""
    if item.node is not None and item.node.is_folder:
        label = f"{theme.folder}{item.label}/{theme.reset}" if theme.folder else f"{item.label}/"
    elif item.node is not None:
        label = f"{theme.workspace}{item.label}{theme.reset}" if theme.workspace else item.label
    else:
        label = item.label
    description = f"{theme.description}{item.description}{theme.reset}" if theme.description else item.description
    gap = width - display_width(label) - display_width(description) - 2
    if gap < 1:
        return fit_ansi_line(f" {label}", width)
    return f" {label}{' ' * gap}{description} "


def render_picker(
    session: PickerSession,
    width: int,
    height: int,
    theme: UITheme = DEFAULT_THEME,
    busy_frame: int = 0,
) -> list[str]:
    """Render the picker as exactly ``height`` rows.

    Row 0 is the title (with a back hint below the root), row 1 the query
    line, and the rest list the filtered items.
    """
    if height <= 0:
        return []
    width = max(1, width)
    title = picker_title(session)
    navigation = session.engine.navigation
    if navigation is not None and not navigation.at_root:
        title = f"{BACK_HINT}  {title}"
    title_line = f"{theme.title}{title}{theme.reset}" if theme.title else title
    lines = [fit_ansi_line(title_line, width)]
    if height == 1:
        return lines

    busy = f" {BUSY_FRAMES[busy_frame % len(BUSY_FRAMES)]}" if session.busy else ""
    query = f"{theme.query}> {theme.reset}{session.query}" if theme.query else f"> {session.query}"
    lines.append(fit_ansi_line(query + busy, width))

    list_height = height - 2
    visible = session.visible_items()
    if session.error is not None and not visible:
        message = str(session.error)
        line = f"{theme.error}{message}{theme.reset}" if theme.error else message
        lines.append(fit_ansi_line(line, width))
        list_height -= 1
    elif not visible and not session.loading:
        empty = "No matching entries" if session.query else "Empty folder"
        line = f"{theme.hint}{empty}{theme.reset}" if theme.hint else empty
        lines.append(fit_ansi_line(line, width))
        list_height -= 1

    session.list_start = visible_tree_start(session.selected, session.list_start, list_height, len(visible))
    for offset in range(max(0, list_height)):
        idx = session.list_start + offset
        if idx >= len(visible):
            lines.append(" " * width)
            continue
        line = fit_ansi_line(format_picker_item(visible[idx], width, theme), width)
        lines.append(selected_with_ansi(line) if idx == session.selected else line)
    return lines[:height]


__all__ = ["picker_title", "format_picker_item", "render_picker"]
