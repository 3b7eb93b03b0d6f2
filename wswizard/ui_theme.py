"""UI theme definitions.

Themes are ANSI palettes for the tree and picker surfaces. Syntax
highlighting of workspace previews uses a separate pygments style.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reverse: str
    reset: str
    title: str
    marker: str
    folder: str
    workspace: str
    description: str
    query: str
    hint: str
    status: str
    error: str


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    reset="\033[0m",
    title="\033[1;38;5;81m",
    marker="\033[38;5;44m",
    folder="\033[1;34m",
    workspace="\033[38;5;252m",
    description="\033[2;38;5;250m",
    query="\033[1;38;5;81m",
    hint="\033[2;38;5;250m",
    status="\033[38;5;229m",
    error="\033[38;5;203m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="\033[7m",
    reset="\033[0m",
    title="",
    marker="",
    folder="",
    workspace="",
    description="",
    query="",
    hint="",
    status="",
    error="",
)


def theme_for(no_color: bool) -> UITheme:
    return PLAIN_THEME if no_color else DEFAULT_THEME


__all__ = ["UITheme", "DEFAULT_THEME", "PLAIN_THEME", "theme_for"]
