"""Tree-surface UI components."""

from .model import TreeRow, TreeSurface
from .rendering import render_tree_rows

__all__ = [
    "TreeRow",
    "TreeSurface",
    "render_tree_rows",
]
