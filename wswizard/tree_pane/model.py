"""Tree-surface model: expandable rows built lazily from engine listings."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

from ..errors import WorkspaceWizardError
from ..runtime.config import EXPAND_ALL, EXPAND_REMEMBER, SURFACE_TREE
from ..runtime.engine import BrowserEngine
from ..runtime.navigation import normalize_path
from ..workspace_model import Node


@dataclass(frozen=True)
class TreeRow:
    """One rendered row in the tree surface."""

    node: Node
    depth: int
    expanded: bool = False


class TreeSurface:
    """Expand/collapse browsing over the whole root hierarchy.

    Only expanded folders are listed. The initial expansion follows the
    configured expand policy; every expand/collapse is forwarded to the
    engine so it can be remembered across sessions.
    """

    def __init__(self, engine: BrowserEngine) -> None:
        self.engine = engine
        self.rows: list[TreeRow] = []
        self.selected_idx = 0
        self.errors: list[WorkspaceWizardError] = []
        self.expanded: set[Path] = set()
        self._seen: set[Path] = set()
        self._root: Path | None = None
        self.reset_expansion()

    def reset_expansion(self) -> None:
        """Seed the expanded set from the expand policy for the current root."""
        self._root = self.engine.root
        self._seen = set()
        navigation = self.engine.navigation
        if navigation is not None and self.engine.settings.expand_policy == EXPAND_REMEMBER:
            self.expanded = set(navigation.expanded)
        else:
            self.expanded = set()

    def _is_expanded(self, path: Path) -> bool:
        if path not in self._seen:
            self._seen.add(path)
            if self.engine.settings.expand_policy == EXPAND_ALL:
                self.expanded.add(path)
        return path in self.expanded

    def reload(self) -> None:
        """Rebuild visible rows, keeping the selection on the same path."""
        if self.engine.root != self._root:
            self.reset_expansion()
        previous = self.selected_node()
        self.errors = []
        rows: list[TreeRow] = []

        def add_children(directory: Path | None, depth: int) -> None:
            listing = self.engine.list_children(directory)
            if listing.error is not None:
                self.errors.append(listing.error)
            for node in listing.nodes:
                if not node.is_folder:
                    rows.append(TreeRow(node=node, depth=depth))
                    continue
                path = normalize_path(node.path)
                expanded = self._is_expanded(path)
                rows.append(TreeRow(node=node, depth=depth, expanded=expanded))
                if expanded:
                    add_children(path, depth + 1)

        add_children(self._root, 0)
        self.rows = rows
        self.selected_idx = 0
        if previous is not None:
            for idx, row in enumerate(rows):
                if row.node.path == previous.path:
                    self.selected_idx = idx
                    break
        self.selected_idx = max(0, min(self.selected_idx, len(rows) - 1))

    def selected_row(self) -> TreeRow | None:
        if 0 <= self.selected_idx < len(self.rows):
            return self.rows[self.selected_idx]
        return None

    def selected_node(self) -> Node | None:
        row = self.selected_row()
        return row.node if row is not None else None

    def move(self, delta: int) -> bool:
        if not self.rows:
            return False
        target = max(0, min(len(self.rows) - 1, self.selected_idx + delta))
        if target == self.selected_idx:
            return False
        self.selected_idx = target
        return True

    def set_expanded(self, expanded: bool) -> bool:
        """Expand or collapse the selected folder row."""
        row = self.selected_row()
        if row is None or not row.node.is_folder or row.expanded == expanded:
            return False
        path = normalize_path(row.node.path)
        self._seen.add(path)
        if expanded:
            self.expanded.add(path)
        else:
            self.expanded.discard(path)
        self.engine.set_expanded(path, expanded)
        self.reload()
        return True

    def collapse_or_select_parent(self) -> bool:
        row = self.selected_row()
        if row is None:
            return False
        if row.node.is_folder and row.expanded:
            return self.set_expanded(False)
        for idx in range(self.selected_idx - 1, -1, -1):
            if self.rows[idx].depth < row.depth:
                self.selected_idx = idx
                return True
        return False

    def activate(self, alternate: bool = False) -> str | None:
        """Toggle the selected folder or open the selected workspace.

        Returns a launch error message, if any.
        """
        row = self.selected_row()
        if row is None:
            return None
        if row.node.is_folder:
            self.set_expanded(not row.expanded)
            return None
        return self.engine.resolve_selection(row.node, SURFACE_TREE, alternate=alternate)

    def target_directory(self) -> Path | None:
        """Directory new folders/workspaces go into for the current selection."""
        node = self.selected_node()
        if node is None:
            return self.engine.root
        if node.is_folder:
            return node.path
        return node.path.parent


__all__ = [
    "TreeRow",
    "TreeSurface",
]
