"""Navigation state for one browse session.

Tracks the current directory below a fixed root boundary plus the set of
folders the tree surface keeps expanded. This module has no UI concerns.
"""

from __future__ import annotations

import logging
import os
from collections.abc import Callable, Iterable
from pathlib import Path

from ..errors import AtRoot, OutOfBounds

logger = logging.getLogger(__name__)


def normalize_path(path: Path | str) -> Path:
    """Return an absolute, lexically normalized path (symlinks untouched)."""
    return Path(os.path.normpath(os.path.abspath(os.fspath(path))))


def is_within(path: Path, root: Path) -> bool:
    """Return whether normalized ``path`` is ``root`` or a descendant of it."""
    return path == root or path.is_relative_to(root)


def _is_plain_child_name(name: str) -> bool:
    if not name or name in {".", ".."}:
        return False
    if os.sep in name:
        return False
    if os.altsep and os.altsep in name:
        return False
    return True


class NavigationState:
    """Current position and expanded folders, bounded by ``root``.

    Invariant: ``current_directory`` is always ``root`` or a descendant.
    Expanded-set changes are persisted through ``save_expanded`` right after
    each mutation.
    """

    def __init__(
        self,
        root: Path,
        expanded: Iterable[Path] = (),
        save_expanded: Callable[[set[Path]], None] | None = None,
    ) -> None:
        self.root = normalize_path(root)
        self._current = self.root
        self._save_expanded = save_expanded
        self.expanded: set[Path] = set()
        # Remembered folders of other roots are written back untouched.
        self._other_roots: set[Path] = set()
        for raw_path in expanded:
            candidate = normalize_path(raw_path)
            if is_within(candidate, self.root):
                self.expanded.add(candidate)
            else:
                self._other_roots.add(candidate)

    @property
    def current_directory(self) -> Path:
        return self._current

    @property
    def at_root(self) -> bool:
        return self._current == self.root

    def reset(self) -> Path:
        """Move back to the root."""
        self._current = self.root
        return self._current

    def descend(self, child_name: str) -> Path:
        """Move into the child ``child_name`` of the current directory.

        Names containing path separators, ``.`` or ``..`` are rejected with
        ``OutOfBounds``; position is left unchanged.
        """
        if not _is_plain_child_name(child_name):
            raise OutOfBounds(child_name, self.root)
        candidate = normalize_path(self._current / child_name)
        if not is_within(candidate, self.root):
            raise OutOfBounds(candidate, self.root)
        self._current = candidate
        return candidate

    def enter(self, path: Path) -> Path:
        """Move to an arbitrary ``path`` below root.

        A target outside the root clamps the position to the root and then
        raises ``OutOfBounds``.
        """
        candidate = normalize_path(path)
        if not is_within(candidate, self.root):
            logger.warning("Navigation to %s escapes root %s; clamping", candidate, self.root)
            self._current = self.root
            raise OutOfBounds(candidate, self.root)
        self._current = candidate
        return candidate

    def ascend(self) -> Path:
        """Move to the parent directory; raises ``AtRoot`` at the boundary."""
        if self.at_root:
            raise AtRoot(self.root)
        self._current = self._current.parent
        return self._current

    def is_expanded(self, path: Path) -> bool:
        return normalize_path(path) in self.expanded

    def set_expanded(self, path: Path, expanded: bool) -> bool:
        """Record expand/collapse for ``path``; return whether it changed."""
        target = normalize_path(path)
        if not is_within(target, self.root):
            return False
        if expanded == (target in self.expanded):
            return False
        if expanded:
            self.expanded.add(target)
        else:
            self.expanded.discard(target)
        if self._save_expanded is not None:
            self._save_expanded(self.expanded | self._other_roots)
        return True


__all__ = [
    "normalize_path",
    "is_within",
    "NavigationState",
]
