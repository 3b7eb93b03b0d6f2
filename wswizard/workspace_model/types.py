"""Domain datatypes for listed workspace-browser entries."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path

FOLDER = "folder"
WORKSPACE = "workspace"
IGNORED = "ignored"

SORT_NAME = "name"
SORT_FOLDERS_FIRST = "folders_first"
SORT_WORKSPACES_FIRST = "workspaces_first"
SORT_POLICIES: tuple[str, ...] = (SORT_NAME, SORT_FOLDERS_FIRST, SORT_WORKSPACES_FIRST)

# Raw entry types reported by the file-system capability.
ENTRY_DIRECTORY = "directory"
ENTRY_FILE = "file"
ENTRY_SYMLINK = "symlink"
ENTRY_OTHER = "other"


@dataclass(frozen=True)
class Classification:
    """Outcome of classifying one directory entry."""

    kind: str
    display_name: str | None = None


@dataclass(frozen=True)
class Node:
    """One listed folder or workspace file below the root.

    ``name`` is the display name; for workspace files the marker suffix is
    stripped while ``path`` keeps the real file name.
    """

    path: Path
    name: str
    kind: str

    @property
    def is_folder(self) -> bool:
        return self.kind == FOLDER

    @property
    def is_workspace(self) -> bool:
        return self.kind == WORKSPACE


__all__ = [
    "FOLDER",
    "WORKSPACE",
    "IGNORED",
    "SORT_NAME",
    "SORT_FOLDERS_FIRST",
    "SORT_WORKSPACES_FIRST",
    "SORT_POLICIES",
    "ENTRY_DIRECTORY",
    "ENTRY_FILE",
    "ENTRY_SYMLINK",
    "ENTRY_OTHER",
    "Classification",
    "Node",
]
