"""Filesystem capability and directory listing for the workspace browser."""

from __future__ import annotations

import logging
import os
from pathlib import Path

from ..errors import DirectoryUnreadable
from .classify import classify
from .types import (
    ENTRY_DIRECTORY,
    ENTRY_FILE,
    ENTRY_OTHER,
    ENTRY_SYMLINK,
    FOLDER,
    IGNORED,
    SORT_FOLDERS_FIRST,
    SORT_WORKSPACES_FIRST,
    WORKSPACE,
    Node,
)

logger = logging.getLogger(__name__)


def _entry_type(entry: os.DirEntry) -> str:
    """Map a scandir entry to a capability entry type without following links."""
    try:
        if entry.is_symlink():
            return ENTRY_SYMLINK
        if entry.is_dir(follow_symlinks=False):
            return ENTRY_DIRECTORY
        if entry.is_file(follow_symlinks=False):
            return ENTRY_FILE
    except OSError:
        pass
    return ENTRY_OTHER


class LocalFileSystem:
    """File-system capability backed by the local disk.

    Every method raises ``OSError`` on failure; callers translate that into
    the browser's error taxonomy.
    """

    def read_directory(self, path: Path) -> list[tuple[str, str]]:
        with os.scandir(path) as entries:
            return [(entry.name, _entry_type(entry)) for entry in entries]

    def create_directory(self, path: Path) -> None:
        Path(path).mkdir(parents=True, exist_ok=True)

    def write_file(self, path: Path, data: bytes) -> None:
        """Create ``path`` with ``data``; an existing file raises ``FileExistsError``."""
        target = Path(path)
        target.parent.mkdir(parents=True, exist_ok=True)
        with target.open("xb") as handle:
            handle.write(data)


LOCAL_FS = LocalFileSystem()


def _by_name(node: Node) -> tuple[str, int]:
    # Folder before workspace when display names tie.
    return (node.name, 0 if node.kind == FOLDER else 1)


def list_directory_nodes(
    directory: Path,
    sort_policy: str,
    fs: LocalFileSystem | None = None,
) -> list[Node]:
    """List classified children of ``directory`` ordered by ``sort_policy``.

    Raises ``DirectoryUnreadable`` when the directory cannot be read; no
    partial listing is ever returned. Names compare case-sensitively, and
    workspace files compare by their stripped display name.
    """
    fs = fs or LOCAL_FS
    directory = Path(directory)
    try:
        raw_entries = fs.read_directory(directory)
    except OSError as exc:
        logger.debug("read_directory failed for %s: %s", directory, exc)
        raise DirectoryUnreadable(directory, exc) from exc

    folders: list[Node] = []
    workspaces: list[Node] = []
    for name, entry_type in raw_entries:
        classification = classify(name, entry_type)
        if classification.kind == IGNORED:
            continue
        if classification.kind == FOLDER:
            folders.append(Node(path=directory / name, name=name, kind=FOLDER))
        else:
            workspaces.append(
                Node(
                    path=directory / name,
                    name=classification.display_name or "",
                    kind=WORKSPACE,
                )
            )

    folders.sort(key=_by_name)
    workspaces.sort(key=_by_name)
    if sort_policy == SORT_FOLDERS_FIRST:
        return folders + workspaces
    if sort_policy == SORT_WORKSPACES_FIRST:
        return workspaces + folders
    return sorted(folders + workspaces, key=_by_name)


__all__ = [
    "LocalFileSystem",
    "LOCAL_FS",
    "list_directory_nodes",
]
