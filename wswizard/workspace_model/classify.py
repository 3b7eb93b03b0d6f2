"""Entry classification into folders, workspace files, and ignored entries."""

from __future__ import annotations

from .types import (
    ENTRY_DIRECTORY,
    ENTRY_FILE,
    FOLDER,
    IGNORED,
    WORKSPACE,
    Classification,
)

WORKSPACE_SUFFIX = ".code-workspace"

_FOLDER = Classification(kind=FOLDER)
_IGNORED = Classification(kind=IGNORED)


def is_workspace_file_name(name: str) -> bool:
    return name.endswith(WORKSPACE_SUFFIX)


def strip_marker(name: str) -> str:
    """Return ``name`` without the workspace marker suffix."""
    if not is_workspace_file_name(name):
        return name
    return name[: -len(WORKSPACE_SUFFIX)]


def with_marker(display_name: str) -> str:
    """Return the workspace file name for ``display_name``."""
    return f"{display_name}{WORKSPACE_SUFFIX}"


def classify(name: str, entry_type: str) -> Classification:
    """Classify one directory entry from already-known metadata.

    Directories are folders regardless of name. Regular files carrying the
    marker suffix are workspace files. Everything else, including symlinks and
    special entries, is ignored.
    """
    if entry_type == ENTRY_DIRECTORY:
        return _FOLDER
    if entry_type == ENTRY_FILE and is_workspace_file_name(name):
        return Classification(kind=WORKSPACE, display_name=strip_marker(name))
    return _IGNORED


__all__ = [
    "WORKSPACE_SUFFIX",
    "is_workspace_file_name",
    "strip_marker",
    "with_marker",
    "classify",
]
