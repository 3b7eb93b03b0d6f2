"""Domain model for the workspace browser.

This package contains non-UI primitives:
- folder/workspace node datatypes and sort-policy names
- entry classification and marker-suffix helpers
- the local filesystem capability and sorted directory listing
- workspace document construction
"""

from __future__ import annotations

from .classify import WORKSPACE_SUFFIX, classify, is_workspace_file_name, strip_marker, with_marker
from .document import (
    build_workspace_document,
    read_workspace_folders,
    serialize_workspace_document,
    workspace_file_path,
)
from .fs import LOCAL_FS, LocalFileSystem, list_directory_nodes
from .types import (
    ENTRY_DIRECTORY,
    ENTRY_FILE,
    ENTRY_OTHER,
    ENTRY_SYMLINK,
    FOLDER,
    IGNORED,
    SORT_FOLDERS_FIRST,
    SORT_NAME,
    SORT_POLICIES,
    SORT_WORKSPACES_FIRST,
    WORKSPACE,
    Classification,
    Node,
)

__all__ = [
    "WORKSPACE_SUFFIX",
    "classify",
    "is_workspace_file_name",
    "strip_marker",
    "with_marker",
    "build_workspace_document",
    "read_workspace_folders",
    "serialize_workspace_document",
    "workspace_file_path",
    "LOCAL_FS",
    "LocalFileSystem",
    "list_directory_nodes",
    "ENTRY_DIRECTORY",
    "ENTRY_FILE",
    "ENTRY_OTHER",
    "ENTRY_SYMLINK",
    "FOLDER",
    "IGNORED",
    "SORT_FOLDERS_FIRST",
    "SORT_NAME",
    "SORT_POLICIES",
    "SORT_WORKSPACES_FIRST",
    "WORKSPACE",
    "Classification",
    "Node",
]
