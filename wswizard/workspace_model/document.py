"""Minimal ``.code-workspace`` document construction and reading."""

from __future__ import annotations

import json
from collections.abc import Iterable
from pathlib import Path

from .classify import is_workspace_file_name, with_marker


def workspace_file_path(parent: Path, name: str) -> Path:
    """Return the workspace file path for ``name`` inside ``parent``.

    ``name`` may already carry the marker suffix; it is not appended twice.
    """
    file_name = name if is_workspace_file_name(name) else with_marker(name)
    return Path(parent) / file_name


def build_workspace_document(open_folders: Iterable[Path | str]) -> dict[str, object]:
    """Build the skeleton document listing the host session's open folders."""
    return {"folders": [{"path": str(folder)} for folder in open_folders]}


def serialize_workspace_document(document: dict[str, object]) -> bytes:
    """Serialize a workspace document as tab-indented JSON ending in a newline."""
    return (json.dumps(document, indent="\t") + "\n").encode("utf-8")


def read_workspace_folders(path: Path) -> list[str]:
    """Return folder paths listed by a workspace file.

    Raises ``OSError`` when the file cannot be read and ``ValueError`` when it
    is not a JSON object. Entries without a string ``path`` are skipped.
    """
    data = json.loads(Path(path).read_text(encoding="utf-8"))
    if not isinstance(data, dict):
        raise ValueError(f"{path} does not contain a workspace object")
    folders = data.get("folders")
    if not isinstance(folders, list):
        return []
    out: list[str] = []
    for folder in folders:
        if isinstance(folder, dict) and isinstance(folder.get("path"), str):
            out.append(folder["path"])
    return out


__all__ = [
    "workspace_file_path",
    "build_workspace_document",
    "serialize_workspace_document",
    "read_workspace_folders",
]
