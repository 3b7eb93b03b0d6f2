"""Tests for workspace-document construction and reading."""

from __future__ import annotations

import json
import tempfile
import unittest
from pathlib import Path

from wswizard.workspace_model import (
    build_workspace_document,
    read_workspace_folders,
    serialize_workspace_document,
    workspace_file_path,
)


class WorkspaceDocumentTests(unittest.TestCase):
    def test_workspace_file_path_appends_marker_once(self) -> None:
        parent = Path("/ws/team")
        self.assertEqual(workspace_file_path(parent, "proj"), parent / "proj.code-workspace")
        self.assertEqual(workspace_file_path(parent, "proj.code-workspace"), parent / "proj.code-workspace")

    def test_document_lists_open_folders(self) -> None:
        document = build_workspace_document([Path("/home/u/proj"), "/home/u/lib"])
        self.assertEqual(document, {"folders": [{"path": "/home/u/proj"}, {"path": "/home/u/lib"}]})
        self.assertEqual(build_workspace_document([]), {"folders": []})

    def test_serialization_is_tab_indented_json(self) -> None:
        payload = serialize_workspace_document({"folders": [{"path": "/home/u/proj"}]})
        text = payload.decode("utf-8")
        self.assertIn('\n\t"folders"', text)
        self.assertTrue(text.endswith("}\n"))
        self.assertEqual(json.loads(text), {"folders": [{"path": "/home/u/proj"}]})

    def test_read_workspace_folders_skips_malformed_entries(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.code-workspace"
            target.write_text(
                json.dumps({"folders": [{"path": "/a"}, {"name": "no path"}, "bare", {"path": 3}]}),
                encoding="utf-8",
            )
            self.assertEqual(read_workspace_folders(target), ["/a"])

    def test_read_workspace_folders_rejects_non_object(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "a.code-workspace"
            target.write_text("[1, 2]", encoding="utf-8")
            with self.assertRaises(ValueError):
                read_workspace_folders(target)


if __name__ == "__main__":
    unittest.main()
