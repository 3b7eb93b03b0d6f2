"""Tests for workspace-file sanitization and highlighting."""

from __future__ import annotations

import tempfile
import unittest
from pathlib import Path

from wswizard.ansi import ANSI_ESCAPE_RE
from wswizard.highlight import DEFAULT_STYLE, colorize_workspace, normalize_style, read_text, sanitize_terminal_text


class HighlightTests(unittest.TestCase):
    def test_sanitize_escapes_control_bytes(self) -> None:
        self.assertEqual(sanitize_terminal_text("a\x1b[2Jb\x07\n\tc"), "a\\x1b[2Jb\\x07\n\tc")
        self.assertEqual(sanitize_terminal_text("plain"), "plain")

    def test_no_color_returns_sanitized_source(self) -> None:
        source = '{\n\t"folders": []\n}\n'
        self.assertEqual(colorize_workspace(source, no_color=True), source)

    def test_colorized_output_keeps_text(self) -> None:
        source = '{\n\t"folders": [{"path": "/home/u/proj"}]\n}'
        rendered = colorize_workspace(source)
        self.assertIn("\033[", rendered)
        self.assertEqual(ANSI_ESCAPE_RE.sub("", rendered), source)

    def test_unknown_style_falls_back_to_default(self) -> None:
        self.assertEqual(normalize_style("no-such-style"), DEFAULT_STYLE)
        self.assertEqual(normalize_style("friendly"), "friendly")

    def test_read_text_falls_back_for_non_utf8(self) -> None:
        with tempfile.TemporaryDirectory() as tmp:
            target = Path(tmp) / "latin.code-workspace"
            target.write_bytes(b'{"name": "caf\xe9"}')
            self.assertEqual(read_text(target), '{"name": "café"}')


if __name__ == "__main__":
    unittest.main()
