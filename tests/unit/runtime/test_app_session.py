"""Tests for the interactive session: key dispatch, prompts, status, rendering.

Sessions run without a terminal; the loop is driven by calling ``tick`` and
``handle_key`` directly.
"""

from __future__ import annotations

import json
import shutil
import tempfile
import time
import unittest
from dataclasses import replace
from pathlib import Path

from wswizard.ansi import ANSI_ESCAPE_RE
from wswizard.runtime.app import CONFIG_POLL_SECONDS, STATUS_SECONDS, BrowserSession
from wswizard.runtime.config import SURFACE_PICKER, SURFACE_TREE, Settings
from wswizard.runtime.engine import BrowserEngine
from wswizard.ui_theme import PLAIN_THEME


class FakeLauncher:
    def __init__(self) -> None:
        self.calls: list[tuple[Path, bool]] = []

    def launch(self, target: Path, new_window: bool) -> str | None:
        self.calls.append((target, new_window))
        return None


class _SessionFixture:
    def setUp(self) -> None:
        self._tmp = tempfile.TemporaryDirectory()
        self.root = Path(self._tmp.name).resolve()
        (self.root / "alpha").mkdir()
        (self.root / "beta.code-workspace").write_text(
            json.dumps({"folders": [{"path": "/home/u/proj"}]}),
            encoding="utf-8",
        )
        self.launcher = FakeLauncher()
        self.now = [100.0]
        self.config_version = [0]
        self.current_settings: Settings | None = None

    def tearDown(self) -> None:
        self._tmp.cleanup()

    def make_session(self, surface: str, root: Path | None = None, **settings_kwargs) -> BrowserSession:
        self.current_settings = Settings(root=root if root is not None else self.root, **settings_kwargs)
        engine = BrowserEngine(
            self.current_settings,
            launcher=self.launcher,
            load_settings=lambda: self.current_settings,
            save_root=lambda _root: None,
            load_expanded=set,
            save_expanded=lambda _expanded: None,
        )
        session = BrowserSession(
            engine,
            surface,
            theme=PLAIN_THEME,
            open_folders=[Path("/home/u/proj")],
            clock=lambda: self.now[0],
            config_signature=lambda: self.config_version[0],
        )
        session.start()
        return session

    @staticmethod
    def tick_until(session: BrowserSession, predicate, timeout_seconds: float = 1.0) -> bool:
        deadline = time.monotonic() + timeout_seconds
        while time.monotonic() < deadline:
            session.tick()
            if predicate():
                return True
            time.sleep(0.01)
        return False

    @staticmethod
    def plain(lines: list[str]) -> list[str]:
        return [ANSI_ESCAPE_RE.sub("", line) for line in lines]

    def type_text(self, session: BrowserSession, text: str) -> None:
        for ch in text:
            session.handle_key(ch)


class TreeSessionTests(_SessionFixture, unittest.TestCase):
    def test_render_shows_rows_detail_and_hint(self) -> None:
        session = self.make_session(SURFACE_TREE)
        session.handle_key("j")
        lines = self.plain(session.render(60, 8))

        self.assertEqual(len(lines), 8)
        self.assertTrue(lines[0].startswith("Workspaces: "))
        self.assertEqual(lines[1].rstrip(), "▸ alpha/")
        self.assertEqual(lines[2].rstrip(), "  beta")
        self.assertEqual(lines[-2].rstrip(), "Folders: /home/u/proj")
        self.assertTrue(lines[-1].startswith("enter open/toggle"))

    def test_enter_on_workspace_opens_and_keeps_session(self) -> None:
        session = self.make_session(SURFACE_TREE, tree_open_in_new_window=True)
        session.handle_key("DOWN")
        session.handle_key("ENTER")
        session.handle_key("o")

        target = self.root / "beta.code-workspace"
        self.assertEqual(self.launcher.calls, [(target, True), (target, False)])
        self.assertFalse(session.state.quit)

    def test_new_folder_prompt_creates_folder(self) -> None:
        session = self.make_session(SURFACE_TREE)
        session.handle_key("DOWN")
        session.handle_key("n")
        self.assertEqual(session.state.prompt_kind, "folder")
        self.type_text(session, "gammx")
        session.handle_key("BACKSPACE")
        self.type_text(session, "a")
        self.assertTrue(self.plain(session.render(60, 6))[-1].startswith("New folder name: gamma"))
        session.handle_key("ENTER")

        self.assertTrue((self.root / "gamma").is_dir())
        self.assertEqual(session.state.prompt_kind, "")
        self.assertEqual(session.state.status_message, "Created folder gamma")
        session.tick()
        self.assertIn("gamma", [row.node.name for row in session.tree.rows])

    def test_new_workspace_prompt_uses_open_folders_and_launches(self) -> None:
        session = self.make_session(SURFACE_TREE)
        session.handle_key("w")
        self.type_text(session, "proj")
        session.handle_key("ENTER")

        created = self.root / "alpha" / "proj.code-workspace"
        self.assertEqual(json.loads(created.read_text(encoding="utf-8")), {"folders": [{"path": "/home/u/proj"}]})
        self.assertEqual(self.launcher.calls, [(created, False)])

    def test_creation_failure_is_shown_once_then_expires(self) -> None:
        session = self.make_session(SURFACE_TREE)
        session.handle_key("DOWN")
        session.handle_key("n")
        self.type_text(session, "beta.code-workspace")
        session.handle_key("ENTER")

        self.assertTrue(session.state.status_is_error)
        self.assertIn("Unable to create", session.state.status_message)
        self.now[0] += STATUS_SECONDS + 1
        session.tick()
        self.assertEqual(session.state.status_message, "")

    def test_escape_cancels_prompt_without_quitting(self) -> None:
        session = self.make_session(SURFACE_TREE)
        session.handle_key("n")
        session.handle_key("ESC")
        self.assertEqual(session.state.prompt_kind, "")
        self.assertFalse(session.state.quit)
        session.handle_key("q")
        self.assertTrue(session.state.quit)

    def test_external_change_reloads_tree_on_tick(self) -> None:
        session = self.make_session(SURFACE_TREE)
        (self.root / "aardvark").mkdir()
        session.engine.refresh()
        session.tick()
        self.assertEqual([row.node.name for row in session.tree.rows], ["aardvark", "alpha", "beta"])

    def test_settings_file_edit_is_applied_on_next_poll(self) -> None:
        session = self.make_session(SURFACE_TREE)
        self.assertEqual([row.node.name for row in session.tree.rows], ["alpha", "beta"])

        self.current_settings = replace(self.current_settings, sort_policy="workspaces_first")
        session.tick()
        self.assertEqual([row.node.name for row in session.tree.rows], ["alpha", "beta"])

        self.now[0] += CONFIG_POLL_SECONDS + 1
        session.tick()
        self.assertEqual([row.node.name for row in session.tree.rows], ["alpha", "beta"])

        self.config_version[0] += 1
        self.now[0] += CONFIG_POLL_SECONDS + 1
        session.tick()
        self.assertEqual(session.engine.settings.sort_policy, "workspaces_first")
        self.assertEqual([row.node.name for row in session.tree.rows], ["beta", "alpha"])

    def test_missing_root_is_reported_in_status(self) -> None:
        session = self.make_session(SURFACE_TREE, root=self.root / "missing")
        self.assertTrue(session.state.status_is_error)
        self.assertIn("Unable to open", session.state.status_message)


class PickerSessionKeyTests(_SessionFixture, unittest.TestCase):
    def test_typing_filters_and_enter_opens_then_quits(self) -> None:
        session = self.make_session(SURFACE_PICKER)
        self.assertTrue(self.tick_until(session, lambda: len(session.picker.items) == 2))

        self.type_text(session, "bet")
        self.assertEqual([item.label for item in session.picker.visible_items()], ["beta"])
        session.handle_key("ENTER")

        self.assertEqual(self.launcher.calls, [(self.root / "beta.code-workspace", False)])
        self.assertTrue(session.state.quit)

    def test_ctrl_o_opens_in_other_window(self) -> None:
        session = self.make_session(SURFACE_PICKER)
        self.assertTrue(self.tick_until(session, lambda: len(session.picker.items) == 2))
        session.handle_key("DOWN")
        session.handle_key("CTRL_O")
        self.assertEqual(self.launcher.calls, [(self.root / "beta.code-workspace", True)])

    def test_enter_folder_then_backspace_goes_back(self) -> None:
        session = self.make_session(SURFACE_PICKER)
        self.assertTrue(self.tick_until(session, lambda: len(session.picker.items) == 2))
        session.handle_key("ENTER")
        self.assertTrue(self.tick_until(session, lambda: session.picker.loaded_directory == self.root / "alpha"))
        self.assertEqual([item.label for item in session.picker.visible_items()], [".."])

        session.handle_key("BACKSPACE")
        self.assertTrue(self.tick_until(session, lambda: session.picker.loaded_directory == self.root))
        self.assertEqual(session.engine.position, self.root)

    def test_watched_delete_replaces_listing(self) -> None:
        session = self.make_session(SURFACE_PICKER, watch_debounce_ms=30)
        session.engine.activate()
        try:
            self.assertTrue(self.tick_until(session, lambda: len(session.picker.items) == 2))
            shutil.rmtree(self.root / "alpha")
            self.assertTrue(
                self.tick_until(
                    session,
                    lambda: [item.label for item in session.picker.visible_items()] == ["beta"],
                    timeout_seconds=5.0,
                )
            )
        finally:
            session.engine.close()

    def test_escape_clears_query_before_quitting(self) -> None:
        session = self.make_session(SURFACE_PICKER)
        self.type_text(session, "q")
        self.assertEqual(session.picker.query, "q")
        self.assertFalse(session.state.quit)
        session.handle_key("ESC")
        self.assertEqual(session.picker.query, "")
        session.handle_key("ESC")
        self.assertTrue(session.state.quit)

    def test_tab_switches_surfaces(self) -> None:
        session = self.make_session(SURFACE_PICKER)
        session.handle_key("TAB")
        self.assertEqual(session.state.surface, SURFACE_TREE)
        self.assertEqual([row.node.name for row in session.tree.rows], ["alpha", "beta"])
        session.handle_key("TAB")
        self.assertEqual(session.state.surface, SURFACE_PICKER)

    def test_unconfigured_root_shows_hint(self) -> None:
        settings = Settings()
        engine = BrowserEngine(
            settings,
            launcher=self.launcher,
            load_settings=lambda: settings,
            save_root=lambda _root: None,
            load_expanded=set,
            save_expanded=lambda _expanded: None,
        )
        session = BrowserSession(engine, SURFACE_PICKER, theme=PLAIN_THEME, clock=lambda: self.now[0])
        session.start()
        self.assertIn("select-root", session.state.status_message)
        session.handle_key("CTRL_N")
        self.assertEqual(session.state.prompt_kind, "")
        self.assertIn("workspaces folder", session.state.status_message)


if __name__ == "__main__":
    unittest.main()
