"""Runtime composition layer for the interactive surfaces.

Builds session state, binds keys for the tree and picker surfaces, and runs
the redraw/input loop. The engine's change channel may fire on the watch
timer thread, so listeners only flip an event that the loop consumes.
"""

from __future__ import annotations

import logging
import sys
import threading
import time
from collections.abc import Callable, Iterable
from pathlib import Path

from ..ansi import fit_ansi_line
from ..errors import WorkspaceWizardError
from ..input import KeyComboRegistry, read_key
from ..picker_panel import PickerSession, render_picker
from ..tree_pane import TreeSurface, render_tree_rows
from ..tree_pane.rendering import visible_tree_start
from ..ui_theme import DEFAULT_THEME, UITheme, theme_for
from ..workspace_model import read_workspace_folders
from . import config
from .config import SURFACE_PICKER, SURFACE_TREE
from .engine import BrowserEngine
from .state import AppState
from .terminal import TerminalController

logger = logging.getLogger(__name__)

STATUS_SECONDS = 4.0
CONFIG_POLL_SECONDS = 1.0
POLL_TIMEOUT_MS = 100
PAGE_STEP = 10

PROMPT_FOLDER = "folder"
PROMPT_WORKSPACE = "workspace"
PROMPT_LABELS = {
    PROMPT_FOLDER: "New folder name: ",
    PROMPT_WORKSPACE: "New workspace name: ",
}

TREE_HINT = "enter open/toggle  o other window  n folder  w workspace  r refresh  tab picker  q quit"
PICKER_HINT = "enter open  ^O other window  ^N folder  ^W workspace  ^R refresh  tab tree  esc quit"


def _workspace_detail(path: Path) -> str:
    try:
        folders = read_workspace_folders(path)
    except (OSError, ValueError) as exc:
        return f"Unreadable workspace: {exc}"
    if not folders:
        return "No folders"
    return "Folders: " + ", ".join(folders)


class BrowserSession:
    """Key handling and rendering for one interactive run."""

    def __init__(
        self,
        engine: BrowserEngine,
        surface: str,
        *,
        theme: UITheme = DEFAULT_THEME,
        open_folders: Iterable[Path | str] = (),
        clock: Callable[[], float] = time.monotonic,
        config_signature: Callable[[], object] = config.config_signature,
    ) -> None:
        self.engine = engine
        self.theme = theme
        self.open_folders = tuple(open_folders)
        self.clock = clock
        self._config_signature = config_signature
        self._last_config_signature = config_signature()
        self._next_config_check = clock() + CONFIG_POLL_SECONDS
        self.state = AppState(surface=surface if surface in {SURFACE_TREE, SURFACE_PICKER} else SURFACE_PICKER)
        self.tree = TreeSurface(engine)
        self.picker = PickerSession(engine)
        self._changed = threading.Event()
        self._unsubscribe = engine.subscribe(self._changed.set)
        self._tree_keys = self._build_tree_keys()
        self._picker_keys = self._build_picker_keys()
        self._prompt_keys = self._build_prompt_keys()

    # Lifecycle

    def start(self) -> None:
        self._show_surface()

    def close(self) -> None:
        self._unsubscribe()

    def _show_surface(self) -> None:
        if self.state.surface == SURFACE_TREE:
            self.tree.reload()
            self._report(self.tree.errors[0] if self.tree.errors else None)
        elif not self.picker.start():
            self._report(self.picker.error)
        self.state.dirty = True

    # Status row

    def set_status(self, message: str, error: bool = False) -> None:
        self.state.status_message = message
        self.state.status_is_error = error
        self.state.status_message_until = self.clock() + STATUS_SECONDS
        self.state.dirty = True

    def _report(self, error: WorkspaceWizardError | None) -> None:
        if error is not None:
            self.set_status(str(error), error=True)

    def _report_launch(self, message: str | None) -> None:
        if message:
            self.set_status(message, error=True)

    # Loop hooks

    def _poll_config(self) -> None:
        now = self.clock()
        if now < self._next_config_check:
            return
        self._next_config_check = now + CONFIG_POLL_SECONDS
        signature = self._config_signature()
        if signature == self._last_config_signature:
            return
        self._last_config_signature = signature
        logger.info("Settings file changed; re-applying settings")
        self.engine.reload_settings()

    def tick(self) -> None:
        """Consume settings edits, change notifications, finished listings, and status expiry."""
        self._poll_config()
        state = self.state
        if self._changed.is_set():
            self._changed.clear()
            if state.surface == SURFACE_TREE:
                self.tree.reload()
            else:
                self.picker.request_listing(force=True)
            state.dirty = True
        if state.surface == SURFACE_PICKER:
            if self.picker.poll():
                self._report(self.picker.error)
                state.dirty = True
            if self.picker.busy:
                state.busy_frame += 1
                state.dirty = True
        if state.status_message and self.clock() >= state.status_message_until:
            state.status_message = ""
            state.status_is_error = False
            state.status_message_until = 0.0
            state.dirty = True

    def handle_key(self, key: str) -> bool:
        """Dispatch one key token; return whether it was handled."""
        if key == "CTRL_C":
            self.state.quit = True
            return True
        if self.state.prompt_kind:
            handled = self._prompt_keys.dispatch(key)
        elif self.state.surface == SURFACE_TREE:
            handled = self._tree_keys.dispatch(key)
        else:
            handled = self._picker_keys.dispatch(key)
        if handled:
            self.state.dirty = True
        return bool(handled)

    # Shared actions

    def _quit(self) -> bool:
        self.state.quit = True
        return True

    def _switch_surface(self) -> bool:
        self.state.surface = SURFACE_PICKER if self.state.surface == SURFACE_TREE else SURFACE_TREE
        self._show_surface()
        return True

    def _refresh(self) -> bool:
        result = self.engine.refresh()
        self._changed.clear()
        if self.state.surface == SURFACE_TREE:
            self.tree.reload()
            self._report(self.tree.errors[0] if self.tree.errors else None)
        else:
            self.picker.request_listing(force=True)
            if result is not None:
                self._report(result.error)
        return True

    def _target_directory(self) -> Path | None:
        if self.state.surface == SURFACE_TREE:
            return self.tree.target_directory()
        return self.picker.target_directory()

    def _open_prompt(self, kind: str) -> bool:
        parent = self._target_directory()
        if parent is None:
            self.set_status("Choose a workspaces folder first", error=True)
            return True
        self.state.prompt_kind = kind
        self.state.prompt_text = ""
        self.state.prompt_parent = parent
        return True

    def _cancel_prompt(self) -> bool:
        self.state.prompt_kind = ""
        self.state.prompt_text = ""
        self.state.prompt_parent = None
        return True

    def _submit_prompt(self) -> bool:
        kind = self.state.prompt_kind
        name = self.state.prompt_text.strip()
        parent = self.state.prompt_parent
        self._cancel_prompt()
        if not name or parent is None:
            return True
        try:
            if kind == PROMPT_FOLDER:
                created = self.engine.create_folder(parent, name)
                self.set_status(f"Created folder {created.name}")
            else:
                created, launch_error = self.engine.create_workspace(parent, name, self.open_folders)
                if launch_error:
                    self.set_status(launch_error, error=True)
                else:
                    self.set_status(f"Created and opened {created.name}")
        except WorkspaceWizardError as exc:
            self.set_status(str(exc), error=True)
        return True

    def _prompt_backspace(self) -> bool:
        self.state.prompt_text = self.state.prompt_text[:-1]
        return True

    def _prompt_type(self, text: str) -> bool:
        self.state.prompt_text += text
        return True

    # Tree actions

    def _tree_move(self, delta: int) -> Callable[[], bool]:
        return lambda: self.tree.move(delta)

    def _tree_activate(self, alternate: bool) -> Callable[[], bool]:
        def activate() -> bool:
            self._report_launch(self.tree.activate(alternate=alternate))
            return True

        return activate

    def _tree_expand(self) -> bool:
        return self.tree.set_expanded(True)

    def _tree_collapse(self) -> bool:
        return self.tree.collapse_or_select_parent()

    # Picker actions

    def _picker_move(self, delta: int) -> Callable[[], bool]:
        return lambda: self.picker.move(delta)

    def _picker_activate(self, alternate: bool) -> Callable[[], bool]:
        def activate() -> bool:
            message = self.picker.activate(alternate=alternate)
            if self.picker.closed:
                if message:
                    self.picker.closed = False
                    self.set_status(message, error=True)
                else:
                    self.state.quit = True
            return True

        return activate

    def _picker_backspace(self) -> bool:
        if self.picker.query:
            self.picker.set_query(self.picker.query[:-1])
            return True
        return self.picker.go_back()

    def _picker_type(self, text: str) -> bool:
        self.picker.set_query(self.picker.query + text)
        return True

    def _picker_clear_query(self) -> bool:
        self.picker.set_query("")
        return True

    def _picker_escape(self) -> bool:
        if self.picker.query:
            return self._picker_clear_query()
        return self._quit()

    # Key tables

    def _build_tree_keys(self) -> KeyComboRegistry:
        return (
            KeyComboRegistry()
            .register(("UP", "k"), self._tree_move(-1))
            .register(("DOWN", "j"), self._tree_move(1))
            .register(("PAGE_UP",), self._tree_move(-PAGE_STEP))
            .register(("PAGE_DOWN",), self._tree_move(PAGE_STEP))
            .register(("HOME", "g"), self._tree_move(-(10**9)))
            .register(("END", "G"), self._tree_move(10**9))
            .register(("ENTER",), self._tree_activate(False))
            .register(("o",), self._tree_activate(True))
            .register(("RIGHT", "l"), self._tree_expand)
            .register(("LEFT", "h"), self._tree_collapse)
            .register(("r", "CTRL_R"), self._refresh)
            .register(("n", "CTRL_N"), lambda: self._open_prompt(PROMPT_FOLDER))
            .register(("w", "CTRL_W"), lambda: self._open_prompt(PROMPT_WORKSPACE))
            .register(("TAB",), self._switch_surface)
            .register(("q", "ESC"), self._quit)
        )

    def _build_picker_keys(self) -> KeyComboRegistry:
        return (
            KeyComboRegistry(on_text=self._picker_type)
            .register(("UP",), self._picker_move(-1))
            .register(("DOWN",), self._picker_move(1))
            .register(("PAGE_UP",), self._picker_move(-PAGE_STEP))
            .register(("PAGE_DOWN",), self._picker_move(PAGE_STEP))
            .register(("ENTER",), self._picker_activate(False))
            .register(("CTRL_O",), self._picker_activate(True))
            .register(("BACKSPACE",), self._picker_backspace)
            .register(("LEFT",), self.picker.go_back)
            .register(("CTRL_U",), self._picker_clear_query)
            .register(("CTRL_R",), self._refresh)
            .register(("CTRL_N",), lambda: self._open_prompt(PROMPT_FOLDER))
            .register(("CTRL_W",), lambda: self._open_prompt(PROMPT_WORKSPACE))
            .register(("TAB",), self._switch_surface)
            .register(("ESC",), self._picker_escape)
        )

    def _build_prompt_keys(self) -> KeyComboRegistry:
        return (
            KeyComboRegistry(on_text=self._prompt_type)
            .register(("ENTER",), self._submit_prompt)
            .register(("ESC",), self._cancel_prompt)
            .register(("BACKSPACE",), self._prompt_backspace)
        )

    # Rendering

    def _selected_workspace(self) -> Path | None:
        if self.state.surface == SURFACE_TREE:
            node = self.tree.selected_node()
        else:
            item = self.picker.selected_item()
            node = item.node if item is not None else None
        if node is None or not node.is_workspace:
            return None
        return node.path

    def _detail_line(self) -> str:
        path = self._selected_workspace()
        if path is None:
            self.state.detail_path = None
            self.state.detail_text = ""
            return ""
        if path != self.state.detail_path:
            self.state.detail_path = path
            self.state.detail_text = _workspace_detail(path)
        return self.state.detail_text

    def _bottom_line(self) -> str:
        state = self.state
        theme = self.theme
        if state.prompt_kind:
            label = PROMPT_LABELS[state.prompt_kind]
            return f"{theme.query}{label}{theme.reset}{state.prompt_text}" if theme.query else label + state.prompt_text
        if state.status_message:
            color = theme.error if state.status_is_error else theme.status
            return f"{color}{state.status_message}{theme.reset}" if color else state.status_message
        hint = TREE_HINT if state.surface == SURFACE_TREE else PICKER_HINT
        return f"{theme.hint}{hint}{theme.reset}" if theme.hint else hint

    def _render_tree(self, width: int, height: int) -> list[str]:
        theme = self.theme
        root = self.engine.root
        title = f"Workspaces: {root}" if root is not None else "Workspaces"
        lines = [fit_ansi_line(f"{theme.title}{title}{theme.reset}" if theme.title else title, width)]
        rows_height = height - 1
        if not self.tree.rows:
            empty = "Empty folder" if root is not None else "No workspaces folder selected"
            lines.append(fit_ansi_line(f"{theme.hint}{empty}{theme.reset}" if theme.hint else empty, width))
            rows_height -= 1
        self.state.tree_start = visible_tree_start(
            self.tree.selected_idx,
            self.state.tree_start,
            rows_height,
            len(self.tree.rows),
        )
        lines.extend(
            render_tree_rows(
                self.tree.rows,
                self.tree.selected_idx,
                self.state.tree_start,
                width,
                rows_height,
                theme,
            )
        )
        return lines

    def render(self, width: int, height: int) -> list[str]:
        """Render a full frame of exactly ``height`` rows."""
        width = max(1, width)
        height = max(3, height)
        content_height = height - 2
        if self.state.surface == SURFACE_TREE:
            content = self._render_tree(width, content_height)
        else:
            content = render_picker(self.picker, width, content_height, self.theme, self.state.busy_frame)
        detail = self._detail_line()
        styled_detail = f"{self.theme.description}{detail}{self.theme.reset}" if detail and self.theme.description else detail
        content = content[:content_height]
        content.extend(" " * width for _ in range(content_height - len(content)))
        return content + [fit_ansi_line(styled_detail, width), fit_ansi_line(self._bottom_line(), width)]


def run_session_loop(session: BrowserSession, terminal: TerminalController, stdin_fd: int) -> None:
    """Redraw and dispatch keys until the session asks to quit."""
    with terminal.raw_mode():
        session.start()
        while not session.state.quit:
            session.tick()
            if session.state.dirty:
                width, height = terminal.size()
                terminal.write_frame(session.render(width, height))
                session.state.dirty = False
            key = read_key(stdin_fd, timeout_ms=POLL_TIMEOUT_MS)
            if key:
                session.handle_key(key)


def run_browser(
    surface: str,
    engine: BrowserEngine | None = None,
    *,
    no_color: bool = False,
    open_folders: Iterable[Path | str] = (),
) -> None:
    """Run an interactive tree or picker session on the controlling terminal."""
    engine = engine if engine is not None else BrowserEngine()
    stdin_fd = sys.stdin.fileno()
    terminal = TerminalController(stdin_fd, sys.stdout.fileno())
    session = BrowserSession(engine, surface, theme=theme_for(no_color), open_folders=open_folders)
    engine.activate()
    logger.info("Interactive %s session started (root=%s)", session.state.surface, engine.root)
    try:
        run_session_loop(session, terminal, stdin_fd)
    finally:
        session.close()
        engine.close()
        logger.info("Interactive session ended")


__all__ = [
    "BrowserSession",
    "run_session_loop",
    "run_browser",
]
