"""Browser engine: listing, navigation, selection, and creation operations.

One engine is constructed per interactive session and shared by the tree and
picker surfaces. It owns the settings snapshot, the navigation state, and the
watch supervisor; surfaces subscribe to its change channel and re-render when
notified. Mutating operations hold one re-entrant lock because debounced
watch refreshes arrive on a timer thread.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable
from dataclasses import dataclass, replace
from pathlib import Path

from ..errors import (
    CreateFailed,
    DirectoryUnreadable,
    NotConfigured,
    OutOfBounds,
    AtRoot,
    WorkspaceWizardError,
)
from ..launch import EditorLauncher
from ..watch import ChangeWatchSupervisor, WatchdogWatcher
from ..workspace_model import (
    LOCAL_FS,
    LocalFileSystem,
    Node,
    build_workspace_document,
    list_directory_nodes,
    serialize_workspace_document,
    workspace_file_path,
)
from . import config
from .config import SURFACE_PICKER, Settings
from .navigation import NavigationState, is_within, normalize_path

logger = logging.getLogger(__name__)

STATE_IDLE = "idle"
STATE_READY = "ready"
STATE_BROWSING = "browsing"


@dataclass(frozen=True)
class ListingResult:
    """Nodes listed for ``directory`` plus the error that emptied them, if any."""

    directory: Path | None
    nodes: tuple[Node, ...] = ()
    error: WorkspaceWizardError | None = None


class BrowserEngine:
    """Lazy hierarchical workspace browser bounded by one configured root."""

    def __init__(
        self,
        settings: Settings | None = None,
        *,
        fs: LocalFileSystem | None = None,
        launcher: EditorLauncher | None = None,
        watcher: WatchdogWatcher | None = None,
        load_settings: Callable[[], Settings] = config.load_settings,
        save_root: Callable[[Path], None] = config.save_root,
        load_expanded: Callable[[], set[Path]] = config.load_expanded_folders,
        save_expanded: Callable[[set[Path]], None] = config.save_expanded_folders,
    ) -> None:
        self._lock = threading.RLock()
        self._load_settings = load_settings
        self._save_root = save_root
        self._load_expanded = load_expanded
        self._save_expanded = save_expanded
        self.settings = settings if settings is not None else load_settings()
        self._fs = fs or LOCAL_FS
        self._owns_launcher = launcher is None
        self._launcher = launcher or EditorLauncher(self.settings.launch_command)
        self._listeners: list[Callable[[], None]] = []
        self._watching = False
        self.supervisor = ChangeWatchSupervisor(
            self._on_structural_change,
            watcher=watcher,
            debounce_seconds=self.settings.watch_debounce_ms / 1000.0,
        )
        self.navigation: NavigationState | None = self._new_navigation(self.settings.root)
        self._last_listed: Path | None = None
        self.last_listing: ListingResult | None = None

    # Lifecycle

    def activate(self) -> None:
        """Enable watch supervision for an interactive session."""
        with self._lock:
            self._watching = True
            self._reconcile_watch()

    def close(self) -> None:
        with self._lock:
            self._watching = False
            self.supervisor.close()

    # Change channel

    def subscribe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a change listener; return a function that removes it."""
        with self._lock:
            self._listeners.append(callback)

        def unsubscribe() -> None:
            with self._lock:
                if callback in self._listeners:
                    self._listeners.remove(callback)

        return unsubscribe

    def _notify(self) -> None:
        with self._lock:
            listeners = list(self._listeners)
        for listener in listeners:
            try:
                listener()
            except Exception:
                logger.exception("Change listener failed")

    # State

    @property
    def root(self) -> Path | None:
        return self.navigation.root if self.navigation is not None else None

    @property
    def state(self) -> str:
        if self.navigation is None:
            return STATE_IDLE
        if self.navigation.at_root:
            return STATE_READY
        return STATE_BROWSING

    @property
    def position(self) -> Path | None:
        return self.navigation.current_directory if self.navigation is not None else None

    def _new_navigation(self, root: Path | None) -> NavigationState | None:
        if root is None:
            return None
        return NavigationState(root, self._load_expanded(), save_expanded=self._save_expanded)

    def _reconcile_watch(self) -> None:
        self.supervisor.set_debounce_seconds(self.settings.watch_debounce_ms / 1000.0)
        self.supervisor.reconcile(self._watching and self.settings.watch_for_changes, self.root)

    def _adopt_settings(self, settings: Settings) -> bool:
        """Swap in ``settings``; re-root navigation when the root moved."""
        previous = self.settings
        self.settings = settings
        if self._owns_launcher:
            self._launcher.command = settings.launch_command
        new_root = normalize_path(settings.root) if settings.root is not None else None
        if new_root != self.root:
            self.navigation = self._new_navigation(new_root)
            self._last_listed = new_root
        self._reconcile_watch()
        return settings != previous

    def apply_settings(self, settings: Settings) -> None:
        """Re-derive dependent state after a configuration change."""
        with self._lock:
            changed = self._adopt_settings(settings)
        if changed:
            self._notify()

    def reload_settings(self) -> None:
        """Re-read the settings store and apply whatever changed."""
        self.apply_settings(self._load_settings())

    # Operations

    def configure_root(self, path: Path) -> Path:
        """Remember ``path`` as root and reset browsing to it."""
        root = normalize_path(path)
        with self._lock:
            self._save_root(root)
            self.settings = replace(self.settings, root=root)
            self.navigation = self._new_navigation(root)
            self._last_listed = root
            self.last_listing = None
            self._reconcile_watch()
        logger.info("Workspaces folder set to %s", root)
        self._notify()
        return root

    def list_children(self, path: Path | None = None) -> ListingResult:
        """List ``path`` (default: current position) with the current sort policy.

        Failures never raise: the result carries an empty node tuple plus the
        error for the caller to report.
        """
        with self._lock:
            navigation = self.navigation
            sort_policy = self.settings.sort_policy
            if navigation is None:
                return ListingResult(directory=None, error=NotConfigured())
            target = normalize_path(path) if path is not None else navigation.current_directory
            if not is_within(target, navigation.root):
                return ListingResult(directory=target, error=OutOfBounds(target, navigation.root))

        try:
            nodes = list_directory_nodes(target, sort_policy, fs=self._fs)
        except DirectoryUnreadable as exc:
            logger.info("%s", exc)
            result = ListingResult(directory=target, error=exc)
        else:
            result = ListingResult(directory=target, nodes=tuple(nodes))

        with self._lock:
            self._last_listed = target
            self.last_listing = result
        return result

    def enter(self, node: Node) -> bool:
        """Move into folder ``node``; workspace nodes are ignored.

        An out-of-root target clamps the position to root, notifies, and
        re-raises ``OutOfBounds``.
        """
        if not node.is_folder:
            return False
        with self._lock:
            if self.navigation is None:
                raise NotConfigured()
            try:
                self.navigation.enter(node.path)
            except OutOfBounds:
                self._notify()
                raise
        self._notify()
        return True

    def back(self) -> bool:
        """Move to the parent directory; no-op at the root."""
        with self._lock:
            if self.navigation is None:
                return False
            try:
                self.navigation.ascend()
            except AtRoot:
                return False
        self._notify()
        return True

    def open(self, node: Node, new_window: bool) -> str | None:
        """Hand workspace ``node`` to the launch capability."""
        return self._launcher.launch(node.path, new_window)

    def resolve_selection(
        self,
        node: Node,
        surface: str = SURFACE_PICKER,
        alternate: bool = False,
    ) -> str | None:
        """Enter folders; open workspaces using the surface's open target.

        ``alternate`` flips the configured target (current vs. new window).
        Returns a launch error message, if any.
        """
        if node.is_folder:
            self.enter(node)
            return None
        new_window = self.settings.open_in_new_window(surface)
        if alternate:
            new_window = not new_window
        return self.open(node, new_window)

    def set_expanded(self, path: Path, expanded: bool) -> bool:
        with self._lock:
            if self.navigation is None:
                return False
            return self.navigation.set_expanded(path, expanded)

    def refresh(self) -> ListingResult | None:
        """Re-read settings, re-issue the last listing, and notify listeners."""
        with self._lock:
            self._adopt_settings(self._load_settings())
            target = self._last_listed
            if target is None and self.navigation is not None:
                target = self.navigation.current_directory
        result = self.list_children(target) if target is not None else None
        self._notify()
        return result

    def _on_structural_change(self) -> None:
        logger.debug("Refreshing after structural change")
        self.refresh()

    def _bounded_target(self, target: Path) -> Path:
        """Normalize a creation target; it must lie strictly below the root."""
        target = normalize_path(target)
        root = self.root
        if root is not None and (target == root or not is_within(target, root)):
            raise CreateFailed(target, OutOfBounds(target, root))
        return target

    def create_folder(self, parent: Path, name: str) -> Path:
        """Create folder ``name`` under ``parent`` and refresh."""
        with self._lock:
            target = self._bounded_target(Path(parent) / name)
            try:
                self._fs.create_directory(target)
            except OSError as exc:
                raise CreateFailed(target, exc) from exc
        logger.info("Created folder %s", target)
        self.refresh()
        return target

    def create_workspace(
        self,
        parent: Path,
        name: str,
        open_folders: Iterable[Path | str] = (),
    ) -> tuple[Path, str | None]:
        """Write a skeleton workspace file and open it in the current window.

        Returns ``(path, launch_error)``. Raises ``CreateFailed`` when the file
        cannot be written (including when it already exists); nothing is
        launched in that case.
        """
        with self._lock:
            target = self._bounded_target(workspace_file_path(Path(parent), name))
            payload = serialize_workspace_document(build_workspace_document(open_folders))
            try:
                self._fs.write_file(target, payload)
            except OSError as exc:
                raise CreateFailed(target, exc) from exc
        logger.info("Created workspace %s", target)
        launch_error = self._launcher.launch(target, False)
        self._notify()
        return target, launch_error


__all__ = [
    "STATE_IDLE",
    "STATE_READY",
    "STATE_BROWSING",
    "ListingResult",
    "BrowserEngine",
]
