"""Filesystem watch supervision for the workspaces root.

Starts or stops one recursive ``watchdog`` observer depending on the
watch-enabled setting and the configured root. Only structural events
(create, delete, move) are forwarded; content modifications are ignored.
Bursts of events collapse into one debounced refresh callback.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable
from pathlib import Path
from typing import Protocol

from watchdog.events import FileSystemEvent, FileSystemEventHandler, FileSystemMovedEvent
from watchdog.observers import Observer

from .runtime.navigation import normalize_path

logger = logging.getLogger(__name__)

DEFAULT_DEBOUNCE_SECONDS = 0.3


class WatchHandle(Protocol):
    def dispose(self) -> None: ...


class RefreshDebouncer:
    """Coalesce rapid triggers into one callback after a quiet period.

    Each ``trigger`` restarts the timer; the callback runs on the timer
    thread once no trigger has arrived for ``delay_seconds``.
    """

    def __init__(
        self,
        callback: Callable[[], None],
        delay_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
        timer_factory: Callable[..., threading.Timer] = threading.Timer,
    ) -> None:
        self._callback = callback
        self.delay_seconds = max(0.0, delay_seconds)
        self._timer_factory = timer_factory
        self._lock = threading.Lock()
        self._timer: threading.Timer | None = None
        self._generation = 0

    @property
    def pending(self) -> bool:
        with self._lock:
            return self._timer is not None

    def trigger(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._generation += 1
            timer = self._timer_factory(self.delay_seconds, self._fire, args=(self._generation,))
            timer.daemon = True
            self._timer = timer
            timer.start()

    def cancel(self) -> None:
        with self._lock:
            if self._timer is not None:
                self._timer.cancel()
            self._timer = None
            self._generation += 1

    def _fire(self, generation: int) -> None:
        # A timer superseded after it started running must not fire.
        with self._lock:
            if generation != self._generation or self._timer is None:
                return
            self._timer = None
        try:
            self._callback()
        except Exception:
            logger.exception("Structural-change callback failed")


class _StructuralEventHandler(FileSystemEventHandler):
    """Forward create/delete/move events; modifications are not structural."""

    def __init__(self, on_create: Callable[[str], None], on_delete: Callable[[str], None]) -> None:
        super().__init__()
        self._on_create = on_create
        self._on_delete = on_delete

    def on_created(self, event: FileSystemEvent) -> None:
        self._on_create(str(event.src_path))

    def on_deleted(self, event: FileSystemEvent) -> None:
        self._on_delete(str(event.src_path))

    def on_moved(self, event: FileSystemMovedEvent) -> None:
        self._on_delete(str(event.src_path))
        self._on_create(str(event.dest_path))


class _ObserverHandle:
    """Disposable wrapper around a running observer."""

    def __init__(self, observer: Observer) -> None:
        self._observer: Observer | None = observer

    def dispose(self) -> None:
        observer = self._observer
        if observer is None:
            return
        self._observer = None
        observer.stop()
        observer.join(timeout=5.0)


class WatchdogWatcher:
    """Watch capability backed by a ``watchdog`` observer per handle."""

    def watch(
        self,
        path: Path,
        recursive: bool,
        on_create: Callable[[str], None],
        on_delete: Callable[[str], None],
    ) -> WatchHandle:
        observer = Observer()
        observer.schedule(_StructuralEventHandler(on_create, on_delete), str(path), recursive=recursive)
        observer.start()
        return _ObserverHandle(observer)


class ChangeWatchSupervisor:
    """Keep exactly one watch handle alive while watching is wanted.

    ``reconcile`` is idempotent: unchanged inputs never create or dispose a
    handle. A root change while active swaps the handle.
    """

    def __init__(
        self,
        on_structural_change: Callable[[], None],
        watcher: WatchdogWatcher | None = None,
        debounce_seconds: float = DEFAULT_DEBOUNCE_SECONDS,
    ) -> None:
        self._watcher = watcher if watcher is not None else WatchdogWatcher()
        self._debouncer = RefreshDebouncer(on_structural_change, debounce_seconds)
        self._handle: WatchHandle | None = None
        self._watched_root: Path | None = None

    @property
    def active(self) -> bool:
        return self._handle is not None

    @property
    def watched_root(self) -> Path | None:
        return self._watched_root

    def set_debounce_seconds(self, seconds: float) -> None:
        self._debouncer.delay_seconds = max(0.0, seconds)

    def reconcile(self, want_watch: bool, root_path: Path | None) -> None:
        root = normalize_path(root_path) if root_path is not None else None
        if not want_watch or root is None:
            self._dispose()
            return
        if self._handle is not None and self._watched_root == root:
            return
        self._dispose()
        try:
            self._handle = self._watcher.watch(
                root,
                True,
                on_create=self._on_structural_event,
                on_delete=self._on_structural_event,
            )
        except OSError as exc:
            logger.warning("Unable to watch %s: %s", root, exc)
            return
        self._watched_root = root
        logger.info("Watching %s for workspace changes", root)

    def close(self) -> None:
        self._dispose()

    def _dispose(self) -> None:
        handle = self._handle
        if handle is None:
            return
        self._handle = None
        logger.info("Stopped watching %s", self._watched_root)
        self._watched_root = None
        self._debouncer.cancel()
        handle.dispose()

    def _on_structural_event(self, path: str) -> None:
        logger.debug("Structural change at %s", path)
        self._debouncer.trigger()


__all__ = [
    "DEFAULT_DEBOUNCE_SECONDS",
    "WatchHandle",
    "RefreshDebouncer",
    "WatchdogWatcher",
    "ChangeWatchSupervisor",
]
