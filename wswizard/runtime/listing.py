"""Background directory-listing worker for the picker surface."""

from __future__ import annotations

import threading
from collections.abc import Callable
from dataclasses import dataclass
from pathlib import Path
from queue import Empty, Queue

from .navigation import normalize_path


@dataclass(frozen=True)
class ListingRequest:
    """One directory-listing job."""

    request_id: int
    target: Path


@dataclass(frozen=True)
class CompletedListing:
    """Completed listing payload from the background worker."""

    request: ListingRequest
    result: object


class ListingScheduler:
    """Single-threaded latest-request-wins listing scheduler.

    While a read for a target is in flight or queued, further requests for
    the same target short-circuit and return ``None``. A forced request only
    short-circuits against a queued read: an in-flight read may predate the
    change that prompted it, so another read is queued behind it. A request
    for another target replaces whatever is queued. Consumers pass their
    current position to ``drain_results`` so stale listings are dropped
    instead of applied.
    """

    def __init__(self, list_children: Callable[[Path], object]) -> None:
        self._list_children = list_children
        self._lock = threading.Lock()
        self._pending: ListingRequest | None = None
        self._in_flight: ListingRequest | None = None
        self._running = False
        self._next_request_id = 1
        self._results: Queue[CompletedListing] = Queue()

    @property
    def busy(self) -> bool:
        with self._lock:
            return self._running

    def _worker(self) -> None:
        while True:
            with self._lock:
                request = self._pending
                self._pending = None
                self._in_flight = request
                if request is None:
                    self._running = False
                    return

            try:
                result = self._list_children(request.target)
            except Exception as exc:
                result = exc
            with self._lock:
                self._in_flight = None
            self._results.put(CompletedListing(request=request, result=result))

    def request(self, target: Path, force: bool = False) -> int | None:
        """Queue a listing of ``target``; return its id or ``None`` if deduplicated."""
        target = normalize_path(target)
        with self._lock:
            candidates = (self._pending,) if force else (self._in_flight, self._pending)
            for existing in candidates:
                if existing is not None and existing.target == target:
                    return None
            request_id = self._next_request_id
            self._next_request_id += 1
            self._pending = ListingRequest(request_id=request_id, target=target)
            if self._running:
                return request_id
            self._running = True

        worker = threading.Thread(
            target=self._worker,
            name="wswizard-listing",
            daemon=True,
        )
        worker.start()
        return request_id

    def drain_results(self, current_directory: Path | None = None) -> list[CompletedListing]:
        """Drain completed listings, dropping those not matching ``current_directory``."""
        current = normalize_path(current_directory) if current_directory is not None else None
        out: list[CompletedListing] = []
        while True:
            try:
                completed = self._results.get_nowait()
            except Empty:
                break
            if current is not None and completed.request.target != current:
                continue
            out.append(completed)
        return out


__all__ = [
    "ListingRequest",
    "CompletedListing",
    "ListingScheduler",
]
