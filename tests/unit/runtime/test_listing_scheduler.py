"""Tests for the background listing scheduler used by the picker."""

from __future__ import annotations

import threading
import time
import unittest
from pathlib import Path

from wswizard.runtime.listing import ListingScheduler
from wswizard.runtime.navigation import normalize_path


def _wait_for_results(
    scheduler: ListingScheduler,
    current: Path | None = None,
    *,
    expected_count: int,
    timeout_seconds: float = 1.0,
) -> list:
    deadline = time.monotonic() + timeout_seconds
    out: list = []
    while time.monotonic() < deadline:
        out.extend(scheduler.drain_results(current))
        if len(out) >= expected_count:
            break
        time.sleep(0.01)
    return out


def _wait_idle(scheduler: ListingScheduler, timeout_seconds: float = 1.0) -> None:
    deadline = time.monotonic() + timeout_seconds
    while scheduler.busy and time.monotonic() < deadline:
        time.sleep(0.01)


class ListingSchedulerTests(unittest.TestCase):
    def test_request_lists_in_background(self) -> None:
        calls: list[Path] = []

        def list_children(target: Path) -> str:
            calls.append(target)
            return f"listing:{target.name}"

        scheduler = ListingScheduler(list_children)
        target = normalize_path("/ws/team")
        self.assertIsNotNone(scheduler.request(target))

        results = _wait_for_results(scheduler, target, expected_count=1)
        self.assertEqual(calls, [target])
        self.assertEqual(results[0].result, "listing:team")
        self.assertEqual(results[0].request.target, target)

    def test_duplicate_request_while_in_flight_short_circuits(self) -> None:
        started = threading.Event()
        release = threading.Event()
        calls: list[Path] = []

        def list_children(target: Path) -> str:
            calls.append(target)
            started.set()
            release.wait(1.0)
            return "done"

        scheduler = ListingScheduler(list_children)
        target = normalize_path("/ws")
        self.assertIsNotNone(scheduler.request(target))
        self.assertTrue(started.wait(1.0))
        self.assertTrue(scheduler.busy)
        self.assertIsNone(scheduler.request(target))
        release.set()

        results = _wait_for_results(scheduler, target, expected_count=1)
        _wait_idle(scheduler)
        self.assertEqual(len(results), 1)
        self.assertEqual(calls, [target])
        self.assertFalse(scheduler.busy)

    def test_forced_request_rereads_behind_in_flight_read(self) -> None:
        started = threading.Event()
        release = threading.Event()
        calls: list[Path] = []

        def list_children(target: Path) -> int:
            calls.append(target)
            if len(calls) == 1:
                started.set()
                release.wait(1.0)
            return len(calls)

        scheduler = ListingScheduler(list_children)
        target = normalize_path("/ws")
        scheduler.request(target)
        self.assertTrue(started.wait(1.0))
        self.assertIsNotNone(scheduler.request(target, force=True))
        self.assertIsNone(scheduler.request(target, force=True))
        release.set()

        results = _wait_for_results(scheduler, target, expected_count=2)
        self.assertEqual([item.result for item in results], [1, 2])
        self.assertEqual(calls, [target, target])

    def test_pending_requests_collapse_to_latest_target(self) -> None:
        started = threading.Event()
        release = threading.Event()
        calls: list[str] = []

        def list_children(target: Path) -> str:
            calls.append(target.name)
            if target.name == "first":
                started.set()
                release.wait(1.0)
            return target.name

        scheduler = ListingScheduler(list_children)
        scheduler.request(normalize_path("/ws/first"))
        self.assertTrue(started.wait(1.0))
        scheduler.request(normalize_path("/ws/second"))
        scheduler.request(normalize_path("/ws/third"))
        release.set()

        results = _wait_for_results(scheduler, None, expected_count=2)
        self.assertEqual(calls, ["first", "third"])
        self.assertEqual([item.result for item in results], ["first", "third"])

    def test_drain_discards_results_for_other_positions(self) -> None:
        scheduler = ListingScheduler(lambda target: target.name)
        scheduler.request(normalize_path("/ws/old"))
        _wait_idle(scheduler)

        self.assertEqual(scheduler.drain_results(normalize_path("/ws/new")), [])
        self.assertEqual(scheduler.drain_results(normalize_path("/ws/old")), [])

    def test_worker_exception_is_delivered_as_result(self) -> None:
        def list_children(_target: Path) -> str:
            raise RuntimeError("boom")

        scheduler = ListingScheduler(list_children)
        target = normalize_path("/ws")
        scheduler.request(target)
        results = _wait_for_results(scheduler, target, expected_count=1)

        self.assertIsInstance(results[0].result, RuntimeError)


if __name__ == "__main__":
    unittest.main()
