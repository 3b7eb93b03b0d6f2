"""Editor launch helper for opening workspace files.

Runs the configured editor CLI (``code`` by default) detached, either reusing
the current window or forcing a new one. Returns an error message string
instead of raising for UI-friendly handling.
"""

from __future__ import annotations

import logging
import shlex
import subprocess
from collections.abc import Callable
from pathlib import Path

logger = logging.getLogger(__name__)

NEW_WINDOW_FLAG = "--new-window"
REUSE_WINDOW_FLAG = "--reuse-window"


def build_launch_command(command: str, target: Path, new_window: bool) -> list[str] | None:
    """Return argv for opening ``target``, or ``None`` when ``command`` is empty."""
    cmd = shlex.split(command.strip()) if command else []
    if not cmd:
        return None
    flag = NEW_WINDOW_FLAG if new_window else REUSE_WINDOW_FLAG
    return [*cmd, flag, str(target)]


class EditorLauncher:
    """Launch capability: open a workspace path in the host editor."""

    def __init__(
        self,
        command: str = "code",
        popen: Callable[..., object] = subprocess.Popen,
    ) -> None:
        self.command = command
        self._popen = popen

    def launch(self, target: Path, new_window: bool) -> str | None:
        argv = build_launch_command(self.command, target, new_window)
        if argv is None:
            return "Cannot open workspace: launch command is empty."
        logger.info("Launching %s", shlex.join(argv))
        try:
            self._popen(
                argv,
                stdin=subprocess.DEVNULL,
                stdout=subprocess.DEVNULL,
                stderr=subprocess.DEVNULL,
                start_new_session=True,
            )
        except OSError as exc:
            logger.warning("Launch failed for %s: %s", target, exc)
            return f"Failed to launch {argv[0]}: {exc}"
        return None


__all__ = [
    "NEW_WINDOW_FLAG",
    "REUSE_WINDOW_FLAG",
    "build_launch_command",
    "EditorLauncher",
]
