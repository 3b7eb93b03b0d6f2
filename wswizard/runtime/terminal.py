"""Terminal mode control for the interactive surfaces.

The session draws full frames on the alternate screen with the cursor hidden
and autowrap off, so rows padded to the terminal width never spill over.
"""

from __future__ import annotations

import contextlib
import os
import shutil
import termios
import tty

# Alternate screen, hidden cursor, autowrap off.
ENTER_SCREEN = b"\x1b[?1049h\x1b[?25l\x1b[?7l"
LEAVE_SCREEN = b"\x1b[?7h\x1b[?25h\x1b[?1049l"
HOME = "\x1b[H"
CLEAR_TO_END = "\x1b[J"
FALLBACK_SIZE = (80, 24)


class TerminalController:
    """Raw-mode lifecycle and frame output on one pair of descriptors."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_attrs = termios.tcgetattr(stdin_fd)

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, ENTER_SCREEN)

    def disable_tui_mode(self) -> None:
        """Restore the main screen first, then the saved tty attributes."""
        os.write(self.stdout_fd, LEAVE_SCREEN)
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_attrs)

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)``."""
        size = shutil.get_terminal_size(FALLBACK_SIZE)
        return size.columns, size.lines

    def write_frame(self, lines: list[str]) -> None:
        """Repaint from the top-left corner and clear whatever is below."""
        payload = HOME + "\r\n".join(lines) + CLEAR_TO_END
        os.write(self.stdout_fd, payload.encode("utf-8", errors="replace"))

    @contextlib.contextmanager
    def raw_mode(self):
        self.enable_tui_mode()
        try:
            yield self
        finally:
            self.disable_tui_mode()


__all__ = ["TerminalController"]
