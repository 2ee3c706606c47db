"""Raw-mode lifecycle for the launcher screen.

The launcher draws on the alternate screen with the cursor hidden and asks
for SGR mouse reports, including bare pointer motion for hover selection.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

# Button presses, any-motion tracking, SGR coordinates.
_MOUSE_MODES = (1000, 1003, 1006)
_ENTER_SEQUENCE = b"\x1b[?1049h\x1b[?25l" + b"".join(f"\x1b[?{mode}h".encode() for mode in _MOUSE_MODES)
_LEAVE_SEQUENCE = b"".join(f"\x1b[?{mode}l".encode() for mode in _MOUSE_MODES) + b"\x1b[?25h\x1b[?1049l"


class TerminalController:
    """Switch a tty into launcher mode and back."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_attrs = termios.tcgetattr(stdin_fd)
        self._active = False

    @property
    def active(self) -> bool:
        return self._active

    def enable_tui_mode(self) -> None:
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, _ENTER_SEQUENCE)
        self._active = True

    def disable_tui_mode(self) -> None:
        """Undo ``enable_tui_mode``; a second call is a no-op."""
        if not self._active:
            return
        self._active = False
        try:
            os.write(self.stdout_fd, _LEAVE_SEQUENCE)
        finally:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_attrs)

    @contextlib.contextmanager
    def raw_mode(self):
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()
