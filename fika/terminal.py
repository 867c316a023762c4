"""Terminal control for the reading session.

Owns raw-mode lifecycle, the alternate screen, cursor visibility, and
full-screen frame painting.
"""

from __future__ import annotations

import contextlib
import os
import termios
import tty

CLEAR_SCREEN = b"\x1b[2J\x1b[3J\x1b[H"


class TerminalController:
    """Switch the tty into raw reading mode and paint whole frames."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        """Capture tty state and bind stdin/stdout file descriptors."""
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state = termios.tcgetattr(stdin_fd)

    def enable_reading_mode(self) -> None:
        """Enter raw mode on the alternate screen with the cursor hidden."""
        tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        os.write(self.stdout_fd, b"\x1b[?1049h\x1b[?25l")

    def disable_reading_mode(self) -> None:
        """Show the cursor, leave the alternate screen, and restore tty attributes.

        A hung-up terminal rejects the writes; tty attributes are still restored.
        """
        with contextlib.suppress(OSError):
            os.write(self.stdout_fd, b"\x1b[?25h\x1b[?1049l")
        termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, self._saved_tty_state)

    def clear_screen(self) -> None:
        os.write(self.stdout_fd, CLEAR_SCREEN)

    def paint(self, rows: list[str]) -> None:
        """Clear the screen and write ``rows`` as one frame.

        Raw mode disables output post-processing, so rows end in CR LF.
        """
        payload = "\r\n".join(rows).encode("utf-8", errors="replace")
        os.write(self.stdout_fd, CLEAR_SCREEN + payload)

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with reading-mode enter/exit calls."""
        try:
            self.enable_reading_mode()
            yield
        finally:
            self.disable_reading_mode()
