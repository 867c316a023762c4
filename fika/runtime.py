"""Session bootstrap and the interactive key loop.

``open_session`` runs the setup pipeline (load, lay out, attach progress,
size to the terminal). ``run_session`` then reads one key at a time and
dispatches it to completion before reading the next. Every way out of the
loop ends in ``save_progress``.
"""

from __future__ import annotations

import contextlib
import logging
import os
import shutil
import signal
from collections.abc import Callable
from pathlib import Path

from .config import Settings
from .input import read_key
from .layout import display_width_for, layout_text
from .loader import open_book
from .render import render_frame, render_unknown_command_panel
from .session import ENTER, QUIT, RENDER, UNKNOWN_COMMAND, ReadingSession
from .store import ProgressStore
from .terminal import TerminalController

logger = logging.getLogger(__name__)

TerminalSize = Callable[[], os.terminal_size]


def default_terminal_size() -> os.terminal_size:
    return shutil.get_terminal_size((80, 24))


def open_session(
    user_path: str | os.PathLike[str],
    store: ProgressStore,
    settings: Settings,
    *,
    keep_blank_lines: bool = False,
    terminal_size: TerminalSize = default_terminal_size,
    cwd: Path | None = None,
) -> ReadingSession:
    """Build a ready-to-run session for the book at ``user_path``."""
    book = open_book(user_path, convert_in_place=settings.convert_in_place, cwd=cwd)
    size = terminal_size()
    width = display_width_for(size.columns, settings.width_factor)
    logger.debug("Terminal width: %d", size.columns)
    layout = layout_text(book.content, width, keep_blank_lines=keep_blank_lines)

    session = ReadingSession(book, layout, store.find_or_create(book.path))
    session.resume()
    session.resize(size.lines)
    return session


def save_progress(session: ReadingSession, store: ProgressStore) -> None:
    """Copy the session offset into its progress record and persist the store."""
    record = session.sync_progress()
    logger.debug("Saving progress %d for %s", record.progress, record.path)
    store.save()


def wait_for_panel_dismissal(stdin_fd: int, read: Callable[[int], str] = read_key) -> bool:
    """Block until Enter or ``q``; return ``True`` when the user chose to quit.

    Every other key is ignored. End of input counts as quitting.
    """
    while True:
        key = read(stdin_fd)
        if key in {"", "q"}:
            return True
        if key == ENTER:
            return False


def run_session(
    session: ReadingSession,
    terminal: TerminalController,
    stdin_fd: int,
    *,
    read: Callable[[int], str] = read_key,
    terminal_size: TerminalSize = default_terminal_size,
) -> None:
    """Run the key loop in raw mode until the user quits or input ends."""

    def paint() -> None:
        terminal.paint(render_frame(session.state, session.layout, session.book_name))

    with terminal.raw_mode():
        paint()
        while True:
            key = read(stdin_fd)
            if not key:
                logger.debug("Input closed, leaving session")
                break
            resized = session.resize(terminal_size().lines)
            result = session.handle_key(key)
            if result == QUIT:
                break
            if result.action == UNKNOWN_COMMAND:
                terminal.paint(
                    render_unknown_command_panel(
                        session.state, result.command, session.book_name, session.total_lines
                    )
                )
                if wait_for_panel_dismissal(stdin_fd, read):
                    break
                paint()
            elif result == RENDER or resized:
                paint()
        terminal.clear_screen()


def _raise_exit(signum: int, _frame: object) -> None:
    raise SystemExit(128 + signum)


@contextlib.contextmanager
def exit_on_signals(signals: tuple[int, ...] = (signal.SIGTERM, signal.SIGHUP)):
    """Turn termination signals into ``SystemExit`` so ``finally`` blocks still run."""
    previous = {signum: signal.signal(signum, _raise_exit) for signum in signals}
    try:
        yield
    finally:
        for signum, handler in previous.items():
            signal.signal(signum, handler)
