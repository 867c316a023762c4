"""Command-line front door for fika.

Parses CLI options, loads settings and the progress store, opens the book,
and runs the interactive reading session. Fatal ``FikaError``s are reported
here and nowhere else.
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from . import __version__
from .config import load_settings
from .errors import FikaError, NotATerminalError, print_panic
from .log import configure_logging, debug_requested_by_env
from .runtime import exit_on_signals, open_session, run_session, save_progress
from .store import ProgressStore
from .style import colorize
from .terminal import TerminalController

logger = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="fika",
        description="Read a plain-text book in the terminal and resume where you left off.",
    )
    parser.add_argument("path", help="Path to the book file (absolute, relative, or ~/...).")
    parser.add_argument(
        "--keep-blank-lines",
        action="store_true",
        default=None,
        help="Keep blank lines instead of stripping them.",
    )
    parser.add_argument("--debug", action="store_true", help="Write debug logs to the fika log file.")
    parser.add_argument("--version", action="version", version=f"fika {__version__}")
    return parser


def read_book(path: str, keep_blank_lines: bool | None = None) -> None:
    """Open ``path`` and run a reading session, saving progress on every exit path."""
    if not (sys.stdin.isatty() and sys.stdout.isatty()):
        raise NotATerminalError("fika needs an interactive terminal on stdin and stdout")

    settings = load_settings()
    if keep_blank_lines is None:
        keep_blank_lines = settings.keep_blank_lines

    store = ProgressStore.load()
    session = open_session(path, store, settings, keep_blank_lines=keep_blank_lines)
    if session.book.converted:
        sys.stderr.write(
            f"Encoding is detected as {colorize(session.book.detected_encoding, 'yellow', bold=True)}. "
            f"Converted it to {colorize('utf-8', 'cyan', bold=True)}.\n"
        )

    terminal = TerminalController(sys.stdin.fileno(), sys.stdout.fileno())
    with exit_on_signals():
        try:
            run_session(session, terminal, sys.stdin.fileno())
        finally:
            save_progress(session, store)


def main(argv: Sequence[str] | None = None) -> None:
    """Parse CLI arguments and read the requested book."""
    args = build_parser().parse_args(argv)
    configure_logging(args.debug or debug_requested_by_env())
    try:
        read_book(args.path, args.keep_blank_lines)
    except FikaError as exc:
        logger.debug("Fatal error: %s", exc)
        print_panic(exc)


if __name__ == "__main__":
    main()
