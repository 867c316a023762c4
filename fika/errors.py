"""Failure taxonomy for fika and the top-level panic reporter.

Loader and store failures are fatal: they surface here as ``FikaError``
subclasses and end the process. Key-handling problems never reach this layer.
"""

from __future__ import annotations

import sys
from typing import NoReturn, TextIO

from .style import colorize

PANIC_EXIT_CODE = 1


class FikaError(Exception):
    """Base class for user-visible fatal errors."""


class BookLoadError(FikaError):
    """Book file is missing, unreadable, or cannot be decoded."""


class StoreError(FikaError):
    """Progress store is corrupt, unreadable, or unwritable."""


class NotATerminalError(FikaError):
    """Interactive reading was requested without a TTY on stdin/stdout."""


def format_panic(err: object) -> str:
    return colorize(f"fika panic: {err}", "red", bold=True)


def print_panic(err: object, stream: TextIO | None = None) -> NoReturn:
    """Report ``err`` on stderr and exit with ``PANIC_EXIT_CODE``."""
    out = stream if stream is not None else sys.stderr
    out.write(format_panic(err) + "\n")
    out.flush()
    raise SystemExit(PANIC_EXIT_CODE)
