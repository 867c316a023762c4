"""ANSI SGR helpers for status lines, gutters, and search highlights.

Thin layer over ``pygments.console`` so every styled fragment ends with a
full reset and callers never hand-assemble escape codes.
"""

from __future__ import annotations

import re

from pygments.console import ansiformat, codes

ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")


def colorize(text: str, color: str, *, bold: bool = False, underline: bool = False) -> str:
    """Wrap ``text`` in the pygments console color ``color`` plus optional attributes."""
    attr = color
    if underline:
        attr = f"_{attr}_"
    if bold:
        attr = f"*{attr}*"
    return ansiformat(attr, text)


def inverse(text: str) -> str:
    """Render ``text`` with swapped foreground/background."""
    return f"\x1b[7m{text}{codes['reset']}"


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)
