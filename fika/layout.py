"""Line layout: wrap logical lines to the reading width.

Over-wide lines are cut into fixed-size chunks. Every chunk after the first
is prefixed with the whitespace run that ends the first chunk, which keeps
indentation roughly continuous. This is chunking, not word wrap: a boundary
without trailing whitespace gets no prefix.
"""

from __future__ import annotations

import logging
import math
import re
from dataclasses import dataclass

from .config import DEFAULT_WIDTH_FACTOR

logger = logging.getLogger(__name__)

_TRAILING_WS_RE = re.compile(r"\s*$")


@dataclass(frozen=True)
class DisplayLine:
    number: int  # 1-based position among all display lines
    body: str
    prefix: str = ""

    @property
    def text(self) -> str:
        return self.prefix + self.body


@dataclass(frozen=True)
class LayoutResult:
    lines: tuple[DisplayLine, ...]
    number_width: int

    def __len__(self) -> int:
        return len(self.lines)

    def texts(self) -> list[str]:
        return [line.text for line in self.lines]


def display_width_for(columns: int, width_factor: float = DEFAULT_WIDTH_FACTOR) -> int:
    return int(math.floor(width_factor * columns))


def chunk_string(text: str, size: int) -> list[str]:
    """Split ``text`` into consecutive ``size``-character chunks."""
    if size <= 0:
        return [text]
    return [text[i : i + size] for i in range(0, len(text), size)]


def split_logical_lines(text: str) -> list[str]:
    """Split on ``\\n``; a trailing newline does not add an empty final line."""
    if not text:
        return []
    lines = text.split("\n")
    if text.endswith("\n"):
        lines.pop()
    return lines


def wrap_line(line: str, width: int) -> list[tuple[str, str]]:
    """Return ``(prefix, body)`` fragments for one logical line."""
    if width <= 0 or len(line) <= width:
        return [("", line)]
    chunks = chunk_string(line, width)
    indent = _TRAILING_WS_RE.search(chunks[0]).group(0)
    return [("", chunks[0])] + [(indent, chunk) for chunk in chunks[1:]]


def layout_text(text: str, width: int, keep_blank_lines: bool = False) -> LayoutResult:
    """Lay out ``text`` into numbered display lines no wider than ``width``.

    Blank (empty or whitespace-only) logical lines are dropped unless
    ``keep_blank_lines`` is set, in which case they become empty display lines.
    ``width <= 0`` disables splitting.
    """
    logical = split_logical_lines(text)
    logger.debug("Display width: %d", width)
    logger.debug(
        "Has line length greater than %d: %s",
        width,
        width > 0 and any(len(line) > width for line in logical),
    )

    lines: list[DisplayLine] = []
    for line in logical:
        if not line.strip():
            if keep_blank_lines:
                lines.append(DisplayLine(number=len(lines) + 1, body=""))
            continue
        for prefix, body in wrap_line(line, width):
            lines.append(DisplayLine(number=len(lines) + 1, body=body, prefix=prefix))

    return LayoutResult(lines=tuple(lines), number_width=len(str(len(lines))))
