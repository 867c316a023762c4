"""Reading-session state machine.

A session is in one of three modes: reading, command entry (after ``:``),
or browsing search results. Each key token is handled to completion and
yields a ``KeyResult`` telling the runtime whether to repaint, quit, or
show the unknown-command panel. Clamping and no-op keys are absorbed here;
nothing raised from this module is meant to reach the user.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field

from .key_registry import KeyBinding, KeyRegistry
from .layout import LayoutResult
from .loader import LoadedBook
from .store import ProgressRecord

logger = logging.getLogger(__name__)

READING = "reading"
COMMAND_ENTRY = "command"
SEARCH_RESULTS = "search"

ENTER = "ENTER"
BACKSPACE = "BACKSPACE"
ESC = "ESC"

SEARCH_VERB = "s"
GOTO_VERB = "g"


@dataclass(frozen=True)
class KeyResult:
    action: str
    command: str = ""


NOOP = KeyResult("noop")
RENDER = KeyResult("render")
QUIT = KeyResult("quit")
UNKNOWN_COMMAND = "unknown_command"


@dataclass
class SessionState:
    mode: str = READING
    offset: int = 0
    viewport_rows: int = 1
    command_buffer: str = ""
    search_query: str = ""
    search_matches: list[int] = field(default_factory=list)
    search_cursor: int = 0


def clamp(value: int, low: int, high: int) -> int:
    return max(low, min(value, high))


def find_matches(texts: list[str], query: str) -> list[int]:
    """Return ascending indices of every text containing ``query`` literally."""
    return [index for index, text in enumerate(texts) if query in text]


def parse_command(buffer: str) -> tuple[str, str]:
    """Split ``"<verb> <args>"`` into verb and the raw argument string."""
    verb, _, args = buffer.lstrip().partition(" ")
    return verb, args


def is_printable_key(key: str) -> bool:
    return len(key) == 1 and key.isprintable()


class ReadingSession:
    """Owns the live ``SessionState`` and the progress record it resumes from."""

    def __init__(
        self,
        book: LoadedBook,
        layout: LayoutResult,
        record: ProgressRecord,
        state: SessionState | None = None,
    ) -> None:
        self.book = book
        self.layout = layout
        self.record = record
        self.state = state if state is not None else SessionState()
        self._texts = layout.texts()
        self._registries = {
            READING: KeyRegistry().register(
                KeyBinding(("q",), lambda: QUIT),
                KeyBinding(("j",), self.page_down),
                KeyBinding(("k",), self.page_up),
                KeyBinding((":",), self.open_command_entry),
            ),
            COMMAND_ENTRY: KeyRegistry(fallback=self._append_to_command).register(
                KeyBinding((ENTER,), self.submit_command),
                KeyBinding((BACKSPACE,), self.delete_command_char),
                KeyBinding((ESC,), self.cancel_command),
            ),
            SEARCH_RESULTS: KeyRegistry().register(
                KeyBinding(("q",), self.close_search),
                KeyBinding(("j",), lambda: self.move_search_cursor(1)),
                KeyBinding(("k",), lambda: self.move_search_cursor(-1)),
                KeyBinding((ENTER,), self.jump_to_search_match),
            ),
        }

    @property
    def total_lines(self) -> int:
        return len(self.layout)

    @property
    def book_name(self) -> str:
        return self.book.name

    def resume(self) -> None:
        """Start reading at the stored progress, clamped to the current layout."""
        self.state.offset = clamp(self.record.progress, 0, self.total_lines)
        logger.debug("Loaded book progress: %d", self.state.offset)

    def resize(self, terminal_rows: int) -> bool:
        """Fit the viewport to ``terminal_rows`` (one row is the status line)."""
        rows = max(1, terminal_rows - 1)
        if rows == self.state.viewport_rows:
            return False
        self.state.viewport_rows = rows
        logger.debug("Book view size: %d rows", rows)
        return True

    def sync_progress(self) -> ProgressRecord:
        self.record.progress = self.state.offset
        return self.record

    def handle_key(self, key: str) -> KeyResult:
        """Process one key token in the current mode; unbound keys are no-ops."""
        result = self._registries[self.state.mode].dispatch(key)
        return result if result is not None else NOOP

    # Reading

    def page_down(self) -> KeyResult:
        self.state.offset = min(self.state.offset + self.state.viewport_rows, self.total_lines)
        return RENDER

    def page_up(self) -> KeyResult:
        self.state.offset = max(0, self.state.offset - self.state.viewport_rows)
        return RENDER

    def open_command_entry(self) -> KeyResult:
        self.state.mode = COMMAND_ENTRY
        self.state.command_buffer = ""
        return RENDER

    # Command entry

    def _append_to_command(self, key: str) -> KeyResult | None:
        if not is_printable_key(key):
            return None
        self.state.command_buffer += key
        return RENDER

    def delete_command_char(self) -> KeyResult:
        self.state.command_buffer = self.state.command_buffer[:-1]
        return RENDER

    def cancel_command(self) -> KeyResult:
        self.state.command_buffer = ""
        self.state.mode = READING
        return RENDER

    def submit_command(self) -> KeyResult:
        buffer = self.state.command_buffer
        self.state.command_buffer = ""
        self.state.mode = READING
        return self.execute_command(buffer)

    def execute_command(self, buffer: str) -> KeyResult:
        verb, args = parse_command(buffer)
        logger.debug("Executing command verb=%r args=%r", verb, args)
        if not verb:
            return RENDER
        if verb == SEARCH_VERB:
            if args:
                self.search(args)
            return RENDER
        if verb == GOTO_VERB:
            try:
                target = int(args)
            except ValueError:
                return RENDER
            self.goto_line(target)
            return RENDER
        return KeyResult(UNKNOWN_COMMAND, command=verb)

    def goto_line(self, line_number: int) -> None:
        """Move to 1-based ``line_number``, clamped to ``[0, total_lines]`` as an offset."""
        self.state.offset = clamp(line_number - 1, 0, self.total_lines)
        self.state.mode = READING

    def search(self, query: str) -> list[int]:
        self.state.search_query = query
        self.state.search_matches = find_matches(self._texts, query)
        self.state.search_cursor = 0
        self.state.mode = SEARCH_RESULTS
        logger.debug("Search %r matched %d lines", query, len(self.state.search_matches))
        return self.state.search_matches

    # Search results

    def current_match(self) -> int | None:
        matches = self.state.search_matches
        if not matches:
            return None
        return matches[clamp(self.state.search_cursor, 0, len(matches) - 1)]

    def move_search_cursor(self, delta: int) -> KeyResult:
        matches = self.state.search_matches
        if not matches:
            return NOOP
        self.state.search_cursor = clamp(self.state.search_cursor + delta, 0, len(matches) - 1)
        return RENDER

    def jump_to_search_match(self) -> KeyResult:
        match = self.current_match()
        if match is not None:
            self.state.offset = match
        self._clear_search()
        return RENDER

    def close_search(self) -> KeyResult:
        self._clear_search()
        return RENDER

    def _clear_search(self) -> None:
        self.state.mode = READING
        self.state.search_query = ""
        self.state.search_matches = []
        self.state.search_cursor = 0
