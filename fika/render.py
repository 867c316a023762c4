"""Frame rendering for the reading, command-entry, and search-results views.

Every function here is a pure function of session state and the laid-out
lines: it returns the rows of one full frame, status line first. Painting
(clearing the screen and writing the rows) is the terminal's job.
"""

from __future__ import annotations

import math

from .layout import DisplayLine, LayoutResult
from .session import COMMAND_ENTRY, SEARCH_RESULTS, SessionState
from .style import colorize, inverse

GUTTER_SEPARATOR = " | "
FINISHED_LABEL = "\U0001f389 Finished"
END_LABEL = "END"
NO_RESULT_LABEL = "No result"
MAX_PANEL_COMMAND_CHARS = 22


def gutter(number: int, number_width: int) -> str:
    return colorize(f"{number:>{number_width}}{GUTTER_SEPARATOR}", "cyan")


def progress_label(offset: int, viewport_rows: int, total: int) -> str:
    if offset >= total:
        return colorize(END_LABEL, "green", bold=True)
    if offset + viewport_rows > total:
        return colorize(FINISHED_LABEL, "green", bold=True)
    return colorize(f"{offset / total * 100:.2f}%", "cyan", bold=True)


def status_line(book_name: str, state: SessionState, total: int) -> str:
    """Title row: book name, position fraction, and progress indicator."""
    position = min(state.offset + 1, total)
    line = (
        f"{colorize(book_name, 'yellow', bold=True)} "
        f"{colorize(f'({position}/{total})', 'yellow', bold=True)} - "
        f"{progress_label(state.offset, state.viewport_rows, total)}"
    )
    if state.mode == COMMAND_ENTRY:
        line += "  " + colorize(f":{state.command_buffer}", "magenta", bold=True) + inverse(" ")
    return line


def content_row(line: DisplayLine, number_width: int) -> str:
    return gutter(line.number, number_width) + line.text


def render_reading_frame(state: SessionState, layout: LayoutResult, book_name: str) -> list[str]:
    """Status line plus the viewport starting at ``state.offset``."""
    rows = [status_line(book_name, state, len(layout))]
    for line in layout.lines[state.offset : state.offset + state.viewport_rows]:
        rows.append(content_row(line, layout.number_width))
    return rows


def search_window(match_index: int, viewport_rows: int, total: int) -> tuple[int, int]:
    """Return the ``[start, end)`` slice centered on ``match_index``.

    ``ceil((rows - 1) / 2)`` rows precede the match and the rest follow it.
    The window is clamped to the document, so near either end the match
    moves off-center instead of the frame showing fewer rows.
    """
    rows = max(1, viewport_rows)
    before = math.ceil((rows - 1) / 2)
    start = max(0, min(match_index - before, total - rows))
    return start, min(total, start + rows)


def highlight_match(text: str, query: str) -> str:
    """Style a matched row, marking each occurrence of ``query`` more strongly."""
    parts = text.split(query) if query else [text]
    out: list[str] = []
    for index, part in enumerate(parts):
        if index:
            out.append(colorize(query, "red", bold=True, underline=True))
        if part:
            out.append(colorize(part, "yellow", bold=True))
    return "".join(out)


def search_status_line(book_name: str, state: SessionState) -> str:
    query = colorize(state.search_query, "magenta", bold=True)
    matches = state.search_matches
    if not matches:
        summary = colorize(NO_RESULT_LABEL, "red", bold=True)
    else:
        summary = colorize(f"{state.search_cursor + 1}/{len(matches)}", "yellow", bold=True)
    return f"{colorize(book_name, 'yellow', bold=True)} - search {query}: {summary}"


def render_search_frame(state: SessionState, layout: LayoutResult, book_name: str) -> list[str]:
    rows = [search_status_line(book_name, state)]
    if not state.search_matches:
        rows.append(colorize(f'{NO_RESULT_LABEL} for "{state.search_query}". Press q to go back.', "gray"))
        return rows

    match_index = state.search_matches[state.search_cursor]
    start, end = search_window(match_index, state.viewport_rows, len(layout))
    for index in range(start, end):
        line = layout.lines[index]
        if index == match_index:
            rows.append(inverse(f"{line.number:>{layout.number_width}}{GUTTER_SEPARATOR}")
                        + highlight_match(line.text, state.search_query))
        else:
            rows.append(content_row(line, layout.number_width))
    return rows


def render_frame(state: SessionState, layout: LayoutResult, book_name: str) -> list[str]:
    """Render the frame for the current mode."""
    if state.mode == SEARCH_RESULTS:
        return render_search_frame(state, layout, book_name)
    return render_reading_frame(state, layout, book_name)


def truncate_command(command: str, limit: int = MAX_PANEL_COMMAND_CHARS) -> str:
    if len(command) <= limit:
        return command
    return command[:limit] + "..."


def render_unknown_command_panel(state: SessionState, command: str, book_name: str, total: int) -> list[str]:
    """Bordered error panel naming the unknown command, below the status line."""
    body = [
        f"Unknown command: {truncate_command(command)}",
        "Enter: back to reading   q: save and quit",
    ]
    inner = max(len(text) for text in body) + 2
    panel = [colorize("┌" + "─" * inner + "┐", "red")]
    for text in body:
        panel.append(colorize("│", "red") + f" {text:<{inner - 2}} " + colorize("│", "red"))
    panel.append(colorize("└" + "─" * inner + "┘", "red"))

    top = max(0, (state.viewport_rows - len(panel)) // 2)
    return [status_line(book_name, state, total)] + [""] * top + panel
