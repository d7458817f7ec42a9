"""Frame composition.

The :class:`Renderer` turns the row store and the cursor state into one
:class:`~pound.output.FrameBuffer` per refresh:

1.  Hide the cursor and home it.
2.  Emit one line per terminal row (file content, ``~`` filler, or the
    welcome banner for an empty buffer), each followed by a
    clear-to-end-of-line so a previous wider frame leaves nothing behind.
3.  Move the cursor to its on-screen position and show it again.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING

from pound import __version__
from pound.output import FrameBuffer
from pound.utils import slice_by_column, visible_width, wrap_text

if TYPE_CHECKING:
    from pound.rows import RowStore
    from pound.terminal import Terminal
    from pound.viewport import CursorState

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# Control sequences
# ---------------------------------------------------------------------------

HIDE_CURSOR = "\x1b[?25l"
SHOW_CURSOR = "\x1b[?25h"
CURSOR_HOME = "\x1b[H"
CLEAR_LINE = "\x1b[K"
CLEAR_SCREEN = "\x1b[2J"
ROW_SEPARATOR = "\r\n"

FILLER = "~"


def move_cursor_to(column: int, row: int) -> str:
    """CUP sequence for the zero-based *column*/*row*."""
    return f"\x1b[{row + 1};{column + 1}H"


class Renderer:
    """Composes frames and writes them to a terminal."""

    def __init__(self, terminal: Terminal, *, version: str = __version__) -> None:
        self.terminal = terminal
        self.welcome = f"Pound editor -- Version {version}"
        self._frames_drawn = 0

    @property
    def frames_drawn(self) -> int:
        return self._frames_drawn

    def welcome_line(self, width: int) -> str:
        """The banner centered in *width* columns, led by a ``~``.

        A banner wider than the terminal is word-wrapped and the pieces
        are joined back together with nothing between them.
        """
        banner_width = visible_width(self.welcome)
        if banner_width > width:
            return "".join(wrap_text(self.welcome, width))

        padding = (width - banner_width) // 2
        line = ""
        if padding > 0:
            line = FILLER
            padding -= 1
        return line + " " * padding + self.welcome

    def draw_rows(self, rows: RowStore, state: CursorState) -> list[str]:
        """Text for every terminal row, top to bottom, without controls."""
        width = state.width
        height = state.height
        first_row = state.first_visible_row()
        first_column = state.first_visible_column()
        row_count = rows.row_count()

        lines: list[str] = []
        for screen_row in range(height):
            file_row = screen_row + first_row
            if file_row < row_count:
                lines.append(
                    slice_by_column(rows.row_at(file_row), first_column, width)
                )
            elif rows.is_empty() and screen_row == height // 3:
                lines.append(self.welcome_line(width))
            else:
                lines.append(FILLER)
        return lines

    def render(self, rows: RowStore, state: CursorState) -> FrameBuffer:
        """Compose one complete frame."""
        frame = FrameBuffer()
        frame.append(HIDE_CURSOR)
        frame.append(CURSOR_HOME)

        frame.lines = self.draw_rows(rows, state)
        for i, line in enumerate(frame.lines):
            if i > 0:
                frame.append(ROW_SEPARATOR)
            frame.append(line)
            frame.append(CLEAR_LINE)

        frame.cursor = state.screen_position()
        frame.append(move_cursor_to(*frame.cursor))
        frame.append(SHOW_CURSOR)
        return frame

    def refresh(self, rows: RowStore, state: CursorState) -> FrameBuffer:
        """Scroll to the cursor, render, and flush the frame."""
        state.recompute_scroll()
        frame = self.render(rows, state)
        frame.flush(self.terminal)
        self._frames_drawn += 1
        logger.debug(
            "frame %d: cursor=(%d, %d) offsets=(%d, %d) size=%dx%d",
            self._frames_drawn,
            state.x,
            state.y,
            state.column_offset,
            state.row_offset,
            state.width,
            state.height,
        )
        return frame

    def clear_full_screen(self) -> None:
        """Clear the whole terminal and home the cursor."""
        self.terminal.write(CLEAR_SCREEN + CURSOR_HOME)
