"""Cursor position, viewport extents and scroll offsets.

Two movement policies share one state object:

* **scrolling** (default): the cursor may travel past the visible area and
  :meth:`CursorState.recompute_scroll` moves the offsets so that it stays
  on screen.
* **bounded**: the cursor is pinned to the visible rows and columns and
  the offsets stay at zero.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass

from pound.errors import ContractViolation, DegenerateSizeError


class Direction(enum.Enum):
    UP = "up"
    DOWN = "down"
    LEFT = "left"
    RIGHT = "right"


def _check_size(width: int, height: int) -> None:
    if width <= 0 or height <= 0:
        raise DegenerateSizeError(width, height)


@dataclass
class CursorState:
    """Cursor (buffer coordinates), viewport bounds and scroll offsets.

    ``x_max``/``y_max`` are the largest on-screen column/row index, i.e.
    terminal width and height minus one.
    """

    x_max: int
    y_max: int
    x: int = 0
    y: int = 0
    column_offset: int = 0
    row_offset: int = 0
    scrolling: bool = True

    @classmethod
    def initialize(
        cls, width: int, height: int, *, scrolling: bool = True
    ) -> CursorState:
        """Create the state for a *width* x *height* terminal."""
        _check_size(width, height)
        return cls(x_max=width - 1, y_max=height - 1, scrolling=scrolling)

    @property
    def width(self) -> int:
        return self.x_max + 1

    @property
    def height(self) -> int:
        return self.y_max + 1

    # -- movement -------------------------------------------------------

    def move_cursor(self, direction: Direction, row_count: int) -> None:
        """Move the cursor one step in *direction*.

        Up and left saturate at zero. In the scrolling variant down stops
        one row past the last row and right is not limited here; the next
        :meth:`recompute_scroll` brings the viewport along. In the bounded
        variant down and right stop at the last visible row/column.
        """
        if direction is Direction.UP:
            self.y = max(self.y - 1, 0)
        elif direction is Direction.LEFT:
            self.x = max(self.x - 1, 0)
        elif direction is Direction.DOWN:
            if not self.scrolling:
                self.y = min(self.y + 1, self.y_max)
            elif self.y < row_count:
                self.y += 1
        elif direction is Direction.RIGHT:
            if self.scrolling:
                self.x += 1
            else:
                self.x = min(self.x + 1, self.x_max)
        else:
            raise ContractViolation(f"not a cursor direction: {direction!r}")

    def recompute_scroll(self) -> None:
        """Shift the offsets so the cursor lies inside the viewport.

        Afterwards ``row_offset <= y <= row_offset + y_max`` and
        ``column_offset <= x <= column_offset + x_max``.
        """
        if not self.scrolling:
            return

        self.row_offset = min(self.row_offset, self.y)
        if self.y >= self.row_offset + self.y_max + 1:
            self.row_offset = self.y - self.y_max

        self.column_offset = min(self.column_offset, self.x)
        if self.x >= self.column_offset + self.x_max + 1:
            self.column_offset = self.x - self.x_max

    def on_resize(self, width: int, height: int) -> None:
        """Adopt a new terminal size and pull the cursor inside it.

        Offsets are left alone; they are fixed up by the next
        :meth:`recompute_scroll`.
        """
        _check_size(width, height)
        self.x_max = width - 1
        self.y_max = height - 1
        self.x = min(self.x, self.x_max)
        self.y = min(self.y, self.y_max)

    # -- queries ----------------------------------------------------------

    def first_visible_row(self) -> int:
        return self.row_offset if self.scrolling else 0

    def first_visible_column(self) -> int:
        return self.column_offset if self.scrolling else 0

    def screen_position(self) -> tuple[int, int]:
        """On-screen ``(column, row)`` of the cursor."""
        return (
            self.x - self.first_visible_column(),
            self.y - self.first_visible_row(),
        )
