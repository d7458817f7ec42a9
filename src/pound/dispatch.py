"""Translate input events into cursor updates or a quit request."""

from __future__ import annotations

import enum
import logging

from pound.errors import ConfigError, ContractViolation
from pound.events import Event, KeyEvent, OtherEvent, ResizeEvent
from pound.keys import Key
from pound.rows import RowStore
from pound.viewport import CursorState, Direction

logger = logging.getLogger(__name__)

DEFAULT_QUIT_KEY = Key.ctrl("q")

_DIRECTIONS: dict[str, Direction] = {
    Key.up: Direction.UP,
    Key.down: Direction.DOWN,
    Key.left: Direction.LEFT,
    Key.right: Direction.RIGHT,
}


class ControlSignal(enum.Enum):
    CONTINUE = "continue"
    QUIT = "quit"


def parse_quit_key(key_id: str) -> KeyEvent:
    """Turn a key identifier such as ``"ctrl+q"`` into the quit chord."""
    chord = KeyEvent.from_key_id(key_id.strip())
    if chord is None:
        raise ConfigError(f"invalid quit key: {key_id!r}")
    return chord


class Dispatcher:
    """Applies events to a :class:`CursorState`."""

    def __init__(
        self,
        rows: RowStore,
        state: CursorState,
        *,
        quit_key: str = DEFAULT_QUIT_KEY,
    ) -> None:
        self.rows = rows
        self.state = state
        self.quit_chord = parse_quit_key(quit_key)

    def dispatch(self, event: Event) -> ControlSignal:
        """Handle one event.

        * The quit chord (exact modifiers) returns ``QUIT`` and changes
          nothing.
        * An unmodified arrow key moves the cursor.
        * A resize adopts the new size.
        * Everything else is ignored.
        """
        if isinstance(event, KeyEvent):
            if event == self.quit_chord:
                logger.debug("quit chord %s", event)
                return ControlSignal.QUIT
            direction = _DIRECTIONS.get(event.code)
            if direction is not None and not event.modifiers:
                self.state.move_cursor(direction, self.rows.row_count())
            return ControlSignal.CONTINUE

        if isinstance(event, ResizeEvent):
            logger.debug("resize to %dx%d", event.width, event.height)
            self.state.on_resize(event.width, event.height)
            return ControlSignal.CONTINUE

        if isinstance(event, OtherEvent):
            return ControlSignal.CONTINUE

        raise ContractViolation(f"not an input event: {event!r}")
