"""The render -> read -> dispatch loop."""

from __future__ import annotations

import enum
import logging

from pound.config import EditorConfig
from pound.dispatch import ControlSignal, Dispatcher
from pound.events import Event
from pound.renderer import Renderer
from pound.rows import RowStore
from pound.terminal import Terminal
from pound.viewport import CursorState

logger = logging.getLogger(__name__)


class SessionState(enum.Enum):
    RUNNING = "running"
    TERMINATED = "terminated"


class Session:
    """One viewer session over a terminal.

    :meth:`run` holds the terminal in raw mode for as long as the loop
    runs. When the loop ends, by quit or by an exception, the screen is
    cleared and then raw mode is released.
    """

    def __init__(
        self,
        terminal: Terminal,
        rows: RowStore,
        config: EditorConfig | None = None,
    ) -> None:
        self.terminal = terminal
        self.rows = rows
        self.config = (config or EditorConfig()).validate()
        self.renderer = Renderer(terminal)
        self.cursor: CursorState | None = None
        self._state = SessionState.TERMINATED

    @property
    def state(self) -> SessionState:
        return self._state

    def run(self) -> int:
        """Run until the quit chord is pressed; returns the exit code."""
        with self.terminal.raw_mode():
            try:
                width, height = self.terminal.size()
                self.cursor = CursorState.initialize(
                    width, height, scrolling=self.config.scrolling
                )
                dispatcher = Dispatcher(
                    self.rows, self.cursor, quit_key=self.config.quit_key
                )
                self._state = SessionState.RUNNING
                logger.info(
                    "session started: %d rows, %dx%d, %s",
                    self.rows.row_count(),
                    width,
                    height,
                    "scrolling" if self.config.scrolling else "bounded",
                )
                while self._state is SessionState.RUNNING:
                    self.renderer.refresh(self.rows, self.cursor)
                    event = self.next_event()
                    if dispatcher.dispatch(event) is ControlSignal.QUIT:
                        self._state = SessionState.TERMINATED
            finally:
                self._state = SessionState.TERMINATED
                self.renderer.clear_full_screen()

        logger.info("session ended after %d frames", self.renderer.frames_drawn)
        return 0

    def next_event(self) -> Event:
        """Block until the terminal has an event, re-polling on timeout."""
        while not self.terminal.poll(self.config.poll_interval):
            logger.debug("no input yet")
        event = self.terminal.read_event()
        logger.debug("event %s", event)
        return event
