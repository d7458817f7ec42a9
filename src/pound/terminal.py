"""Terminal abstraction for raw-mode stdin/stdout interaction.

Provides a ``Terminal`` protocol and a concrete ``ProcessTerminal``
implementation that manages raw mode, bracketed paste, SIGWINCH-based
resize detection, blocking input polling and unbuffered output.

Raw mode is only ever held through :class:`RawMode`, a context manager
that restores the saved terminal attributes on every exit path.
"""

from __future__ import annotations

import codecs
import logging
import os
import select
import signal
import sys
import termios
import time
import tty
from collections import deque
from pathlib import Path
from types import TracebackType
from typing import IO, Protocol

from pound.errors import TerminalIOError
from pound.events import Event, ResizeEvent, decode_event, paste_event
from pound.stdin_buffer import StdinBuffer

logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
# ANSI escape constants
# ---------------------------------------------------------------------------

_BRACKETED_PASTE_ENABLE = "\x1b[?2004h"
_BRACKETED_PASTE_DISABLE = "\x1b[?2004l"

# How long to wait for the rest of an escape sequence before treating a
# lone ESC as the Escape key.
_ESCAPE_TIMEOUT = 0.025

_FALLBACK_COLUMNS = 80
_FALLBACK_ROWS = 24


# ---------------------------------------------------------------------------
# Terminal protocol
# ---------------------------------------------------------------------------


class Terminal(Protocol):
    """Interface for the terminal operations the viewer needs."""

    def enable_raw_mode(self) -> None: ...

    def disable_raw_mode(self) -> None: ...

    def raw_mode(self) -> RawMode: ...

    def size(self) -> tuple[int, int]: ...

    def poll(self, timeout: float | None) -> bool: ...

    def read_event(self) -> Event: ...

    def write(self, data: str) -> None: ...


# ---------------------------------------------------------------------------
# Scoped raw mode
# ---------------------------------------------------------------------------


class RawMode:
    """Holds a terminal in raw mode for the duration of a ``with`` block.

    The terminal is put back into its original mode when the block exits,
    whether it returns normally or raises.
    """

    def __init__(self, terminal: Terminal) -> None:
        self._terminal = terminal
        self.active = False

    def __enter__(self) -> Terminal:
        self._terminal.enable_raw_mode()
        self.active = True
        return self._terminal

    def __exit__(
        self,
        exc_type: type[BaseException] | None,
        exc: BaseException | None,
        tb: TracebackType | None,
    ) -> None:
        self.active = False
        self._terminal.disable_raw_mode()


# ---------------------------------------------------------------------------
# ProcessTerminal implementation
# ---------------------------------------------------------------------------


class ProcessTerminal:
    """Concrete terminal implementation backed by ``sys.stdin``/``sys.stdout``.

    Manages raw mode via :mod:`tty` and :mod:`termios`, bracketed paste
    mode, and SIGWINCH-based resize detection. Resizes wake a blocked
    :meth:`poll` through a self-pipe written by the signal handler.
    """

    def __init__(
        self,
        *,
        stdin: IO[str] | None = None,
        stdout: IO[str] | None = None,
        write_log: Path | None = None,
    ) -> None:
        self._stdin = stdin if stdin is not None else sys.stdin
        self._stdout = stdout if stdout is not None else sys.stdout
        self._write_log_path = write_log

        self._original_termios: list | None = None
        self._prev_sigwinch_handler: signal.Handlers | None = None
        self._wake_r: int | None = None
        self._wake_w: int | None = None
        self._resize_pending: bool = False

        self._decoder = codecs.getincrementaldecoder("utf-8")("replace")
        self._events: deque[Event] = deque()
        self._stdin_buffer = StdinBuffer()
        self._stdin_buffer.on_data(
            lambda data: self._events.append(decode_event(data))
        )
        self._stdin_buffer.on_paste(
            lambda data: self._events.append(paste_event(data))
        )

    # -- raw mode -----------------------------------------------------------

    def raw_mode(self) -> RawMode:
        return RawMode(self)

    def enable_raw_mode(self) -> None:
        """Enable raw mode, bracketed paste, and resize notification."""
        if self._original_termios is not None:
            raise TerminalIOError("raw mode is already enabled")

        fd = self._stdin.fileno()
        try:
            self._original_termios = termios.tcgetattr(fd)
            tty.setraw(fd)
        except termios.error as exc:
            self._original_termios = None
            raise TerminalIOError(f"cannot enable raw mode: {exc}") from exc

        # From here on a failure must undo the partial setup
        try:
            self._wake_r, self._wake_w = os.pipe()
            os.set_blocking(self._wake_w, False)
            self._prev_sigwinch_handler = signal.getsignal(signal.SIGWINCH)
            signal.signal(signal.SIGWINCH, self._on_sigwinch)
            self.write(_BRACKETED_PASTE_ENABLE)
        except BaseException:
            self.disable_raw_mode()
            raise

        logger.debug("raw mode enabled on fd %d", fd)

    def disable_raw_mode(self) -> None:
        """Restore terminal state and clean up all handlers."""
        if self._original_termios is None:
            return

        try:
            self.write(_BRACKETED_PASTE_DISABLE)
        except TerminalIOError:
            logger.warning("could not disable bracketed paste", exc_info=True)

        if self._prev_sigwinch_handler is not None:
            signal.signal(signal.SIGWINCH, self._prev_sigwinch_handler)
            self._prev_sigwinch_handler = None

        for fd in (self._wake_r, self._wake_w):
            if fd is not None:
                os.close(fd)
        self._wake_r = self._wake_w = None

        self._stdin_buffer.clear()
        self._events.clear()

        original, self._original_termios = self._original_termios, None
        fd = self._stdin.fileno()
        try:
            termios.tcsetattr(fd, termios.TCSADRAIN, original)
        except termios.error as exc:
            raise TerminalIOError(f"cannot restore terminal mode: {exc}") from exc
        logger.debug("raw mode disabled on fd %d", fd)

    # -- size ---------------------------------------------------------------

    def size(self) -> tuple[int, int]:
        """Return ``(columns, rows)``; falls back to 80x24 off a tty."""
        try:
            size = os.get_terminal_size(self._stdout.fileno())
        except (ValueError, OSError):
            return _FALLBACK_COLUMNS, _FALLBACK_ROWS
        return size.columns, size.lines

    # -- input --------------------------------------------------------------

    def poll(self, timeout: float | None) -> bool:
        """Wait up to *timeout* seconds for an event; ``None`` waits forever.

        Returns ``True`` when :meth:`read_event` has something to return.
        """
        deadline = None if timeout is None else time.monotonic() + timeout

        while not self._has_queued():
            wait = None if deadline is None else max(0.0, deadline - time.monotonic())
            escape_wait = self._stdin_buffer.has_pending()
            if escape_wait:
                # The rest of a split sequence always gets the full grace
                # period, even past the deadline
                wait = _ESCAPE_TIMEOUT

            if self._wait_readable(wait):
                continue
            if escape_wait:
                self._stdin_buffer.flush()
                continue
            return False

        return True

    def read_event(self) -> Event:
        """Return the next decoded event, blocking until there is one."""
        while not self._has_queued():
            self.poll(None)

        if self._resize_pending:
            self._resize_pending = False
            columns, rows = self.size()
            return ResizeEvent(columns, rows)

        return self._events.popleft()

    def _has_queued(self) -> bool:
        return self._resize_pending or bool(self._events)

    def _wait_readable(self, wait: float | None) -> bool:
        fds = [self._stdin.fileno()]
        if self._wake_r is not None:
            fds.append(self._wake_r)

        try:
            readable, _, _ = select.select(fds, [], [], wait)
        except OSError as exc:
            raise TerminalIOError(f"cannot poll terminal input: {exc}") from exc

        if self._wake_r is not None and self._wake_r in readable:
            os.read(self._wake_r, 64)
            self._resize_pending = True
        if self._stdin.fileno() in readable:
            self._read_input()

        return bool(readable)

    def _read_input(self) -> None:
        try:
            raw = os.read(self._stdin.fileno(), 4096)
        except OSError as exc:
            raise TerminalIOError(f"cannot read terminal input: {exc}") from exc

        if not raw:
            raise TerminalIOError("terminal input closed")

        self._stdin_buffer.process(self._decoder.decode(raw))

    # -- output -------------------------------------------------------------

    def write(self, data: str) -> None:
        """Write *data* to the terminal in one call and flush it."""
        try:
            self._stdout.write(data)
            self._stdout.flush()
        except OSError as exc:
            raise TerminalIOError(f"cannot write to terminal: {exc}") from exc

        if self._write_log_path is not None:
            try:
                with open(self._write_log_path, "a", encoding="utf-8") as f:
                    f.write(data)
            except OSError:
                logger.warning(
                    "cannot append to write log %s", self._write_log_path,
                    exc_info=True,
                )

    # -- private: SIGWINCH -------------------------------------------------

    def _on_sigwinch(self, signum: int, frame: object) -> None:
        """Handle terminal resize signals."""
        if self._wake_w is None:
            return
        try:
            os.write(self._wake_w, b"\0")
        except BlockingIOError:
            # Pipe full: a wakeup is already pending
            pass
