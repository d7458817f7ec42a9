"""Splitting of raw stdin chunks into complete input sequences.

A single ``read`` can return half of an escape sequence, or several keys
at once. :class:`StdinBuffer` holds partial sequences until they are
complete and hands each finished one to the ``on_data`` callback, so an
arrow key split across reads is never mistaken for Escape followed by
text. Bracketed paste content is collected and handed to ``on_paste``
in one piece.

The buffer never waits on its own. When it is left holding an
incomplete sequence the caller decides how long to wait for the rest and
calls :meth:`StdinBuffer.flush` when that time is up.
"""

from __future__ import annotations

import re
from typing import Callable, Literal

ESC = "\x1b"
BRACKETED_PASTE_START = "\x1b[200~"
BRACKETED_PASTE_END = "\x1b[201~"

SequenceStatus = Literal["complete", "incomplete", "not-escape"]

_SGR_MOUSE_RE = re.compile(r"^<\d+;\d+;\d+[Mm]$")


# ---------------------------------------------------------------------------
# Sequence classification
# ---------------------------------------------------------------------------


def _csi_status(data: str) -> SequenceStatus:
    # X10 mouse reports carry three raw bytes after ``ESC [ M``
    if data.startswith("\x1b[M"):
        return "complete" if len(data) >= 6 else "incomplete"
    if len(data) < 3:
        return "incomplete"

    params = data[2:]
    if not 0x40 <= ord(params[-1]) <= 0x7E:
        return "incomplete"
    if params.startswith("<") and not _SGR_MOUSE_RE.match(params):
        return "incomplete"
    return "complete"


def _is_complete_sequence(data: str) -> SequenceStatus:
    """Classify *data* as a finished escape sequence or a prefix of one."""
    if not data.startswith(ESC):
        return "not-escape"
    if len(data) == 1:
        return "incomplete"

    intro = data[1]
    if intro == "[":
        return _csi_status(data)
    if intro == "]":
        # OSC ends with BEL or ST
        if data.endswith(("\x07", ESC + "\\")):
            return "complete"
        return "incomplete"
    if intro == "O":
        return "complete" if len(data) >= 3 else "incomplete"
    # ESC + one character is a meta (alt) key
    return "complete"


def _sequence_end(buffer: str, start: int) -> int | None:
    for end in range(start + 1, len(buffer) + 1):
        if _is_complete_sequence(buffer[start:end]) != "incomplete":
            return end
    return None


def _extract_complete_sequences(buffer: str) -> tuple[list[str], str]:
    """Split *buffer* into complete sequences and an unfinished remainder."""
    sequences: list[str] = []
    pos = 0
    while pos < len(buffer):
        if buffer[pos] != ESC:
            sequences.append(buffer[pos])
            pos += 1
            continue

        end = _sequence_end(buffer, pos)
        if end is None:
            return sequences, buffer[pos:]
        sequences.append(buffer[pos:end])
        pos = end

    return sequences, ""


# ---------------------------------------------------------------------------
# StdinBuffer
# ---------------------------------------------------------------------------


class StdinBuffer:
    """Accumulates stdin text and emits complete sequences and pastes."""

    def __init__(self) -> None:
        self._buffer = ""
        self._paste_mode = False
        self._on_data: Callable[[str], None] | None = None
        self._on_paste: Callable[[str], None] | None = None

    def on_data(self, callback: Callable[[str], None]) -> None:
        """Set the callback for complete key sequences."""
        self._on_data = callback

    def on_paste(self, callback: Callable[[str], None]) -> None:
        """Set the callback for bracketed paste content."""
        self._on_paste = callback

    def _emit_data(self, data: str) -> None:
        if self._on_data:
            self._on_data(data)

    def _emit_paste(self, data: str) -> None:
        if self._on_paste:
            self._on_paste(data)

    def process(self, data: str) -> None:
        """Feed a chunk of decoded input."""
        self._buffer += data

        while self._buffer:
            if self._paste_mode:
                end = self._buffer.find(BRACKETED_PASTE_END)
                if end == -1:
                    return
                self._paste_mode = False
                self._emit_paste(self._buffer[:end])
                self._buffer = self._buffer[end + len(BRACKETED_PASTE_END) :]
                continue

            start = self._buffer.find(BRACKETED_PASTE_START)
            head = self._buffer if start == -1 else self._buffer[:start]
            sequences, remainder = _extract_complete_sequences(head)
            for sequence in sequences:
                self._emit_data(sequence)

            if start == -1:
                self._buffer = remainder
                return
            self._paste_mode = True
            self._buffer = self._buffer[start + len(BRACKETED_PASTE_START) :]

    def flush(self) -> None:
        """Emit a held incomplete sequence as-is.

        Called once the caller has waited long enough for the rest of an
        escape sequence; a lone ``ESC`` then becomes the Escape key. An
        unfinished paste is kept.
        """
        if self._paste_mode or not self._buffer:
            return
        pending, self._buffer = self._buffer, ""
        self._emit_data(pending)

    def has_pending(self) -> bool:
        """True when part of an escape sequence is waiting for more bytes."""
        return bool(self._buffer) and not self._paste_mode

    def clear(self) -> None:
        self._buffer = ""
        self._paste_mode = False
