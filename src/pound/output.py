"""Per-frame output batching.

A :class:`FrameBuffer` collects every piece of one screen refresh (row
text and control sequences) so the whole frame reaches the terminal in a
single write.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from pound.terminal import Terminal


class FrameBuffer:
    """Append-only buffer for one frame of terminal output."""

    def __init__(self) -> None:
        self._chunks: list[str] = []
        self.lines: list[str] = []
        self.cursor: tuple[int, int] = (0, 0)

    def append(self, text: str) -> None:
        self._chunks.append(text)

    def getvalue(self) -> str:
        return "".join(self._chunks)

    def __len__(self) -> int:
        return sum(len(chunk) for chunk in self._chunks)

    def flush(self, terminal: Terminal) -> None:
        """Write the frame to *terminal* in one call, then clear it.

        A failed write propagates; the buffer is left intact in that case.
        """
        terminal.write(self.getvalue())
        self._chunks.clear()
