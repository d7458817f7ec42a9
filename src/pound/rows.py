"""Read-only store of the text rows being viewed."""

from __future__ import annotations

import logging
import re
from collections.abc import Iterable
from pathlib import Path

from pound.errors import LoadError
from pound.utils import visible_width

logger = logging.getLogger(__name__)

_LINE_BREAK_RE = re.compile(r"\r\n|\r|\n")


def split_rows(content: str) -> list[str]:
    """Split *content* on line terminators; a trailing terminator does
    not start another row."""
    rows = _LINE_BREAK_RE.split(content)
    if rows[-1] == "":
        rows.pop()
    return rows


class RowStore:
    """Ordered, immutable sequence of text lines.

    Rows carry no line terminator. The store never changes after it is
    built, so row count and row contents are stable for a whole session.
    """

    __slots__ = ("_rows",)

    def __init__(self, rows: Iterable[str] = ()) -> None:
        self._rows: tuple[str, ...] = tuple(rows)

    @classmethod
    def from_lines(cls, lines: Iterable[str]) -> RowStore:
        return cls(lines)

    @classmethod
    def load(cls, source: Path | str | None) -> RowStore:
        """Load rows from *source*, or return an empty store for ``None``.

        Raises :class:`LoadError` when the file cannot be read.
        """
        if source is None:
            return cls()

        path = Path(source)
        try:
            content = path.read_text(encoding="utf-8", errors="replace")
        except OSError as exc:
            raise LoadError(path, exc.strerror or str(exc)) from exc

        store = cls(split_rows(content))
        logger.info("loaded %d rows from %s", store.row_count(), path)
        return store

    def row_count(self) -> int:
        return len(self._rows)

    def __len__(self) -> int:
        return len(self._rows)

    def is_empty(self) -> bool:
        return not self._rows

    def row_at(self, index: int) -> str:
        """Return row *index*; raises ``IndexError`` when out of range."""
        if index < 0 or index >= len(self._rows):
            raise IndexError(
                f"row {index} out of range for {len(self._rows)} rows"
            )
        return self._rows[index]

    def row_width(self, index: int) -> int:
        """Visible column width of row *index*."""
        return visible_width(self.row_at(index))
