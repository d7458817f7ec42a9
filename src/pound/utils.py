"""Terminal text utilities: width measurement, word wrapping, column slicing.

Widths are measured per grapheme cluster, so combining marks take no
columns and East Asian wide characters and emoji take two.
"""

from __future__ import annotations

import unicodedata

import grapheme
import wcwidth as _wcwidth

TAB_WIDTH = 3
_TAB_TEXT = " " * TAB_WIDTH


# ---------------------------------------------------------------------------
# Width cache (capped at 512 entries)
# ---------------------------------------------------------------------------

_width_cache: dict[str, int] = {}
_WIDTH_CACHE_MAX = 512


def _cache_width(key: str, value: int) -> int:
    if len(_width_cache) >= _WIDTH_CACHE_MAX:
        _width_cache.clear()
    _width_cache[key] = value
    return value


def _is_plain_ascii(text: str) -> bool:
    return all(0x20 <= ord(ch) <= 0x7E for ch in text)


# ---------------------------------------------------------------------------
# Grapheme width
# ---------------------------------------------------------------------------


def _is_emoji_cluster(g: str) -> bool:
    for ch in g:
        cp = ord(ch)
        if cp in (0xFE0F, 0x200D):  # VS16, ZWJ
            return True
        if 0x1F3FB <= cp <= 0x1F3FF or 0x1F1E6 <= cp <= 0x1F1FF:  # tones, flags
            return True
    first = ord(g[0])
    return first >= 0x1F000 or 0x2600 <= first <= 0x27BF


def _grapheme_width(g: str) -> int:
    """Columns taken by one grapheme cluster.

    Tabs count as ``TAB_WIDTH``. Multi-codepoint emoji are two columns
    wide, clusters led by a mark or format character take none, and
    anything else is whatever :func:`wcwidth.wcwidth` says for its first
    codepoint (controls count as zero).
    """
    if g == "\t":
        return TAB_WIDTH
    if not g:
        return 0
    if len(g) > 1 and _is_emoji_cluster(g):
        return 2

    category = unicodedata.category(g[0])
    if category.startswith("M") or category == "Cf":
        return 0
    return max(_wcwidth.wcwidth(g[0]), 0)


# ---------------------------------------------------------------------------
# visible_width
# ---------------------------------------------------------------------------


def visible_width(text: str) -> int:
    """Number of terminal columns *text* occupies.

    Plain ASCII is measured by length; anything else is summed per
    grapheme and cached.
    """
    expanded = text.replace("\t", _TAB_TEXT)
    if _is_plain_ascii(expanded):
        return len(expanded)

    width = _width_cache.get(expanded)
    if width is None:
        width = _cache_width(
            expanded, sum(_grapheme_width(g) for g in grapheme.graphemes(expanded))
        )
    return width


# ---------------------------------------------------------------------------
# wrap_text
# ---------------------------------------------------------------------------


def wrap_text(text: str, width: int) -> list[str]:
    """Word-wrap *text* to *width* columns.

    Embedded newlines start a new physical line. Lines break at the last
    space that fits; the space itself is dropped, as are leading spaces on
    continuation lines. A word wider than *width* is split mid-word.

    Returns the wrapped lines in order, without trailing newlines.
    """
    if width <= 0:
        return [text]

    result: list[str] = []
    for physical_line in text.split("\n"):
        result.extend(_wrap_single_line(physical_line, width))
    return result


def _wrap_single_line(line: str, width: int) -> list[str]:
    """Wrap a single line (no embedded newlines) to *width* columns."""
    if not line:
        return [""]

    result_lines: list[str] = []
    # (grapheme text, width) pairs for the line being built
    current: list[tuple[str, int]] = []
    current_width = 0

    for g in grapheme.graphemes(line):
        if g == "\t":
            g, g_width = _TAB_TEXT, TAB_WIDTH
        else:
            g_width = _grapheme_width(g)

        # Leading spaces of a continuation line are dropped
        if not current and result_lines and g.isspace():
            continue

        if current_width + g_width > width and current_width > 0:
            if g.isspace():
                result_lines.append(_join(current).rstrip())
                current, current_width = [], 0
                continue

            split = _find_word_break(current)
            if split is not None:
                result_lines.append(_join(current[:split]).rstrip())
                current = _lstrip_parts(current[split + 1 :])
            else:
                result_lines.append(_join(current))
                current = []
            current_width = sum(w for _, w in current)

        current.append((g, g_width))
        current_width += g_width

    result_lines.append(_join(current))
    return result_lines


def _find_word_break(parts: list[tuple[str, int]]) -> int | None:
    """Index of the last space in *parts*, or ``None`` if there is none
    past the first position."""
    for idx in range(len(parts) - 1, 0, -1):
        if parts[idx][0] == " ":
            return idx
    return None


def _lstrip_parts(parts: list[tuple[str, int]]) -> list[tuple[str, int]]:
    start = 0
    while start < len(parts) and parts[start][0].isspace():
        start += 1
    return parts[start:]


def _join(parts: list[tuple[str, int]]) -> str:
    return "".join(text for text, _ in parts)


# ---------------------------------------------------------------------------
# slice_by_column
# ---------------------------------------------------------------------------


def slice_by_column(line: str, start_col: int, length: int) -> str:
    """Extract at most *length* visible columns starting at *start_col*.

    A wide character that straddles either boundary is left out rather
    than cut in half. Tabs are expanded to ``TAB_WIDTH`` spaces. Asking
    for columns past the end of *line* yields an empty string.
    """
    if length <= 0 or start_col < 0:
        return ""

    end_col = start_col + length

    if _is_plain_ascii(line):
        return line[start_col:end_col]

    result: list[str] = []
    col = 0
    for g in grapheme.graphemes(line):
        if col >= end_col:
            break
        w = _grapheme_width(g)
        if col >= start_col and col + w <= end_col:
            result.append(_TAB_TEXT if g == "\t" else g)
        col += w

    return "".join(result)
