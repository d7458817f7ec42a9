"""Tests for frame composition -- Renderer.draw_rows, render, refresh.

Uses the VirtualTerminal to capture output and verify the exact control
sequences written per frame.
"""

from __future__ import annotations

import pytest

from pound.errors import TerminalIOError
from pound.output import FrameBuffer
from pound.renderer import (
    CLEAR_LINE,
    CLEAR_SCREEN,
    CURSOR_HOME,
    HIDE_CURSOR,
    ROW_SEPARATOR,
    SHOW_CURSOR,
    Renderer,
    move_cursor_to,
)
from pound.rows import RowStore
from pound.viewport import CursorState, Direction

from .virtual_terminal import VirtualTerminal

BANNER = "Pound editor -- Version 1.0.0"


def make_renderer() -> tuple[Renderer, VirtualTerminal]:
    terminal = VirtualTerminal()
    return Renderer(terminal), terminal


# ---------------------------------------------------------------------------
# Welcome banner
# ---------------------------------------------------------------------------


class TestWelcomeBanner:
    def test_empty_store_80x24(self) -> None:
        renderer, _ = make_renderer()
        lines = renderer.draw_rows(RowStore(), CursorState.initialize(80, 24))
        assert len(lines) == 24
        assert lines[8] == "~" + " " * 24 + BANNER
        for i, line in enumerate(lines):
            if i != 8:
                assert line == "~"

    def test_banner_row_is_a_third_of_the_height(self) -> None:
        renderer, _ = make_renderer()
        lines = renderer.draw_rows(RowStore(), CursorState.initialize(80, 10))
        assert BANNER in lines[3]

    def test_exact_fit_has_no_filler(self) -> None:
        renderer, _ = make_renderer()
        assert renderer.welcome_line(len(BANNER)) == BANNER

    def test_one_spare_column_has_no_filler(self) -> None:
        renderer, _ = make_renderer()
        # padding == 0 -> no leading "~"
        assert renderer.welcome_line(len(BANNER) + 1) == BANNER

    def test_two_spare_columns_get_filler_only(self) -> None:
        renderer, _ = make_renderer()
        assert renderer.welcome_line(len(BANNER) + 2) == "~" + BANNER

    def test_narrow_terminal_concatenates_wrapped_segments(self) -> None:
        renderer, _ = make_renderer()
        assert renderer.welcome_line(10) == "Poundeditor --Version1.0.0"

    def test_custom_version(self) -> None:
        renderer = Renderer(VirtualTerminal(), version="9.9")
        assert renderer.welcome == "Pound editor -- Version 9.9"

    def test_no_banner_when_store_has_rows(self) -> None:
        renderer, _ = make_renderer()
        lines = renderer.draw_rows(
            RowStore(["only row"]), CursorState.initialize(80, 24)
        )
        assert lines[0] == "only row"
        assert all(line == "~" for line in lines[1:])


# ---------------------------------------------------------------------------
# Row slicing
# ---------------------------------------------------------------------------


class TestRowSlicing:
    ROW = "".join(chr(ord("a") + i % 26) for i in range(50))

    def _state(self, column_offset: int, width: int = 20) -> CursorState:
        state = CursorState.initialize(width, 3)
        state.x = column_offset
        state.column_offset = column_offset
        return state

    def test_slice_inside_row(self) -> None:
        renderer, _ = make_renderer()
        lines = renderer.draw_rows(RowStore([self.ROW]), self._state(10))
        assert lines[0] == self.ROW[10:30]

    def test_offset_past_row_end_is_empty(self) -> None:
        renderer, _ = make_renderer()
        lines = renderer.draw_rows(RowStore([self.ROW]), self._state(60))
        assert lines[0] == ""

    def test_row_shorter_than_width(self) -> None:
        renderer, _ = make_renderer()
        lines = renderer.draw_rows(RowStore([self.ROW]), self._state(45))
        assert lines[0] == self.ROW[45:]

    def test_rows_follow_row_offset(self) -> None:
        renderer, _ = make_renderer()
        rows = RowStore([f"line {i}" for i in range(10)])
        state = CursorState.initialize(20, 3)
        for _ in range(6):
            state.move_cursor(Direction.DOWN, rows.row_count())
        state.recompute_scroll()
        assert renderer.draw_rows(rows, state) == ["line 4", "line 5", "line 6"]

    def test_rows_past_end_are_filler(self) -> None:
        renderer, _ = make_renderer()
        rows = RowStore(["a", "b"])
        state = CursorState.initialize(20, 4)
        assert renderer.draw_rows(rows, state) == ["a", "b", "~", "~"]

    def test_bounded_ignores_offsets(self) -> None:
        renderer, _ = make_renderer()
        rows = RowStore(["abcdef", "ghijkl"])
        state = CursorState.initialize(3, 2, scrolling=False)
        state.row_offset = 1
        state.column_offset = 2
        assert renderer.draw_rows(rows, state) == ["abc", "ghi"]


# ---------------------------------------------------------------------------
# render
# ---------------------------------------------------------------------------


class TestRender:
    def test_frame_layout(self) -> None:
        renderer, _ = make_renderer()
        rows = RowStore(["one", "two"])
        state = CursorState.initialize(10, 3)
        state.move_cursor(Direction.RIGHT, 2)
        state.move_cursor(Direction.DOWN, 2)

        frame = renderer.render(rows, state)

        expected = (
            HIDE_CURSOR
            + CURSOR_HOME
            + "one" + CLEAR_LINE + ROW_SEPARATOR
            + "two" + CLEAR_LINE + ROW_SEPARATOR
            + "~" + CLEAR_LINE
            + "\x1b[2;2H"
            + SHOW_CURSOR
        )
        assert frame.getvalue() == expected
        assert frame.cursor == (1, 1)
        assert frame.lines == ["one", "two", "~"]

    def test_no_separator_after_last_row(self) -> None:
        renderer, _ = make_renderer()
        frame = renderer.render(RowStore(), CursorState.initialize(10, 5))
        value = frame.getvalue()
        assert value.count(ROW_SEPARATOR) == 4
        assert value.count(CLEAR_LINE) == 5

    def test_cursor_placed_relative_to_offsets(self) -> None:
        renderer, _ = make_renderer()
        rows = RowStore(["x" * 100 for _ in range(100)])
        state = CursorState.initialize(10, 5)
        for _ in range(30):
            state.move_cursor(Direction.RIGHT, 100)
        for _ in range(20):
            state.move_cursor(Direction.DOWN, 100)
        state.recompute_scroll()

        frame = renderer.render(rows, state)
        assert frame.cursor == (9, 4)
        assert frame.getvalue().endswith(move_cursor_to(9, 4) + SHOW_CURSOR)

    def test_move_cursor_to_is_one_based(self) -> None:
        assert move_cursor_to(0, 0) == "\x1b[1;1H"
        assert move_cursor_to(4, 7) == "\x1b[8;5H"


# ---------------------------------------------------------------------------
# refresh / flush / clear
# ---------------------------------------------------------------------------


class TestRefresh:
    def test_single_write_per_frame(self) -> None:
        renderer, terminal = make_renderer()
        state = CursorState.initialize(80, 24)
        renderer.refresh(RowStore(), state)
        assert terminal.write_count == 1
        assert BANNER in terminal.output
        assert renderer.frames_drawn == 1

    def test_refresh_recomputes_scroll(self) -> None:
        renderer, terminal = make_renderer()
        rows = RowStore([str(i) for i in range(50)])
        state = CursorState.initialize(10, 5)
        for _ in range(12):
            state.move_cursor(Direction.DOWN, rows.row_count())

        frame = renderer.refresh(rows, state)

        assert state.row_offset == 8
        assert frame.lines == ["8", "9", "10", "11", "12"]
        assert terminal.output.endswith(move_cursor_to(0, 4) + SHOW_CURSOR)

    def test_write_failure_propagates(self) -> None:
        renderer, terminal = make_renderer()
        terminal.fail_writes = True
        with pytest.raises(TerminalIOError):
            renderer.refresh(RowStore(), CursorState.initialize(10, 5))
        assert renderer.frames_drawn == 0

    def test_clear_full_screen(self) -> None:
        renderer, terminal = make_renderer()
        renderer.clear_full_screen()
        assert terminal.output == CLEAR_SCREEN + CURSOR_HOME


class TestFrameBuffer:
    def test_flush_writes_once_and_clears(self) -> None:
        terminal = VirtualTerminal()
        frame = FrameBuffer()
        frame.append("abc")
        frame.append("def")
        assert len(frame) == 6
        frame.flush(terminal)
        assert terminal.writes == ["abcdef"]
        assert frame.getvalue() == ""

    def test_failed_flush_keeps_content(self) -> None:
        terminal = VirtualTerminal()
        terminal.fail_writes = True
        frame = FrameBuffer()
        frame.append("abc")
        with pytest.raises(TerminalIOError):
            frame.flush(terminal)
        assert frame.getvalue() == "abc"
