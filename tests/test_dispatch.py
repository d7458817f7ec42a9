"""Tests for pound.dispatch -- event handling and the quit chord."""

from __future__ import annotations

import dataclasses

import pytest

from pound.dispatch import ControlSignal, Dispatcher, parse_quit_key
from pound.errors import ConfigError, ContractViolation, DegenerateSizeError
from pound.events import KeyEvent, OtherEvent, ResizeEvent
from pound.rows import RowStore
from pound.viewport import CursorState


def make_dispatcher(
    rows: int = 50, width: int = 20, height: int = 10, **kwargs
) -> Dispatcher:
    store = RowStore([f"row {i}" for i in range(rows)])
    return Dispatcher(store, CursorState.initialize(width, height), **kwargs)


def key(key_id: str) -> KeyEvent:
    event = KeyEvent.from_key_id(key_id)
    assert event is not None
    return event


# ---------------------------------------------------------------------------
# Quit chord
# ---------------------------------------------------------------------------


class TestQuit:
    def test_ctrl_q_quits(self) -> None:
        d = make_dispatcher()
        assert d.dispatch(key("ctrl+q")) is ControlSignal.QUIT

    @pytest.mark.parametrize("moves", [[], ["down"] * 3, ["right"] * 40 + ["down"] * 20])
    def test_quit_regardless_of_cursor_and_without_mutation(self, moves: list[str]) -> None:
        d = make_dispatcher()
        for m in moves:
            d.dispatch(key(m))
        before = dataclasses.replace(d.state)
        assert d.dispatch(key("ctrl+q")) is ControlSignal.QUIT
        assert d.dispatch(key("ctrl+q")) is ControlSignal.QUIT
        assert d.state == before

    def test_plain_q_does_not_quit_by_default(self) -> None:
        d = make_dispatcher()
        assert d.dispatch(key("q")) is ControlSignal.CONTINUE

    def test_extra_modifier_does_not_quit(self) -> None:
        d = make_dispatcher()
        assert d.dispatch(key("ctrl+alt+q")) is ControlSignal.CONTINUE

    def test_custom_quit_key(self) -> None:
        d = make_dispatcher(quit_key="q")
        assert d.dispatch(key("q")) is ControlSignal.QUIT
        assert d.dispatch(key("ctrl+q")) is ControlSignal.CONTINUE


class TestParseQuitKey:
    def test_ctrl_chord(self) -> None:
        assert parse_quit_key("ctrl+q") == KeyEvent("q", frozenset({"ctrl"}))

    def test_plain_key(self) -> None:
        assert parse_quit_key("q") == KeyEvent("q")

    @pytest.mark.parametrize("bad", ["", "ctrl", "ctrl+shift"])
    def test_invalid(self, bad: str) -> None:
        with pytest.raises(ConfigError):
            parse_quit_key(bad)


# ---------------------------------------------------------------------------
# Cursor movement
# ---------------------------------------------------------------------------


class TestMovement:
    def test_arrows_move_cursor(self) -> None:
        d = make_dispatcher()
        for k in ["down", "down", "right", "right", "right", "up", "left"]:
            assert d.dispatch(key(k)) is ControlSignal.CONTINUE
        assert (d.state.x, d.state.y) == (2, 1)

    def test_down_limited_by_row_count(self) -> None:
        d = make_dispatcher(rows=2)
        for _ in range(5):
            d.dispatch(key("down"))
        assert d.state.y == 2

    def test_modified_arrows_are_ignored(self) -> None:
        d = make_dispatcher()
        for k in ["shift+down", "ctrl+right", "alt+down"]:
            assert d.dispatch(key(k)) is ControlSignal.CONTINUE
        assert (d.state.x, d.state.y) == (0, 0)

    def test_other_keys_are_ignored(self) -> None:
        d = make_dispatcher()
        for k in ["a", "enter", "pageDown", "escape", "ctrl+c"]:
            assert d.dispatch(key(k)) is ControlSignal.CONTINUE
        assert (d.state.x, d.state.y) == (0, 0)


# ---------------------------------------------------------------------------
# Resize and other events
# ---------------------------------------------------------------------------


class TestResizeAndOther:
    def test_resize_updates_state(self) -> None:
        d = make_dispatcher()
        for _ in range(8):
            d.dispatch(key("down"))
        assert d.dispatch(ResizeEvent(5, 4)) is ControlSignal.CONTINUE
        assert (d.state.x_max, d.state.y_max) == (4, 3)
        assert d.state.y == 3

    def test_degenerate_resize_propagates(self) -> None:
        d = make_dispatcher()
        with pytest.raises(DegenerateSizeError):
            d.dispatch(ResizeEvent(0, 0))

    @pytest.mark.parametrize("kind", ["paste", "focus", "mouse", "unknown"])
    def test_other_events_are_ignored(self, kind: str) -> None:
        d = make_dispatcher()
        before = dataclasses.replace(d.state)
        assert d.dispatch(OtherEvent(kind, "x")) is ControlSignal.CONTINUE
        assert d.state == before

    def test_non_event_is_contract_violation(self) -> None:
        d = make_dispatcher()
        with pytest.raises(ContractViolation):
            d.dispatch("up")  # type: ignore[arg-type]
