"""Decoded input events.

An :data:`Event` is exactly one of :class:`KeyEvent`, :class:`ResizeEvent`
or :class:`OtherEvent`. Consumers match on the class, so a new kind of
event has to be added here before anything can receive it.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Literal, Union

from pound.keys import modifier_names, parse_key, parse_key_id

OtherKind = Literal["paste", "focus", "mouse", "unknown"]

_FOCUS_SEQUENCES = ("\x1b[I", "\x1b[O")


@dataclass(frozen=True)
class KeyEvent:
    """A key press: base key name plus the set of held modifiers."""

    code: str
    modifiers: frozenset[str] = field(default_factory=frozenset)

    @classmethod
    def from_key_id(cls, key_id: str) -> KeyEvent | None:
        """Build an event from an identifier such as ``"ctrl+q"``."""
        parsed = parse_key_id(key_id)
        if parsed is None:
            return None
        return cls(
            code=str(parsed["key"]),
            modifiers=modifier_names(int(parsed["modifiers"])),
        )


@dataclass(frozen=True)
class ResizeEvent:
    """The terminal now has *width* columns and *height* rows."""

    width: int
    height: int


@dataclass(frozen=True)
class OtherEvent:
    """Input the viewer does not act on (paste, focus, mouse, unknown keys)."""

    kind: OtherKind
    data: str = ""


Event = Union[KeyEvent, ResizeEvent, OtherEvent]


def decode_event(sequence: str) -> Event:
    """Decode one complete input sequence into an :data:`Event`."""
    if sequence in _FOCUS_SEQUENCES:
        return OtherEvent("focus", sequence)
    if sequence.startswith("\x1b[<") or sequence.startswith("\x1b[M"):
        return OtherEvent("mouse", sequence)

    key_id = parse_key(sequence)
    if key_id is None:
        return OtherEvent("unknown", sequence)

    event = KeyEvent.from_key_id(key_id)
    if event is None:
        return OtherEvent("unknown", sequence)
    return event


def paste_event(content: str) -> OtherEvent:
    return OtherEvent("paste", content)
