"""Keyboard input parsing for raw-mode terminals.

Turns one complete input sequence (as split off by
:class:`pound.stdin_buffer.StdinBuffer`) into a key identifier such as
``"q"``, ``"ctrl+q"``, ``"up"`` or ``"shift+alt+left"``.
"""

from __future__ import annotations

# ---------------------------------------------------------------------------
# Type alias
# ---------------------------------------------------------------------------

KeyId = str


# ---------------------------------------------------------------------------
# Key helper object
# ---------------------------------------------------------------------------


class Key:
    """Named key constants and modifier combinators."""

    escape = "escape"
    enter = "enter"
    tab = "tab"
    space = "space"
    backspace = "backspace"
    delete = "delete"
    insert = "insert"
    home = "home"
    end = "end"
    page_up = "pageUp"
    page_down = "pageDown"
    up = "up"
    down = "down"
    left = "left"
    right = "right"

    @staticmethod
    def ctrl(key: str) -> str:
        return f"ctrl+{key}"


# ---------------------------------------------------------------------------
# Sequence tables
# ---------------------------------------------------------------------------

MODIFIERS: dict[str, int] = {
    "shift": 1,
    "alt": 2,
    "ctrl": 4,
}

# Final bytes shared by the CSI (``ESC [``) and SS3 (``ESC O``) forms.
_CURSOR_FINALS: dict[str, str] = {
    "A": Key.up,
    "B": Key.down,
    "C": Key.right,
    "D": Key.left,
    "H": Key.home,
    "F": Key.end,
}

_SS3_FUNCTION_KEYS: dict[str, str] = {"P": "f1", "Q": "f2", "R": "f3", "S": "f4"}

# ``ESC [ <n> ~``; 1/4 and 7/8 are the vt220 and rxvt spellings of home/end.
_TILDE_KEYS: dict[str, str] = {
    "1": Key.home,
    "2": Key.insert,
    "3": Key.delete,
    "4": Key.end,
    "5": Key.page_up,
    "6": Key.page_down,
    "7": Key.home,
    "8": Key.end,
    "15": "f5",
    "17": "f6",
    "18": "f7",
    "19": "f8",
    "20": "f9",
    "21": "f10",
    "23": "f11",
    "24": "f12",
}

_MODIFIABLE_TILDE_KEYS = ("2", "3", "5", "6")

_SINGLE_KEYS: dict[str, str] = {
    "\x1b": Key.escape,
    "\r": Key.enter,
    "\n": Key.enter,
    "\t": Key.tab,
    " ": Key.space,
    "\x7f": Key.backspace,
    "\x08": Key.backspace,
    "\x00": "ctrl+space",
    "\x1b[Z": "shift+tab",
}

_ALT_SPECIAL_KEYS: dict[str, str] = {
    "\x1b": "alt+escape",
    "\r": "alt+enter",
    "\n": "alt+enter",
    "\x7f": "alt+backspace",
    "\x08": "alt+backspace",
}


def _modifier_prefix(bitmask: int) -> str:
    return "".join(
        f"{name}+" for name in ("ctrl", "shift", "alt") if bitmask & MODIFIERS[name]
    )


def _build_plain_sequences() -> dict[str, str]:
    table: dict[str, str] = {}
    for final, name in _CURSOR_FINALS.items():
        table[f"\x1b[{final}"] = name
        table[f"\x1bO{final}"] = name
    for final, name in _SS3_FUNCTION_KEYS.items():
        table[f"\x1bO{final}"] = name
    for number, name in _TILDE_KEYS.items():
        table[f"\x1b[{number}~"] = name
    return table


def _build_modified_sequences() -> dict[str, str]:
    # xterm sends ``CSI 1;<1 + bitmask><final>`` for cursor keys and
    # ``CSI <n>;<1 + bitmask>~`` for the editing keys.
    table: dict[str, str] = {}
    for bitmask in range(1, 8):
        prefix = _modifier_prefix(bitmask)
        for final, name in _CURSOR_FINALS.items():
            table[f"\x1b[1;{bitmask + 1}{final}"] = prefix + name
        for number in _MODIFIABLE_TILDE_KEYS:
            table[f"\x1b[{number};{bitmask + 1}~"] = prefix + _TILDE_KEYS[number]
    return table


LEGACY_KEY_SEQUENCES: dict[str, str] = _build_plain_sequences()
LEGACY_MODIFIED_SEQUENCES: dict[str, str] = _build_modified_sequences()


# ---------------------------------------------------------------------------
# Key identifiers
# ---------------------------------------------------------------------------


def parse_key_id(key_id: str) -> dict[str, object] | None:
    """Split a key identifier like ``"ctrl+shift+a"`` into its components.

    Returns a dict with ``modifiers`` (bitmask, shift=1 alt=2 ctrl=4) and
    ``key`` (the base key), or ``None`` when *key_id* is empty or names
    only modifiers. ``"+"`` on its own is the plus key.
    """
    modifiers = 0
    rest: list[str] = []
    for part in key_id.split("+"):
        bit = MODIFIERS.get(part.lower())
        if bit is None:
            rest.append(part)
        else:
            modifiers |= bit

    key = "+".join(rest)
    if not key:
        return None
    return {"modifiers": modifiers, "key": key}


def modifier_names(bitmask: int) -> frozenset[str]:
    """Return the modifier names set in *bitmask*."""
    return frozenset(name for name, bit in MODIFIERS.items() if bitmask & bit)


# ---------------------------------------------------------------------------
# parse_key
# ---------------------------------------------------------------------------


def _ctrl_letter(ch: str) -> str | None:
    if len(ch) == 1 and 1 <= ord(ch) <= 26:
        return chr(ord(ch) + ord("a") - 1)
    return None


def _parse_alt(ch: str) -> KeyId | None:
    if ch in _ALT_SPECIAL_KEYS:
        return _ALT_SPECIAL_KEYS[ch]
    letter = _ctrl_letter(ch)
    if letter is not None:
        return "ctrl+alt+" + letter
    if ch.isupper():
        return "shift+alt+" + ch.lower()
    if ch.isprintable():
        return "alt+" + ch.lower()
    return None


def parse_key(data: str) -> KeyId | None:
    """Parse raw terminal input and return the key identifier, or ``None``.

    The result uses the format :func:`parse_key_id` accepts, e.g.
    ``"a"``, ``"ctrl+a"``, ``"shift+up"`` or ``"f5"``.
    """
    for table in (LEGACY_MODIFIED_SEQUENCES, LEGACY_KEY_SEQUENCES, _SINGLE_KEYS):
        if data in table:
            return table[data]

    letter = _ctrl_letter(data)
    if letter is not None:
        return "ctrl+" + letter

    if len(data) == 2 and data[0] == "\x1b":
        return _parse_alt(data[1])

    if len(data) == 1 and data.isprintable():
        return data
    return None
