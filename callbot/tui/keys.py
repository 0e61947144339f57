from __future__ import annotations

import curses
from dataclasses import dataclass
from typing import Literal

KeyKind = Literal[
    "quit",
    "switch_column",
    "up",
    "down",
    "left",
    "right",
    "page_up",
    "page_down",
    "home",
    "end",
    "confirm",
    "cancel",
    "run",
    "char",
    "backspace",
]

KEY_ENTER = {10, 13, curses.KEY_ENTER}
KEY_BACK = {curses.KEY_BACKSPACE, 127, 8}
KEY_ESCAPE = {27, curses.KEY_EXIT}

_NAV_KEYS: dict[int, KeyKind] = {
    curses.KEY_UP: "up",
    curses.KEY_DOWN: "down",
    curses.KEY_LEFT: "left",
    curses.KEY_RIGHT: "right",
    curses.KEY_PPAGE: "page_up",
    curses.KEY_NPAGE: "page_down",
    curses.KEY_HOME: "home",
    curses.KEY_END: "end",
}

_COMMAND_CHARS: dict[str, KeyKind] = {
    "q": "quit",
    "r": "run",
}


@dataclass(frozen=True)
class KeyEvent:
    kind: KeyKind
    char: str = ""


def is_enter(key: object) -> bool:
    return isinstance(key, int) and key in KEY_ENTER or key in ("\n", "\r")


def is_backspace(key: object) -> bool:
    return isinstance(key, int) and key in KEY_BACK or key in ("\x7f", "\b")


def is_escape(key: object) -> bool:
    return isinstance(key, int) and key in KEY_ESCAPE or key == "\x1b"


def decode_key(key: object, text_mode: bool = False) -> KeyEvent | None:
    """Map a ``get_wch`` result to a key event.

    In ``text_mode`` every printable character is literal input, so ``q``
    and ``r`` do not quit or run while a value is being edited.
    """
    if key is None:
        return None
    if is_enter(key):
        return KeyEvent("confirm")
    if is_escape(key):
        return KeyEvent("cancel")
    if is_backspace(key):
        return KeyEvent("backspace")
    if key == "\t":
        return KeyEvent("switch_column")
    if isinstance(key, int):
        kind = _NAV_KEYS.get(key)
        return KeyEvent(kind) if kind else None
    if isinstance(key, str) and len(key) == 1 and key.isprintable():
        if not text_mode and key in _COMMAND_CHARS:
            return KeyEvent(_COMMAND_CHARS[key])
        return KeyEvent("char", key)
    return None
