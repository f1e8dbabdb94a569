"""Structured key events produced by the decoder.

A ``KeyInfo`` names either one of the special keys below or ``"char"`` for a
text codepoint. Modifiers are reported as independent booleans.
"""

from __future__ import annotations

from dataclasses import dataclass

KEY_CHAR = "char"
KEY_ESCAPE = "escape"
KEY_ENTER = "enter"
KEY_BACKSPACE = "backspace"
KEY_TAB = "tab"
KEY_UP = "up"
KEY_DOWN = "down"
KEY_LEFT = "left"
KEY_RIGHT = "right"
KEY_HOME = "home"
KEY_END = "end"
KEY_PAGEUP = "pageup"
KEY_PAGEDOWN = "pagedown"
KEY_DELETE = "delete"

NAMED_KEYS: frozenset[str] = frozenset(
    {
        KEY_ESCAPE,
        KEY_ENTER,
        KEY_BACKSPACE,
        KEY_TAB,
        KEY_UP,
        KEY_DOWN,
        KEY_LEFT,
        KEY_RIGHT,
        KEY_HOME,
        KEY_END,
        KEY_PAGEUP,
        KEY_PAGEDOWN,
        KEY_DELETE,
    }
)


@dataclass(frozen=True)
class KeyInfo:
    """Decoded key identity plus modifier flags."""

    name: str
    char: str | None = None
    ctrl: bool = False
    alt: bool = False
    shift: bool = False

    def with_modifiers(self, *, ctrl: bool, alt: bool, shift: bool) -> KeyInfo:
        return KeyInfo(name=self.name, char=self.char, ctrl=ctrl, alt=alt, shift=shift)


@dataclass(frozen=True)
class InputEvent:
    """One key press together with the raw text span it was decoded from."""

    key: KeyInfo
    raw: str


def key_event(name: str, raw: str, *, ctrl: bool = False, alt: bool = False, shift: bool = False) -> InputEvent:
    """Build an event for a named (non-text) key."""
    return InputEvent(key=KeyInfo(name=name, ctrl=ctrl, alt=alt, shift=shift), raw=raw)


def char_event(char: str, raw: str | None = None, *, ctrl: bool = False, alt: bool = False) -> InputEvent:
    """Build an event for a text codepoint, defaulting ``raw`` to the char."""
    return InputEvent(
        key=KeyInfo(name=KEY_CHAR, char=char, ctrl=ctrl, alt=alt),
        raw=char if raw is None else raw,
    )


__all__ = [
    "KEY_CHAR",
    "KEY_ESCAPE",
    "KEY_ENTER",
    "KEY_BACKSPACE",
    "KEY_TAB",
    "KEY_UP",
    "KEY_DOWN",
    "KEY_LEFT",
    "KEY_RIGHT",
    "KEY_HOME",
    "KEY_END",
    "KEY_PAGEUP",
    "KEY_PAGEDOWN",
    "KEY_DELETE",
    "NAMED_KEYS",
    "KeyInfo",
    "InputEvent",
    "key_event",
    "char_event",
]
