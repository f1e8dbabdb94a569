"""Terminal input decoding.

Turns one raw read from a terminal into an ordered list of key events.
Handles UTF-8 text, C0 control keys, CSI/SS3 escape sequences with modifier
parameters, and ESC-prefixed Alt combinations. Decoding never raises:
anything unrecognized degrades to a literal Escape key press.
"""

from __future__ import annotations

import re

from .keys import (
    KEY_BACKSPACE,
    KEY_CHAR,
    KEY_DELETE,
    KEY_DOWN,
    KEY_END,
    KEY_ENTER,
    KEY_ESCAPE,
    KEY_HOME,
    KEY_LEFT,
    KEY_PAGEDOWN,
    KEY_PAGEUP,
    KEY_RIGHT,
    KEY_TAB,
    KEY_UP,
    InputEvent,
    KeyInfo,
    char_event,
    key_event,
)

ESC = "\x1b"
CSI = "\x1b["
SS3 = "\x1bO"

CSI_SEQUENCE_RE = re.compile(r"\x1b\[[0-9;]*[A-Za-z~]")
_CSI_BODY_RE = re.compile(r"^(\d[\d;]*|)([A-Za-z~])$")

# xterm modifier parameter: value - 1 is a bitmask of shift(1), alt(2), ctrl(4).
MODIFIER_MAP: dict[int, tuple[bool, bool, bool]] = {
    2: (True, False, False),
    3: (False, True, False),
    4: (True, True, False),
    5: (False, False, True),
    6: (True, False, True),
    7: (False, True, True),
    8: (True, True, True),
}

CSI_FINAL_KEYS: dict[str, str] = {
    "A": KEY_UP,
    "B": KEY_DOWN,
    "C": KEY_RIGHT,
    "D": KEY_LEFT,
    "H": KEY_HOME,
    "F": KEY_END,
}

CSI_TILDE_KEYS: dict[int, str] = {
    1: KEY_HOME,
    3: KEY_DELETE,
    4: KEY_END,
    5: KEY_PAGEUP,
    6: KEY_PAGEDOWN,
    7: KEY_HOME,
    8: KEY_END,
}

SS3_KEYS: dict[str, str] = {
    "A": KEY_UP,
    "B": KEY_DOWN,
    "C": KEY_RIGHT,
    "D": KEY_LEFT,
}

CTRL_ENTER_BODIES = frozenset({"13;5u", "27;5;13~"})
SHIFT_TAB_BODY = "Z"


def _to_text(buffer: bytes | bytearray | memoryview | str) -> str:
    if isinstance(buffer, str):
        return buffer
    return bytes(buffer).decode("utf-8", errors="replace")


def _modifiers_from_params(params: list[int]) -> tuple[bool, bool, bool]:
    """Return ``(shift, alt, ctrl)`` from the trailing CSI parameter."""
    if len(params) < 2:
        return False, False, False
    return MODIFIER_MAP.get(params[-1], (False, False, False))


def _decode_plain(ch: str) -> InputEvent:
    """Decode one non-escape codepoint."""
    if ch in {"\r", "\n"}:
        return key_event(KEY_ENTER, ch)
    if ch == "\t":
        return key_event(KEY_TAB, ch)
    if ch in {"\x7f", "\x08"}:
        return key_event(KEY_BACKSPACE, ch)
    code = ord(ch)
    if code == 0:
        return char_event(" ", ch, ctrl=True)
    if code < 32:
        return char_event(chr(code + 96), ch, ctrl=True)
    return char_event(ch)


def _decode_csi(sequence: str) -> InputEvent | None:
    body = sequence[len(CSI):]
    if body in CTRL_ENTER_BODIES:
        return key_event(KEY_ENTER, sequence, ctrl=True)
    if body == SHIFT_TAB_BODY:
        return key_event(KEY_TAB, sequence, shift=True)

    match = _CSI_BODY_RE.match(body)
    if match is None:
        return None
    raw_params, final = match.group(1), match.group(2)
    params = [int(part) if part else 0 for part in raw_params.split(";")] if raw_params else []
    shift, alt, ctrl = _modifiers_from_params(params)

    name = CSI_FINAL_KEYS.get(final)
    if name is None and final == "~":
        name = CSI_TILDE_KEYS.get(params[0] if params else 0)
    if name is None:
        return None
    return key_event(name, sequence, ctrl=ctrl, alt=alt, shift=shift)


def _decode_escape(text: str, start: int) -> tuple[InputEvent, int]:
    """Decode the escape-initiated event at ``start``; return it and its length."""
    csi_match = CSI_SEQUENCE_RE.match(text, start)
    if csi_match is not None:
        sequence = csi_match.group(0)
        event = _decode_csi(sequence)
        if event is None:
            # Well-formed but unknown: swallow the whole sequence as a bare Escape.
            event = key_event(KEY_ESCAPE, sequence)
        return event, len(sequence)

    if text.startswith(SS3, start) and start + len(SS3) < len(text):
        final = text[start + len(SS3)]
        sequence = text[start : start + len(SS3) + 1]
        name = SS3_KEYS.get(final)
        if name is not None:
            return key_event(name, sequence), len(sequence)
        if final.isascii() and final.isalpha():
            return key_event(KEY_ESCAPE, sequence), len(sequence)

    if start + 1 < len(text) and text[start + 1] != ESC:
        ch = text[start + 1]
        plain = _decode_plain(ch)
        key = plain.key.with_modifiers(ctrl=plain.key.ctrl, alt=True, shift=plain.key.shift)
        return InputEvent(key=key, raw=ESC + ch), 2

    return key_event(KEY_ESCAPE, ESC), 1


def decode(buffer: bytes | bytearray | memoryview | str) -> list[InputEvent]:
    """Decode a raw terminal read into key events, preserving order.

    A lone ``ESC`` at the end of the buffer is reported as the Escape key.
    Multi-byte UTF-8 codepoints produce a single event each; invalid bytes
    decode to U+FFFD rather than raising.
    """
    text = _to_text(buffer)
    events: list[InputEvent] = []
    i = 0
    n = len(text)
    while i < n:
        if text[i] == ESC:
            event, length = _decode_escape(text, i)
            events.append(event)
            i += length
            continue
        events.append(_decode_plain(text[i]))
        i += 1
    return events


def decode_first(buffer: bytes | bytearray | memoryview | str) -> InputEvent:
    """Return the first decoded event, or an empty char event for empty input."""
    events = decode(buffer)
    if events:
        return events[0]
    return InputEvent(key=KeyInfo(name=KEY_CHAR, char=""), raw="")


__all__ = ["decode", "decode_first", "MODIFIER_MAP", "CSI_SEQUENCE_RE"]
