"""Input-layer public API for key decoding and keybinding resolution.

Exports are split between low-level terminal decoding (`decode`, `read_chunk`)
and the modal resolver used by the runtime loop.
"""

from .decoder import decode, decode_first
from .keybinds import (
    DEFAULT_BINDINGS,
    EMPTY_RESULT,
    KeyBinding,
    KeybindResult,
    action_binding,
    command_binding,
    in_mode,
    is_char,
    is_key,
    resolve_keybind,
)
from .keys import InputEvent, KeyInfo
from .reader import read_chunk

__all__ = [
    "decode",
    "decode_first",
    "read_chunk",
    "InputEvent",
    "KeyInfo",
    "KeyBinding",
    "KeybindResult",
    "EMPTY_RESULT",
    "DEFAULT_BINDINGS",
    "action_binding",
    "command_binding",
    "in_mode",
    "is_char",
    "is_key",
    "resolve_keybind",
]
