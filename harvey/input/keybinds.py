"""Modal keybinding resolution.

Bindings are an ordered table of ``(matches, result)`` pairs; the first
binding whose predicate accepts the event in the current mode wins. Catch-all
bindings such as "insert any printable character" must therefore come last.
"""

from __future__ import annotations

from collections.abc import Callable, Sequence
from dataclasses import dataclass, field

from ..state.actions import (
    ClearInput,
    CreateChat,
    DeleteChar,
    DeleteWord,
    FocusNext,
    FocusPrev,
    HideHelp,
    InsertChar,
    MoveSelection,
    Quit,
    ScrollMessages,
    SelectChat,
    SendMessage,
    SetFocus,
    SetMode,
    ToggleHelp,
)
from ..state.model import FOCUS_CHAT_LIST, FOCUS_INPUT, FOCUS_MESSAGES, MODE_INSERT, MODE_NORMAL
from .keys import KEY_BACKSPACE, KEY_CHAR, KEY_DOWN, KEY_ENTER, KEY_ESCAPE, KEY_TAB, KEY_UP, InputEvent

SCROLL_STEP = 10


@dataclass(frozen=True)
class KeybindResult:
    """Local state changes plus external side-effect requests for one key."""

    actions: tuple = field(default_factory=tuple)
    commands: tuple = field(default_factory=tuple)


EMPTY_RESULT = KeybindResult()


@dataclass(frozen=True)
class KeyBinding:
    """Predicate over ``(event, mode)`` paired with a result producer."""

    matches: Callable[[InputEvent, str], bool]
    result: Callable[[InputEvent, str], KeybindResult]


def _modifiers_match(event: InputEvent, ctrl: bool | None, alt: bool | None, shift: bool | None) -> bool:
    key = event.key
    if ctrl is not None and key.ctrl != ctrl:
        return False
    if alt is not None and key.alt != alt:
        return False
    if shift is not None and key.shift != shift:
        return False
    return True


def is_char(
    event: InputEvent,
    char: str,
    *,
    ctrl: bool | None = None,
    alt: bool | None = None,
    shift: bool | None = None,
) -> bool:
    """Return whether ``event`` is text ``char``; ``None`` modifiers are ignored."""
    if event.key.name != KEY_CHAR or event.key.char != char:
        return False
    return _modifiers_match(event, ctrl, alt, shift)


def is_key(
    event: InputEvent,
    name: str,
    *,
    ctrl: bool | None = None,
    alt: bool | None = None,
    shift: bool | None = None,
) -> bool:
    """Return whether ``event`` is the named key; ``None`` modifiers are ignored."""
    if event.key.name != name:
        return False
    return _modifiers_match(event, ctrl, alt, shift)


def in_mode(mode: str, predicate: Callable[[InputEvent], bool]) -> Callable[[InputEvent, str], bool]:
    """Restrict ``predicate`` to events arriving in ``mode``."""

    def matches(event: InputEvent, current_mode: str) -> bool:
        return current_mode == mode and predicate(event)

    return matches


def action_binding(matches: Callable[[InputEvent, str], bool], *actions: object) -> KeyBinding:
    result = KeybindResult(actions=tuple(actions))
    return KeyBinding(matches=matches, result=lambda _event, _mode: result)


def command_binding(matches: Callable[[InputEvent, str], bool], *commands: object) -> KeyBinding:
    result = KeybindResult(commands=tuple(commands))
    return KeyBinding(matches=matches, result=lambda _event, _mode: result)


def is_printable_insert(event: InputEvent) -> bool:
    """Text keys without Ctrl/Alt insert themselves in insert mode."""
    key = event.key
    return key.name == KEY_CHAR and bool(key.char) and not key.ctrl and not key.alt


def _insert_typed_char(event: InputEvent, _mode: str) -> KeybindResult:
    return KeybindResult(actions=(InsertChar(event.key.char or ""),))


def resolve_keybind(
    event: InputEvent,
    mode: str,
    bindings: Sequence[KeyBinding] | None = None,
) -> KeybindResult:
    """Resolve ``event`` against ``bindings``; unbound keys yield an empty result."""
    table = DEFAULT_BINDINGS if bindings is None else bindings
    for binding in table:
        if binding.matches(event, mode):
            return binding.result(event, mode)
    return EMPTY_RESULT


def _normal(predicate: Callable[[InputEvent], bool]) -> Callable[[InputEvent, str], bool]:
    return in_mode(MODE_NORMAL, predicate)


def _insert(predicate: Callable[[InputEvent], bool]) -> Callable[[InputEvent, str], bool]:
    return in_mode(MODE_INSERT, predicate)


_ENTER_INSERT = (SetMode(MODE_INSERT), SetFocus(FOCUS_INPUT))

DEFAULT_BINDINGS: tuple[KeyBinding, ...] = (
    # Normal mode
    command_binding(_normal(lambda e: is_char(e, "q")), Quit()),
    command_binding(_normal(lambda e: is_char(e, "c", ctrl=True)), Quit()),
    action_binding(_normal(lambda e: is_char(e, "?")), ToggleHelp()),
    action_binding(_normal(lambda e: is_key(e, KEY_ESCAPE)), HideHelp()),
    command_binding(_normal(lambda e: is_char(e, "n", ctrl=False, alt=False)), CreateChat()),
    action_binding(_normal(lambda e: is_char(e, "i", ctrl=False)), *_ENTER_INSERT),
    action_binding(_normal(lambda e: is_char(e, "a", ctrl=False)), *_ENTER_INSERT),
    action_binding(_normal(lambda e: is_char(e, "j", ctrl=False) or is_key(e, KEY_DOWN)), MoveSelection(1)),
    action_binding(_normal(lambda e: is_char(e, "k", ctrl=False) or is_key(e, KEY_UP)), MoveSelection(-1)),
    action_binding(_normal(lambda e: is_char(e, "G")), SelectChat(-1)),
    action_binding(_normal(lambda e: is_key(e, KEY_TAB, shift=False)), FocusNext()),
    action_binding(_normal(lambda e: is_key(e, KEY_TAB, shift=True)), FocusPrev()),
    action_binding(_normal(lambda e: is_char(e, "h", ctrl=False)), SetFocus(FOCUS_CHAT_LIST)),
    action_binding(_normal(lambda e: is_char(e, "l", ctrl=False)), SetFocus(FOCUS_MESSAGES)),
    action_binding(_normal(lambda e: is_char(e, "d", ctrl=True)), ScrollMessages(SCROLL_STEP)),
    action_binding(_normal(lambda e: is_char(e, "u", ctrl=True)), ScrollMessages(-SCROLL_STEP)),
    # Insert mode
    action_binding(_insert(lambda e: is_key(e, KEY_ESCAPE)), SetMode(MODE_NORMAL)),
    command_binding(_insert(lambda e: is_key(e, KEY_ENTER, ctrl=False)), SendMessage()),
    action_binding(_insert(lambda e: is_key(e, KEY_ENTER, ctrl=True)), InsertChar("\n")),
    action_binding(_insert(lambda e: is_key(e, KEY_BACKSPACE)), DeleteChar()),
    action_binding(_insert(lambda e: is_char(e, "w", ctrl=True)), DeleteWord()),
    action_binding(_insert(lambda e: is_char(e, "u", ctrl=True)), ClearInput()),
    KeyBinding(matches=_insert(is_printable_insert), result=_insert_typed_char),
)


__all__ = [
    "SCROLL_STEP",
    "KeybindResult",
    "EMPTY_RESULT",
    "KeyBinding",
    "is_char",
    "is_key",
    "in_mode",
    "action_binding",
    "command_binding",
    "is_printable_insert",
    "resolve_keybind",
    "DEFAULT_BINDINGS",
]
