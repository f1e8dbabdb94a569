"""Pure state reducer.

``reduce(state, action)`` returns a new ``TuiState`` and never mutates its
input. Unknown actions return the state unchanged so newer action types can
flow through older reducers.
"""

from __future__ import annotations

import re
from collections.abc import Callable, Iterable
from dataclasses import replace

from . import actions as a
from .model import FOCUS_ORDER, ScreenSize, StreamingState, TuiState

_TRAILING_WORD_RE = re.compile(r"\S+\s*\Z")
_TRAILING_SPACE_RE = re.compile(r"\s\Z")
_LEADING_SPACE_RE = re.compile(r"\A\s")


def clamp_index(index: int, length: int) -> int:
    """Clamp ``index`` into ``[0, length - 1]``; empty collections clamp to 0."""
    if length <= 0:
        return 0
    return max(0, min(index, length - 1))


def _focus_index(focus: str) -> int:
    try:
        return FOCUS_ORDER.index(focus)
    except ValueError:
        return 0


def _set_mode(state: TuiState, action: a.SetMode) -> TuiState:
    return replace(state, mode=action.mode)


def _set_focus(state: TuiState, action: a.SetFocus) -> TuiState:
    return replace(state, focus=action.focus)


def _focus_next(state: TuiState, action: a.FocusNext) -> TuiState:
    index = (_focus_index(state.focus) + 1) % len(FOCUS_ORDER)
    return replace(state, focus=FOCUS_ORDER[index])


def _focus_prev(state: TuiState, action: a.FocusPrev) -> TuiState:
    index = (_focus_index(state.focus) - 1) % len(FOCUS_ORDER)
    return replace(state, focus=FOCUS_ORDER[index])


def _toggle_help(state: TuiState, action: a.ToggleHelp) -> TuiState:
    return replace(state, show_help=not state.show_help)


def _hide_help(state: TuiState, action: a.HideHelp) -> TuiState:
    if not state.show_help:
        return state
    return replace(state, show_help=False)


def _set_chats(state: TuiState, action: a.SetChats) -> TuiState:
    chats = tuple(action.chats)
    return replace(
        state,
        chats=chats,
        selected_chat_index=clamp_index(state.selected_chat_index, len(chats)),
    )


def _select_chat(state: TuiState, action: a.SelectChat) -> TuiState:
    desired = len(state.chats) - 1 if action.index == -1 else action.index
    return replace(state, selected_chat_index=clamp_index(desired, len(state.chats)))


def _move_selection(state: TuiState, action: a.MoveSelection) -> TuiState:
    desired = state.selected_chat_index + action.delta
    return replace(state, selected_chat_index=clamp_index(desired, len(state.chats)))


def _set_messages(state: TuiState, action: a.SetMessages) -> TuiState:
    return replace(state, messages=tuple(action.messages), message_scroll_offset=0)


def _add_message(state: TuiState, action: a.AddMessage) -> TuiState:
    return replace(state, messages=state.messages + (action.message,))


def _scroll_messages(state: TuiState, action: a.ScrollMessages) -> TuiState:
    return replace(state, message_scroll_offset=max(0, state.message_scroll_offset + action.delta))


def _insert_char(state: TuiState, action: a.InsertChar) -> TuiState:
    before = state.input_buffer[: state.cursor_position]
    after = state.input_buffer[state.cursor_position :]
    return replace(
        state,
        input_buffer=f"{before}{action.char}{after}",
        cursor_position=state.cursor_position + len(action.char),
    )


def _delete_char(state: TuiState, action: a.DeleteChar) -> TuiState:
    if state.cursor_position <= 0:
        return state
    before = state.input_buffer[: state.cursor_position - 1]
    after = state.input_buffer[state.cursor_position :]
    return replace(state, input_buffer=before + after, cursor_position=state.cursor_position - 1)


def _delete_word(state: TuiState, action: a.DeleteWord) -> TuiState:
    """Delete the word (and its trailing blanks) before the cursor.

    One space is put back only when text remains on both sides, the deleted
    span ended in whitespace, and the suffix does not already start with
    whitespace. Otherwise the two sides are joined directly.
    """
    before = state.input_buffer[: state.cursor_position]
    after = state.input_buffer[state.cursor_position :]
    next_before = _TRAILING_WORD_RE.sub("", before, count=1).rstrip()
    needs_space = (
        bool(next_before)
        and bool(after)
        and _TRAILING_SPACE_RE.search(before) is not None
        and _LEADING_SPACE_RE.match(after) is None
    )
    spacer = " " if needs_space else ""
    return replace(
        state,
        input_buffer=f"{next_before}{spacer}{after}",
        cursor_position=len(next_before) + len(spacer),
    )


def _clear_input(state: TuiState, action: a.ClearInput) -> TuiState:
    return replace(state, input_buffer="", cursor_position=0)


def _set_input(state: TuiState, action: a.SetInput) -> TuiState:
    max_cursor = len(action.input)
    desired = max_cursor if action.cursor is None else action.cursor
    return replace(state, input_buffer=action.input, cursor_position=max(0, min(desired, max_cursor)))


def _start_streaming(state: TuiState, action: a.StartStreaming) -> TuiState:
    return replace(state, streaming=StreamingState(active=True, content="", chat_id=action.chat_id))


def _append_stream(state: TuiState, action: a.AppendStream) -> TuiState:
    return replace(
        state,
        streaming=StreamingState(
            active=True,
            content=state.streaming.content + action.content,
            chat_id=state.streaming.chat_id,
        ),
    )


def _complete_stream(state: TuiState, action: a.CompleteStream) -> TuiState:
    return replace(state, messages=state.messages + (action.message,), streaming=StreamingState())


def _cancel_stream(state: TuiState, action: a.CancelStream) -> TuiState:
    return replace(state, streaming=StreamingState())


def _set_error(state: TuiState, action: a.SetError) -> TuiState:
    return replace(state, error=action.error)


def _resize(state: TuiState, action: a.Resize) -> TuiState:
    return replace(state, screen_size=ScreenSize(rows=action.rows, cols=action.cols))


_REDUCERS: dict[type, Callable[[TuiState, object], TuiState]] = {
    a.SetMode: _set_mode,
    a.SetFocus: _set_focus,
    a.FocusNext: _focus_next,
    a.FocusPrev: _focus_prev,
    a.ToggleHelp: _toggle_help,
    a.HideHelp: _hide_help,
    a.SetChats: _set_chats,
    a.SelectChat: _select_chat,
    a.MoveSelection: _move_selection,
    a.SetMessages: _set_messages,
    a.AddMessage: _add_message,
    a.ScrollMessages: _scroll_messages,
    a.InsertChar: _insert_char,
    a.DeleteChar: _delete_char,
    a.DeleteWord: _delete_word,
    a.ClearInput: _clear_input,
    a.SetInput: _set_input,
    a.StartStreaming: _start_streaming,
    a.AppendStream: _append_stream,
    a.CompleteStream: _complete_stream,
    a.CancelStream: _cancel_stream,
    a.SetError: _set_error,
    a.Resize: _resize,
}


def reduce(state: TuiState, action: object) -> TuiState:
    """Apply one action and return the resulting state."""
    handler = _REDUCERS.get(type(action))
    if handler is None:
        return state
    return handler(state, action)


def reduce_all(state: TuiState, actions: Iterable[object]) -> TuiState:
    """Fold a batch of actions left to right."""
    for action in actions:
        state = reduce(state, action)
    return state


__all__ = ["clamp_index", "reduce", "reduce_all"]
