"""Pure reducer tests: selection clamping, input editing, streaming, help."""

from __future__ import annotations

import unittest
from dataclasses import dataclass
from typing import ClassVar

from harvey.state import (
    AddMessage,
    AppendStream,
    CancelStream,
    ChatSummary,
    ClearInput,
    CompleteStream,
    DeleteChar,
    DeleteWord,
    FocusNext,
    FocusPrev,
    HideHelp,
    InsertChar,
    MessageSummary,
    MoveSelection,
    Resize,
    ScreenSize,
    ScrollMessages,
    SelectChat,
    SetChats,
    SetError,
    SetFocus,
    SetInput,
    SetMessages,
    SetMode,
    StartStreaming,
    StreamingState,
    ToggleHelp,
    clamp_index,
    initial_state,
    reduce,
    reduce_all,
)

CHATS = (ChatSummary(1, "first"), ChatSummary(2, "second"), ChatSummary(3, "third"))


@dataclass(frozen=True)
class Unknown:
    type: ClassVar[str] = "SOMETHING_NEW"


class ClampTests(unittest.TestCase):
    def test_clamp_index(self) -> None:
        self.assertEqual(clamp_index(5, 3), 2)
        self.assertEqual(clamp_index(-4, 3), 0)
        self.assertEqual(clamp_index(1, 3), 1)
        self.assertEqual(clamp_index(7, 0), 0)


class SelectionReducerTests(unittest.TestCase):
    def test_move_selection_clamps_at_both_ends(self) -> None:
        state = initial_state(chats=CHATS, selected_chat_index=2)
        self.assertEqual(reduce(state, MoveSelection(1)).selected_chat_index, 2)
        state = initial_state(chats=CHATS, selected_chat_index=0)
        self.assertEqual(reduce(state, MoveSelection(-1)).selected_chat_index, 0)
        self.assertEqual(reduce(state, MoveSelection(1)).selected_chat_index, 1)

    def test_select_chat_minus_one_selects_last(self) -> None:
        state = initial_state(chats=CHATS)
        self.assertEqual(reduce(state, SelectChat(-1)).selected_chat_index, 2)
        self.assertEqual(reduce(state, SelectChat(99)).selected_chat_index, 2)

    def test_selection_on_empty_list_stays_zero(self) -> None:
        state = initial_state()
        self.assertEqual(reduce(state, MoveSelection(3)).selected_chat_index, 0)
        self.assertEqual(reduce(state, SelectChat(-1)).selected_chat_index, 0)

    def test_set_chats_reclamps_selection(self) -> None:
        state = initial_state(chats=CHATS, selected_chat_index=2)
        after = reduce(state, SetChats([ChatSummary(9, "only")]))
        self.assertEqual(after.chats, (ChatSummary(9, "only"),))
        self.assertEqual(after.selected_chat_index, 0)


class FocusAndModeReducerTests(unittest.TestCase):
    def test_focus_cycles_in_order(self) -> None:
        state = initial_state()
        seen = []
        for _ in range(3):
            state = reduce(state, FocusNext())
            seen.append(state.focus)
        self.assertEqual(seen, ["messages", "input", "chat-list"])
        self.assertEqual(reduce(initial_state(), FocusPrev()).focus, "input")

    def test_set_mode_and_focus(self) -> None:
        state = reduce_all(initial_state(), [SetMode("insert"), SetFocus("input")])
        self.assertEqual((state.mode, state.focus), ("insert", "input"))

    def test_help_toggle_and_hide(self) -> None:
        state = reduce(initial_state(), ToggleHelp())
        self.assertTrue(state.show_help)
        self.assertFalse(reduce(state, HideHelp()).show_help)
        self.assertFalse(reduce(state, ToggleHelp()).show_help)

        hidden = initial_state()
        self.assertIs(reduce(hidden, HideHelp()), hidden)


class MessageReducerTests(unittest.TestCase):
    def test_set_messages_resets_scroll(self) -> None:
        state = initial_state(message_scroll_offset=7)
        after = reduce(state, SetMessages([MessageSummary(1, "user", "hi")]))
        self.assertEqual(after.messages, (MessageSummary(1, "user", "hi"),))
        self.assertEqual(after.message_scroll_offset, 0)

    def test_scroll_never_goes_negative(self) -> None:
        state = reduce(initial_state(), ScrollMessages(10))
        self.assertEqual(state.message_scroll_offset, 10)
        self.assertEqual(reduce(state, ScrollMessages(-25)).message_scroll_offset, 0)

    def test_add_message_appends(self) -> None:
        state = initial_state(messages=[MessageSummary(1, "user", "a")])
        after = reduce(state, AddMessage(MessageSummary(2, "assistant", "b")))
        self.assertEqual([message.id for message in after.messages], [1, 2])


class InputReducerTests(unittest.TestCase):
    def test_insert_at_cursor(self) -> None:
        state = initial_state(input_buffer="held", cursor_position=3)
        after = reduce(state, InsertChar("l"))
        self.assertEqual((after.input_buffer, after.cursor_position), ("helld", 4))

    def test_insert_then_delete_round_trips(self) -> None:
        for buffer, cursor in (("", 0), ("abc", 0), ("abc", 2), ("abc", 3)):
            with self.subTest(buffer=buffer, cursor=cursor):
                state = initial_state(input_buffer=buffer, cursor_position=cursor)
                after = reduce_all(state, [InsertChar("X"), DeleteChar()])
                self.assertEqual((after.input_buffer, after.cursor_position), (buffer, cursor))

    def test_delete_char_at_start_is_noop(self) -> None:
        state = initial_state(input_buffer="abc", cursor_position=0)
        self.assertIs(reduce(state, DeleteChar()), state)

    def test_delete_word_keeps_single_separator(self) -> None:
        state = initial_state(input_buffer="hello   world there", cursor_position=14)
        after = reduce(state, DeleteWord())
        self.assertEqual(after.input_buffer, "hello there")
        self.assertEqual(after.cursor_position, 6)

    def test_delete_word_at_end_of_buffer(self) -> None:
        state = initial_state(input_buffer="hello world", cursor_position=11)
        after = reduce(state, DeleteWord())
        self.assertEqual((after.input_buffer, after.cursor_position), ("hello", 5))

    def test_delete_word_mid_word_joins_directly(self) -> None:
        state = initial_state(input_buffer="hello wor", cursor_position=8)
        after = reduce(state, DeleteWord())
        self.assertEqual((after.input_buffer, after.cursor_position), ("hellor", 5))

    def test_delete_word_with_only_one_word(self) -> None:
        state = initial_state(input_buffer="word rest", cursor_position=5)
        after = reduce(state, DeleteWord())
        self.assertEqual((after.input_buffer, after.cursor_position), ("rest", 0))

    def test_clear_and_set_input(self) -> None:
        state = initial_state(input_buffer="abc", cursor_position=2)
        cleared = reduce(state, ClearInput())
        self.assertEqual((cleared.input_buffer, cleared.cursor_position), ("", 0))

        set_default = reduce(state, SetInput("xyz"))
        self.assertEqual(set_default.cursor_position, 3)
        self.assertEqual(reduce(state, SetInput("xyz", cursor=10)).cursor_position, 3)
        self.assertEqual(reduce(state, SetInput("xyz", cursor=-2)).cursor_position, 0)


class StreamingReducerTests(unittest.TestCase):
    def test_stream_lifecycle(self) -> None:
        state = reduce(initial_state(), StartStreaming(4))
        self.assertEqual(state.streaming, StreamingState(active=True, content="", chat_id=4))

        state = reduce_all(state, [AppendStream("Hel"), AppendStream("lo")])
        self.assertEqual(state.streaming.content, "Hello")

        done = reduce(state, CompleteStream(MessageSummary(8, "assistant", "Hello")))
        self.assertEqual(done.streaming, StreamingState())
        self.assertEqual(done.messages[-1], MessageSummary(8, "assistant", "Hello"))

    def test_cancel_discards_content(self) -> None:
        state = reduce_all(initial_state(), [StartStreaming(1), AppendStream("partial"), CancelStream()])
        self.assertEqual(state.streaming, StreamingState())
        self.assertEqual(state.messages, ())


class MiscReducerTests(unittest.TestCase):
    def test_error_and_resize(self) -> None:
        state = reduce(initial_state(), SetError("boom"))
        self.assertEqual(state.error, "boom")
        self.assertIsNone(reduce(state, SetError(None)).error)
        self.assertEqual(reduce(state, Resize(rows=40, cols=120)).screen_size, ScreenSize(40, 120))

    def test_unknown_action_returns_same_state(self) -> None:
        state = initial_state(input_buffer="keep")
        self.assertIs(reduce(state, Unknown()), state)

    def test_reduce_does_not_mutate_input(self) -> None:
        state = initial_state(input_buffer="abc", cursor_position=3)
        reduce(state, InsertChar("d"))
        self.assertEqual(state.input_buffer, "abc")


if __name__ == "__main__":
    unittest.main()
