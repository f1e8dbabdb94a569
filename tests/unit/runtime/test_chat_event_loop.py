"""Event loop behavior driven through a scripted fake terminal."""

from __future__ import annotations

import threading
import time
import unittest
from collections.abc import Callable
from unittest import mock

from harvey.render.ansi import strip_ansi
from harvey.runtime.config import EngineConfig
from harvey.runtime.loop import EventLoop, merge_initial_state, run_tui
from harvey.state import (
    AppendStream,
    ChatSummary,
    CompleteStream,
    CreateChat,
    LoadChat,
    MessageSummary,
    Resize,
    ScreenSize,
    SelectChat,
    SendMessage,
    SetChats,
    StartStreaming,
    TuiState,
    initial_state,
)
from harvey.ui_theme import PLAIN_THEME

CHATS = (ChatSummary(1, "first"), ChatSummary(2, "second"))
FAST = EngineConfig(poll_interval_ms=5)


class Until:
    """Script step that idles until ``predicate(terminal)`` holds."""

    def __init__(self, predicate: Callable[["ScriptedTerminal"], bool], timeout: float = 5.0) -> None:
        self.predicate = predicate
        self.timeout = timeout
        self.deadline: float | None = None


class ScriptedTerminal:
    """Feeds scripted input and records frames; EOF once the script ends."""

    def __init__(self, steps, size: ScreenSize | None = ScreenSize(24, 80)) -> None:
        self.steps = list(steps)
        self.current_size = size
        self.frames: list[str] = []
        self.events: list[str] = []

    @property
    def screen(self) -> str:
        return strip_ansi(self.frames[-1]) if self.frames else ""

    def enable_tui_mode(self) -> None:
        self.events.append("enable")

    def disable_tui_mode(self) -> None:
        self.events.append("disable")

    def write(self, text: str) -> None:
        self.frames.append(text)

    def size(self) -> ScreenSize | None:
        return self.current_size

    def read(self, timeout_ms: int | None = None) -> bytes:
        if not self.steps:
            raise EOFError("script finished")
        step = self.steps[0]
        if isinstance(step, Until):
            if step.deadline is None:
                step.deadline = time.monotonic() + step.timeout
            if step.predicate(self):
                self.steps.pop(0)
                return b""
            if time.monotonic() > step.deadline:
                raise AssertionError(f"condition never held; screen was:\n{self.screen}")
            time.sleep((timeout_ms or 5) / 1000.0)
            return b""
        self.steps.pop(0)
        return step


class EventLoopSessionTests(unittest.TestCase):
    def test_quit_restores_terminal_without_calling_handler(self) -> None:
        handler = mock.Mock(return_value=[])
        terminal = ScriptedTerminal([b"q"])

        final = run_tui(terminal, handler, config=FAST)

        handler.assert_not_called()
        self.assertEqual(terminal.events, ["enable", "disable"])
        self.assertIsInstance(final, TuiState)

    def test_end_of_input_quits(self) -> None:
        terminal = ScriptedTerminal([])
        run_tui(terminal, mock.Mock(return_value=[]), config=FAST)
        self.assertEqual(terminal.events, ["enable", "disable"])

    def test_typing_in_insert_mode_is_painted(self) -> None:
        terminal = ScriptedTerminal([b"iA"])

        final = run_tui(terminal, mock.Mock(return_value=[]), config=FAST)

        self.assertEqual((final.mode, final.focus, final.input_buffer), ("insert", "input", "A"))
        self.assertIn("> A", terminal.screen)
        self.assertIn("[INSERT]", terminal.screen)

    def test_initial_state_mapping_and_measured_size(self) -> None:
        terminal = ScriptedTerminal([], size=ScreenSize(30, 100))

        final = run_tui(terminal, mock.Mock(return_value=[]), {"chats": CHATS}, config=FAST)

        self.assertEqual(final.chats, CHATS)
        self.assertEqual(final.screen_size, ScreenSize(30, 100))
        self.assertIn("> first", strip_ansi(terminal.frames[0]))

    def test_command_actions_are_applied(self) -> None:
        def handler(command, _state):
            if isinstance(command, CreateChat):
                return [SetChats([ChatSummary(7, "Fresh chat")]), SelectChat(0)]
            return []

        terminal = ScriptedTerminal([b"n", Until(lambda t: "Fresh chat" in t.screen)])

        final = run_tui(terminal, handler, config=FAST)

        self.assertEqual(final.chats, (ChatSummary(7, "Fresh chat"),))

    def test_streamed_reply_is_painted_incrementally(self) -> None:
        def handler(command, _state):
            if not isinstance(command, SendMessage):
                return []

            def produce():
                yield StartStreaming(1)
                yield AppendStream("Hel")
                yield AppendStream("lo")
                yield CompleteStream(MessageSummary(5, "assistant", "Hello"))

            return produce()

        terminal = ScriptedTerminal(
            [b"ihi\r", Until(lambda t: "AI: Hello" in t.screen and "Streaming..." not in t.screen)]
        )

        final = run_tui(terminal, handler, initial_state(chats=CHATS), config=FAST)

        screens = [strip_ansi(frame) for frame in terminal.frames]
        self.assertTrue(any("AI: Hel█" in screen for screen in screens))
        self.assertEqual(final.messages[-1], MessageSummary(5, "assistant", "Hello"))
        self.assertFalse(final.streaming.active)

    def test_handler_errors_are_shown_in_overlay(self) -> None:
        def handler(_command, _state):
            raise RuntimeError("database is locked")

        terminal = ScriptedTerminal([b"n", Until(lambda t: "Database error" in t.screen)])

        with self.assertLogs("harvey.runtime.commands", level="ERROR"):
            final = run_tui(terminal, handler, config=FAST)

        self.assertTrue(final.error.startswith("Database error"))

    def test_failed_stream_does_not_stay_active(self) -> None:
        def handler(command, _state):
            if not isinstance(command, SendMessage):
                return []

            def produce():
                yield StartStreaming(1)
                yield AppendStream("partial")
                raise RuntimeError("upstream exploded")

            return produce()

        terminal = ScriptedTerminal([b"ix\r", Until(lambda t: "upstream exploded" in t.screen)])

        with self.assertLogs("harvey.runtime.commands", level="ERROR"):
            final = run_tui(terminal, handler, initial_state(chats=CHATS), config=FAST)

        self.assertFalse(final.streaming.active)
        self.assertEqual(final.streaming.content, "")
        self.assertEqual(final.error, "upstream exploded")
        self.assertNotIn("Streaming...", terminal.screen)
        self.assertNotIn("partial█", terminal.screen)

    def test_quit_waits_for_abandoned_stream_cleanup(self) -> None:
        cleaned = threading.Event()

        def handler(command, _state):
            if not isinstance(command, SendMessage):
                return []

            def produce():
                try:
                    yield StartStreaming(1)
                    while True:
                        time.sleep(0.01)
                        yield AppendStream(".")
                finally:
                    cleaned.set()

            return produce()

        terminal = ScriptedTerminal(
            [b"ix\r", Until(lambda t: "Streaming..." in t.screen), b"\x1b", b"q"]
        )

        run_tui(terminal, handler, initial_state(chats=CHATS), config=FAST)

        self.assertTrue(cleaned.is_set())
        self.assertEqual(terminal.events, ["enable", "disable"])

    def test_quit_discards_queued_commands(self) -> None:
        calls: list[object] = []
        started = threading.Event()
        release = threading.Event()

        def handler(command, _state):
            calls.append(command)
            started.set()
            release.wait(5.0)
            return []

        terminal = ScriptedTerminal([b"nn", Until(lambda _t: started.is_set()), b"q"])
        try:
            run_tui(terminal, handler, config=FAST)
        finally:
            release.set()

        time.sleep(0.1)
        self.assertEqual(calls, [CreateChat()])
        self.assertEqual(terminal.events, ["enable", "disable"])


class EventLoopUnitTests(unittest.TestCase):
    def _loop(self, state: TuiState | None = None, size: ScreenSize | None = ScreenSize(24, 80)) -> EventLoop:
        loop = EventLoop(
            ScriptedTerminal([], size=size),
            mock.Mock(return_value=[]),
            state if state is not None else initial_state(),
            config=FAST,
            theme=PLAIN_THEME,
        )
        loop.running = True
        return loop

    def test_selection_change_requests_load_chat(self) -> None:
        loop = self._loop(initial_state(chats=CHATS))
        with mock.patch.object(loop.commands, "submit") as submit_mock:
            loop.handle_input(b"j")
            loop.handle_input(b"j")
            loop.handle_input(b"k")

        self.assertEqual(
            [c.args[0] for c in submit_mock.call_args_list],
            [LoadChat(chat_id=2), LoadChat(chat_id=1)],
        )

    def test_key_actions_repaint_once_per_key(self) -> None:
        loop = self._loop()
        loop.handle_input(b"i")
        self.assertEqual(len(loop.terminal.frames), 1)
        self.assertEqual((loop.state.mode, loop.state.focus), ("insert", "input"))

        loop.handle_input(b"\x1b[Z")
        self.assertEqual(len(loop.terminal.frames), 1)

    def test_codepoint_split_across_reads_is_joined(self) -> None:
        loop = self._loop(initial_state(mode="insert", focus="input"))
        euro = "€".encode("utf-8")

        loop.handle_input(b"x" + euro[:1])
        self.assertEqual(loop.state.input_buffer, "x")
        loop.handle_input(euro[1:2])
        self.assertEqual(loop.state.input_buffer, "x")
        loop.handle_input(euro[2:] + euro)

        self.assertEqual(loop.state.input_buffer, "x€€")
        self.assertNotIn("�", loop.state.input_buffer)

    def test_invalid_bytes_still_become_replacement_chars(self) -> None:
        loop = self._loop(initial_state(mode="insert", focus="input"))
        loop.handle_input(b"a\xffb")
        self.assertEqual(loop.state.input_buffer, "a�b")

    def test_quit_stops_processing_remaining_keys(self) -> None:
        loop = self._loop()
        with mock.patch.object(loop.commands, "submit") as submit_mock:
            loop.handle_input(b"qn")

        self.assertFalse(loop.running)
        self.assertTrue(loop.commands.stopped)
        submit_mock.assert_not_called()

    def test_resize_applies_only_on_change(self) -> None:
        loop = self._loop(size=ScreenSize(24, 80))
        loop.handle_resize()
        self.assertEqual(loop.terminal.frames, [])

        loop.terminal.current_size = ScreenSize(40, 120)
        with mock.patch.object(loop, "apply", wraps=loop.apply) as apply_mock:
            loop.handle_resize()
        apply_mock.assert_called_once_with(Resize(rows=40, cols=120))
        self.assertEqual(loop.state.screen_size, ScreenSize(40, 120))

        loop.terminal.current_size = None
        loop.handle_resize()
        self.assertEqual(loop.state.screen_size, ScreenSize(40, 120))

    def test_merge_initial_state(self) -> None:
        self.assertEqual(merge_initial_state(None), initial_state())
        state = initial_state(input_buffer="x")
        self.assertIs(merge_initial_state(state), state)
        self.assertEqual(merge_initial_state({"chats": CHATS}).chats, CHATS)


if __name__ == "__main__":
    unittest.main()
