"""Main interactive event loop for the chat screen.

The loop thread owns ``TuiState``. Each iteration applies actions posted by
the command worker, re-measures the terminal, then waits briefly for input.
Key actions are applied and painted before any command they produce is
queued; commands run one at a time on the worker.
"""

from __future__ import annotations

import codecs
import logging
from collections.abc import Iterable, Mapping, Sequence
from dataclasses import replace

from ..input import DEFAULT_BINDINGS, KeyBinding, decode, resolve_keybind
from ..render import render
from ..state import LoadChat, Quit, Resize, TuiState, initial_state, reduce, reduce_all
from ..ui_theme import UITheme, resolve_theme
from .commands import CommandHandler, CommandQueue
from .config import EngineConfig

logger = logging.getLogger(__name__)

WORKER_JOIN_TIMEOUT_SECONDS = 0.5


def merge_initial_state(initial: TuiState | Mapping[str, object] | None) -> TuiState:
    """Merge caller overrides over the default state."""
    if initial is None:
        return initial_state()
    if isinstance(initial, TuiState):
        return initial
    return initial_state(**dict(initial))


class EventLoop:
    """Wires terminal input, the reducer, the renderer and the command queue."""

    def __init__(
        self,
        terminal,
        on_command: CommandHandler,
        state: TuiState,
        *,
        config: EngineConfig,
        theme: UITheme | None = None,
        bindings: Sequence[KeyBinding] = DEFAULT_BINDINGS,
    ) -> None:
        self.terminal = terminal
        self.state = state
        self.config = config
        self.theme = theme if theme is not None else resolve_theme(config.theme, no_color=config.no_color)
        self.bindings = bindings
        self.running = False
        self.commands = CommandQueue(on_command, lambda: self.state)
        # Holds back a codepoint split across two reads until it completes.
        self._utf8 = codecs.getincrementaldecoder("utf-8")(errors="replace")

    def repaint(self) -> None:
        self.terminal.write(render(self.state, self.theme))

    def apply(self, action: object) -> None:
        self.state = reduce(self.state, action)
        self.repaint()

    def apply_batch(self, actions: Iterable[object]) -> None:
        """Apply key actions atomically with a single repaint."""
        actions = tuple(actions)
        if not actions:
            return
        self.state = reduce_all(self.state, actions)
        self.repaint()

    def request_quit(self) -> None:
        if not self.running:
            return
        logger.info("quit requested")
        self.running = False
        self.commands.stop()

    def handle_input(self, data: bytes) -> None:
        text = self._utf8.decode(data)
        if not text:
            return
        for event in decode(text):
            if not self.running:
                return
            previous_chat = self.state.selected_chat_id()
            result = resolve_keybind(event, self.state.mode, self.bindings)
            self.apply_batch(result.actions)

            for command in result.commands:
                if isinstance(command, Quit):
                    self.request_quit()
                    return
                self.commands.submit(command)

            current_chat = self.state.selected_chat_id()
            if current_chat is not None and current_chat != previous_chat:
                self.commands.submit(LoadChat(chat_id=current_chat))

    def handle_resize(self) -> None:
        size = self.terminal.size()
        if size is None or size == self.state.screen_size:
            return
        logger.debug("terminal resized to %dx%d", size.rows, size.cols)
        self.apply(Resize(rows=size.rows, cols=size.cols))

    def drain_commands(self) -> None:
        for action in self.commands.drain():
            if not self.running:
                return
            self.apply(action)

    def _startup(self) -> None:
        size = self.terminal.size()
        if size is not None:
            self.state = replace(self.state, screen_size=size)
        self.running = True
        self.terminal.enable_tui_mode()
        self.commands.start()
        self.repaint()

    def run(self) -> TuiState:
        """Run until quit or end of input; returns the final state."""
        logger.info(
            "starting session: %dx%d, theme=%s",
            self.state.screen_size.rows,
            self.state.screen_size.cols,
            self.theme.name,
        )
        try:
            self._startup()
            while self.running:
                self.drain_commands()
                if not self.running:
                    break
                self.handle_resize()
                try:
                    data = self.terminal.read(self.config.poll_interval_ms)
                except EOFError:
                    logger.info("input closed")
                    self.request_quit()
                    break
                if data:
                    self.handle_input(data)
        finally:
            self.running = False
            self.commands.stop()
            try:
                self.terminal.disable_tui_mode()
            finally:
                self.commands.join(WORKER_JOIN_TIMEOUT_SECONDS)
        logger.info("session ended")
        return self.state


def run_tui(
    terminal,
    on_command: CommandHandler,
    initial_state: TuiState | Mapping[str, object] | None = None,
    *,
    config: EngineConfig | None = None,
    theme: UITheme | None = None,
) -> TuiState:
    """Run the chat screen on ``terminal`` until the user quits.

    ``on_command(command, state)`` returns a list of actions or an iterator
    that yields them over time. Exceptions it raises are logged and shown in
    the error overlay. Returns the final state after the terminal is restored.
    """
    loop = EventLoop(
        terminal,
        on_command,
        merge_initial_state(initial_state),
        config=config if config is not None else EngineConfig(),
        theme=theme,
    )
    return loop.run()


__all__ = ["EventLoop", "merge_initial_state", "run_tui"]
