"""Terminal control helpers for the chat session.

Owns the stdin/stdout descriptors, raw-mode lifecycle, and alternate-screen
switching. Raw mode is only attempted when stdin is a TTY; when the terminal
refuses it the session keeps running without it.
"""

from __future__ import annotations

import contextlib
import logging
import os
import termios
import tty

from ..input.reader import read_chunk
from ..render.ansi import ALT_SCREEN_ENTER, ALT_SCREEN_EXIT, CURSOR_SHOW
from ..state.model import ScreenSize

logger = logging.getLogger(__name__)


class Terminal:
    """Single owned handle over the process terminal (or test pipes)."""

    def __init__(self, stdin_fd: int, stdout_fd: int) -> None:
        self.stdin_fd = stdin_fd
        self.stdout_fd = stdout_fd
        self._saved_tty_state: list | None = None
        self._tui_mode = False

    @property
    def raw(self) -> bool:
        return self._saved_tty_state is not None

    def _enter_raw_mode(self) -> None:
        if not os.isatty(self.stdin_fd):
            logger.debug("stdin fd %d is not a tty; skipping raw mode", self.stdin_fd)
            return
        try:
            saved = termios.tcgetattr(self.stdin_fd)
            tty.setraw(self.stdin_fd, termios.TCSAFLUSH)
        except termios.error as exc:
            logger.debug("raw mode unavailable: %s", exc)
            return
        self._saved_tty_state = saved

    def _restore_tty(self) -> None:
        saved = self._saved_tty_state
        if saved is None:
            return
        self._saved_tty_state = None
        try:
            termios.tcsetattr(self.stdin_fd, termios.TCSAFLUSH, saved)
        except termios.error as exc:
            logger.debug("could not restore tty state: %s", exc)

    def enable_tui_mode(self) -> None:
        """Enter raw mode (when possible) and the alternate screen buffer."""
        if self._tui_mode:
            return
        self._enter_raw_mode()
        self.write(ALT_SCREEN_ENTER)
        self._tui_mode = True

    def disable_tui_mode(self) -> None:
        """Return to the main screen, show the cursor and restore the tty."""
        if not self._tui_mode:
            return
        self._tui_mode = False
        try:
            self.write(ALT_SCREEN_EXIT + CURSOR_SHOW)
        finally:
            self._restore_tty()

    @contextlib.contextmanager
    def raw_mode(self):
        """Context manager that brackets code with TUI enter/exit calls."""
        try:
            self.enable_tui_mode()
            yield self
        finally:
            self.disable_tui_mode()

    def write(self, text: str) -> None:
        """Write ``text`` as UTF-8, retrying until every byte is written."""
        view = memoryview(text.encode("utf-8"))
        while view:
            written = os.write(self.stdout_fd, view)
            view = view[written:]

    def read(self, timeout_ms: int | None = None) -> bytes:
        """Read one chunk of pending input; see ``read_chunk``."""
        return read_chunk(self.stdin_fd, timeout_ms)

    def size(self) -> ScreenSize | None:
        """Measure the terminal, or ``None`` when the output is not a terminal."""
        try:
            measured = os.get_terminal_size(self.stdout_fd)
        except OSError:
            return None
        if measured.lines <= 0 or measured.columns <= 0:
            return None
        return ScreenSize(rows=measured.lines, cols=measured.columns)


__all__ = ["Terminal"]
