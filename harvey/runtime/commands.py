"""Serial command execution on a background worker thread.

Commands run strictly one at a time in submission order. Actions produced by
the handler are posted to a results queue that the event loop drains on its
own thread, so ``TuiState`` is only ever touched by the loop.
"""

from __future__ import annotations

import logging
import threading
from collections.abc import Callable, Iterable, Iterator
from dataclasses import dataclass
from queue import Empty, Queue

from ..errors import user_friendly_message
from ..state.actions import Action, CancelStream, Command, CompleteStream, SetError, StartStreaming
from ..state.model import TuiState

logger = logging.getLogger(__name__)

CommandHandler = Callable[[Command, TuiState], object]

_BARRIER_POLL_SECONDS = 0.05


@dataclass(frozen=True)
class CommandResult:
    """Handler output: a finite batch of actions or an incremental stream."""

    batch: tuple[Action, ...] = ()
    stream: Iterator[Action] | None = None

    @classmethod
    def from_handler(cls, value: object) -> CommandResult:
        """Normalize a handler return value (list, tuple, iterator, or ``None``)."""
        if value is None:
            return cls()
        if isinstance(value, CommandResult):
            return value
        if isinstance(value, (list, tuple)):
            return cls(batch=tuple(value))
        if isinstance(value, Iterable) and not isinstance(value, (str, bytes)):
            return cls(stream=iter(value))
        raise TypeError(f"unsupported command result: {type(value).__name__}")

    @property
    def is_stream(self) -> bool:
        return self.stream is not None

    def __iter__(self) -> Iterator[Action]:
        if self.stream is not None:
            return self.stream
        return iter(self.batch)

    def close(self) -> None:
        """Release an abandoned stream (generators run their ``finally``)."""
        close = getattr(self.stream, "close", None)
        if callable(close):
            close()


class CommandQueue:
    """Single-threaded FIFO command executor.

    After each command the worker waits until the loop has applied every
    action that command produced, so the next command sees up-to-date state.
    """

    def __init__(
        self,
        handler: CommandHandler,
        get_state: Callable[[], TuiState],
        *,
        name: str = "harvey-commands",
    ) -> None:
        self._handler = handler
        self._get_state = get_state
        self._name = name
        self._pending: Queue[Command | None] = Queue()
        self._results: Queue[object] = Queue()
        self._stopped = threading.Event()
        self._worker: threading.Thread | None = None

    @property
    def stopped(self) -> bool:
        return self._stopped.is_set()

    def start(self) -> None:
        if self._worker is not None:
            return
        self._worker = threading.Thread(target=self._run, name=self._name, daemon=True)
        self._worker.start()

    def submit(self, command: Command) -> bool:
        """Queue ``command`` behind any in-flight work; ignored once stopped."""
        if self._stopped.is_set():
            return False
        logger.debug("queued command %s", command.type)
        self._pending.put(command)
        return True

    def stop(self) -> None:
        """Stop the worker and discard commands that have not started."""
        if self._stopped.is_set():
            return
        self._stopped.set()
        discarded = 0
        while True:
            try:
                item = self._pending.get_nowait()
            except Empty:
                break
            if item is not None:
                discarded += 1
        if discarded:
            logger.debug("discarded %d pending command(s)", discarded)
        self._pending.put(None)

    def join(self, timeout: float | None = None) -> bool:
        """Wait for the worker to exit; returns whether it has."""
        worker = self._worker
        if worker is None:
            return True
        worker.join(timeout)
        alive = worker.is_alive()
        if alive:
            logger.debug("command worker still busy after %.2fs", timeout or 0.0)
        return not alive

    def drain(self) -> Iterator[Action]:
        """Yield actions posted so far, releasing the worker at command boundaries."""
        while True:
            try:
                item = self._results.get_nowait()
            except Empty:
                return
            if isinstance(item, threading.Event):
                # Every earlier action has been consumed by the caller by now.
                item.set()
                continue
            yield item

    def _run(self) -> None:
        while not self._stopped.is_set():
            command = self._pending.get()
            if command is None or self._stopped.is_set():
                return
            self._execute(command)

            barrier = threading.Event()
            self._results.put(barrier)
            while not barrier.wait(_BARRIER_POLL_SECONDS):
                if self._stopped.is_set():
                    return

    def _execute(self, command: Command) -> None:
        logger.debug("running command %s", command.type)
        streaming = False
        try:
            result = CommandResult.from_handler(self._handler(command, self._get_state()))
            for action in result:
                if self._stopped.is_set():
                    logger.debug("abandoning %s after quit", command.type)
                    result.close()
                    return
                if isinstance(action, StartStreaming):
                    streaming = True
                elif isinstance(action, (CompleteStream, CancelStream)):
                    streaming = False
                self._results.put(action)
        except Exception as exc:
            logger.exception("command %s failed", command.type)
            # A failed command never leaves a stream open.
            if streaming:
                self._results.put(CancelStream())
            self._results.put(SetError(user_friendly_message(exc)))


__all__ = ["CommandHandler", "CommandResult", "CommandQueue"]
