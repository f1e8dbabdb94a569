"""Immutable UI state snapshot owned by the event loop."""

from __future__ import annotations

from dataclasses import dataclass, field, replace

MODE_NORMAL = "normal"
MODE_INSERT = "insert"

FOCUS_CHAT_LIST = "chat-list"
FOCUS_MESSAGES = "messages"
FOCUS_INPUT = "input"
FOCUS_ORDER: tuple[str, ...] = (FOCUS_CHAT_LIST, FOCUS_MESSAGES, FOCUS_INPUT)

ROLE_USER = "user"
ROLE_ASSISTANT = "assistant"

DEFAULT_ROWS = 24
DEFAULT_COLS = 80


@dataclass(frozen=True)
class ChatSummary:
    id: int
    title: str


@dataclass(frozen=True)
class MessageSummary:
    id: int
    role: str
    content: str


@dataclass(frozen=True)
class StreamingState:
    """In-flight assistant response accumulated from streamed chunks."""

    active: bool = False
    content: str = ""
    chat_id: int | None = None


@dataclass(frozen=True)
class ScreenSize:
    rows: int = DEFAULT_ROWS
    cols: int = DEFAULT_COLS


@dataclass(frozen=True)
class TuiState:
    """Complete UI snapshot; every action produces a new instance."""

    mode: str = MODE_NORMAL
    focus: str = FOCUS_CHAT_LIST
    show_help: bool = False
    chats: tuple[ChatSummary, ...] = ()
    selected_chat_index: int = 0
    messages: tuple[MessageSummary, ...] = ()
    message_scroll_offset: int = 0
    input_buffer: str = ""
    cursor_position: int = 0
    streaming: StreamingState = field(default_factory=StreamingState)
    error: str | None = None
    screen_size: ScreenSize = field(default_factory=ScreenSize)

    def selected_chat(self) -> ChatSummary | None:
        """Return the chat under the selection, or ``None`` when the list is empty."""
        if 0 <= self.selected_chat_index < len(self.chats):
            return self.chats[self.selected_chat_index]
        return None

    def selected_chat_id(self) -> int | None:
        chat = self.selected_chat()
        return chat.id if chat is not None else None


INITIAL_STATE = TuiState()


def initial_state(**overrides: object) -> TuiState:
    """Merge caller-supplied partial overrides over the default state.

    Sequences given for ``chats``/``messages`` are frozen into tuples so the
    result stays immutable.
    """
    for key in ("chats", "messages"):
        if key in overrides and overrides[key] is not None:
            overrides[key] = tuple(overrides[key])  # type: ignore[arg-type]
    return replace(INITIAL_STATE, **overrides)  # type: ignore[arg-type]


__all__ = [
    "MODE_NORMAL",
    "MODE_INSERT",
    "FOCUS_CHAT_LIST",
    "FOCUS_MESSAGES",
    "FOCUS_INPUT",
    "FOCUS_ORDER",
    "ROLE_USER",
    "ROLE_ASSISTANT",
    "ChatSummary",
    "MessageSummary",
    "StreamingState",
    "ScreenSize",
    "TuiState",
    "INITIAL_STATE",
    "initial_state",
]
