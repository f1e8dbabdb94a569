"""Actions (pure state changes) and commands (external side-effect requests).

Every variant is a frozen dataclass carrying a ``type`` tag. Actions are the
only way ``TuiState`` changes; commands are executed by the event loop through
the external command handler.
"""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass
from typing import ClassVar, Union

from .model import ChatSummary, MessageSummary


@dataclass(frozen=True)
class SetMode:
    type: ClassVar[str] = "SET_MODE"
    mode: str


@dataclass(frozen=True)
class SetFocus:
    type: ClassVar[str] = "SET_FOCUS"
    focus: str


@dataclass(frozen=True)
class FocusNext:
    type: ClassVar[str] = "FOCUS_NEXT"


@dataclass(frozen=True)
class FocusPrev:
    type: ClassVar[str] = "FOCUS_PREV"


@dataclass(frozen=True)
class ToggleHelp:
    type: ClassVar[str] = "TOGGLE_HELP"


@dataclass(frozen=True)
class HideHelp:
    type: ClassVar[str] = "HIDE_HELP"


@dataclass(frozen=True)
class SetChats:
    type: ClassVar[str] = "SET_CHATS"
    chats: Sequence[ChatSummary]


@dataclass(frozen=True)
class SelectChat:
    """Select a chat by index; ``-1`` selects the last chat."""

    type: ClassVar[str] = "SELECT_CHAT"
    index: int


@dataclass(frozen=True)
class MoveSelection:
    type: ClassVar[str] = "MOVE_SELECTION"
    delta: int


@dataclass(frozen=True)
class SetMessages:
    type: ClassVar[str] = "SET_MESSAGES"
    messages: Sequence[MessageSummary]


@dataclass(frozen=True)
class AddMessage:
    type: ClassVar[str] = "ADD_MESSAGE"
    message: MessageSummary


@dataclass(frozen=True)
class ScrollMessages:
    type: ClassVar[str] = "SCROLL_MESSAGES"
    delta: int


@dataclass(frozen=True)
class InsertChar:
    type: ClassVar[str] = "INSERT_CHAR"
    char: str


@dataclass(frozen=True)
class DeleteChar:
    type: ClassVar[str] = "DELETE_CHAR"


@dataclass(frozen=True)
class DeleteWord:
    type: ClassVar[str] = "DELETE_WORD"


@dataclass(frozen=True)
class ClearInput:
    type: ClassVar[str] = "CLEAR_INPUT"


@dataclass(frozen=True)
class SetInput:
    type: ClassVar[str] = "SET_INPUT"
    input: str
    cursor: int | None = None


@dataclass(frozen=True)
class StartStreaming:
    type: ClassVar[str] = "START_STREAMING"
    chat_id: int | None


@dataclass(frozen=True)
class AppendStream:
    type: ClassVar[str] = "APPEND_STREAM"
    content: str


@dataclass(frozen=True)
class CompleteStream:
    type: ClassVar[str] = "COMPLETE_STREAM"
    message: MessageSummary


@dataclass(frozen=True)
class CancelStream:
    type: ClassVar[str] = "CANCEL_STREAM"


@dataclass(frozen=True)
class SetError:
    type: ClassVar[str] = "SET_ERROR"
    error: str | None


@dataclass(frozen=True)
class Resize:
    type: ClassVar[str] = "RESIZE"
    rows: int
    cols: int


Action = Union[
    SetMode,
    SetFocus,
    FocusNext,
    FocusPrev,
    ToggleHelp,
    HideHelp,
    SetChats,
    SelectChat,
    MoveSelection,
    SetMessages,
    AddMessage,
    ScrollMessages,
    InsertChar,
    DeleteChar,
    DeleteWord,
    ClearInput,
    SetInput,
    StartStreaming,
    AppendStream,
    CompleteStream,
    CancelStream,
    SetError,
    Resize,
]


@dataclass(frozen=True)
class Quit:
    type: ClassVar[str] = "QUIT"


@dataclass(frozen=True)
class SendMessage:
    type: ClassVar[str] = "SEND_MESSAGE"


@dataclass(frozen=True)
class CreateChat:
    type: ClassVar[str] = "CREATE_CHAT"


@dataclass(frozen=True)
class LoadChat:
    type: ClassVar[str] = "LOAD_CHAT"
    chat_id: int


Command = Union[Quit, SendMessage, CreateChat, LoadChat]


__all__ = [
    "Action",
    "Command",
    "SetMode",
    "SetFocus",
    "FocusNext",
    "FocusPrev",
    "ToggleHelp",
    "HideHelp",
    "SetChats",
    "SelectChat",
    "MoveSelection",
    "SetMessages",
    "AddMessage",
    "ScrollMessages",
    "InsertChar",
    "DeleteChar",
    "DeleteWord",
    "ClearInput",
    "SetInput",
    "StartStreaming",
    "AppendStream",
    "CompleteStream",
    "CancelStream",
    "SetError",
    "Resize",
    "Quit",
    "SendMessage",
    "CreateChat",
    "LoadChat",
]
