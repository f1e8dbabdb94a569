"""UI state model, action/command types, and the pure reducer."""

from .actions import (
    Action,
    AddMessage,
    AppendStream,
    CancelStream,
    ClearInput,
    Command,
    CompleteStream,
    CreateChat,
    DeleteChar,
    DeleteWord,
    FocusNext,
    FocusPrev,
    HideHelp,
    InsertChar,
    LoadChat,
    MoveSelection,
    Quit,
    Resize,
    ScrollMessages,
    SelectChat,
    SendMessage,
    SetChats,
    SetError,
    SetFocus,
    SetInput,
    SetMessages,
    SetMode,
    StartStreaming,
    ToggleHelp,
)
from .model import (
    FOCUS_CHAT_LIST,
    FOCUS_INPUT,
    FOCUS_MESSAGES,
    FOCUS_ORDER,
    INITIAL_STATE,
    MODE_INSERT,
    MODE_NORMAL,
    ROLE_ASSISTANT,
    ROLE_USER,
    ChatSummary,
    MessageSummary,
    ScreenSize,
    StreamingState,
    TuiState,
    initial_state,
)
from .reducer import clamp_index, reduce, reduce_all

__all__ = [
    "Action",
    "AddMessage",
    "AppendStream",
    "CancelStream",
    "ClearInput",
    "Command",
    "CompleteStream",
    "CreateChat",
    "DeleteChar",
    "DeleteWord",
    "FocusNext",
    "FocusPrev",
    "HideHelp",
    "InsertChar",
    "LoadChat",
    "MoveSelection",
    "Quit",
    "Resize",
    "ScrollMessages",
    "SelectChat",
    "SendMessage",
    "SetChats",
    "SetError",
    "SetFocus",
    "SetInput",
    "SetMessages",
    "SetMode",
    "StartStreaming",
    "ToggleHelp",
    "FOCUS_CHAT_LIST",
    "FOCUS_INPUT",
    "FOCUS_MESSAGES",
    "FOCUS_ORDER",
    "INITIAL_STATE",
    "MODE_INSERT",
    "MODE_NORMAL",
    "ROLE_ASSISTANT",
    "ROLE_USER",
    "ChatSummary",
    "MessageSummary",
    "ScreenSize",
    "StreamingState",
    "TuiState",
    "initial_state",
    "clamp_index",
    "reduce",
    "reduce_all",
]
