"""Command handler connecting the engine to chat storage and completions.

``ChatCommandHandler`` is the ``on_command`` callable passed to ``run_tui``.
Storage and the completion client are protocols; ``harvey.memory_store``
provides in-memory implementations.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Sequence
from dataclasses import dataclass
from typing import Protocol

from .errors import user_friendly_message
from .state import (
    AddMessage,
    AppendStream,
    CancelStream,
    ChatSummary,
    ClearInput,
    CompleteStream,
    CreateChat,
    LoadChat,
    MessageSummary,
    ROLE_ASSISTANT,
    ROLE_USER,
    SelectChat,
    SendMessage,
    SetChats,
    SetError,
    SetMessages,
    StartStreaming,
    TuiState,
)

logger = logging.getLogger(__name__)

DEFAULT_CHAT_TITLE = "New Chat"
DEFAULT_ANCHOR_PROMPT = "You are a helpful assistant."
RECENT_TURNS = 4
ROLE_SYSTEM = "system"
HISTORY_SUMMARY = "history"


@dataclass(frozen=True)
class Chat:
    id: int
    title: str
    anchor_prompt: str = DEFAULT_ANCHOR_PROMPT
    anchor_summary: str | None = None
    turn_count: int = 0


@dataclass(frozen=True)
class Message:
    id: int
    chat_id: int
    role: str
    content: str
    turn_number: int


@dataclass(frozen=True)
class Summary:
    chat_id: int
    kind: str
    content: str


@dataclass(frozen=True)
class ContextMessage:
    """One entry of the prompt sent to the completion client."""

    role: str
    content: str


class ChatRepository(Protocol):
    def get_all(self) -> list[Chat]: ...

    def get_by_id(self, chat_id: int) -> Chat | None: ...

    def create(self, title: str, anchor_prompt: str) -> Chat: ...

    def increment_turn_count(self, chat_id: int) -> None: ...


class MessageRepository(Protocol):
    def create(self, chat_id: int, role: str, content: str, turn_number: int) -> Message: ...

    def get_all_for_chat(self, chat_id: int) -> list[Message]: ...

    def get_last_n_turns(self, chat_id: int, n: int) -> list[Message]: ...

    def get_current_turn(self, chat_id: int) -> int: ...


class SummaryRepository(Protocol):
    def get_latest(self, chat_id: int, kind: str) -> Summary | None: ...


class CompletionClient(Protocol):
    def stream(self, context: Sequence[ContextMessage]) -> Iterator[str]:
        """Yield the reply text chunk by chunk."""
        ...


def is_conversation_message(message: Message) -> bool:
    return message.role in (ROLE_USER, ROLE_ASSISTANT)


def to_message_summary(message: Message) -> MessageSummary:
    return MessageSummary(id=message.id, role=message.role, content=message.content)


def to_chat_summary(chat: Chat) -> ChatSummary:
    return ChatSummary(id=chat.id, title=chat.title)


def assemble_context(
    *,
    anchor_summary: str | None,
    history_summary: str | None,
    recent_messages: Sequence[Message],
    current_message: str,
    max_recent_turns: int = RECENT_TURNS,
    global_tone_summary: str | None = None,
) -> list[ContextMessage]:
    """Build the prompt: system summaries, recent turns, then the new message.

    System entries come in the order global tone, chat anchor, chat history;
    missing summaries are skipped.
    """
    context: list[ContextMessage] = []
    for summary in (global_tone_summary, anchor_summary, history_summary):
        if summary is not None:
            context.append(ContextMessage(ROLE_SYSTEM, summary))

    conversation = [message for message in recent_messages if is_conversation_message(message)]
    limit = max_recent_turns * 2
    if len(conversation) > limit:
        conversation = conversation[-limit:]
    context.extend(ContextMessage(message.role, message.content) for message in conversation)

    context.append(ContextMessage(ROLE_USER, current_message))
    return context


class ChatCommandHandler:
    """Translate engine commands into repository calls and state actions."""

    def __init__(
        self,
        chats: ChatRepository,
        messages: MessageRepository,
        completions: CompletionClient,
        summaries: SummaryRepository | None = None,
        global_tone_summary: str | None = None,
    ) -> None:
        self.chats = chats
        self.messages = messages
        self.completions = completions
        self.summaries = summaries
        self.global_tone_summary = global_tone_summary

    def __call__(self, command: object, state: TuiState):
        if isinstance(command, SendMessage):
            return self.send_message(state)
        if isinstance(command, CreateChat):
            return self.create_chat()
        if isinstance(command, LoadChat):
            return self.load_chat(command.chat_id)
        return []

    def initial_state_overrides(self) -> dict[str, object]:
        """Chats plus the first chat's messages, for ``run_tui``'s initial state."""
        chats = [to_chat_summary(chat) for chat in self.chats.get_all()]
        messages: list[MessageSummary] = []
        if chats:
            messages = self._conversation(chats[0].id)
        return {"chats": chats, "selected_chat_index": 0, "messages": messages}

    def _conversation(self, chat_id: int) -> list[MessageSummary]:
        return [
            to_message_summary(message)
            for message in self.messages.get_all_for_chat(chat_id)
            if is_conversation_message(message)
        ]

    def load_chat(self, chat_id: int) -> list[object]:
        return [
            CancelStream(),
            SetMessages(tuple(self._conversation(chat_id))),
            SetError(None),
        ]

    def create_chat(self) -> list[object]:
        chat = self.chats.create(DEFAULT_CHAT_TITLE, DEFAULT_ANCHOR_PROMPT)
        summaries = tuple(to_chat_summary(item) for item in self.chats.get_all())
        new_index = next((index for index, item in enumerate(summaries) if item.id == chat.id), 0)
        logger.info("created chat %d", chat.id)
        return [
            SetChats(summaries),
            SelectChat(new_index),
            SetMessages(()),
            SetError(None),
        ]

    def send_message(self, state: TuiState) -> Iterator[object]:
        """Persist the user's message and stream the assistant's reply."""
        text = state.input_buffer.strip()
        if not text:
            return

        chat_id = state.selected_chat_id()
        if chat_id is None:
            yield SetError("No chat selected")
            return

        chat = self.chats.get_by_id(chat_id)
        if chat is None:
            yield SetError("Chat not found")
            return

        recent = self.messages.get_last_n_turns(chat_id, RECENT_TURNS)
        turn_number = self.messages.get_current_turn(chat_id) + 1
        user_message = self.messages.create(chat_id, ROLE_USER, text, turn_number)

        yield SetError(None)
        yield AddMessage(to_message_summary(user_message))
        yield ClearInput()
        yield StartStreaming(chat_id)

        try:
            history = None
            if self.summaries is not None:
                latest = self.summaries.get_latest(chat_id, HISTORY_SUMMARY)
                history = latest.content if latest is not None else None
            context = assemble_context(
                anchor_summary=chat.anchor_summary,
                history_summary=history,
                recent_messages=recent,
                current_message=text,
                global_tone_summary=self.global_tone_summary,
            )

            reply = []
            for chunk in self.completions.stream(context):
                reply.append(chunk)
                yield AppendStream(chunk)

            assistant = self.messages.create(chat_id, ROLE_ASSISTANT, "".join(reply), turn_number)
            yield CompleteStream(to_message_summary(assistant))
            self.chats.increment_turn_count(chat_id)
        except Exception as exc:
            logger.exception("sending message to chat %d failed", chat_id)
            yield CancelStream()
            yield SetError(user_friendly_message(exc))


__all__ = [
    "DEFAULT_CHAT_TITLE",
    "DEFAULT_ANCHOR_PROMPT",
    "RECENT_TURNS",
    "Chat",
    "Message",
    "Summary",
    "ContextMessage",
    "ChatRepository",
    "MessageRepository",
    "SummaryRepository",
    "CompletionClient",
    "assemble_context",
    "ChatCommandHandler",
]
