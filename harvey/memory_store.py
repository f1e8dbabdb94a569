"""In-memory chat storage and an offline echo completion client.

Together they let the CLI run end to end without a database or network.
Chats are listed most recently updated first.
"""

from __future__ import annotations

import itertools
import re
import threading
import time
from collections.abc import Iterator, Sequence
from dataclasses import replace

from .errors import ChatNotFoundError
from .session import ROLE_SYSTEM, Chat, ContextMessage, Message, Summary

_WORD_CHUNK_RE = re.compile(r"\s*\S+\s*")


class InMemoryChatStore:
    """Shared tables behind the chat, message and summary repositories.

    ``store.chats``, ``store.messages`` and ``store.summaries`` implement the
    repository protocols from ``harvey.session`` and share one lock.
    """

    def __init__(self) -> None:
        self.lock = threading.Lock()
        self.chat_rows: dict[int, Chat] = {}
        self.touched: dict[int, int] = {}
        self.message_rows: list[Message] = []
        self.summary_rows: list[Summary] = []
        self.chat_ids = itertools.count(1)
        self.message_ids = itertools.count(1)
        self.clock = itertools.count(1)
        self.chats = InMemoryChatRepository(self)
        self.messages = InMemoryMessageRepository(self)
        self.summaries = InMemorySummaryRepository(self)


class InMemoryChatRepository:
    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store

    def get_all(self) -> list[Chat]:
        store = self._store
        with store.lock:
            return sorted(
                store.chat_rows.values(),
                key=lambda chat: (store.touched[chat.id], chat.id),
                reverse=True,
            )

    def get_by_id(self, chat_id: int) -> Chat | None:
        with self._store.lock:
            return self._store.chat_rows.get(chat_id)

    def create(self, title: str, anchor_prompt: str) -> Chat:
        store = self._store
        with store.lock:
            chat = Chat(id=next(store.chat_ids), title=title, anchor_prompt=anchor_prompt)
            store.chat_rows[chat.id] = chat
            store.touched[chat.id] = next(store.clock)
            return chat

    def increment_turn_count(self, chat_id: int) -> None:
        store = self._store
        with store.lock:
            chat = store.chat_rows.get(chat_id)
            if chat is None:
                raise ChatNotFoundError(chat_id)
            store.chat_rows[chat_id] = replace(chat, turn_count=chat.turn_count + 1)
            store.touched[chat_id] = next(store.clock)


class InMemoryMessageRepository:
    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store

    def create(self, chat_id: int, role: str, content: str, turn_number: int) -> Message:
        store = self._store
        with store.lock:
            if chat_id not in store.chat_rows:
                raise ChatNotFoundError(chat_id)
            message = Message(
                id=next(store.message_ids),
                chat_id=chat_id,
                role=role,
                content=content,
                turn_number=turn_number,
            )
            store.message_rows.append(message)
            return message

    def get_all_for_chat(self, chat_id: int) -> list[Message]:
        with self._store.lock:
            found = [message for message in self._store.message_rows if message.chat_id == chat_id]
        return sorted(found, key=lambda message: (message.turn_number, message.id))

    def get_current_turn(self, chat_id: int) -> int:
        return max((message.turn_number for message in self.get_all_for_chat(chat_id)), default=0)

    def get_last_n_turns(self, chat_id: int, n: int) -> list[Message]:
        """Messages from the ``n`` most recent turns, oldest first."""
        if n <= 0:
            return []
        current = self.get_current_turn(chat_id)
        if current == 0:
            return []
        start = max(1, current - n + 1)
        return [message for message in self.get_all_for_chat(chat_id) if message.turn_number >= start]


class InMemorySummaryRepository:
    def __init__(self, store: InMemoryChatStore) -> None:
        self._store = store

    def add(self, chat_id: int, kind: str, content: str) -> Summary:
        summary = Summary(chat_id=chat_id, kind=kind, content=content)
        with self._store.lock:
            self._store.summary_rows.append(summary)
        return summary

    def get_latest(self, chat_id: int, kind: str) -> Summary | None:
        with self._store.lock:
            for summary in reversed(self._store.summary_rows):
                if summary.chat_id == chat_id and summary.kind == kind:
                    return summary
        return None


def split_words(text: str) -> list[str]:
    """Split ``text`` into word chunks that concatenate back to ``text``."""
    chunks = _WORD_CHUNK_RE.findall(text)
    return chunks if "".join(chunks) == text else [text]


class EchoCompletion:
    """Completion client that echoes the latest user message word by word."""

    def __init__(self, prefix: str = "You said: ", delay: float = 0.0) -> None:
        self.prefix = prefix
        self.delay = delay

    def reply_for(self, context: Sequence[ContextMessage]) -> str:
        latest = next(
            (message.content for message in reversed(context) if message.role != ROLE_SYSTEM),
            "",
        )
        return f"{self.prefix}{latest}"

    def stream(self, context: Sequence[ContextMessage]) -> Iterator[str]:
        for chunk in split_words(self.reply_for(context)):
            if self.delay > 0:
                time.sleep(self.delay)
            yield chunk


__all__ = [
    "InMemoryChatStore",
    "InMemoryChatRepository",
    "InMemoryMessageRepository",
    "InMemorySummaryRepository",
    "EchoCompletion",
    "split_words",
]
