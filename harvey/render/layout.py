"""Screen layout for the status bar, chat list, messages, and input regions.

All coordinates are 1-based terminal cells. The chat list and messages panes
share the content rows side by side and together span the full width.
"""

from __future__ import annotations

from dataclasses import dataclass

STATUS_BAR_HEIGHT = 1
INPUT_HEIGHT = 3
MIN_CONTENT_HEIGHT = 1
CHAT_LIST_MAX_WIDTH = 30
CHAT_LIST_WIDTH_RATIO = 0.3


@dataclass(frozen=True)
class Region:
    row: int
    col: int
    width: int
    height: int


@dataclass(frozen=True)
class Layout:
    status_bar: Region
    chat_list: Region
    messages: Region
    input: Region


def chat_list_width(cols: int) -> int:
    """Return chat-list width: 30% of columns, at most 30, leaving one column for messages."""
    raw = int(cols * CHAT_LIST_WIDTH_RATIO)
    return max(1, min(min(CHAT_LIST_MAX_WIDTH, raw), max(1, cols - 1)))


def calculate_layout(rows: int, cols: int) -> Layout:
    """Split a ``rows`` x ``cols`` screen into the four fixed regions."""
    rows = max(1, rows)
    cols = max(1, cols)

    input_height = INPUT_HEIGHT
    if rows < STATUS_BAR_HEIGHT + INPUT_HEIGHT + MIN_CONTENT_HEIGHT:
        input_height = max(1, rows - STATUS_BAR_HEIGHT - MIN_CONTENT_HEIGHT)
    content_height = max(MIN_CONTENT_HEIGHT, rows - STATUS_BAR_HEIGHT - input_height)

    status_bar = Region(row=1, col=1, width=cols, height=STATUS_BAR_HEIGHT)
    content_row = status_bar.row + status_bar.height
    input_region = Region(row=content_row + content_height, col=1, width=cols, height=input_height)

    chat_width = chat_list_width(cols)
    messages_width = max(1, cols - chat_width)
    chat_list = Region(row=content_row, col=1, width=chat_width, height=content_height)
    messages = Region(row=content_row, col=chat_width + 1, width=messages_width, height=content_height)

    return Layout(status_bar=status_bar, chat_list=chat_list, messages=messages, input=input_region)


__all__ = ["Region", "Layout", "chat_list_width", "calculate_layout"]
