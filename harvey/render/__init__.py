"""Rendering engine for the chat screen.

``render(state)`` returns one ANSI string that repaints the whole screen:
status bar, chat list, messages, input box and the optional help overlay.
Rendering is pure; the event loop writes the result to the terminal.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..state.model import FOCUS_CHAT_LIST, FOCUS_INPUT, FOCUS_MESSAGES, MODE_INSERT, ROLE_USER, TuiState
from ..ui_theme import DEFAULT_THEME, UITheme
from .ansi import (
    CLEAR_SCREEN,
    CURSOR_HIDE,
    CURSOR_HOME,
    CURSOR_SHOW,
    ELLIPSIS,
    draw_box,
    move_to,
    pad,
    styled,
    truncate,
    wrap_words,
)
from .help import render_help_overlay
from .layout import Layout, Region, calculate_layout

STREAM_CURSOR = "█"
INPUT_PROMPT = ">"
NEWLINE_GLYPH = "⏎"
STREAMING_LABEL = "Streaming..."
EMPTY_CHATS_HINT: tuple[str, ...] = ("No chats yet", "Press n to create one")
USER_LABEL = "You:"
ASSISTANT_LABEL = "AI:"


@dataclass(frozen=True)
class InputView:
    """Painted input box plus where the terminal cursor belongs."""

    output: str
    cursor_row: int
    cursor_col: int


def _border_style(state: TuiState, target: str, theme: UITheme) -> str:
    return theme.border_focused if state.focus == target else theme.border_blurred


def render_status_bar(state: TuiState, width: int, theme: UITheme = DEFAULT_THEME) -> str:
    """Mode badge and focus on the left, streaming indicator on the right."""
    insert = state.mode == MODE_INSERT
    mode_text = "[INSERT]" if insert else "[NORMAL]"
    mode_style = theme.mode_insert if insert else theme.mode_normal
    right = STREAMING_LABEL if state.streaming.active else ""
    reserved = len(right) + 1 if right else 0
    left_width = max(0, width - reserved)
    left = pad(f"{mode_text} Focus: {state.focus}", left_width)
    left = left.replace(mode_text, styled(mode_text, mode_style), 1)
    if not right:
        return left
    return f"{left} {right}"


def render_chat_list(state: TuiState, region: Region, theme: UITheme = DEFAULT_THEME) -> str:
    out: list[str] = [
        draw_box(
            region.row,
            region.col,
            region.width,
            region.height,
            title="Chats",
            style=_border_style(state, FOCUS_CHAT_LIST, theme),
        )
    ]
    inner_w = max(0, region.width - 2)
    inner_h = max(0, region.height - 2)

    if not state.chats:
        for index, hint in enumerate(EMPTY_CHATS_HINT[:inner_h]):
            text = styled(pad(f" {hint}", inner_w), theme.empty_hint)
            out.append(move_to(region.row + 1 + index, region.col + 1) + text)
        return "".join(out)

    for index in range(inner_h):
        chat = state.chats[index] if index < len(state.chats) else None
        selected = index == state.selected_chat_index
        marker = ">" if selected else " "
        title = chat.title if chat is not None else ""
        line = pad(truncate(f"{marker} {title}", inner_w), inner_w)
        if selected:
            line = styled(line, theme.reverse)
        out.append(move_to(region.row + 1 + index, region.col + 1) + line)
    return "".join(out)


def format_message_line(label: str, label_style: str, content: str, width: int) -> str:
    """Render ``label content`` cut to ``width`` codepoints."""
    if width <= 0:
        return ""
    content_width = width - len(label) - 1
    if content_width <= 0:
        return truncate(label, width, "")
    return f"{styled(label, label_style)} {truncate(content, content_width, '')}"


def _streaming_lines(content: str, width: int, theme: UITheme) -> list[str]:
    """Word-wrap the in-flight reply with continuation lines under the label."""
    label = ASSISTANT_LABEL
    content_width = width - len(label) - 1
    if content_width <= 0:
        return [truncate(label, width, "")]
    wrapped = wrap_words(content + STREAM_CURSOR, content_width)
    indent = " " * (len(label) + 1)
    lines = [f"{styled(label, theme.assistant_label)} {wrapped[0]}"]
    lines.extend(f"{indent}{chunk}" for chunk in wrapped[1:])
    return lines


def render_messages(state: TuiState, region: Region, theme: UITheme = DEFAULT_THEME) -> str:
    out: list[str] = [
        draw_box(
            region.row,
            region.col,
            region.width,
            region.height,
            title="Messages",
            style=_border_style(state, FOCUS_MESSAGES, theme),
        )
    ]
    inner_w = max(0, region.width - 2)
    inner_h = max(0, region.height - 2)
    row = region.row + 1
    col = region.col + 1

    rendered = 0
    for message in state.messages[max(0, state.message_scroll_offset) :]:
        if rendered >= inner_h:
            break
        first_line = message.content.split("\n", 1)[0]
        if message.role == ROLE_USER:
            line = format_message_line(USER_LABEL, theme.user_label, first_line, inner_w)
        else:
            line = format_message_line(ASSISTANT_LABEL, theme.assistant_label, first_line, inner_w)
        out.append(move_to(row + rendered, col) + line)
        rendered += 1

    remaining = inner_h - rendered
    if state.streaming.active and remaining > 0:
        # Keep the newest streamed text visible when it outgrows the box.
        stream_lines = _streaming_lines(state.streaming.content, inner_w, theme)[-remaining:]
        for line in stream_lines:
            out.append(move_to(row + rendered, col) + line)
            rendered += 1

    if state.error:
        centered = pad(truncate(state.error, inner_w, ""), inner_w, "center")
        overlay_row = region.row + region.height // 2
        out.append(move_to(overlay_row, col) + styled(centered, theme.error_overlay))
    return "".join(out)


def render_input(state: TuiState, region: Region, theme: UITheme = DEFAULT_THEME) -> InputView:
    """Render the input box and compute the terminal cursor cell.

    When the buffer is wider than the box, the tail of the buffer is shown
    behind an ellipsis and the cursor offset is shifted to match.
    """
    insert = state.mode == MODE_INSERT
    border = theme.border_focused if state.focus == FOCUS_INPUT or insert else theme.border_blurred
    out: list[str] = [draw_box(region.row, region.col, region.width, region.height, style=border)]

    inner_w = max(0, region.width - 2)
    prompt = styled(INPUT_PROMPT, theme.prompt_insert if insert else theme.prompt_normal)
    available = max(0, inner_w - len(INPUT_PROMPT) - 1)

    buffer = state.input_buffer.replace("\n", NEWLINE_GLYPH)
    visible = buffer
    cursor_offset = state.cursor_position
    if len(buffer) > available > 0:
        window = max(0, available - len(ELLIPSIS))
        start = max(0, len(buffer) - window)
        visible = ELLIPSIS + buffer[start:]
        cursor_offset = min(max(0, state.cursor_position - start) + len(ELLIPSIS), len(visible))

    input_row = region.row + 1 if region.height > 1 else region.row
    input_col = region.col + 1
    out.append(move_to(input_row, input_col) + f"{prompt} {pad(visible, available)}")
    cursor_col = input_col + len(INPUT_PROMPT) + 1 + min(cursor_offset, available)
    return InputView(output="".join(out), cursor_row=input_row, cursor_col=cursor_col)


def render(state: TuiState, theme: UITheme = DEFAULT_THEME) -> str:
    """Return a full-screen repaint for ``state``."""
    rows, cols = state.screen_size.rows, state.screen_size.cols
    layout: Layout = calculate_layout(rows, cols)
    out: list[str] = [CURSOR_HIDE, CURSOR_HOME, CLEAR_SCREEN]

    status = layout.status_bar
    out.append(move_to(status.row, status.col) + render_status_bar(state, status.width, theme))
    out.append(render_chat_list(state, layout.chat_list, theme))
    out.append(render_messages(state, layout.messages, theme))
    input_view = render_input(state, layout.input, theme)
    out.append(input_view.output)

    if state.show_help:
        out.append(render_help_overlay(rows, cols, theme))

    if state.mode == MODE_INSERT:
        out.append(move_to(input_view.cursor_row, input_view.cursor_col))
        out.append(CURSOR_SHOW)
    return "".join(out)


__all__ = [
    "STREAM_CURSOR",
    "InputView",
    "render",
    "render_status_bar",
    "render_chat_list",
    "render_messages",
    "render_input",
    "format_message_line",
    "render_help_overlay",
    "calculate_layout",
]
