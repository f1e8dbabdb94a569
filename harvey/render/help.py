"""Help overlay content and rendering.

The overlay is a centered box listing every default keybinding. On short
screens the list is cut from the bottom, but the closing hint always stays.
"""

from __future__ import annotations

from dataclasses import dataclass

from ..ui_theme import DEFAULT_THEME, UITheme
from .ansi import draw_box, move_to, pad, styled, truncate

HELP_OVERLAY_WIDTH = 48
HELP_OVERLAY_HEIGHT = 25
HELP_CLOSE_HINT = "Press ? or Esc to close"


@dataclass(frozen=True)
class HelpLine:
    text: str
    tone: str = ""
    align: str = "left"


HELP_OVERLAY_LINES: tuple[HelpLine, ...] = (
    HelpLine("  NORMAL MODE", tone="heading"),
    HelpLine("  ?           Show this help"),
    HelpLine("  q, Ctrl+c   Quit"),
    HelpLine("  n           New chat"),
    HelpLine("  j, ↓        Move down"),
    HelpLine("  k, ↑        Move up"),
    HelpLine("  G           Jump to last chat"),
    HelpLine("  i, a        Enter insert mode"),
    HelpLine("  h           Focus chat list"),
    HelpLine("  l           Focus messages"),
    HelpLine("  Tab         Focus next panel"),
    HelpLine("  Shift+Tab   Focus previous panel"),
    HelpLine("  Ctrl+d      Scroll messages down"),
    HelpLine("  Ctrl+u      Scroll messages up"),
    HelpLine(""),
    HelpLine("  INSERT MODE", tone="heading"),
    HelpLine("  Esc         Return to normal mode"),
    HelpLine("  Enter       Send message"),
    HelpLine("  Ctrl+Enter  Insert newline"),
    HelpLine("  Backspace   Delete character"),
    HelpLine("  Ctrl+w      Delete word"),
    HelpLine("  Ctrl+u      Clear input"),
    HelpLine(HELP_CLOSE_HINT, tone="hint", align="center"),
)


def select_help_lines(inner_height: int) -> tuple[HelpLine, ...]:
    """Return the lines that fit ``inner_height`` rows, keeping the close hint last."""
    if inner_height <= 0:
        return ()
    if inner_height >= len(HELP_OVERLAY_LINES):
        return HELP_OVERLAY_LINES
    hint = HELP_OVERLAY_LINES[-1]
    if inner_height == 1:
        return (hint,)
    return HELP_OVERLAY_LINES[: inner_height - 1] + (hint,)


def render_help_overlay(rows: int, cols: int, theme: UITheme = DEFAULT_THEME) -> str:
    """Render the centered help box for a ``rows`` x ``cols`` screen."""
    width = min(HELP_OVERLAY_WIDTH, cols)
    height = min(HELP_OVERLAY_HEIGHT, rows)
    if width < 4 or height < 4:
        return ""

    row = max(1, (rows - height) // 2 + 1)
    col = max(1, (cols - width) // 2 + 1)
    inner_w = width - 2
    out: list[str] = [draw_box(row, col, width, height, title="Help", style=theme.help_border)]

    for index, line in enumerate(select_help_lines(height - 2)):
        text = pad(truncate(line.text, inner_w, ""), inner_w, line.align)
        if line.tone == "heading":
            text = styled(text, theme.help_heading)
        elif line.tone == "hint":
            text = styled(text, theme.help_hint)
        out.append(move_to(row + 1 + index, col + 1) + text)
    return "".join(out)


__all__ = [
    "HELP_OVERLAY_WIDTH",
    "HELP_OVERLAY_HEIGHT",
    "HELP_CLOSE_HINT",
    "HelpLine",
    "HELP_OVERLAY_LINES",
    "select_help_lines",
    "render_help_overlay",
]
