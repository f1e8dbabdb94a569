"""ANSI escape constants and plain-text shaping helpers for the renderer.

Widths are measured in codepoints; text passed to ``truncate``/``pad`` must
not contain escape sequences.
"""

from __future__ import annotations

import re

CSI = "\033["
ANSI_ESCAPE_RE = re.compile(r"\x1b\[[0-9;?]*[ -/]*[@-~]")

CURSOR_HIDE = f"{CSI}?25l"
CURSOR_SHOW = f"{CSI}?25h"
CURSOR_HOME = f"{CSI}H"
CLEAR_SCREEN = f"{CSI}2J"
CLEAR_LINE = f"{CSI}2K"
ALT_SCREEN_ENTER = f"{CSI}?1049h"
ALT_SCREEN_EXIT = f"{CSI}?1049l"
RESET = f"{CSI}0m"

ELLIPSIS = "..."


def move_to(row: int, col: int) -> str:
    """Absolute cursor position, 1-based."""
    return f"{CSI}{row};{col}H"


def strip_ansi(text: str) -> str:
    return ANSI_ESCAPE_RE.sub("", text)


def styled(text: str, *styles: str) -> str:
    """Wrap ``text`` in SGR ``styles`` and a reset; empty styles leave it bare."""
    prefix = "".join(styles)
    if not prefix:
        return text
    return f"{prefix}{text}{RESET}"


def truncate(text: str, max_width: int, ellipsis: str = ELLIPSIS) -> str:
    """Cut ``text`` to ``max_width`` codepoints, ending in ``ellipsis`` when cut."""
    if max_width <= 0:
        return ""
    if len(text) <= max_width:
        return text
    if max_width <= len(ellipsis):
        return ellipsis[:max_width]
    return text[: max_width - len(ellipsis)] + ellipsis


def pad(text: str, width: int, align: str = "left") -> str:
    """Fit ``text`` to exactly ``width`` codepoints (hard cut, then pad)."""
    if width <= 0:
        return ""
    fitted = truncate(text, width, "")
    padding = width - len(fitted)
    if padding <= 0:
        return fitted
    if align == "right":
        return " " * padding + fitted
    if align == "center":
        left = padding // 2
        return " " * left + fitted + " " * (padding - left)
    return fitted + " " * padding


def wrap_words(text: str, width: int) -> list[str]:
    """Greedy word wrap; words longer than ``width`` are split hard.

    Newlines in ``text`` always start a new line. Returns at least one line.
    """
    if width <= 0:
        return [""]
    lines: list[str] = []
    for paragraph in text.split("\n"):
        current = ""
        for word in paragraph.split(" "):
            while len(word) > width:
                if current:
                    lines.append(current)
                    current = ""
                lines.append(word[:width])
                word = word[width:]
            if not current:
                current = word
            elif len(current) + 1 + len(word) <= width:
                current = f"{current} {word}"
            else:
                lines.append(current)
                current = word
        lines.append(current)
    return lines or [""]


def draw_box(
    row: int,
    col: int,
    width: int,
    height: int,
    *,
    title: str = "",
    style: str = "",
) -> str:
    """Draw a ``+-|`` bordered box with an optional title in the top edge."""
    if width < 2 or height < 2:
        return ""
    inner_w = width - 2
    out: list[str] = []

    top = "+" + "-" * inner_w + "+"
    if title and inner_w >= 2:
        segment = f" {truncate(title, inner_w - 2, '')} "
        top = "+" + segment + "-" * max(0, inner_w - len(segment)) + "+"
    out.append(move_to(row, col) + styled(top, style))

    middle = styled("|" + " " * inner_w + "|", style)
    for offset in range(1, height - 1):
        out.append(move_to(row + offset, col) + middle)

    out.append(move_to(row + height - 1, col) + styled("+" + "-" * inner_w + "+", style))
    return "".join(out)


__all__ = [
    "ANSI_ESCAPE_RE",
    "CURSOR_HIDE",
    "CURSOR_SHOW",
    "CURSOR_HOME",
    "CLEAR_SCREEN",
    "CLEAR_LINE",
    "ALT_SCREEN_ENTER",
    "ALT_SCREEN_EXIT",
    "RESET",
    "ELLIPSIS",
    "move_to",
    "strip_ansi",
    "styled",
    "truncate",
    "pad",
    "wrap_words",
    "draw_box",
]
