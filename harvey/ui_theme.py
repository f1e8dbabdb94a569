"""UI theme definitions and selection helpers.

Themes are ANSI palettes for the chat screen chrome: borders, mode badges,
message labels, error overlay and help box.
"""

from __future__ import annotations

from dataclasses import dataclass


@dataclass(frozen=True)
class UITheme:
    """Semantic ANSI palette used by renderers."""

    name: str
    reverse: str
    border_focused: str
    border_blurred: str
    mode_normal: str
    mode_insert: str
    prompt_normal: str
    prompt_insert: str
    user_label: str
    assistant_label: str
    empty_hint: str
    error_overlay: str
    help_border: str
    help_heading: str
    help_hint: str


DEFAULT_THEME = UITheme(
    name="default",
    reverse="\033[7m",
    border_focused="\033[32m",
    border_blurred="\033[90m",
    mode_normal="\033[36m",
    mode_insert="\033[32m",
    prompt_normal="\033[90m",
    prompt_insert="\033[33m",
    user_label="\033[34m",
    assistant_label="\033[32m",
    empty_hint="\033[2m\033[90m",
    error_overlay="\033[41m\033[37m",
    help_border="\033[36m",
    help_heading="\033[1m\033[36m",
    help_hint="\033[2m\033[90m",
)

OCEAN_THEME = UITheme(
    name="ocean",
    reverse="\033[7m",
    border_focused="\033[38;5;45m",
    border_blurred="\033[2;38;5;110m",
    mode_normal="\033[1;38;5;39m",
    mode_insert="\033[1;38;5;84m",
    prompt_normal="\033[2;38;5;110m",
    prompt_insert="\033[38;5;215m",
    user_label="\033[38;5;117m",
    assistant_label="\033[38;5;84m",
    empty_hint="\033[2;38;5;110m",
    error_overlay="\033[48;5;124m\033[38;5;231m",
    help_border="\033[38;5;39m",
    help_heading="\033[1;38;5;45m",
    help_hint="\033[2;38;5;110m",
)

PLAIN_THEME = UITheme(
    name="plain",
    reverse="\033[7m",
    border_focused="",
    border_blurred="",
    mode_normal="",
    mode_insert="",
    prompt_normal="",
    prompt_insert="",
    user_label="",
    assistant_label="",
    empty_hint="",
    error_overlay="\033[7m",
    help_border="",
    help_heading="",
    help_hint="",
)

_THEMES: dict[str, UITheme] = {
    DEFAULT_THEME.name: DEFAULT_THEME,
    OCEAN_THEME.name: OCEAN_THEME,
}


def available_theme_names() -> tuple[str, ...]:
    """Return selectable non-plain theme names."""
    return tuple(sorted(_THEMES.keys()))


def normalize_theme_name(name: str | None) -> str:
    """Return a valid theme name, falling back to default."""
    if not name:
        return DEFAULT_THEME.name
    candidate = str(name).strip().lower()
    if candidate in _THEMES:
        return candidate
    return DEFAULT_THEME.name


def resolve_theme(name: str | None, *, no_color: bool = False) -> UITheme:
    """Return concrete theme for requested name and color mode."""
    if no_color:
        return PLAIN_THEME
    return _THEMES[normalize_theme_name(name)]


__all__ = [
    "UITheme",
    "DEFAULT_THEME",
    "OCEAN_THEME",
    "PLAIN_THEME",
    "available_theme_names",
    "normalize_theme_name",
    "resolve_theme",
]
