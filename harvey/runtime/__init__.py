"""Public runtime entry points.

This package groups the event loop (`run_tui`), the serial command queue,
the terminal handle, and the persisted engine config.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from .commands import CommandQueue, CommandResult
    from .config import EngineConfig
    from .terminal import Terminal


def run_tui(*args, **kwargs):
    """Lazily import loop runner to avoid package-import cycles."""
    from .loop import run_tui as _run_tui

    return _run_tui(*args, **kwargs)


def __getattr__(name: str):
    if name in {"CommandQueue", "CommandResult"}:
        from . import commands as _commands

        return getattr(_commands, name)
    if name == "EngineConfig":
        from . import config as _config

        return _config.EngineConfig
    if name == "Terminal":
        from . import terminal as _terminal

        return _terminal.Terminal
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "run_tui",
    "CommandQueue",
    "CommandResult",
    "EngineConfig",
    "Terminal",
]
