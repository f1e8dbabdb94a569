"""Command-line front door for harvey.

Parses CLI options, layers them over the persisted config, and sets up
logging. Then seeds an in-memory chat store and runs the terminal engine.
"""

from __future__ import annotations

import argparse
import logging
import shutil
import sys
from pathlib import Path

from .errors import user_friendly_message
from .log import setup_logging
from .memory_store import EchoCompletion, InMemoryChatStore
from .render import render
from .runtime import run_tui
from .runtime.config import (
    CONFIG_PATH,
    LOG_LEVELS,
    EngineConfig,
    apply_overrides,
    config_to_mapping,
    load_engine_config,
    save_config,
)
from .runtime.terminal import Terminal
from .session import DEFAULT_ANCHOR_PROMPT, ChatCommandHandler
from .state import ROLE_ASSISTANT, ScreenSize, initial_state
from .ui_theme import available_theme_names, resolve_theme

logger = logging.getLogger(__name__)

WELCOME_CHAT_TITLE = "Welcome"
WELCOME_MESSAGE = "Hi! Press i to type, Enter to send, and ? for help."


def _positive_int(value: str) -> int:
    """argparse type for positive integer values."""
    try:
        parsed = int(value)
    except ValueError as exc:
        raise argparse.ArgumentTypeError(f"invalid integer value: {value!r}") from exc
    if parsed <= 0:
        raise argparse.ArgumentTypeError("value must be >= 1")
    return parsed


def _default_screen_size() -> ScreenSize:
    term = shutil.get_terminal_size((80, 24))
    return ScreenSize(rows=max(1, term.lines), cols=max(1, term.columns))


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Chat with an assistant in a full-screen terminal UI.")
    parser.add_argument(
        "--theme",
        default=None,
        help=f"UI theme name ({', '.join(available_theme_names())}).",
    )
    parser.add_argument("--no-color", action="store_true", help="Disable color output.")
    parser.add_argument(
        "--log-level",
        default=None,
        type=str.upper,
        choices=LOG_LEVELS,
        help="Log level for the log file (default from config, else WARNING).",
    )
    parser.add_argument("--log-file", type=Path, default=None, help="Write logs to this file.")
    parser.add_argument(
        "--write-config",
        action="store_true",
        help=f"Save the effective settings to {CONFIG_PATH} and exit.",
    )
    parser.add_argument("--render", action="store_true", help="Print one frame of the start screen and exit.")
    parser.add_argument("--rows", type=_positive_int, default=None, help="Screen rows for --render.")
    parser.add_argument("--cols", type=_positive_int, default=None, help="Screen columns for --render.")
    return parser


def seed_store(store: InMemoryChatStore) -> None:
    """Create the welcome chat shown on first start."""
    chat = store.chats.create(WELCOME_CHAT_TITLE, DEFAULT_ANCHOR_PROMPT)
    store.messages.create(chat.id, ROLE_ASSISTANT, WELCOME_MESSAGE, 0)


def build_handler(store: InMemoryChatStore | None = None) -> ChatCommandHandler:
    if store is None:
        store = InMemoryChatStore()
        seed_store(store)
    return ChatCommandHandler(
        store.chats,
        store.messages,
        EchoCompletion(delay=0.05),
        summaries=store.summaries,
    )


def render_start_screen(handler: ChatCommandHandler, config: EngineConfig, size: ScreenSize) -> str:
    """Render the first frame without touching the terminal."""
    state = initial_state(**handler.initial_state_overrides(), screen_size=size)
    return render(state, resolve_theme(config.theme, no_color=config.no_color))


def main(argv: list[str] | None = None) -> None:
    """Parse CLI arguments and launch the chat UI on the process terminal.

    Exits with status 1 after printing a short message when the session fails
    outside the command handler (command failures stay inside the UI).
    """
    args = build_parser().parse_args(argv)
    config = apply_overrides(
        load_engine_config(),
        theme=args.theme,
        no_color=args.no_color,
        log_level=args.log_level,
    )

    if args.write_config:
        if not save_config(config_to_mapping(config)):
            raise SystemExit(f"Could not write config: {CONFIG_PATH}")
        sys.stdout.write(f"Wrote {CONFIG_PATH}\n")
        return

    handler = build_handler()
    if args.render:
        size = _default_screen_size()
        size = ScreenSize(rows=args.rows or size.rows, cols=args.cols or size.cols)
        sys.stdout.write(render_start_screen(handler, config, size))
        sys.stdout.write("\n")
        return

    setup_logging(config.log_level, args.log_file)
    terminal = Terminal(sys.stdin.fileno(), sys.stdout.fileno())
    try:
        run_tui(terminal, handler, handler.initial_state_overrides(), config=config)
    except Exception as exc:
        logger.exception("session failed")
        sys.stderr.write(user_friendly_message(exc) + "\n")
        raise SystemExit(1) from exc


if __name__ == "__main__":
    main()
