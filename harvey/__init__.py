"""Public package surface for harvey.

Exports ``main`` for programmatic CLI invocation and ``run_tui`` for hosts
that bring their own command handler. The terminal engine lives in
``harvey.input``, ``harvey.state``, ``harvey.render`` and ``harvey.runtime``.
"""

from __future__ import annotations


def main(*args, **kwargs):
    """Lazily import CLI entrypoint to keep package imports lightweight."""
    from .cli import main as _main

    return _main(*args, **kwargs)


def run_tui(*args, **kwargs):
    """Lazily import the event loop runner; see ``harvey.runtime.loop.run_tui``."""
    from .runtime.loop import run_tui as _run_tui

    return _run_tui(*args, **kwargs)


__all__ = ["main", "run_tui"]
