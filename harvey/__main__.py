"""Module entrypoint for ``python -m harvey``.

This keeps module-mode execution behavior identical to the console script.
All argument parsing and runtime setup happen in ``harvey.cli``.
"""

from .cli import main


if __name__ == "__main__":
    main()
