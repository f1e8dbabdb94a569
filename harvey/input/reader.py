"""Low-level terminal reads.

Waits on a file descriptor with ``select`` and returns whatever bytes are
available, so an escape sequence delivered in one write arrives in one chunk.
"""

from __future__ import annotations

import os
import select

READ_CHUNK_SIZE = 4096


def read_chunk(fd: int, timeout_ms: int | None = None) -> bytes:
    """Read up to ``READ_CHUNK_SIZE`` bytes, or ``b""`` when nothing arrived in time.

    Raises ``EOFError`` once the descriptor reports end of file.
    """
    if timeout_ms is not None:
        ready, _, _ = select.select([fd], [], [], max(0.0, timeout_ms / 1000.0))
        if not ready:
            return b""
    try:
        data = os.read(fd, READ_CHUNK_SIZE)
    except BlockingIOError:
        return b""
    if not data:
        raise EOFError(f"fd {fd} closed")
    return data
