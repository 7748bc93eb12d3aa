# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""STDIO stream provider.

The process's own stdin/stdout carry the protocol.  There is nothing to connect,
so this provider never blocks and never fails; the handles belong to the hosting
process and are never closed here.
"""

from __future__ import annotations

import sys
from typing import BinaryIO

from ..types import TransportVariant


def get_stdio_handles() -> tuple[BinaryIO, BinaryIO]:
    """Return the binary layers of ``sys.stdin``/``sys.stdout``.

    Separated into a helper so tests can patch it with in-memory buffers.
    """
    return sys.stdin.buffer, sys.stdout.buffer


class StdioStreamProvider:
    """Serve the process's standard input/output handles."""

    def __init__(self, stdin: BinaryIO | None = None, stdout: BinaryIO | None = None) -> None:
        self._stdin = stdin
        self._stdout = stdout

    @property
    def variant(self) -> TransportVariant:
        return TransportVariant.STDIO

    def get_input_stream(self) -> BinaryIO:
        if self._stdin is not None:
            return self._stdin
        return get_stdio_handles()[0]

    def get_output_stream(self) -> BinaryIO:
        if self._stdout is not None:
            return self._stdout
        return get_stdio_handles()[1]

    def close(self) -> None:
        """No-op: stdio handles are owned by the hosting process."""

    def __repr__(self) -> str:
        return "StdioStreamProvider()"


__all__ = ["StdioStreamProvider", "get_stdio_handles"]
