# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Async access to the selected transport.

Connect and accept block the calling thread, so async servers must not call the
facade directly from the event loop.  :func:`open_async_streams` performs the
first access in a worker thread and wraps the handles with
:func:`anyio.wrap_file`, which in turn offloads each read/write.
"""

from __future__ import annotations

from typing import BinaryIO

import anyio
from anyio import AsyncFile, to_thread

from .facade import StreamFacade


async def open_async_streams(facade: StreamFacade) -> tuple[AsyncFile[bytes], AsyncFile[bytes]]:
    """Return ``(reader, writer)`` async wrappers over the facade's streams.

    Raises:
        StreamConnectionError: If the socket transport fails to connect or
            accept.
    """
    pair = await to_thread.run_sync(facade.streams)
    reader: BinaryIO = pair.input
    writer: BinaryIO = pair.output
    return anyio.wrap_file(reader), anyio.wrap_file(writer)


__all__ = ["open_async_streams"]
