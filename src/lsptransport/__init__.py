# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Transport selection for language-server processes.

Pick stdio, an outbound TCP connection, or a single accepted TCP connection from
process configuration, and connect lazily on the first stream access::

    facade = StreamFacade.from_env()
    reader = facade.get_input_stream()   # may block on connect/accept
    writer = facade.get_output_stream()
"""

from __future__ import annotations

from .aio import open_async_streams
from .config import TransportSettings
from .facade import StreamFacade
from .providers import (
    ClientSocketStreamProvider,
    ConnectionErrorKind,
    LazyStreamProvider,
    ServerSocketStreamProvider,
    StdioStreamProvider,
    StreamConnectionError,
    StreamProvider,
)
from .selector import ConnectionSelector, select_variant
from .types import ConnectionEndpoint, StreamPair, TransportVariant


__all__ = [
    "ClientSocketStreamProvider",
    "ConnectionEndpoint",
    "ConnectionErrorKind",
    "ConnectionSelector",
    "LazyStreamProvider",
    "ServerSocketStreamProvider",
    "StdioStreamProvider",
    "StreamConnectionError",
    "StreamFacade",
    "StreamPair",
    "StreamProvider",
    "TransportSettings",
    "TransportVariant",
    "open_async_streams",
    "select_variant",
]
