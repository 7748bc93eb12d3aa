# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Stream providers, one per transport variant.

Each provider exposes ``get_input_stream``/``get_output_stream``; the socket
variants connect lazily on the first call to either accessor.
"""

from __future__ import annotations

from .base import ConnectionErrorKind, LazyStreamProvider, StreamConnectionError, StreamProvider
from .stdio import StdioStreamProvider
from .tcp import ClientSocketStreamProvider, ServerSocketStreamProvider

__all__ = [
    "ClientSocketStreamProvider",
    "ConnectionErrorKind",
    "LazyStreamProvider",
    "ServerSocketStreamProvider",
    "StdioStreamProvider",
    "StreamConnectionError",
    "StreamProvider",
]
