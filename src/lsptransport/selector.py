# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Transport selection.

:class:`ConnectionSelector` decides once which transport the process uses and
builds the matching provider on first request.  Selection never performs I/O and
never validates the endpoint: an unreachable host only surfaces when the first
stream is requested.
"""

from __future__ import annotations

import threading
from typing import BinaryIO

from .config import TransportSettings
from .providers import (
    ClientSocketStreamProvider,
    ServerSocketStreamProvider,
    StdioStreamProvider,
    StreamProvider,
)
from .types import TransportVariant
from .utils import get_logger


def select_variant(settings: TransportSettings) -> TransportVariant:
    """Apply the selection policy: client, then server, then stdio."""
    if settings.client_endpoint() is not None:
        return TransportVariant.CLIENT_SOCKET
    if settings.server_endpoint() is not None:
        return TransportVariant.SERVER_SOCKET
    return TransportVariant.STDIO


class ConnectionSelector:
    """Own the process's single stream provider.

    Args:
        settings: Transport configuration, usually
            :meth:`TransportSettings.from_env`.
        stdin: Override for the stdio input handle.
        stdout: Override for the stdio output handle.
        connect_timeout: Seconds to wait when dialing out; ``None`` blocks.
        accept_timeout: Seconds to wait for the editor to connect; ``None``
            blocks.
    """

    def __init__(
        self,
        settings: TransportSettings,
        *,
        stdin: BinaryIO | None = None,
        stdout: BinaryIO | None = None,
        connect_timeout: float | None = None,
        accept_timeout: float | None = None,
    ) -> None:
        self._settings = settings
        self._stdin = stdin
        self._stdout = stdout
        self._connect_timeout = connect_timeout
        self._accept_timeout = accept_timeout
        self._lock = threading.Lock()
        self._provider: StreamProvider | None = None
        self._logger = get_logger("lsptransport.selector")

    @property
    def settings(self) -> TransportSettings:
        return self._settings

    @property
    def variant(self) -> TransportVariant:
        return self.selected_provider().variant

    def selected_provider(self) -> StreamProvider:
        """Return the provider for this process, creating it on first call."""
        provider = self._provider
        if provider is not None:
            return provider

        with self._lock:
            if self._provider is None:
                self._provider = self._create_provider()
            return self._provider

    def _create_provider(self) -> StreamProvider:
        if (endpoint := self._settings.client_endpoint()) is not None:
            self._logger.info("Using client socket transport to %s", endpoint.describe())
            return ClientSocketStreamProvider(endpoint, connect_timeout=self._connect_timeout)

        if (endpoint := self._settings.server_endpoint()) is not None:
            self._logger.info("Using server socket transport on %s", endpoint.describe())
            return ServerSocketStreamProvider(endpoint, accept_timeout=self._accept_timeout)

        self._logger.info("Using stdio transport")
        return StdioStreamProvider(self._stdin, self._stdout)


__all__ = ["ConnectionSelector", "select_variant"]
