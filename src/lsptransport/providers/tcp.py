# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""TCP stream providers.

``ClientSocketStreamProvider`` dials out to an editor that is already listening;
``ServerSocketStreamProvider`` listens on all interfaces and accepts exactly one
editor connection.  Both block on first use, both expose the connection through
buffered ``makefile`` handles, and both report failure as
:class:`~lsptransport.providers.base.StreamConnectionError`.
"""

from __future__ import annotations

import socket
import time

from .base import ConnectionErrorKind, LazyStreamProvider, StreamConnectionError
from ..types import ConnectionEndpoint, StreamPair, TransportVariant


def _pair_from_socket(sock: socket.socket) -> StreamPair:
    return StreamPair(input=sock.makefile("rb"), output=sock.makefile("wb"))


def _create_listener(address: tuple[str, int]) -> socket.socket:
    """Listen on every IPv4 and IPv6 interface where the host supports it."""
    if socket.has_dualstack_ipv6():
        return socket.create_server(address, family=socket.AF_INET6, dualstack_ipv6=True, backlog=1)
    return socket.create_server(address, backlog=1)


def _elapsed_ms(started: float) -> float:
    return (time.perf_counter() - started) * 1000


class _SocketStreamProvider(LazyStreamProvider):
    """Holds the connected socket so :meth:`close` can release it."""

    def __init__(self, endpoint: ConnectionEndpoint) -> None:
        super().__init__(endpoint)
        self._socket: socket.socket | None = None

    def _close_transport(self) -> None:
        if self._socket is not None:
            self._socket.close()


class ClientSocketStreamProvider(_SocketStreamProvider):
    """Connect to ``(host, port)`` on first use."""

    VARIANT = TransportVariant.CLIENT_SOCKET

    def __init__(self, endpoint: ConnectionEndpoint, *, connect_timeout: float | None = None) -> None:
        super().__init__(endpoint)
        self._connect_timeout = connect_timeout

    def _open(self) -> StreamPair:
        target = self.endpoint.describe()
        self._logger.debug("Connecting to %s", target)
        started = time.perf_counter()
        try:
            sock = socket.create_connection(self.endpoint.address, timeout=self._connect_timeout)
        except OSError as exc:
            self._logger.error("Could not connect to %s: %s", target, exc, exc_info=True)
            raise StreamConnectionError(
                ConnectionErrorKind.CONNECT_FAILED, self.endpoint, f"could not connect to {target}: {exc}"
            ) from exc

        # create_connection leaves the connect timeout on the socket; reads
        # from the editor must block indefinitely.
        sock.settimeout(None)
        self._socket = sock
        self._logger.info("Connected to %s", target, extra={"duration_ms": _elapsed_ms(started)})
        return _pair_from_socket(sock)


class ServerSocketStreamProvider(_SocketStreamProvider):
    """Listen on ``("", port)`` and accept a single connection on first use."""

    VARIANT = TransportVariant.SERVER_SOCKET

    def __init__(self, endpoint: ConnectionEndpoint, *, accept_timeout: float | None = None) -> None:
        super().__init__(endpoint)
        self._accept_timeout = accept_timeout
        self._bound_address: tuple[str, int] | None = None
        self._peer_address: tuple[str, int] | None = None

    @property
    def bound_address(self) -> tuple[str, int] | None:
        """Address the listener was bound to (resolves port ``0``)."""
        return self._bound_address

    @property
    def peer_address(self) -> tuple[str, int] | None:
        return self._peer_address

    def _open(self) -> StreamPair:
        target = self.endpoint.describe()
        started = time.perf_counter()
        try:
            listener = _create_listener(self.endpoint.address)
        except OSError as exc:
            self._logger.error("Could not listen on %s: %s", target, exc, exc_info=True)
            raise StreamConnectionError(
                ConnectionErrorKind.ACCEPT_FAILED, self.endpoint, f"could not listen on {target}: {exc}"
            ) from exc

        with listener:
            self._bound_address = listener.getsockname()[:2]
            self._logger.info("Waiting for a connection on port %s", self._bound_address[1])
            listener.settimeout(self._accept_timeout)
            try:
                conn, peer = listener.accept()
            except OSError as exc:
                self._logger.error("Accept on %s failed: %s", target, exc, exc_info=True)
                raise StreamConnectionError(
                    ConnectionErrorKind.ACCEPT_FAILED, self.endpoint, f"accept on {target} failed: {exc}"
                ) from exc

        # Accepted sockets inherit the listener's timeout on some platforms.
        conn.settimeout(None)
        self._socket = conn
        self._peer_address = peer[:2]
        self._logger.info(
            "Accepted connection from %s:%s", peer[0], peer[1], extra={"duration_ms": _elapsed_ms(started)}
        )
        return _pair_from_socket(conn)


__all__ = ["ClientSocketStreamProvider", "ServerSocketStreamProvider"]
