# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Value types shared across :mod:`lsptransport`."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import BinaryIO


ALL_INTERFACES = ""


class TransportVariant(str, Enum):
    """The three mutually exclusive ways of obtaining the byte stream."""

    STDIO = "stdio"
    CLIENT_SOCKET = "client-socket"
    SERVER_SOCKET = "server-socket"


@dataclass(frozen=True, slots=True)
class ConnectionEndpoint:
    """Where a socket variant dials to or listens on.

    Attributes:
        host: Remote host for client endpoints; ``""`` (all interfaces) for
            server endpoints.
        port: TCP port.
        variant: The transport variant this endpoint was built for.
    """

    host: str
    port: int
    variant: TransportVariant

    @property
    def address(self) -> tuple[str, int]:
        return (self.host, self.port)

    def describe(self) -> str:
        host = self.host or "*"
        return f"{host}:{self.port}"


@dataclass(frozen=True, slots=True)
class StreamPair:
    """Input/output handles published together once setup completes."""

    input: BinaryIO
    output: BinaryIO


__all__ = ["ALL_INTERFACES", "ConnectionEndpoint", "StreamPair", "TransportVariant"]
