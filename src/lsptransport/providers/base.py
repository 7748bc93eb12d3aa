# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Shared stream-provider primitives.

Every transport exposes the same two accessors.  :class:`LazyStreamProvider`
implements connect-on-first-use for the socket variants: whichever accessor is
called first runs the variant's ``_open`` hook while holding a single lock that
covers *both* accessors, so a reader thread and a writer thread racing on start
up converge on one connection.
"""

from __future__ import annotations

from abc import ABC, abstractmethod
from enum import Enum
import threading
from typing import BinaryIO, ClassVar, Protocol, runtime_checkable

from ..types import ConnectionEndpoint, StreamPair, TransportVariant
from ..utils import get_logger


class ConnectionErrorKind(str, Enum):
    CONNECT_FAILED = "connect-failed"
    ACCEPT_FAILED = "accept-failed"


class StreamConnectionError(ConnectionError):
    """Raised when a socket transport cannot produce its stream pair.

    Subclasses the builtin :class:`ConnectionError` so callers that already
    handle ``OSError`` keep working.
    """

    def __init__(self, kind: ConnectionErrorKind, endpoint: ConnectionEndpoint | None, message: str) -> None:
        super().__init__(message)
        self.kind = kind
        self.endpoint = endpoint

    def __str__(self) -> str:
        return f"[{self.kind.value}] {self.args[0]}"


@runtime_checkable
class StreamProvider(Protocol):
    """Anything that can hand out the process's input/output byte streams."""

    @property
    def variant(self) -> TransportVariant: ...

    def get_input_stream(self) -> BinaryIO: ...

    def get_output_stream(self) -> BinaryIO: ...


class LazyStreamProvider(ABC):
    """Base class for providers that defer setup until the first access.

    Subclasses implement :meth:`_open`, which performs the blocking
    connect/accept and returns the resulting :class:`StreamPair`.  The pair is
    published in a single assignment before ``initialized`` flips, so no caller
    can observe one half without the other.

    A failed ``_open`` leaves the provider uninitialized and propagates the
    error to the caller and to every caller already waiting on that attempt;
    a later call runs setup again.  There is no internal retry loop.
    """

    VARIANT: ClassVar[TransportVariant]

    def __init__(self, endpoint: ConnectionEndpoint) -> None:
        self._endpoint = endpoint
        self._lock = threading.Lock()
        self._pair: StreamPair | None = None
        self._initialized = False
        self._closed = False
        self._setup_count = 0
        self._last_error: StreamConnectionError | None = None
        self._logger = get_logger(f"lsptransport.providers.{self.VARIANT.value}")

    @property
    def variant(self) -> TransportVariant:
        return self.VARIANT

    @property
    def endpoint(self) -> ConnectionEndpoint:
        return self._endpoint

    @property
    def initialized(self) -> bool:
        return self._initialized

    @property
    def setup_count(self) -> int:
        """Number of times :meth:`_open` has been invoked."""
        return self._setup_count

    def get_input_stream(self) -> BinaryIO:
        return self._ensure_open().input

    def get_output_stream(self) -> BinaryIO:
        return self._ensure_open().output

    def _ensure_open(self) -> StreamPair:
        if self._initialized:
            return self._pair  # type: ignore[return-value]

        attempt = self._setup_count
        with self._lock:
            if not self._initialized:
                if self._closed:
                    raise RuntimeError(f"{type(self).__name__} for {self._endpoint.describe()} is closed")
                # Callers queued behind a failed attempt share its outcome.
                if self._setup_count != attempt and self._last_error is not None:
                    raise self._last_error
                self._setup_count += 1
                try:
                    pair = self._open()
                except StreamConnectionError as exc:
                    self._last_error = exc
                    raise
                self._last_error = None
                self._pair = pair
                self._initialized = True
            return self._pair  # type: ignore[return-value]

    @abstractmethod
    def _open(self) -> StreamPair:
        """Perform the variant-specific connect/accept.

        Raises:
            StreamConnectionError: If the connection could not be established.
        """

    def close(self) -> None:
        """Close the published stream pair, if any.

        The provider stays initialized: accessors keep returning the (now
        closed) handles, matching the lifetime of a single connection.
        """
        with self._lock:
            if self._closed:
                return
            self._closed = True
            pair = self._pair
        if pair is None:
            return
        for stream in (pair.input, pair.output):
            try:
                stream.close()
            except OSError as exc:
                self._logger.debug("Ignoring error while closing %s stream: %s", self._endpoint.describe(), exc)
        self._close_transport()

    def _close_transport(self) -> None:
        """Release the underlying socket after the stream pair is closed."""

    def __repr__(self) -> str:
        state = "ready" if self._initialized else "pending"
        return f"{type(self).__name__}({self._endpoint.describe()}, {state})"


__all__ = [
    "ConnectionErrorKind",
    "LazyStreamProvider",
    "StreamConnectionError",
    "StreamProvider",
]
