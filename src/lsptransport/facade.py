# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Public entry point for obtaining the protocol byte streams."""

from __future__ import annotations

from collections.abc import Mapping
from typing import Any, BinaryIO

from .config import TransportSettings
from .selector import ConnectionSelector
from .types import StreamPair


class StreamFacade:
    """Forward stream requests to the selected provider.

    Holds no state of its own; the first call may block while a socket
    transport connects or accepts.
    """

    def __init__(self, selector: ConnectionSelector) -> None:
        self._selector = selector

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None, **selector_options: Any) -> "StreamFacade":
        """Build a facade from ``CLIENT_HOST``/``CLIENT_PORT``/``SERVER_PORT``."""
        settings = TransportSettings.from_env(environ)
        return cls(ConnectionSelector(settings, **selector_options))

    @property
    def selector(self) -> ConnectionSelector:
        return self._selector

    def get_input_stream(self) -> BinaryIO:
        return self._selector.selected_provider().get_input_stream()

    def get_output_stream(self) -> BinaryIO:
        return self._selector.selected_provider().get_output_stream()

    def streams(self) -> StreamPair:
        provider = self._selector.selected_provider()
        return StreamPair(input=provider.get_input_stream(), output=provider.get_output_stream())


__all__ = ["StreamFacade"]
