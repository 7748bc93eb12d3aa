# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Transport configuration read once at process start.

Editors that launch a language server over TCP communicate the endpoint through
the environment:

* ``CLIENT_PORT`` (and optionally ``CLIENT_HOST``) ask the server to dial back
  to a socket the editor is already listening on.
* ``SERVER_PORT`` asks the server to listen and wait for the editor to connect.

With neither present the server talks over its own stdin/stdout.  The settings
object is built once and handed to :class:`~lsptransport.selector.ConnectionSelector`
explicitly; nothing here is cached at module level.
"""

from __future__ import annotations

from collections.abc import Mapping
import os
from typing import Any, Final

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .types import ALL_INTERFACES, ConnectionEndpoint, TransportVariant


ENV_CLIENT_HOST: Final[str] = "CLIENT_HOST"
ENV_CLIENT_PORT: Final[str] = "CLIENT_PORT"
ENV_SERVER_PORT: Final[str] = "SERVER_PORT"
DEFAULT_CLIENT_HOST: Final[str] = "localhost"


class TransportSettings(BaseModel):
    """Immutable snapshot of the transport-related process configuration."""

    model_config = ConfigDict(frozen=True)

    client_host: str | None = None
    client_port: int | None = Field(default=None, ge=0, le=65535)
    server_port: int | None = Field(default=None, ge=0, le=65535)
    default_client_host: str = DEFAULT_CLIENT_HOST

    @field_validator("client_host", "client_port", "server_port", mode="before")
    @classmethod
    def _blank_is_absent(cls, value: Any) -> Any:
        if isinstance(value, str) and not value.strip():
            return None
        return value

    @classmethod
    def from_env(cls, environ: Mapping[str, str] | None = None) -> "TransportSettings":
        """Build settings from ``CLIENT_HOST``/``CLIENT_PORT``/``SERVER_PORT``.

        Args:
            environ: Mapping to read instead of :data:`os.environ`.

        Raises:
            pydantic.ValidationError: If a port value is not an integer in
                ``0..65535``.
        """
        env = os.environ if environ is None else environ
        return cls(
            client_host=env.get(ENV_CLIENT_HOST),
            client_port=env.get(ENV_CLIENT_PORT),
            server_port=env.get(ENV_SERVER_PORT),
        )

    def client_endpoint(self) -> ConnectionEndpoint | None:
        if self.client_port is None:
            return None
        host = self.client_host or self.default_client_host
        return ConnectionEndpoint(host=host, port=self.client_port, variant=TransportVariant.CLIENT_SOCKET)

    def server_endpoint(self) -> ConnectionEndpoint | None:
        if self.server_port is None:
            return None
        return ConnectionEndpoint(host=ALL_INTERFACES, port=self.server_port, variant=TransportVariant.SERVER_SOCKET)


__all__ = [
    "DEFAULT_CLIENT_HOST",
    "ENV_CLIENT_HOST",
    "ENV_CLIENT_PORT",
    "ENV_SERVER_PORT",
    "TransportSettings",
]
