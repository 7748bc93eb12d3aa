from collections.abc import Iterator
import socket

import pytest


@pytest.fixture
def anyio_backend():
    return "asyncio"


@pytest.fixture
def loopback_listener() -> Iterator[socket.socket]:
    """A listening socket on 127.0.0.1 with an ephemeral port."""
    listener = socket.create_server(("127.0.0.1", 0))
    listener.settimeout(5)
    try:
        yield listener
    finally:
        listener.close()


@pytest.fixture
def closed_port() -> int:
    """A loopback port that nothing is listening on."""
    with socket.create_server(("127.0.0.1", 0)) as probe:
        return probe.getsockname()[1]
