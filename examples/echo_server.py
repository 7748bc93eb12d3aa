# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

"""Echo every byte received back to the editor.

Run over stdio:
    uv run python examples/echo_server.py

Wait for an editor to connect on port 5007:
    SERVER_PORT=5007 uv run python examples/echo_server.py

Dial back to an editor listening on port 5008:
    CLIENT_PORT=5008 uv run python examples/echo_server.py
"""

from __future__ import annotations

import anyio

from lsptransport import StreamConnectionError, StreamFacade, open_async_streams
from lsptransport.utils import get_logger


logger = get_logger("lsptransport.examples.echo")


async def main() -> None:
    facade = StreamFacade.from_env(accept_timeout=60)
    try:
        reader, writer = await open_async_streams(facade)
    except StreamConnectionError as exc:
        logger.error("No transport available: %s", exc)
        return

    logger.info("Echoing over %s", facade.selector.variant.value)
    while chunk := await reader.read1(4096):
        await writer.write(chunk)
        await writer.flush()


if __name__ == "__main__":
    anyio.run(main)
