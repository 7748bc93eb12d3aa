# ==============================================================================
#                  © 2025 Dedalus Labs, Inc. and affiliates
#                            Licensed under MIT
#               github.com/dedalus-labs/lsptransport-python/LICENSE
# ==============================================================================

from __future__ import annotations

import io
import threading

import pytest

from lsptransport import (
    ConnectionEndpoint,
    ConnectionErrorKind,
    LazyStreamProvider,
    StreamConnectionError,
    StreamPair,
    TransportVariant,
)


ENDPOINT = ConnectionEndpoint(host="localhost", port=9000, variant=TransportVariant.CLIENT_SOCKET)


class RecordingProvider(LazyStreamProvider):
    """Lazy provider whose setup can be held open to force races."""

    VARIANT = TransportVariant.CLIENT_SOCKET

    def __init__(self, *, failures: int = 0) -> None:
        super().__init__(ENDPOINT)
        self.release = threading.Event()
        self.release.set()
        self.entered = threading.Event()
        self.failures = failures
        self.opened: list[StreamPair] = []

    def _open(self) -> StreamPair:
        self.entered.set()
        self.release.wait(timeout=5)
        if self.failures:
            self.failures -= 1
            raise StreamConnectionError(ConnectionErrorKind.CONNECT_FAILED, self.endpoint, "refused")
        pair = StreamPair(input=io.BytesIO(b"in"), output=io.BytesIO())
        self.opened.append(pair)
        return pair


def test_setup_is_deferred_until_first_access() -> None:
    provider = RecordingProvider()

    assert provider.initialized is False
    assert provider.setup_count == 0

    stream = provider.get_output_stream()

    assert provider.initialized is True
    assert provider.setup_count == 1
    assert stream is provider.opened[0].output


def test_input_and_output_share_one_setup() -> None:
    provider = RecordingProvider()

    reader = provider.get_input_stream()
    writer = provider.get_output_stream()
    provider.get_input_stream()

    assert provider.setup_count == 1
    assert reader is provider.opened[0].input
    assert writer is provider.opened[0].output


def test_concurrent_accessors_run_setup_exactly_once() -> None:
    provider = RecordingProvider()
    provider.release.clear()
    workers = 16
    barrier = threading.Barrier(workers)
    results: list[object] = []
    results_lock = threading.Lock()

    def worker(index: int) -> None:
        barrier.wait()
        stream = provider.get_input_stream() if index % 2 else provider.get_output_stream()
        with results_lock:
            results.append(stream)

    threads = [threading.Thread(target=worker, args=(i,)) for i in range(workers)]
    for thread in threads:
        thread.start()

    assert provider.entered.wait(timeout=5)
    provider.release.set()
    for thread in threads:
        thread.join(timeout=5)

    assert provider.setup_count == 1
    assert len(provider.opened) == 1
    pair = provider.opened[0]
    assert len(results) == workers
    assert all(stream is pair.input or stream is pair.output for stream in results)
    assert sum(stream is pair.input for stream in results) == workers // 2


def test_output_call_blocks_while_input_setup_is_in_flight() -> None:
    provider = RecordingProvider()
    provider.release.clear()
    outputs: list[object] = []

    reader_thread = threading.Thread(target=provider.get_input_stream)
    reader_thread.start()
    assert provider.entered.wait(timeout=5)

    writer_thread = threading.Thread(target=lambda: outputs.append(provider.get_output_stream()))
    writer_thread.start()
    writer_thread.join(timeout=0.1)

    assert writer_thread.is_alive()
    assert outputs == []

    provider.release.set()
    reader_thread.join(timeout=5)
    writer_thread.join(timeout=5)

    assert outputs == [provider.opened[0].output]
    assert provider.setup_count == 1


def test_failed_setup_leaves_provider_uninitialized() -> None:
    provider = RecordingProvider(failures=1)

    with pytest.raises(StreamConnectionError) as excinfo:
        provider.get_input_stream()

    assert excinfo.value.kind is ConnectionErrorKind.CONNECT_FAILED
    assert isinstance(excinfo.value, ConnectionError)
    assert provider.initialized is False

    # retrying is the caller's decision; the next call runs setup again
    provider.get_input_stream()

    assert provider.initialized is True
    assert provider.setup_count == 2


def test_every_caller_observes_a_persistent_failure() -> None:
    provider = RecordingProvider(failures=3)

    for _ in range(3):
        with pytest.raises(StreamConnectionError):
            provider.get_output_stream()

    assert provider.setup_count == 3
    assert provider.initialized is False


def test_close_closes_streams_and_blocks_reconnect() -> None:
    provider = RecordingProvider()
    reader = provider.get_input_stream()

    provider.close()
    provider.close()

    assert reader.closed
    assert provider.initialized is True


def test_close_before_setup_prevents_setup() -> None:
    provider = RecordingProvider()
    provider.close()

    with pytest.raises(RuntimeError):
        provider.get_input_stream()

    assert provider.setup_count == 0


def test_error_message_includes_kind() -> None:
    error = StreamConnectionError(ConnectionErrorKind.ACCEPT_FAILED, ENDPOINT, "accept on *:9001 failed")

    assert str(error) == "[accept-failed] accept on *:9001 failed"
    assert error.endpoint is ENDPOINT


def test_callers_waiting_on_a_failed_setup_share_the_failure() -> None:
    provider = RecordingProvider(failures=1)
    provider.release.clear()
    outcomes: dict[str, str] = {}

    def attempt(name: str, accessor) -> None:
        try:
            accessor()
        except StreamConnectionError:
            outcomes[name] = "failed"
        else:
            outcomes[name] = "ok"

    reader_thread = threading.Thread(target=attempt, args=("reader", provider.get_input_stream))
    reader_thread.start()
    assert provider.entered.wait(timeout=5)

    writer_thread = threading.Thread(target=attempt, args=("writer", provider.get_output_stream))
    writer_thread.start()
    writer_thread.join(timeout=0.1)
    assert writer_thread.is_alive()

    provider.release.set()
    reader_thread.join(timeout=5)
    writer_thread.join(timeout=5)

    assert outcomes == {"reader": "failed", "writer": "failed"}
    assert provider.setup_count == 1
    assert provider.opened == []
    assert provider.initialized is False

    # a fresh call after the failure is a new attempt
    provider.get_output_stream()

    assert provider.setup_count == 2
    assert provider.initialized is True
