import gc
import gzip

import pytest

from promkit.builder import build_counter
from promkit.handler import CONTENT_TYPE, MetricsHandler, gzip_compress
from promkit.registry import Registry


def _counter(registry, name):
    return build_counter().name(name).register(registry).add({})


@pytest.fixture
def own_registry():
    return Registry()


@pytest.fixture
def handler(own_registry):
    return MetricsHandler(own_registry)


def _some_registry(name):
    registry = Registry()
    _counter(registry, name).increment()
    return registry


def test_gzip_compress_round_trip():
    data = b"example_total 1\n" * 50
    compressed = gzip_compress(data)
    assert compressed[:2] == b"\x1f\x8b"
    assert gzip.decompress(compressed) == data


def test_empty_handler_returns_empty_body(handler):
    response = handler.handle_get()
    assert response.status == 200
    assert response.body == b""
    assert response.header("Content-Length") == "0"


def test_registered_collectable_is_exposed(handler):
    registry = _some_registry("example_total")
    handler.register_collectable(registry)
    response = handler.handle_get()
    assert b"example_total" in response.body
    assert response.header("Content-Type") == CONTENT_TYPE
    assert response.header("Content-Encoding") is None
    assert response.header("Content-Length") == str(len(response.body))


def test_gzip_when_accepted(handler):
    registry = _some_registry("example_total")
    handler.register_collectable(registry)
    plain = handler.handle_get().body
    response = handler.handle_get("gzip, deflate")
    assert response.header("Content-Encoding") == "gzip"
    assert gzip.decompress(response.body) == plain


def test_other_encoding_is_not_compressed(handler):
    registry = _some_registry("example_total")
    handler.register_collectable(registry)
    response = handler.handle_get("br")
    assert response.header("Content-Encoding") is None
    assert b"example_total" in response.body


def test_removed_collectable_is_not_exposed(handler):
    registry = _some_registry("some_counter_total")
    handler.register_collectable(registry)
    handler.remove_collectable(registry)
    assert b"some_counter_total" not in handler.handle_get().body


def test_expired_collectable_is_skipped(handler):
    kept = _some_registry("first_total")
    gone = _some_registry("second_total")
    handler.register_collectable(kept)
    handler.register_collectable(gone)
    del gone
    gc.collect()
    body = handler.handle_get().body
    assert b"first_total" in body
    assert b"second_total" not in body


def test_scrape_statistics(handler, own_registry):
    registry = _some_registry("example_total")
    handler.register_collectable(registry)
    first = handler.handle_get()
    second = handler.handle_get()
    assert _counter(own_registry, "exposer_scrapes_total").value == 2.0
    assert _counter(own_registry, "exposer_transferred_bytes_total").value == len(
        first.body
    ) + len(second.body)


def test_own_registry_exposes_latencies(handler, own_registry):
    handler.register_collectable(own_registry)
    handler.handle_get()
    body = handler.handle_get().body.decode("utf-8")
    assert "exposer_request_latencies_count" in body
    assert "exposer_scrapes_total" in body
    assert "exposer_transferred_bytes_total" in body