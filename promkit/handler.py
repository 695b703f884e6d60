"""Serving scrapes: collecting, serializing and optionally compressing metrics."""

from __future__ import annotations

import threading
import time
import weakref
import zlib
from dataclasses import dataclass, field

from promkit.builder import build_counter, build_summary
from promkit.collector import collect_metrics
from promkit.model import Collectable
from promkit.registry import Registry
from promkit.text_serializer import TextSerializer

CONTENT_TYPE = "text/plain; charset=utf-8"

_LATENCY_QUANTILES = [(0.5, 0.05), (0.9, 0.01), (0.99, 0.001)]


def gzip_compress(data: bytes) -> bytes:
    """Compress data into a gzip stream at the default level."""
    compressor = zlib.compressobj(
        zlib.Z_DEFAULT_COMPRESSION,
        zlib.DEFLATED,
        16 + zlib.MAX_WBITS,
        9,
        zlib.Z_DEFAULT_STRATEGY,
    )
    return compressor.compress(data) + compressor.flush(zlib.Z_FINISH)


@dataclass
class MetricsResponse:
    """The status, headers and body of a response to a scrape."""

    status: int
    headers: list[tuple[str, str]] = field(default_factory=list)
    body: bytes = b""

    def header(self, name: str) -> str | None:
        """Return the value of the first header called name, if any."""
        wanted = name.lower()
        return next((v for n, v in self.headers if n.lower() == wanted), None)


class MetricsHandler:
    """Answers scrapes with the metrics of weakly held collectables.

    Statistics about the scrapes themselves are recorded in the registry
    given at construction.
    """

    def __init__(self, registry: Registry) -> None:
        self._lock = threading.Lock()
        self._collectables: list[weakref.ReferenceType[Collectable]] = []
        self._serializer = TextSerializer()
        self._bytes_transferred = (
            build_counter()
            .name("exposer_transferred_bytes_total")
            .help("Transferred bytes to metrics services")
            .register(registry)
            .add({})
        )
        self._num_scrapes = (
            build_counter()
            .name("exposer_scrapes_total")
            .help("Number of times metrics were scraped")
            .register(registry)
            .add({})
        )
        self._request_latencies = (
            build_summary()
            .name("exposer_request_latencies")
            .help("Latencies of serving scrape requests, in microseconds")
            .register(registry)
            .add({}, _LATENCY_QUANTILES)
        )

    def register_collectable(self, collectable: Collectable) -> None:
        """Scrape collectable for as long as it is alive elsewhere."""
        with self._lock:
            self._collectables = [ref for ref in self._collectables if ref() is not None]
            self._collectables.append(weakref.ref(collectable))

    def remove_collectable(self, collectable: Collectable) -> None:
        """Stop scraping collectable."""
        with self._lock:
            self._collectables = [
                ref for ref in self._collectables if ref() is not collectable
            ]

    def handle_get(self, accept_encoding: str | None = None) -> MetricsResponse:
        """Collect and serialize all metrics into a 200 response.

        The body is gzip-compressed when accept_encoding mentions gzip.
        """
        start = time.perf_counter()

        with self._lock:
            refs = list(self._collectables)
        metrics = collect_metrics(refs)
        body = self._serializer.serialize(metrics).encode("utf-8")

        headers = [("Content-Type", CONTENT_TYPE)]
        if accept_encoding and "gzip" in accept_encoding:
            compressed = gzip_compress(body)
            if compressed:
                headers.append(("Content-Encoding", "gzip"))
                body = compressed
        headers.append(("Content-Length", str(len(body))))

        elapsed_us = int((time.perf_counter() - start) * 1_000_000)
        self._request_latencies.observe(elapsed_us)
        self._bytes_transferred.increment(len(body))
        self._num_scrapes.increment()
        return MetricsResponse(status=200, headers=headers, body=body)