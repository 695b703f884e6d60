"""Prometheus metrics: instrumentation, text exposition and an HTTP scrape endpoint."""

__version__ = "1.3.0"