"""Fluent builders that register metric families with a registry."""

from __future__ import annotations

from promkit.family import Family
from promkit.metrics import Counter, Gauge, Histogram, Info, Summary
from promkit.model import Labels
from promkit.registry import Registry


class Builder:
    """Collects a family's name, help and constant labels, then registers it."""

    def __init__(self, metric_class: type) -> None:
        self.metric_class = metric_class
        self._labels: dict[str, str] = {}
        self._name = ""
        self._help = ""

    def labels(self, labels: Labels) -> Builder:
        """Set the constant labels."""
        self._labels = dict(labels)
        return self

    def name(self, name: str) -> Builder:
        """Set the family name."""
        self._name = name
        return self

    def help(self, help: str) -> Builder:
        """Set the help text."""
        self._help = help
        return self

    def register(self, registry: Registry) -> Family:
        """Add the family to registry and return it."""
        return registry.add(self.metric_class, self._name, self._help, self._labels)


def build_counter() -> Builder:
    """Start building a counter family."""
    return Builder(Counter)


def build_gauge() -> Builder:
    """Start building a gauge family."""
    return Builder(Gauge)


def build_histogram() -> Builder:
    """Start building a histogram family."""
    return Builder(Histogram)


def build_info() -> Builder:
    """Start building an info family."""
    return Builder(Info)


def build_summary() -> Builder:
    """Start building a summary family."""
    return Builder(Summary)


__all__ = [
    "Builder",
    "build_counter",
    "build_gauge",
    "build_histogram",
    "build_info",
    "build_summary",
]