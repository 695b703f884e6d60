"""Metric types and validation of metric and label names."""

from __future__ import annotations

import enum
import re

_METRIC_NAME = re.compile(r"[a-zA-Z_:][a-zA-Z0-9_:]*")
_LABEL_NAME = re.compile(r"[a-zA-Z_][a-zA-Z0-9_]*")


class MetricType(enum.Enum):
    """The kind of values a metric family holds."""

    COUNTER = "counter"
    GAUGE = "gauge"
    SUMMARY = "summary"
    UNTYPED = "untyped"
    HISTOGRAM = "histogram"
    INFO = "info"


def _starts_valid(name: str) -> bool:
    return bool(name) and not name[0].isdigit() and not name.startswith("__")


def check_metric_name(name: str) -> bool:
    """Return whether name matches ``[a-zA-Z_:][a-zA-Z0-9_:]*`` and is not reserved."""
    return _starts_valid(name) and _METRIC_NAME.fullmatch(name) is not None


def check_label_name(name: str, metric_type: MetricType) -> bool:
    """Return whether name is a usable label name for the given metric type.

    Label names follow ``[a-zA-Z_][a-zA-Z0-9_]*``; names starting with two
    underscores are reserved, and ``le`` and ``quantile`` are reserved for
    histograms and summaries respectively.
    """
    if not _starts_valid(name):
        return False
    if metric_type is MetricType.HISTOGRAM and name == "le":
        return False
    if metric_type is MetricType.SUMMARY and name == "quantile":
        return False
    return _LABEL_NAME.fullmatch(name) is not None