"""Rendering of collected metric families in the Prometheus text format."""

from __future__ import annotations

import abc
import io
import math
from collections.abc import Callable, Iterable
from typing import TextIO

from promkit.model import ClientMetric, MetricFamily
from promkit.names import MetricType

_LABEL_ESCAPES = str.maketrans({"\n": "\\n", "\\": "\\\\", '"': '\\"'})


def _format_number(value: float) -> str:
    if math.isnan(value):
        return "Nan"
    if math.isinf(value):
        return "-Inf" if value < 0 else "+Inf"
    return format(value, ".16g")


def _format_label_value(value: str | float) -> str:
    if isinstance(value, str):
        return value.translate(_LABEL_ESCAPES)
    return _format_number(value)


def _head(
    family: MetricFamily,
    metric: ClientMetric,
    suffix: str = "",
    extra_label: tuple[str, str | float] | None = None,
) -> str:
    pairs = [(label.name, label.value) for label in metric.labels]
    if extra_label is not None:
        pairs.append(extra_label)
    head = family.name + suffix
    if pairs:
        rendered = ",".join(
            f'{name}="{_format_label_value(value)}"' for name, value in pairs
        )
        head += "{" + rendered + "}"
    return head + " "


def _tail(metric: ClientMetric) -> str:
    if metric.timestamp_ms != 0:
        return f" {metric.timestamp_ms}\n"
    return "\n"


def _line(
    family: MetricFamily,
    metric: ClientMetric,
    value: str,
    suffix: str = "",
    extra_label: tuple[str, str | float] | None = None,
) -> str:
    return _head(family, metric, suffix, extra_label) + value + _tail(metric)


def _simple_lines(family: MetricFamily, metric: ClientMetric) -> Iterable[str]:
    yield _line(family, metric, _format_number(metric.value))


def _info_lines(family: MetricFamily, metric: ClientMetric) -> Iterable[str]:
    yield _line(family, metric, _format_number(metric.value), "_info")


def _summary_lines(family: MetricFamily, metric: ClientMetric) -> Iterable[str]:
    summary = metric.summary
    yield _line(family, metric, str(int(summary.sample_count)), "_count")
    yield _line(family, metric, _format_number(summary.sample_sum), "_sum")
    for q in summary.quantiles:
        yield _line(
            family, metric, _format_number(q.value), "", ("quantile", q.quantile)
        )


def _histogram_lines(family: MetricFamily, metric: ClientMetric) -> Iterable[str]:
    histogram = metric.histogram
    yield _line(family, metric, str(int(histogram.sample_count)), "_count")
    yield _line(family, metric, _format_number(histogram.sample_sum), "_sum")
    last = -math.inf
    for bucket in histogram.buckets:
        last = bucket.upper_bound
        yield _line(
            family,
            metric,
            str(int(bucket.cumulative_count)),
            "_bucket",
            ("le", bucket.upper_bound),
        )
    if last != math.inf:
        yield _line(
            family, metric, str(int(histogram.sample_count)), "_bucket", ("le", "+Inf")
        )


# Info is exposed as a gauge, since the text format has no info type.
_RENDERERS: dict[
    MetricType, tuple[str, Callable[[MetricFamily, ClientMetric], Iterable[str]]]
] = {
    MetricType.COUNTER: ("counter", _simple_lines),
    MetricType.GAUGE: ("gauge", _simple_lines),
    MetricType.INFO: ("gauge", _info_lines),
    MetricType.SUMMARY: ("summary", _summary_lines),
    MetricType.UNTYPED: ("untyped", _simple_lines),
    MetricType.HISTOGRAM: ("histogram", _histogram_lines),
}


class Serializer(abc.ABC):
    """Turns metric families into an exposition format."""

    def serialize(self, metrics: Iterable[MetricFamily]) -> str:
        """Return the serialized form of metrics as a string."""
        out = io.StringIO()
        self.write(out, metrics)
        return out.getvalue()

    @abc.abstractmethod
    def write(self, out: TextIO, metrics: Iterable[MetricFamily]) -> None:
        """Write the serialized form of metrics to out."""


class TextSerializer(Serializer):
    """Serializer for the Prometheus text exposition format."""

    def write(self, out: TextIO, metrics: Iterable[MetricFamily]) -> None:
        """Write every family with its HELP and TYPE lines and its samples."""
        for family in metrics:
            if family.help:
                out.write(f"# HELP {family.name} {family.help}\n")
            type_name, render = _RENDERERS[family.type]
            out.write(f"# TYPE {family.name} {type_name}\n")
            for metric in family.metrics:
                for line in render(family, metric):
                    out.write(line)