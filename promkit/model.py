"""Data model of collected metrics, shared by metrics and serializers."""

from __future__ import annotations

import abc
from collections.abc import Mapping
from dataclasses import dataclass, field

from promkit.names import MetricType

Labels = Mapping[str, str]
LabelsKey = tuple[tuple[str, str], ...]


def labels_key(labels: Labels) -> LabelsKey:
    """Return a hashable key for a label set, independent of insertion order."""
    return tuple(sorted(labels.items()))


@dataclass
class LabelPair:
    """A single label attached to a sample."""

    name: str
    value: str


@dataclass
class Bucket:
    """A histogram bucket with its cumulative count."""

    cumulative_count: int = 0
    upper_bound: float = 0.0


@dataclass
class QuantileValue:
    """The estimated value of one quantile of a summary."""

    quantile: float = 0.0
    value: float = 0.0


@dataclass
class SummaryData:
    """Count, sum and quantile estimates of a summary."""

    sample_count: int = 0
    sample_sum: float = 0.0
    quantiles: list[QuantileValue] = field(default_factory=list)


@dataclass
class HistogramData:
    """Count, sum and buckets of a histogram."""

    sample_count: int = 0
    sample_sum: float = 0.0
    buckets: list[Bucket] = field(default_factory=list)


@dataclass
class ClientMetric:
    """One labelled metric as collected.

    ``value`` carries the sample of counters, gauges, infos and untyped
    metrics; summaries and histograms use their own fields.
    """

    labels: list[LabelPair] = field(default_factory=list)
    value: float = 0.0
    summary: SummaryData = field(default_factory=SummaryData)
    histogram: HistogramData = field(default_factory=HistogramData)
    timestamp_ms: int = 0


@dataclass
class MetricFamily:
    """All collected metrics sharing a name, help text and type."""

    name: str
    help: str
    type: MetricType
    metrics: list[ClientMetric] = field(default_factory=list)


class Collectable(abc.ABC):
    """Something that can be scraped for metric families."""

    @abc.abstractmethod
    def collect(self) -> list[MetricFamily]:
        """Return the current metric families."""