"""The metric kinds: gauges, counters, infos, histograms and summaries."""

from __future__ import annotations

import bisect
import math
import threading
import time
from collections.abc import Callable, Iterable, Sequence
from itertools import pairwise

from promkit.model import Bucket, ClientMetric, HistogramData, QuantileValue, SummaryData
from promkit.names import MetricType
from promkit.quantiles import Quantile, TimeWindowQuantiles


class Gauge:
    """A value that can go up and down."""

    metric_type = MetricType.GAUGE

    def __init__(self, value: float = 0.0) -> None:
        self._value = float(value)
        self._lock = threading.Lock()

    def increment(self, value: float = 1.0) -> None:
        """Add value to the gauge."""
        with self._lock:
            self._value += value

    def decrement(self, value: float = 1.0) -> None:
        """Subtract value from the gauge."""
        with self._lock:
            self._value -= value

    def set(self, value: float) -> None:
        """Replace the gauge's value."""
        with self._lock:
            self._value = float(value)

    def set_to_current_time(self) -> None:
        """Set the gauge to the current Unix time in whole seconds."""
        self.set(float(int(time.time())))

    @property
    def value(self) -> float:
        """The current value."""
        return self._value

    def collect(self) -> ClientMetric:
        """Return the gauge's sample."""
        return ClientMetric(value=self._value)


class Counter:
    """A value that only goes up, unless it is reset."""

    metric_type = MetricType.COUNTER

    def __init__(self) -> None:
        self._gauge = Gauge()

    def increment(self, value: float = 1.0) -> None:
        """Add value to the counter; negative values are ignored."""
        if value < 0.0:
            return
        self._gauge.increment(value)

    def reset(self) -> None:
        """Set the counter back to zero."""
        self._gauge.set(0.0)

    @property
    def value(self) -> float:
        """The current value."""
        return self._gauge.value

    def collect(self) -> ClientMetric:
        """Return the counter's sample."""
        return ClientMetric(value=self.value)


class Info:
    """A constant metric whose information lies in its labels."""

    metric_type = MetricType.INFO

    def collect(self) -> ClientMetric:
        """Return the info sample, whose value is always 1."""
        return ClientMetric(value=1.0)


class Histogram:
    """Counts observations in buckets given by their upper bounds."""

    metric_type = MetricType.HISTOGRAM

    def __init__(self, buckets: Iterable[float]) -> None:
        boundaries = [float(b) for b in buckets]
        if any(a >= b for a, b in pairwise(boundaries)):
            raise ValueError("Bucket Boundaries must be strictly sorted")
        self._boundaries = boundaries
        self._counts = [0.0] * (len(boundaries) + 1)
        self._sum = 0.0
        self._lock = threading.Lock()

    @property
    def bucket_boundaries(self) -> list[float]:
        """The upper bounds of the finite buckets."""
        return list(self._boundaries)

    def observe(self, value: float) -> None:
        """Count one observation in the first bucket whose bound is >= value."""
        index = bisect.bisect_left(self._boundaries, value)
        with self._lock:
            self._sum += value
            self._counts[index] += 1.0

    def observe_multiple(
        self, bucket_increments: Sequence[float], sum_of_values: float
    ) -> None:
        """Add many observations at once, one increment per bucket.

        The increments include one for the +Inf bucket. Negative increments
        are ignored.
        """
        if len(bucket_increments) != len(self._counts):
            raise ValueError(
                "The size of bucket_increments was not equal to "
                "the number of buckets in the histogram."
            )
        with self._lock:
            self._sum += sum_of_values
            for index, increment in enumerate(bucket_increments):
                if not increment < 0.0:
                    self._counts[index] += increment

    def reset(self) -> None:
        """Clear all bucket counts and the sum."""
        with self._lock:
            self._counts = [0.0] * len(self._counts)
            self._sum = 0.0

    def collect(self) -> ClientMetric:
        """Return the histogram's count, sum and cumulative buckets."""
        with self._lock:
            cumulative = 0
            buckets = []
            bounds = [*self._boundaries, math.inf]
            for bound, count in zip(bounds, self._counts):
                cumulative = int(cumulative + count)
                buckets.append(Bucket(cumulative_count=cumulative, upper_bound=bound))
            data = HistogramData(
                sample_count=cumulative, sample_sum=self._sum, buckets=buckets
            )
        return ClientMetric(histogram=data)


def _as_quantile(item: Quantile | tuple[float, float]) -> Quantile:
    if isinstance(item, Quantile):
        return item
    quantile, error = item
    return Quantile(quantile, error)


class Summary:
    """Tracks count, sum and quantile estimates over a sliding time window."""

    metric_type = MetricType.SUMMARY

    def __init__(
        self,
        quantiles: Iterable[Quantile | tuple[float, float]],
        max_age: float = 60.0,
        age_buckets: int = 5,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._quantiles = [_as_quantile(q) for q in quantiles]
        self._values = TimeWindowQuantiles(self._quantiles, max_age, age_buckets, clock)
        self._count = 0
        self._sum = 0.0
        self._lock = threading.Lock()

    @property
    def quantiles(self) -> list[Quantile]:
        """The tracked quantiles."""
        return list(self._quantiles)

    def observe(self, value: float) -> None:
        """Record one observation."""
        with self._lock:
            self._count += 1
            self._sum += value
            self._values.insert(value)

    def collect(self) -> ClientMetric:
        """Return the summary's count, sum and quantile estimates."""
        with self._lock:
            data = SummaryData(
                sample_count=self._count,
                sample_sum=self._sum,
                quantiles=[
                    QuantileValue(q.quantile, self._values.get(q.quantile))
                    for q in self._quantiles
                ],
            )
        return ClientMetric(summary=data)