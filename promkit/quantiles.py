"""Streaming quantile estimation (CKMS) with a sliding time window."""

from __future__ import annotations

import math
import time
from collections.abc import Callable, Sequence
from dataclasses import dataclass, field
from itertools import pairwise


def _ratio(numerator: float, denominator: float) -> float:
    if denominator:
        return numerator / denominator
    if numerator:
        return math.copysign(math.inf, numerator)
    return math.nan


@dataclass(frozen=True)
class Quantile:
    """A target quantile with its allowed rank error."""

    quantile: float
    error: float
    u: float = field(init=False, repr=False)
    v: float = field(init=False, repr=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "u", _ratio(2.0 * self.error, 1.0 - self.quantile))
        object.__setattr__(self, "v", _ratio(2.0 * self.error, self.quantile))


@dataclass(slots=True)
class _Item:
    value: float
    g: int
    delta: int


class CKMSQuantiles:
    """Targeted quantile estimator over a stream of observations."""

    def __init__(self, quantiles: Sequence[Quantile], buffer_size: int = 500) -> None:
        if buffer_size < 1:
            raise ValueError("buffer_size must be positive")
        self._quantiles = quantiles
        self._buffer_size = buffer_size
        self._buffer: list[float] = []
        self._sample: list[_Item] = []
        self._count = 0

    def insert(self, value: float) -> None:
        """Add an observation."""
        self._buffer.append(value)
        if len(self._buffer) == self._buffer_size:
            self._insert_batch()
            self._compress()

    def get(self, q: float) -> float:
        """Return the estimate for quantile q, or NaN without observations."""
        self._insert_batch()
        self._compress()

        if not self._sample:
            return math.nan

        rank_min = 0
        desired = int(q * self._count)
        bound = desired + self._allowable_error(desired) / 2

        for prev, cur in pairwise(self._sample):
            rank_min += prev.g
            if rank_min + cur.g + cur.delta > bound:
                return prev.value
        return self._sample[-1].value

    def reset(self) -> None:
        """Forget all observations."""
        self._count = 0
        self._sample.clear()
        self._buffer.clear()

    def _allowable_error(self, rank: int) -> float:
        size = len(self._sample)
        min_error = float(size + 1)
        for q in self._quantiles:
            if rank <= q.quantile * size:
                error = q.u * (size - rank)
            else:
                error = q.v * rank
            if error < min_error:
                min_error = error
        return min_error

    def _insert_batch(self) -> bool:
        if not self._buffer:
            return False

        batch = sorted(self._buffer)
        sample = self._sample

        if not sample:
            sample.append(_Item(batch[0], 1, 0))
            self._count += 1
            batch = batch[1:]

        item = 0
        idx = 1
        for value in batch:
            while idx < len(sample) and sample[item].value < value:
                item = idx
                idx += 1

            if sample[item].value > value:
                idx -= 1

            if idx == 1 or idx + 1 == len(sample):
                delta = 0
            else:
                delta = math.floor(self._allowable_error(idx + 1)) + 1

            sample.insert(idx, _Item(value, 1, delta))
            self._count += 1
            item = idx
            idx += 1

        self._buffer.clear()
        return True

    def _compress(self) -> None:
        sample = self._sample
        if len(sample) < 2:
            return

        nxt = 0
        idx = 1
        while idx < len(sample):
            prev = nxt
            nxt = idx
            idx += 1
            if (
                sample[prev].g + sample[nxt].g + sample[nxt].delta
                <= self._allowable_error(idx - 1)
            ):
                sample[nxt].g += sample[prev].g
                del sample[prev]


class TimeWindowQuantiles:
    """Quantile estimates over observations from a sliding time window.

    The window of ``max_age`` seconds is split into ``age_buckets`` estimators
    that are reset one after another as time passes.
    """

    def __init__(
        self,
        quantiles: Sequence[Quantile],
        max_age: float,
        age_buckets: int,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        if age_buckets < 1:
            raise ValueError("age_buckets must be positive")
        if max_age <= 0:
            raise ValueError("max_age must be positive")
        self._quantiles = quantiles
        self._buckets = [CKMSQuantiles(quantiles) for _ in range(age_buckets)]
        self._current = 0
        self._clock = clock
        self._last_rotation = clock()
        self._rotation_interval = max_age / age_buckets

    def insert(self, value: float) -> None:
        """Add an observation to every bucket of the window."""
        self._rotate()
        for bucket in self._buckets:
            bucket.insert(value)

    def get(self, q: float) -> float:
        """Return the estimate for quantile q over the current window."""
        return self._rotate().get(q)

    def _rotate(self) -> CKMSQuantiles:
        delta = self._clock() - self._last_rotation
        while delta > self._rotation_interval:
            self._buckets[self._current].reset()
            self._current = (self._current + 1) % len(self._buckets)
            delta -= self._rotation_interval
            self._last_rotation += self._rotation_interval
        return self._buckets[self._current]