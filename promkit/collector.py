"""Gathering metric families from several collectables."""

from __future__ import annotations

import weakref
from collections.abc import Iterable

from promkit.model import Collectable, MetricFamily


def collect_metrics(
    collectables: Iterable[Collectable | weakref.ReferenceType[Collectable]],
) -> list[MetricFamily]:
    """Collect from each collectable in order and concatenate the results.

    Weak references whose target is gone are skipped.
    """
    collected: list[MetricFamily] = []
    for entry in collectables:
        collectable = entry() if isinstance(entry, weakref.ReferenceType) else entry
        if collectable is None:
            continue
        collected.extend(collectable.collect())
    return collected