"""A registry holding metric families of every kind."""

from __future__ import annotations

import enum
import threading

from promkit.family import Family
from promkit.metrics import Counter, Gauge, Histogram, Info, Summary
from promkit.model import Collectable, Labels, MetricFamily, labels_key

_KINDS = (Counter, Gauge, Histogram, Info, Summary)


class InsertBehavior(enum.Enum):
    """What adding a family under an existing name does."""

    MERGE = "merge"
    THROW = "throw"


class Registry(Collectable):
    """Owns metric families and collects them in a fixed order of kinds."""

    def __init__(self, insert_behavior: InsertBehavior = InsertBehavior.MERGE) -> None:
        self.insert_behavior = insert_behavior
        self._families: dict[type, list[Family]] = {kind: [] for kind in _KINDS}
        self._lock = threading.Lock()

    def _families_of(self, metric_class: type) -> list[Family]:
        try:
            return self._families[metric_class]
        except KeyError:
            raise TypeError(f"Unsupported metric class: {metric_class!r}") from None

    def add(
        self,
        metric_class: type,
        name: str,
        help: str = "",
        labels: Labels | None = None,
    ) -> Family:
        """Return a family of metric_class named name, creating it if needed.

        Raises ValueError when the name is taken by another kind, or, under
        MERGE, by a family with other constant labels, or, under THROW, at all.
        """
        labels = dict(labels or {})
        with self._lock:
            families = self._families_of(metric_class)
            for kind, others in self._families.items():
                if kind is not metric_class and any(f.name == name for f in others):
                    raise ValueError("Family name already exists with different type")
            for family in families:
                if family.name != name:
                    continue
                if self.insert_behavior is InsertBehavior.MERGE:
                    if labels_key(family.constant_labels) == labels_key(labels):
                        return family
                    raise ValueError(
                        "Family name already exists with different constant labels"
                    )
                raise ValueError("Family name already exists")
            family = Family(metric_class, name, help, labels)
            families.append(family)
            return family

    def remove(self, family: Family) -> bool:
        """Remove the given family; return whether it was registered."""
        with self._lock:
            families = self._families_of(family.metric_class)
            for index, candidate in enumerate(families):
                if candidate is family:
                    del families[index]
                    return True
            return False

    def collect(self) -> list[MetricFamily]:
        """Collect counters, gauges, histograms, infos and summaries, in that order."""
        with self._lock:
            return [
                collected
                for kind in _KINDS
                for family in self._families[kind]
                for collected in family.collect()
            ]