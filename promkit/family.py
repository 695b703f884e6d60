"""A family of metrics sharing a name, distinguished by their labels."""

from __future__ import annotations

import threading
from typing import Any

from promkit.model import ClientMetric, LabelPair, Labels, LabelsKey, MetricFamily, labels_key
from promkit.names import check_label_name, check_metric_name


class Family:
    """Metrics of one kind under one name, one per distinct label set."""

    def __init__(
        self,
        metric_class: type,
        name: str,
        help: str = "",
        constant_labels: Labels | None = None,
    ) -> None:
        self.metric_class = metric_class
        self.name = name
        self.help = help
        self._constant_labels = labels_key(constant_labels or {})
        if not check_metric_name(name):
            raise ValueError("Invalid metric name")
        for label_name, _ in self._constant_labels:
            if not check_label_name(label_name, metric_class.metric_type):
                raise ValueError("Invalid label name")
        self._metrics: dict[LabelsKey, Any] = {}
        self._lock = threading.Lock()

    @property
    def constant_labels(self) -> dict[str, str]:
        """The labels attached to every metric of the family."""
        return dict(self._constant_labels)

    def add(self, labels: Labels, *args: Any, **kwargs: Any) -> Any:
        """Return the metric for labels, creating it from args if it is new.

        Raises ValueError when a label name is invalid or repeats a constant
        label.
        """
        metric = self.metric_class(*args, **kwargs)
        key = labels_key(labels)
        constant_names = {name for name, _ in self._constant_labels}
        with self._lock:
            existing = self._metrics.get(key)
            if existing is not None:
                return existing
            for label_name, _ in key:
                if not check_label_name(label_name, self.metric_class.metric_type):
                    raise ValueError("Invalid label name")
                if label_name in constant_names:
                    raise ValueError("Duplicate label name")
            self._metrics[key] = metric
            return metric

    def remove(self, metric: Any) -> None:
        """Remove the given metric object, if it belongs to the family."""
        with self._lock:
            for key, candidate in self._metrics.items():
                if candidate is metric:
                    del self._metrics[key]
                    break

    def has(self, labels: Labels) -> bool:
        """Return whether a metric with exactly these labels exists."""
        with self._lock:
            return labels_key(labels) in self._metrics

    def collect(self) -> list[MetricFamily]:
        """Return the family with all its metrics, or nothing when empty."""
        with self._lock:
            if not self._metrics:
                return []
            metrics = [self._collect_metric(key, m) for key, m in self._metrics.items()]
        return [
            MetricFamily(
                name=self.name,
                help=self.help,
                type=self.metric_class.metric_type,
                metrics=metrics,
            )
        ]

    def _collect_metric(self, key: LabelsKey, metric: Any) -> ClientMetric:
        collected = metric.collect()
        collected.labels = [
            LabelPair(name, value) for name, value in (*self._constant_labels, *key)
        ]
        return collected