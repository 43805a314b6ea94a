"""Counter metric, to track counts of events or running totals.

Counters only go up (and reset when their child is removed). Use a
:class:`~metrics_core.gauge.Gauge` for values that can go down. By
convention counter names end in ``_total``.
"""

from __future__ import annotations

from typing import Iterable

from metrics_core.atomic import AtomicFloat
from metrics_core.collector import Collector
from metrics_core.errors import NegativeAmountError
from metrics_core.labels import LabelKey
from metrics_core.samples import MetricType, Sample


class CounterChild:
    """State of one labelled counter."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value = AtomicFloat(0.0)

    @property
    def value(self) -> float:
        return self._value.get()

    def inc(self, amount: float = 1) -> None:
        """Increment by ``amount``, which must be non-negative."""
        if amount < 0:
            raise NegativeAmountError("Amount to increment must be non-negative.")
        if amount == 0:
            return
        self._value.add(amount)


class Counter(Collector[CounterChild]):
    """Counter collector."""

    metric_type = MetricType.COUNTER

    def _new_child(self) -> CounterChild:
        return CounterChild()

    def _child_samples(self, key: LabelKey, child: CounterChild) -> Iterable[Sample]:
        return (Sample(self.name, self.label_names, key, child.value),)

    def inc(self, amount: float = 1) -> None:
        """Increment the unlabelled counter."""
        self._default_child().inc(amount)

    @property
    def value(self) -> float:
        return self._default_child().value


__all__ = ["Counter", "CounterChild"]
