"""Gauge metric, to report instantaneous values that go up and down."""

from __future__ import annotations

import time
from typing import Iterable

from metrics_core.atomic import AtomicFloat
from metrics_core.collector import Collector
from metrics_core.labels import LabelKey
from metrics_core.samples import MetricType, Sample


class GaugeChild:
    """State of one labelled gauge."""

    __slots__ = ("_value",)

    def __init__(self) -> None:
        self._value = AtomicFloat(0.0)

    @property
    def value(self) -> float:
        return self._value.get()

    def inc(self, amount: float = 1) -> None:
        if amount == 0:
            return
        self._value.add(amount)

    def dec(self, amount: float = 1) -> None:
        self.inc(-amount)

    def set(self, value: float) -> None:
        """Replace the value; a concurrent add may be lost (last write wins)."""
        self._value.exchange(value)

    def set_to_current_time(self) -> None:
        """Set to the current Unix time in whole seconds."""
        self.set(int(time.time()))


class Gauge(Collector[GaugeChild]):
    """Gauge collector."""

    metric_type = MetricType.GAUGE

    def _new_child(self) -> GaugeChild:
        return GaugeChild()

    def _child_samples(self, key: LabelKey, child: GaugeChild) -> Iterable[Sample]:
        return (Sample(self.name, self.label_names, key, child.value),)

    def inc(self, amount: float = 1) -> None:
        self._default_child().inc(amount)

    def dec(self, amount: float = 1) -> None:
        self._default_child().dec(amount)

    def set(self, value: float) -> None:
        self._default_child().set(value)

    def set_to_current_time(self) -> None:
        self._default_child().set_to_current_time()

    @property
    def value(self) -> float:
        return self._default_child().value


__all__ = ["Gauge", "GaugeChild"]
