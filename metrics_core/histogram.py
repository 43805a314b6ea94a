"""Histogram metric, to track distributions of events.

Each child keeps one raw count per bucket: an observation increments only
the first bucket whose upper bound is ``>=`` the observed value. Cumulative
``le`` counts are computed when the histogram is collected, by prefix
summing the raw counts in ascending bound order. The last bound is always
``+Inf`` so every observation lands in exactly one bucket.

Note: each bucket is one exposed series. Many buckets combined with many
label values can produce a large number of series.
"""

from __future__ import annotations

import bisect
import math
import time
from dataclasses import dataclass
from typing import Any, Dict, Iterator, Optional, Sequence, Tuple, Type

from metrics_core.atomic import AtomicFloat
from metrics_core.collector import Collector, CollectorBuilder
from metrics_core.config import get_settings
from metrics_core.errors import BucketOrderError, InvalidBucketsError
from metrics_core.exposition import format_value
from metrics_core.labels import LabelKey
from metrics_core.samples import MetricType, Sample

BUCKET_LABEL = "le"


def linear_buckets(start: float, width: float, count: int) -> Tuple[float, ...]:
    """``count`` bounds starting at ``start``, each ``width`` apart."""
    if count < 1:
        raise InvalidBucketsError("Histogram must have at least one bucket.")
    return tuple(start + i * width for i in range(count))


def exponential_buckets(start: float, factor: float, count: int) -> Tuple[float, ...]:
    """``count`` bounds starting at ``start``, each ``factor`` times the last."""
    if count < 1:
        raise InvalidBucketsError("Histogram must have at least one bucket.")
    return tuple(start * math.pow(factor, i) for i in range(count))


def prepare_buckets(buckets: Sequence[float]) -> Tuple[float, ...]:
    """Validate bucket bounds and append ``+Inf`` if missing."""
    bounds = [float(bound) for bound in buckets]
    if not bounds:
        raise InvalidBucketsError("Histogram must have at least one bucket.")
    if any(math.isnan(bound) for bound in bounds):
        raise InvalidBucketsError("Histogram bucket bounds must not be NaN.")
    for lower, upper in zip(bounds, bounds[1:]):
        if lower >= upper:
            raise BucketOrderError(lower, upper)
    if bounds[-1] != math.inf:
        bounds.append(math.inf)
    return tuple(bounds)


@dataclass(frozen=True)
class HistogramSnapshot:
    """Point-in-time view of one histogram child."""
    upper_bounds: Tuple[float, ...]
    buckets: Tuple[float, ...]  # cumulative, ascending by bound
    sum: float

    @property
    def count(self) -> float:
        return self.buckets[-1]


class Timer:
    """Context manager observing elapsed seconds into a histogram child."""

    def __init__(self, child: "HistogramChild"):
        self._child = child
        self._start: Optional[float] = None

    def __enter__(self) -> "Timer":
        self._start = time.perf_counter()
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        if self._start is not None:
            self._child.observe(max(time.perf_counter() - self._start, 0.0))


class HistogramChild:
    """State of one labelled histogram."""

    __slots__ = ("_upper_bounds", "_bucket_counts", "_sum")

    def __init__(self, upper_bounds: Tuple[float, ...]):
        self._upper_bounds = upper_bounds
        self._bucket_counts = tuple(AtomicFloat(0.0) for _ in upper_bounds)
        self._sum = AtomicFloat(0.0)

    def observe(self, value: float) -> None:
        value = float(value)
        if math.isnan(value):
            # NaN compares false against every bound; account it under +Inf
            index = len(self._upper_bounds) - 1
        else:
            index = bisect.bisect_left(self._upper_bounds, value)
        self._bucket_counts[index].add(1.0)
        self._sum.add(value)

    def time(self) -> Timer:
        return Timer(self)

    def get_value(self) -> HistogramSnapshot:
        cumulative = []
        total = 0.0
        for bucket_count in self._bucket_counts:
            total += bucket_count.get()
            cumulative.append(total)
        return HistogramSnapshot(self._upper_bounds, tuple(cumulative), self._sum.get())


class HistogramBuilder(CollectorBuilder["Histogram"]):
    """Builder for :class:`Histogram` with bucket configuration."""

    def __init__(self, collector_class: Type["Histogram"]):
        super().__init__(collector_class)
        self._buckets: Optional[Tuple[float, ...]] = None

    def with_buckets(self, *buckets: float) -> "HistogramBuilder":
        if len(buckets) == 1 and isinstance(buckets[0], (list, tuple)):
            buckets = tuple(buckets[0])
        self._buckets = tuple(buckets)
        return self

    def linear_buckets(self, start: float, width: float, count: int) -> "HistogramBuilder":
        self._buckets = linear_buckets(start, width, count)
        return self

    def exponential_buckets(self, start: float, factor: float, count: int) -> "HistogramBuilder":
        self._buckets = exponential_buckets(start, factor, count)
        return self

    def _options(self) -> Dict[str, Any]:
        return {"buckets": self._buckets}


class Histogram(Collector[HistogramChild]):
    """Histogram collector.

    ``buckets`` defaults to ``Settings.DEFAULT_BUCKETS``. The label name
    ``le`` is synthesized for bucket series and cannot be declared.
    """

    metric_type = MetricType.HISTOGRAM
    reserved_label_names = (BUCKET_LABEL,)

    def __init__(
        self,
        name: str,
        help: str,
        label_names: Sequence[str] = (),
        namespace: str = "",
        subsystem: str = "",
        buckets: Optional[Sequence[float]] = None,
    ):
        if buckets is None:
            buckets = get_settings().DEFAULT_BUCKETS
        self._upper_bounds = prepare_buckets(buckets)
        super().__init__(name, help, label_names, namespace=namespace, subsystem=subsystem)

    @classmethod
    def _builder_class(cls) -> Type[HistogramBuilder]:
        return HistogramBuilder

    @property
    def upper_bounds(self) -> Tuple[float, ...]:
        return self._upper_bounds

    def exposed_names(self) -> Tuple[str, ...]:
        return (self.name, f"{self.name}_count", f"{self.name}_sum", f"{self.name}_bucket")

    def _new_child(self) -> HistogramChild:
        return HistogramChild(self._upper_bounds)

    def _child_samples(self, key: LabelKey, child: HistogramChild) -> Iterator[Sample]:
        snapshot = child.get_value()
        bucket_label_names = self.label_names + (BUCKET_LABEL,)
        for bound, count in zip(snapshot.upper_bounds, snapshot.buckets):
            yield Sample(
                f"{self.name}_bucket",
                bucket_label_names,
                key + (format_value(bound),),
                count,
            )
        yield Sample(f"{self.name}_count", self.label_names, key, snapshot.count)
        yield Sample(f"{self.name}_sum", self.label_names, key, snapshot.sum)

    def observe(self, value: float) -> None:
        """Observe into the unlabelled histogram."""
        self._default_child().observe(value)

    def time(self) -> Timer:
        return self._default_child().time()


__all__ = [
    "BUCKET_LABEL",
    "Histogram",
    "HistogramBuilder",
    "HistogramChild",
    "HistogramSnapshot",
    "Timer",
    "linear_buckets",
    "exponential_buckets",
    "prepare_buckets",
]
