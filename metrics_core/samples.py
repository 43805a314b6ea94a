"""Immutable snapshots produced by collectors at scrape time."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Optional, Tuple


class MetricType(Enum):
    """Types of metrics."""
    COUNTER = "counter"
    GAUGE = "gauge"
    HISTOGRAM = "histogram"
    SUMMARY = "summary"
    UNTYPED = "untyped"


@dataclass(frozen=True)
class Sample:
    """A single series value with its label set."""
    name: str
    label_names: Tuple[str, ...]
    label_values: Tuple[str, ...]
    value: float

    def __post_init__(self) -> None:
        if not self.name:
            raise ValueError("Sample name is required")
        object.__setattr__(self, "label_names", tuple(self.label_names))
        object.__setattr__(self, "label_values", tuple(self.label_values))
        if len(self.label_names) != len(self.label_values):
            raise ValueError(
                f"Sample {self.name} has {len(self.label_names)} label names "
                f"but {len(self.label_values)} values"
            )

    @property
    def labels(self) -> dict:
        return dict(zip(self.label_names, self.label_values))


@dataclass(frozen=True)
class MetricFamilySamples:
    """One collector's metric and all of its samples."""
    name: str
    metric_type: MetricType
    help: str
    samples: Tuple[Sample, ...] = ()

    def __post_init__(self) -> None:
        if not self.name or not self.name.strip():
            raise ValueError("Metric family name is required")
        if not self.help or not self.help.strip():
            raise ValueError("Metric family help is required")
        object.__setattr__(self, "samples", tuple(self.samples))

    def find(self, name: str, labels: Optional[dict] = None) -> Optional[Sample]:
        """Return the first sample with ``name`` and exactly ``labels``."""
        wanted = labels or {}
        for sample in self.samples:
            if sample.name == name and sample.labels == wanted:
                return sample
        return None


__all__ = ["MetricType", "Sample", "MetricFamilySamples"]
