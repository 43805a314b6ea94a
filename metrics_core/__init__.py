"""In-process metric instrumentation.

Provides metric declaration, mutation and scraping:
- Counter, Gauge, Histogram collectors with per-label-set children
- Collector registry with series name uniqueness
- Text exposition format writer
"""

from metrics_core.atomic import AtomicFloat
from metrics_core.collector import Collector, CollectorBuilder, MetricDefinition
from metrics_core.config import Settings, get_settings
from metrics_core.counter import Counter, CounterChild
from metrics_core.errors import (
    BucketOrderError,
    ConfigurationError,
    DuplicateLabelNameError,
    DuplicateRegistrationError,
    ErrorCode,
    InvalidBucketsError,
    InvalidLabelNameError,
    InvalidMetricNameError,
    LabelArityError,
    MetricsError,
    MissingFieldError,
    MissingLabelValueError,
    NegativeAmountError,
    ReservedLabelNameError,
    UsageError,
)
from metrics_core.exposition import (
    CONTENT_TYPE_LATEST,
    TextExpositionWriter,
    format_value,
    generate_latest,
)
from metrics_core.gauge import Gauge, GaugeChild
from metrics_core.histogram import (
    Histogram,
    HistogramBuilder,
    HistogramChild,
    HistogramSnapshot,
    Timer,
    exponential_buckets,
    linear_buckets,
)
from metrics_core.labels import LabelKey
from metrics_core.registry import REGISTRY, CollectorRegistry, get_default_registry
from metrics_core.samples import MetricFamilySamples, MetricType, Sample
from metrics_core.validation import validate_label_name, validate_metric_name

__all__ = [
    # Primitives
    "AtomicFloat",
    "LabelKey",
    # Collectors
    "Collector",
    "CollectorBuilder",
    "MetricDefinition",
    "Counter",
    "CounterChild",
    "Gauge",
    "GaugeChild",
    "Histogram",
    "HistogramBuilder",
    "HistogramChild",
    "HistogramSnapshot",
    "Timer",
    "linear_buckets",
    "exponential_buckets",
    # Snapshots
    "MetricType",
    "Sample",
    "MetricFamilySamples",
    # Registry
    "CollectorRegistry",
    "REGISTRY",
    "get_default_registry",
    # Exposition
    "CONTENT_TYPE_LATEST",
    "TextExpositionWriter",
    "format_value",
    "generate_latest",
    # Validation
    "validate_metric_name",
    "validate_label_name",
    # Config
    "Settings",
    "get_settings",
    # Errors
    "ErrorCode",
    "MetricsError",
    "ConfigurationError",
    "MissingFieldError",
    "InvalidMetricNameError",
    "InvalidLabelNameError",
    "ReservedLabelNameError",
    "DuplicateLabelNameError",
    "InvalidBucketsError",
    "BucketOrderError",
    "UsageError",
    "LabelArityError",
    "MissingLabelValueError",
    "NegativeAmountError",
    "DuplicateRegistrationError",
]
