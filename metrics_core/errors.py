"""Error codes and exception types for metric instrumentation.

Three families of failure are kept apart so callers can tell them apart:
- configuration errors: the metric can never work as declared
- usage errors: one particular call was invalid and had no effect
- registration conflicts: a collector collides with one already registered
"""

from __future__ import annotations

from enum import Enum
from typing import Optional


class ErrorCode(str, Enum):
    METRICS_ERROR = "METRICS_ERROR"
    CONFIGURATION_ERROR = "CONFIGURATION_ERROR"
    USAGE_ERROR = "USAGE_ERROR"
    MISSING_FIELD = "MISSING_FIELD"
    INVALID_METRIC_NAME = "INVALID_METRIC_NAME"
    INVALID_LABEL_NAME = "INVALID_LABEL_NAME"
    RESERVED_LABEL_NAME = "RESERVED_LABEL_NAME"
    DUPLICATE_LABEL_NAME = "DUPLICATE_LABEL_NAME"
    INVALID_BUCKETS = "INVALID_BUCKETS"
    BUCKET_ORDER = "BUCKET_ORDER"
    LABEL_ARITY = "LABEL_ARITY"
    MISSING_LABEL_VALUE = "MISSING_LABEL_VALUE"
    NEGATIVE_AMOUNT = "NEGATIVE_AMOUNT"
    DUPLICATE_REGISTRATION = "DUPLICATE_REGISTRATION"


class MetricsError(Exception):
    """Base exception for metric errors."""

    default_code: ErrorCode = ErrorCode.METRICS_ERROR

    def __init__(self, message: str, code: Optional[ErrorCode] = None):
        self.message = message
        self.code = code or self.default_code
        super().__init__(message)


class ConfigurationError(MetricsError, ValueError):
    """A metric declaration is invalid."""

    default_code = ErrorCode.CONFIGURATION_ERROR


class MissingFieldError(ConfigurationError):
    """A required builder field (name or help) was not set."""

    default_code = ErrorCode.MISSING_FIELD

    def __init__(self, field: str, message: Optional[str] = None):
        self.field = field
        super().__init__(message or f"{field} hasn't been set.")


class InvalidMetricNameError(ConfigurationError):
    default_code = ErrorCode.INVALID_METRIC_NAME


class InvalidLabelNameError(ConfigurationError):
    default_code = ErrorCode.INVALID_LABEL_NAME


class ReservedLabelNameError(ConfigurationError):
    default_code = ErrorCode.RESERVED_LABEL_NAME


class DuplicateLabelNameError(ConfigurationError):
    default_code = ErrorCode.DUPLICATE_LABEL_NAME


class InvalidBucketsError(ConfigurationError):
    default_code = ErrorCode.INVALID_BUCKETS


class BucketOrderError(InvalidBucketsError):
    """Histogram bucket bounds are not strictly increasing."""

    default_code = ErrorCode.BUCKET_ORDER

    def __init__(self, lower: float, upper: float):
        self.lower = lower
        self.upper = upper
        super().__init__(
            f"Histogram buckets must be in increasing order: {lower} >= {upper}"
        )


class UsageError(MetricsError, ValueError):
    """A single call on a metric was invalid; it had no effect."""

    default_code = ErrorCode.USAGE_ERROR


class LabelArityError(UsageError):
    default_code = ErrorCode.LABEL_ARITY


class MissingLabelValueError(UsageError):
    default_code = ErrorCode.MISSING_LABEL_VALUE


class NegativeAmountError(UsageError):
    default_code = ErrorCode.NEGATIVE_AMOUNT


class DuplicateRegistrationError(MetricsError, ValueError):
    """A collector exposes a series name that is already registered."""

    default_code = ErrorCode.DUPLICATE_REGISTRATION

    def __init__(self, series_name: str):
        self.series_name = series_name
        super().__init__(
            f"Collector already registered that provides name: {series_name}"
        )


__all__ = [
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
